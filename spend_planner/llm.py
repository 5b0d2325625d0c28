"""LLM integration using OpenRouter for AI-written budget briefings."""

import os
from typing import Dict, List, Optional
import openai
from openai import OpenAI
from spend_planner.config import RETENTION_BENCHMARK
from spend_planner.models import AnalysisResult


def get_ai_briefing(
    result: AnalysisResult,
    api_key: Optional[str] = None,
    model: str = "anthropic/claude-sonnet-4"
) -> tuple[Optional[str], Optional[str]]:
    """
    Generate an AI-written budget briefing using OpenRouter.

    Args:
        result: Analysis result to summarize
        api_key: OpenRouter API key (or from env OPENROUTER_API_KEY)
        model: Model to use

    Returns:
        Tuple of (response_content, error_message)
    """
    api_key = api_key or os.environ.get("OPENROUTER_API_KEY")

    if not api_key:
        return None, "No API key provided"

    context = build_context(result)

    system_prompt = """You are a recruiting marketing analyst. Review job-ad spend and hiring targets and advise on budget moves.
Be specific. Reference actual roles, states, and dollar amounts from the data.
Format your response in clean markdown."""

    user_prompt = f"""## Current Situation

{context}

## Your Task

Based on this data, provide:

1. **Executive Summary** (2-3 sentences)
2. **Budget Moves** - Where to add or cut spend, with expected hiring impact
3. **Data Gaps** - Which recommendations rest on thin applicant data
4. **Retention Risks** - Cohorts whose churn undermines the hiring plan"""

    try:
        client = OpenAI(
            base_url="https://openrouter.ai/api/v1",
            api_key=api_key
        )

        response = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            max_tokens=1500,
            temperature=0.7
        )

        return response.choices[0].message.content, None

    except openai.AuthenticationError:
        return None, "OpenRouter rejected the API key."
    except openai.NotFoundError:
        return None, f"OpenRouter has no model '{model}'."
    except openai.APITimeoutError:
        return None, "The briefing request timed out."
    except openai.APIConnectionError:
        return None, "Could not reach OpenRouter."
    except openai.APIError as e:
        return None, f"Briefing failed: {e}"


def build_context(result: AnalysisResult) -> str:
    """Build context string for the LLM prompt."""
    summary = result.summary
    recs = result.recommendations

    context = f"""### Overall Metrics
- **Total Spend:** ${summary.total_spend:,.0f}
- **Total Applications:** {summary.total_applications:,}
- **Cost per Application:** ${summary.cost_per_app:,.2f}
- **Total Hiring Gap:** {summary.hiring_gap}

### Recommendation Mix
- Increase: {sum(1 for r in recs if r.recommendation == 'increase')}
- Decrease: {sum(1 for r in recs if r.recommendation == 'decrease')}
- Maintain: {sum(1 for r in recs if r.recommendation == 'maintain')}
"""

    increases = sorted(
        [r for r in recs if r.recommendation == 'increase'],
        key=lambda r: -r.change_percent
    )
    if increases:
        context += "\n### Largest Increases\n"
        for r in increases[:5]:
            context += f"- **{r.role} / {r.state}**: gap {r.gap}, ${r.current_spend:,} -> ${r.spend_needed:,} ({r.change_percent:+d}%), {r.confidence} confidence\n"

    decreases = sorted(
        [r for r in recs if r.recommendation == 'decrease'],
        key=lambda r: r.change_percent
    )
    if decreases:
        context += "\n### Largest Decreases\n"
        for r in decreases[:5]:
            context += f"- **{r.role} / {r.state}**: ${r.current_spend:,} -> ${r.spend_needed:,} ({r.change_percent:+d}%)\n"

    low_confidence = [r for r in recs if r.confidence == 'low' and r.gap > 0]
    if low_confidence:
        context += "\n### Low-Confidence Targets\n"
        for r in low_confidence[:5]:
            context += f"- **{r.role} / {r.state}**: gap {r.gap}, {r.target_apps} applications needed\n"

    if result.retention:
        weak = sorted(
            [c for c in result.retention if c.retention_rate < RETENTION_BENCHMARK],
            key=lambda c: c.retention_rate
        )
        if weak:
            context += f"\n### Cohorts Below {RETENTION_BENCHMARK:.0%} 90-Day Retention\n"
            for c in weak[:5]:
                context += f"- **{c.role} / {c.state}**: {c.retention_rate*100:.0f}% of {c.total} retained\n"

    return context


BRIEFING_MODELS = [
    {"id": "anthropic/claude-sonnet-4", "name": "Claude Sonnet 4"},
    {"id": "openai/gpt-4o-mini", "name": "GPT-4o Mini"},
    {"id": "google/gemini-2.0-flash-001", "name": "Gemini 2.0 Flash"},
]


def get_available_models() -> List[Dict]:
    return list(BRIEFING_MODELS)
