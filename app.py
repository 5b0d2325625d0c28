"""
Hiring Spend Planner - Recruiting Budget Dashboard
Turns applicant, spend and headcount exports into per-role/per-state spend recommendations.

Method:
- Conversion: hires / applications, blended with the role average on small samples
- Spend response: applications per dollar with a saturation ceiling
- Gap: forecast headcount minus signed hires after 8%/month churn over 3 months
"""

import logging
import streamlit as st
from spend_planner.config import DATASET_SCHEMAS, REQUIRED_DATASETS, RETENTION_BENCHMARK
from spend_planner.llm import get_ai_briefing, get_available_models
from spend_planner.session import AnalysisSession
from spend_planner.tables import (
    conversion_frame, curves_frame, recommendations_frame, retention_frame
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

DATASET_LABELS = {
    "mmm": "MMM Output",
    "ashby": "Ashby Applicants",
    "spend": "Ad Spend",
    "headcount": "Headcount Targets",
    "roster": "Employee Roster (optional)",
}

st.set_page_config(
    page_title="Hiring Spend Planner",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.markdown("""
<style>
    .main-header {
        text-align: center;
        padding: 1.5rem 0;
        border-bottom: 1px solid rgba(255,255,255,0.1);
        margin-bottom: 1.5rem;
    }

    .section-header {
        font-size: 1.4rem;
        font-weight: 600;
        padding-bottom: 0.5rem;
        border-bottom: 1px solid rgba(255,255,255,0.1);
        margin-bottom: 1rem;
    }
</style>
""", unsafe_allow_html=True)

st.markdown("""
<div class="main-header">
    <h1>Hiring Spend Planner</h1>
    <p style="color: #94a3b8;">Conversion, spend response and headcount gaps by role and state</p>
</div>
""", unsafe_allow_html=True)

if "session" not in st.session_state:
    st.session_state.session = AnalysisSession()
session: AnalysisSession = st.session_state.session

# Sidebar
with st.sidebar:
    st.markdown("### 📂 Data Files")
    for name in DATASET_SCHEMAS:
        upload = st.file_uploader(DATASET_LABELS[name], type="csv", key=f"{name}_file")
        if upload is not None and st.session_state.get(f"{name}_loaded") != upload.file_id:
            session.load(name, upload.getvalue().decode("utf-8"))
            st.session_state[f"{name}_loaded"] = upload.file_id

        status = session.statuses.get(name)
        if status is not None:
            if status.ok:
                st.caption(f"✓ {status.message}")
            else:
                st.caption(f"✗ Error: {status.message}")

    st.markdown("---")
    curve_method = st.selectbox(
        "Curve fit",
        ["ratio", "hill"],
        help="ratio: average applications per dollar. hill: least-squares saturation fit on date-paired rows."
    )
    session.curve_method = curve_method

    if st.button("🔍 Analyze", disabled=not session.ready, use_container_width=True):
        with st.spinner("Analyzing..."):
            _, error = session.analyze()
        if error:
            st.error(error)

    if not session.ready:
        st.caption(f"Waiting for: {', '.join(DATASET_LABELS[n] for n in session.missing_required())}")

result = session.result

if result is None:
    st.info(f"Upload the {', '.join(REQUIRED_DATASETS)} files and press Analyze.")
    st.stop()

tab1, tab2, tab3, tab4 = st.tabs(["📈 Overview", "💡 Recommendations", "🔬 Diagnostics", "👥 Retention"])

with tab1:
    st.markdown('<div class="section-header">🎯 Key Metrics</div>', unsafe_allow_html=True)
    summary = result.summary

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Spend", f"${summary.total_spend:,.0f}")
    with col2:
        st.metric("Total Applications", f"{summary.total_applications:,}")
    with col3:
        st.metric("Cost per Application", f"${summary.cost_per_app:.2f}")
    with col4:
        st.metric("Hiring Gap", summary.hiring_gap)

    st.markdown("---")
    st.markdown("### 🤖 AI Budget Briefing")
    models = get_available_models()
    model = st.selectbox("Model", [m["id"] for m in models],
                         format_func=lambda m: next(x["name"] for x in models if x["id"] == m))
    if st.button("Generate briefing"):
        with st.spinner("Asking the model..."):
            content, error = get_ai_briefing(result, model=model)
        if error:
            st.warning(error)
        else:
            st.markdown(content)

with tab2:
    st.markdown('<div class="section-header">💡 Spend Recommendations</div>', unsafe_allow_html=True)
    recs_df = recommendations_frame(result)

    action_filter = st.selectbox("Filter by Action", ["All", "increase", "decrease", "maintain"])
    if action_filter != "All":
        recs_df = recs_df[recs_df["Recommendation"] == action_filter]

    st.dataframe(
        recs_df,
        use_container_width=True,
        hide_index=True,
        column_config={
            "Spend Needed": st.column_config.NumberColumn("Spend Needed", format="$%d"),
            "Current Spend": st.column_config.NumberColumn("Current Spend", format="$%d"),
            "Change %": st.column_config.NumberColumn("Change %", format="%d%%"),
        }
    )
    st.caption(f"Showing {len(recs_df)} of {len(result.recommendations)} targets")

with tab3:
    st.markdown('<div class="section-header">🔬 Conversion Rates</div>', unsafe_allow_html=True)
    st.dataframe(conversion_frame(result), use_container_width=True, hide_index=True)

    st.markdown('<div class="section-header">📉 Spend Curves</div>', unsafe_allow_html=True)
    st.dataframe(curves_frame(result), use_container_width=True, hide_index=True)

with tab4:
    st.markdown('<div class="section-header">👥 90-Day Retention</div>', unsafe_allow_html=True)
    if result.retention is None:
        st.info("Upload an employee roster to see retention by cohort.")
    else:
        st.dataframe(
            retention_frame(result),
            use_container_width=True,
            hide_index=True,
            column_config={
                "Retention": st.column_config.ProgressColumn("Retention", format="%.2f", min_value=0, max_value=1),
            }
        )
        st.caption(f"Benchmark: {RETENTION_BENCHMARK:.0%} of hires retained past 90 days")
