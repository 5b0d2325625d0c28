import pytest


def ashby_rows(role, state, applications, hires):
    rows = []
    for i in range(applications):
        rows.append({
            'candidate_id': f"{role}-{state}-{i}",
            'role': role,
            'state': state,
            'applied_at': '2024-01-01',
            'hired_at': '2024-02-01' if i < hires else '',
            'status': 'hired' if i < hires else 'rejected',
        })
    return rows


@pytest.fixture
def ashby():
    return (
        ashby_rows('Engineer', 'CA', 40, 6)
        + ashby_rows('Engineer', 'TX', 10, 1)
        + ashby_rows('Nurse', 'NY', 120, 12)
    )


@pytest.fixture
def spend():
    return [
        {'date': '2024-01-01', 'role': 'Engineer', 'state': 'CA', 'spend': '1000'},
        {'date': '2024-02-01', 'role': 'Engineer', 'state': 'CA', 'spend': '2000'},
        {'date': '2024-01-01', 'role': 'Nurse', 'state': 'NY', 'spend': '500'},
    ]


@pytest.fixture
def mmm():
    return [
        {'date': '2024-01-01', 'role': 'Engineer', 'state': 'CA', 'applications': '50'},
        {'date': '2024-02-01', 'role': 'Engineer', 'state': 'CA', 'applications': '70'},
        {'date': '2024-01-01', 'role': 'Engineer', 'state': 'TX', 'applications': '30'},
    ]


@pytest.fixture
def headcount():
    return [
        {'month': '2024-03', 'role': 'Engineer', 'state': 'CA', 'forecast_headcount': '50', 'hires_signed': '10'},
        {'month': '2024-03', 'role': 'Nurse', 'state': 'NY', 'forecast_headcount': '5', 'hires_signed': '20'},
        {'month': '2024-03', 'role': 'Designer', 'state': 'WA', 'forecast_headcount': '3', 'hires_signed': '0'},
    ]


@pytest.fixture
def roster():
    return [
        {'employee_id': '1', 'role': 'Engineer', 'state': 'CA', 'hire_date': '2023-01-01', 'termination_date': '2023-02-01'},
        {'employee_id': '2', 'role': 'Engineer', 'state': 'CA', 'hire_date': '2023-01-01', 'termination_date': ''},
        {'employee_id': '3', 'role': 'Engineer', 'state': 'CA', 'hire_date': '2023-01-01', 'termination_date': '2023-06-01'},
        {'employee_id': '4', 'role': 'Nurse', 'state': 'NY', 'hire_date': '2023-03-01', 'termination_date': ''},
    ]


def to_csv(records):
    headers = list(records[0].keys())
    lines = [','.join(headers)]
    lines += [','.join(r[h] for h in headers) for r in records]
    return '\n'.join(lines) + '\n'


@pytest.fixture
def csv_texts(ashby, spend, mmm, headcount, roster):
    return {
        'ashby': to_csv(ashby),
        'spend': to_csv(spend),
        'mmm': to_csv(mmm),
        'headcount': to_csv(headcount),
        'roster': to_csv(roster),
    }
