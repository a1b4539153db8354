import pytest

from meterprofile import columns


def test_header_match_resolves_every_role():
    roles = columns.detect_columns(["RDate", "RTime", "kWh+", "kWh-", "Meter ID"])
    assert (roles.date, roles.time, roles.value, roles.meter_id) == (0, 1, 2, 4)
    assert roles.sources == {
        "date": "header",
        "time": "header",
        "value": "header",
        "meter_id": "header",
    }
    assert roles.value_resolved


def test_value_patterns_follow_priority_not_column_order():
    roles = columns.detect_columns(["Timestamp", "Status", "Power (kW)", "Energy (kWh)"])
    # 'kwh' outranks 'kw'
    assert roles.value == 3


def test_claimed_header_not_reused():
    # 'Date/Time' is claimed as the date column, so there is no time column
    roles = columns.detect_columns(["Date/Time", "Value"])
    assert roles.date == 0
    assert roles.time == -1
    assert roles.value == 1


def test_overrides_win():
    roles = columns.detect_columns(
        ["Date", "Time", "kWh"], date_column=2, value_column=0, time_column=1
    )
    assert (roles.date, roles.time, roles.value) == (2, 1, 0)
    assert roles.sources["date"] == "override"


def test_sample_analysis_fills_unlabelled_columns():
    headers = ["A", "B", "C"]
    rows = [["x", f"{d:02d}/01/2024", str(1.5 + d)] for d in range(1, 11)]
    roles = columns.detect_columns(headers, rows)
    assert roles.date == 1
    assert roles.value == 2
    assert roles.sources["date"] == "data"
    assert roles.sources["value"] == "data"


def test_value_score_prefers_varying_non_zero_columns():
    rows = [["0", "5", str(i)] for i in range(10)]
    assert columns.value_score(rows, 0) == 10 + 0 + 0
    assert columns.value_score(rows, 1) == 10 + 0 + 5
    assert columns.value_score(rows, 2) == 10 + 10 + 5
    assert columns.value_score([["x"], ["y"], ["1"]], 0) is None


def test_date_share():
    rows = [["2024-01-01"], ["2024-01-02"], ["n/a"], ["2024-01-04"]]
    assert columns.date_share(rows, 0) == pytest.approx(0.75)
    assert columns.date_share([], 0) == 0.0


@pytest.mark.parametrize(
    "headers,rows,expected",
    [
        (["foo", "bar"], [], (0, 1)),
        (["only"], [], (0, 0)),
        ([], [], (0, 0)),
    ],
)
def test_defaults(headers, rows, expected):
    roles = columns.detect_columns(headers, rows)
    assert (roles.date, roles.value) == expected
    assert roles.sources["value"] == "default"
    assert not roles.value_resolved


def test_clock_column_is_not_taken_as_value():
    rows = [["2024-01-02", f"{h:02d}:00", "1.5"] for h in range(24)]
    roles = columns.detect_columns(["a", "b", "c"], rows)
    assert roles.date == 0
    assert roles.value == 2
    assert columns.time_share(rows, 1) == 1.0
