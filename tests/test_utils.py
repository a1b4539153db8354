import pytest

from meterprofile import utils


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1.5", 1.5),
        (" 2,345.6 ", 2345.6),
        ("12 kWh", 12.0),
        ("-0.25", -0.25),
        ("", None),
        (None, None),
        ("n/a", None),
        ("1.2.3", None),
    ],
)
def test_parse_number(raw, expected):
    assert utils.parse_number(raw) == expected


def test_cell_handles_short_rows_and_negative_index():
    row = [" a ", "b"]
    assert utils.cell(row, 0) == "a"
    assert utils.cell(row, 5) == ""
    assert utils.cell(row, -1) == ""


def test_calculate_delta_and_rollover():
    assert utils.calculate_delta(105.5, 100.0) == pytest.approx(5.5)
    # meter rolled over to zero and counted up again
    assert utils.calculate_delta(3.0, 99_999.0) == 3.0


def test_cumulative_to_interval():
    assert utils.cumulative_to_interval([100, 101, 103, 2, 5]) == [1, 2, 2, 3]
    assert utils.cumulative_to_interval([42]) == []
    assert utils.cumulative_to_interval([]) == []


@pytest.mark.parametrize(
    "policy,expected",
    [("filter", None), ("absolute", 2.5), ("keep", -2.5)],
)
def test_handle_negative(policy, expected):
    assert utils.handle_negative(-2.5, policy) == expected
    assert utils.handle_negative(1.0, policy) == 1.0


def test_apply_negative_policy():
    values = [1.0, -2.0, 3.0]
    assert utils.apply_negative_policy(values) == [1.0, 3.0]
    assert utils.apply_negative_policy(values, "absolute") == [1.0, 2.0, 3.0]
    assert utils.apply_negative_policy(values, "keep") == values


def test_increasing_share():
    assert utils.increasing_share([1, 2, 3, 4]) == 1.0
    assert utils.increasing_share([1, 2, 2, 1, 5]) == pytest.approx(0.5)
    assert utils.increasing_share([1]) == 0.0
