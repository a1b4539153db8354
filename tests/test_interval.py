import pytest

from meterprofile import interval
from meterprofile.types import CalendarDate, ParsedReading

DAY = CalendarDate(2024, 1, 2)


def _readings(minutes, day=DAY):
    return [ParsedReading(day, m // 60, m % 60, 1.0) for m in minutes]


@pytest.mark.parametrize("step", [5, 15, 30, 60])
def test_regular_cadence(step):
    assert interval.detect_interval(_readings(range(0, 600, step))) == step


def test_unsorted_and_duplicate_timestamps():
    minutes = [60, 0, 30, 30, 90, 120]
    assert interval.detect_interval(_readings(minutes)) == 30


def test_gaps_over_four_hours_are_ignored():
    minutes = [0, 15, 30, 45, 600, 615, 630]
    assert interval.detect_interval(_readings(minutes)) == 15


def test_crosses_midnight():
    late = _readings([1410, 1425])
    early = _readings([0, 15], CalendarDate(2024, 1, 3))
    assert interval.detect_interval(late + early) == 15


def test_fallback_to_sixty():
    assert interval.detect_interval([]) == 60
    assert interval.detect_interval(_readings([0])) == 60
    assert interval.detect_interval(_readings([0, 0, 0])) == 60
    assert interval.detect_interval(_readings([0]) + _readings([0], CalendarDate(2024, 1, 5))) == 60


@pytest.mark.parametrize(
    "minutes,expected",
    [(14, 15), (16, 15), (45, 30), (90, 60), (7.5, 5), (200, 180), (3, 1)],
)
def test_round_to_standard(minutes, expected):
    assert interval.round_to_standard(minutes) == expected


def test_mode_tie_picks_smallest():
    minutes = [0, 15, 30, 90, 150]
    assert interval.detect_interval(_readings(minutes)) == 15
