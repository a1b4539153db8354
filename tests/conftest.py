import pytest

from meterprofile.types import CalendarDate, ParsedReading


def halfhour_times():
    return [f"{h:02d}:{m:02d}" for h in range(24) for m in (0, 30)]


@pytest.fixture
def scada_table():
    """One Tuesday of half-hourly kWh readings in the RDate/RTime/kWh+ layout."""
    headers = ["RDate", "RTime", "kWh+"]
    rows = [["02/01/2024", t, "0.5"] for t in halfhour_times()]
    return headers, rows


@pytest.fixture
def scada_content():
    lines = [',"Main Incomer",2024-01-02,2024-01-02', "RDate,RTime,kWh+,kWh-"]
    lines += [f"02/01/2024,{t},0.5,0" for t in halfhour_times()]
    return "\n".join(lines) + "\n"


@pytest.fixture
def halfhour_readings():
    def _make(day: CalendarDate, value: float = 1.0):
        return [ParsedReading(day, h, m, value) for h in range(24) for m in (0, 30)]

    return _make


class RecordingLog:
    def __init__(self):
        self.records = []

    def __call__(self, level, event, fields):
        self.records.append((level, event, dict(fields)))

    def events(self):
        return [e for _, e, _ in self.records]

    def fields(self, event):
        return next(f for _, e, f in self.records if e == event)


@pytest.fixture
def recording_log():
    return RecordingLog()
