from __future__ import annotations
import calendar
import re
from typing import Optional, Tuple

import pandas as pd

from . import canon
from .types import CalendarDate

ParsedDateTime = Tuple[CalendarDate, int, int]

_TIME = r"(\d{1,2}):(\d{2})(?::(\d{2}))?(?:\s*([AaPp][Mm]))?"

# 1. "31/12/2024 23:30:00", "2024-12-31T23:30"
_COMBINED = re.compile(r"^(\d{1,4})[-/.](\d{1,2})[-/.](\d{1,4})(?:T|\s+)" + _TIME)
# 2. "31/12/2024" (time may come from a separate cell)
_DATE_ONLY = re.compile(r"^(\d{1,4})[-/.](\d{1,2})[-/.](\d{1,4})(?!\d)")
_TIME_CELL = re.compile(r"^" + _TIME)
# 3. "01-Jan-24 10:00"
_MONTH_NAME = re.compile(
    r"^(\d{1,2})[-/.\s]([A-Za-z]{3,9})[-/.\s](\d{2}|\d{4})(?!\d)(?:(?:T|\s+)" + _TIME + r")?"
)
# 4. ISO-looking prefix required before handing off to pandas
_ISO_PREFIX = re.compile(r"^\d{4}[-/]\d{2}[-/]\d{2}")


def _strip_quotes(s: str) -> str:
    return s.strip().strip("\"'").strip()


def expand_year(year: int) -> int:
    """Two-digit years: >50 is 19xx, otherwise 20xx."""
    if year < 100:
        return year + (1900 if year > canon.TWO_DIGIT_YEAR_PIVOT else 2000)
    return year


def resolve_parts(p1: int, p2: int, p3: int, order: str = "DMY") -> Tuple[int, int, int]:
    """
    Order three numeric date parts into (year, month, day).

    Value ranges decide first: a part above 31 is the year whatever the hint,
    and with the year last a part above 12 can only be the day. The hint is
    used only when the parts are ambiguous.
    """
    if p1 > 31:
        year, month, day = p1, p2, p3
    elif p3 > 31:
        month_first = order == "MDY"
        if month_first and p1 > 12 >= p2:
            month_first = False
        elif not month_first and p2 > 12 >= p1:
            month_first = True
        if month_first:
            month, day, year = p1, p2, p3
        else:
            day, month, year = p1, p2, p3
    elif p2 > 31:
        year = p2
        day, month = (p1, p3) if order == "DMY" else (p3, p1)
    elif order == "DMY":
        day, month, year = p1, p2, p3
    elif order == "MDY":
        month, day, year = p1, p2, p3
    else:
        year, month, day = p1, p2, p3
    return expand_year(year), month, day


def make_date(year: int, month: int, day: int) -> Optional[CalendarDate]:
    """CalendarDate if the components form a real calendar day, else None."""
    if not (1 <= month <= 12) or not (1 <= day <= 31):
        return None
    if year < 1 or day > calendar.monthrange(year, month)[1]:
        return None
    return CalendarDate(year, month, day)


def _clock(hour: str, minute: str, meridiem: Optional[str] = None) -> Optional[Tuple[int, int]]:
    h, m = int(hour), int(minute)
    if meridiem:
        if not 1 <= h <= 12:
            return None
        h = h % 12 + (12 if meridiem.lower() == "pm" else 0)
    if h == 24 and m == 0:
        # meter exports label the last interval of the day 24:00
        return 0, 0
    if h > 23 or m > 59:
        return None
    return h, m


def parse_time(time_str: Optional[str]) -> Optional[Tuple[int, int]]:
    """Parse an 'H:MM[:SS] [AM|PM]' prefix into (hour, minute)."""
    if not time_str:
        return None
    m = _TIME_CELL.match(_strip_quotes(time_str))
    if not m:
        return None
    return _clock(m.group(1), m.group(2), m.group(4))


def _numeric(m: re.Match, order: str) -> Optional[CalendarDate]:
    year, month, day = resolve_parts(int(m.group(1)), int(m.group(2)), int(m.group(3)), order)
    return make_date(year, month, day)


def parse_datetime(
    date_str: Optional[str], time_str: Optional[str] = None, order: str = canon.DETECT_DATE_ORDER
) -> Optional[ParsedDateTime]:
    """
    Parse a date cell (plus an optional separate time cell) into
    (CalendarDate, hour, minute). Returns None when nothing matches; the
    caller counts that as a parse error.
    """
    if not date_str:
        return None
    date_s = _strip_quotes(date_str)
    time_s = _strip_quotes(time_str) if time_str else ""
    if not date_s:
        return None

    # 1) date and time in one cell
    m = _COMBINED.match(date_s)
    if m:
        d = _numeric(m, order)
        if d is not None:
            clock = _clock(m.group(4), m.group(5), m.group(7))
            if clock is None:
                return None
            return d, clock[0], clock[1]

    # 2) date only, time from the time cell
    m = _DATE_ONLY.match(date_s)
    if m:
        d = _numeric(m, order)
        if d is not None:
            if time_s:
                clock = parse_time(time_s)
                if clock is None and _TIME_CELL.match(time_s):
                    return None
                return (d, *clock) if clock else (d, 0, 0)
            return d, 0, 0

    # 3) month names
    m = _MONTH_NAME.match(date_s)
    if m:
        month = canon.MONTHS.get(m.group(2)[:3].lower())
        if month is not None:
            d = make_date(expand_year(int(m.group(3))), month, int(m.group(1)))
            if d is not None:
                if m.group(4):
                    clock = _clock(m.group(4), m.group(5), m.group(7))
                else:
                    clock = parse_time(time_s) if time_s else (0, 0)
                if clock is not None:
                    return d, clock[0], clock[1]

    # 4) last resort for ISO-like strings the regexes missed
    combined = f"{date_s} {time_s}" if time_s else date_s
    if len(combined) >= 10 and _ISO_PREFIX.match(combined):
        ts = pd.to_datetime(combined, errors="coerce")
        if ts is not None and not pd.isna(ts):
            return CalendarDate(ts.year, ts.month, ts.day), int(ts.hour), int(ts.minute)

    return None
