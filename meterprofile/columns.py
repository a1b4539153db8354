from __future__ import annotations
import re
from typing import Dict, Optional, Sequence

from . import canon, utils
from .types import ColumnRoles, RoleSource

_DATE_LIKE = re.compile(r"\d{1,4}[-/.]\d{1,2}[-/.]\d{1,4}")
_TIME_LIKE = re.compile(r"^\d{1,2}:\d{2}")


def find_by_header(
    headers: Sequence[str], patterns: Sequence[str], exclude: Sequence[int] = ()
) -> int:
    """Index of the first header containing a pattern, patterns tried in priority order."""
    lower = [h.lower().strip() for h in headers]
    for pattern in patterns:
        for i, h in enumerate(lower):
            if i not in exclude and pattern in h:
                return i
    return -1


def _column_values(rows: Sequence[Sequence[str]], col: int) -> list[str]:
    return [utils.cell(r, col) for r in rows[: canon.COLUMN_SAMPLE_ROWS]]


def date_share(rows: Sequence[Sequence[str]], col: int) -> float:
    """Fraction of sampled cells that look like a numeric date."""
    vals = _column_values(rows, col)
    if not vals:
        return 0.0
    return sum(1 for v in vals if _DATE_LIKE.search(v)) / len(vals)


def time_share(rows: Sequence[Sequence[str]], col: int) -> float:
    """Fraction of sampled cells that look like a clock time."""
    vals = _column_values(rows, col)
    if not vals:
        return 0.0
    return sum(1 for v in vals if _TIME_LIKE.match(v)) / len(vals)


def value_score(rows: Sequence[Sequence[str]], col: int) -> Optional[int]:
    """
    Score a column as the meter-value candidate; None when fewer than half
    the sampled cells are numeric.
    """
    vals = _column_values(rows, col)
    nums = [n for n in (utils.parse_number(v) for v in vals) if n is not None]
    if not vals or len(nums) < len(vals) * 0.5:
        return None
    varies = any(b != a for a, b in zip(nums, nums[1:]))
    total = sum(abs(n) for n in nums)
    return len(nums) + (10 if varies else 0) + (5 if total > 0 else 0)


def analyse_sample(
    rows: Sequence[Sequence[str]], n_cols: int, claimed: Sequence[int] = ()
) -> tuple[int, int]:
    """Statistical fallback: (date_column, value_column) from sample rows, -1 if none."""
    if not rows:
        return -1, -1
    date_col = next(
        (c for c in range(n_cols) if c not in claimed and date_share(rows, c) >= 0.8),
        -1,
    )
    best_col, best_score = -1, 0
    for c in range(n_cols):
        # clock cells parse as numbers ("00:30" -> 30)
        if c in claimed or c == date_col or time_share(rows, c) >= 0.5:
            continue
        score = value_score(rows, c)
        if score is not None and score > best_score:
            best_col, best_score = c, score
    return date_col, best_col


def detect_columns(
    headers: Sequence[str],
    sample_rows: Sequence[Sequence[str]] = (),
    *,
    date_column: Optional[int] = None,
    time_column: Optional[int] = None,
    value_column: Optional[int] = None,
    meter_id_column: Optional[int] = None,
) -> ColumnRoles:
    """
    Map columns to the date, time, value and meter-id roles.

    Explicit indices win, then header text, then the statistical sample
    analysis (date and value only). A date or value column is always
    returned; the validator is relied on to catch a bad guess.
    """
    sample = list(sample_rows[: canon.DETECT_SAMPLE_ROWS])
    n_cols = max([len(headers), *(len(r) for r in sample)], default=0)

    roles: Dict[str, int] = {}
    sources: Dict[str, RoleSource] = {}
    for role, idx in (
        ("date", date_column),
        ("time", time_column),
        ("value", value_column),
        ("meter_id", meter_id_column),
    ):
        if idx is not None and idx >= 0:
            roles[role], sources[role] = idx, "override"

    # Pass A: header text
    for role, patterns in (
        ("date", canon.DATE_PATTERNS),
        ("time", canon.TIME_PATTERNS),
        ("value", canon.VALUE_PATTERNS),
        ("meter_id", canon.METER_PATTERNS),
    ):
        if role in roles:
            continue
        idx = find_by_header(headers, patterns, exclude=list(roles.values()))
        if idx != -1:
            roles[role], sources[role] = idx, "header"

    # Pass B: sample data
    if ("date" not in roles or "value" not in roles) and sample:
        date_col, value_col = analyse_sample(sample, n_cols, claimed=list(roles.values()))
        if "date" not in roles and date_col != -1:
            roles["date"], sources["date"] = date_col, "data"
        if "value" not in roles and value_col != -1 and value_col != roles.get("date"):
            roles["value"], sources["value"] = value_col, "data"

    if "date" not in roles:
        roles["date"], sources["date"] = 0, "default"
    if "value" not in roles:
        roles["value"], sources["value"] = (1 if n_cols > 1 else 0), "default"

    return ColumnRoles(
        date=roles["date"],
        time=roles.get("time", -1),
        value=roles["value"],
        meter_id=roles.get("meter_id", -1),
        sources=sources,
    )
