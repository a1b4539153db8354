# meterprofile/utils.py
from __future__ import annotations
import re
from typing import Iterable, Optional, Sequence

from .types import NegativePolicy

_NON_NUMERIC = re.compile(r"[^\d.\-]")


def cell(row: Sequence[str], idx: int) -> str:
    """Return the trimmed cell at idx, or '' when the row is short or idx < 0."""
    if idx < 0 or idx >= len(row):
        return ""
    v = row[idx]
    return v.strip() if v else ""


def parse_number(value: Optional[str]) -> Optional[float]:
    """
    Parse a meter value cell, dropping units, thousands separators and
    other decoration. Returns None when nothing numeric is left.
    """
    if not value:
        return None
    cleaned = _NON_NUMERIC.sub("", value)
    if not cleaned:
        return None
    try:
        return float(cleaned)
    except ValueError:
        return None


def calculate_delta(current: float, previous: float) -> float:
    """Interval consumption between two cumulative readings.

    A drop is treated as a meter rollover, so the current reading is the delta.
    """
    if current < previous:
        return current
    return current - previous


def cumulative_to_interval(values: Iterable[float]) -> list[float]:
    """
    Convert running meter totals into per-interval consumption.

    The first reading has no predecessor and is dropped, so the output is one
    element shorter than the input.
    """
    out: list[float] = []
    prev: Optional[float] = None
    for v in values:
        if prev is not None:
            out.append(calculate_delta(v, prev))
        prev = v
    return out


def handle_negative(value: float, policy: NegativePolicy = "filter") -> Optional[float]:
    """Apply a sign policy to one reading; None means drop it."""
    if value >= 0:
        return value
    if policy == "absolute":
        return abs(value)
    if policy == "keep":
        return value
    # 'filter' and anything unrecognised
    return None


def apply_negative_policy(
    values: Iterable[float], policy: NegativePolicy = "filter"
) -> list[float]:
    out = (handle_negative(v, policy) for v in values)
    return [v for v in out if v is not None]


def increasing_share(values: Sequence[float]) -> float:
    """Fraction of consecutive pairs where the value strictly increases."""
    if len(values) < 2:
        return 0.0
    ups = sum(1 for a, b in zip(values, values[1:]) if b > a)
    return ups / (len(values) - 1)
