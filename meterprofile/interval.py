from __future__ import annotations
from typing import Sequence

import numpy as np

from . import canon
from .types import ParsedReading


def round_to_standard(minutes: float) -> int:
    """Snap a delta to the nearest standard interval (the lower one on a tie)."""
    standards = np.asarray(canon.STANDARD_INTERVALS_MIN)
    return int(standards[np.argmin(np.abs(standards - minutes))])


def detect_interval(
    readings: Sequence[ParsedReading], default: int = canon.DEFAULT_INTERVAL_MIN
) -> int:
    """
    Infer the sampling interval in minutes from parsed readings.

    Uses the first readings only, ignores duplicate timestamps and gaps over
    four hours, snaps each delta to a standard interval and returns the mode.
    """
    sample = readings[: canon.INTERVAL_SAMPLE_SIZE]
    if len(sample) < 2:
        return int(default)

    ts = np.sort(
        np.fromiter(
            (r.date.ordinal() * 1440 + r.minute_of_day for r in sample),
            dtype=np.int64,
            count=len(sample),
        )
    )
    diffs = np.diff(ts)
    diffs = diffs[(diffs > 0) & (diffs <= canon.MAX_INTERVAL_MIN)]
    if len(diffs) == 0:
        return int(default)

    rounded = np.array([round_to_standard(d) for d in diffs], dtype=int)
    vals, counts = np.unique(rounded, return_counts=True)
    return int(vals[np.argmax(counts)])
