from __future__ import annotations
from typing import Sequence

import numpy as np
import pandas as pd

from . import canon
from .types import LoadProfile, ParsedReading, Quantity

DAY_TYPES = ("weekday", "weekend")


def empty_profile(interval_minutes: int = canon.DEFAULT_INTERVAL_MIN) -> LoadProfile:
    """Zero-filled profile returned whenever nothing usable was parsed."""
    return LoadProfile(
        weekday_profile=[0.0] * canon.HOURS,
        weekend_profile=[0.0] * canon.HOURS,
        detected_interval_minutes=int(interval_minutes),
    )


def readings_frame(readings: Sequence[ParsedReading]) -> pd.DataFrame:
    """One row per reading: ISO day key, day-type, hour and value."""
    return pd.DataFrame.from_records(
        [
            (r.date.isoformat(), "weekend" if r.date.is_weekend() else "weekday", r.hour, r.value)
            for r in readings
        ],
        columns=["day", "day_type", "hour", "value"],
    )


def hourly_grid(frame: pd.DataFrame, quantity: Quantity) -> tuple[pd.Series, dict[str, int]]:
    """
    Reduce readings onto the fixed 48-bucket (day_type, hour) grid.

    - power: mean reading per bucket (typical kW for that hour)
    - energy: bucket sum / distinct days of that day-type (average kWh per hour)

    Returns the per-bucket series and the true distinct-day count per day-type.
    """
    grid = pd.MultiIndex.from_product(
        [list(DAY_TYPES), range(canon.HOURS)], names=["day_type", "hour"]
    )
    day_counts = frame.groupby("day_type")["day"].nunique()
    days = {dt: int(day_counts.get(dt, 0)) for dt in DAY_TYPES}

    buckets = (
        frame.groupby(["day_type", "hour"])["value"]
        .agg(["sum", "count"])
        .reindex(grid, fill_value=0)
    )
    if quantity == "power":
        per_hour = buckets["sum"] / buckets["count"].where(buckets["count"] > 0)
    else:
        divisor = pd.Series(
            [max(days[dt], 1) for dt in buckets.index.get_level_values("day_type")],
            index=buckets.index,
        )
        per_hour = buckets["sum"] / divisor

    per_hour = per_hour.fillna(0.0).astype(float).round(canon.PROFILE_DECIMALS).clip(lower=0.0)
    # normalise -0.0
    return per_hour + 0.0, days


def total_energy(values: np.ndarray, quantity: Quantity, interval_minutes: int) -> float:
    """kWh total: summed energy, or power integrated over the sampling interval."""
    if quantity == "power":
        return float(np.sum(values * (interval_minutes / 60.0)))
    return float(np.sum(values))


def aggregate(
    readings: Sequence[ParsedReading],
    quantity: Quantity,
    interval_minutes: int = canon.DEFAULT_INTERVAL_MIN,
) -> LoadProfile:
    """
    Build the weekday/weekend 24-hour profile and summary statistics from
    normalised readings. `quantity` applies to every reading in the table.
    """
    if not readings:
        return empty_profile(interval_minutes)

    frame = readings_frame(readings)
    per_hour, days = hourly_grid(frame, quantity)
    weekday = per_hour.xs("weekday", level="day_type").to_list()
    weekend = per_hour.xs("weekend", level="day_type").to_list()

    # exact zeros mean "no data" for peak/average purposes
    combined = np.asarray(weekday + weekend, dtype=float)
    nonzero = combined[combined != 0]
    peak = float(max(nonzero.max(initial=0.0), 0.0))
    avg = float(nonzero.mean()) if len(nonzero) else 0.0

    total = total_energy(frame["value"].to_numpy(dtype=float), quantity, interval_minutes)
    day_keys = frame["day"]

    return LoadProfile(
        weekday_profile=weekday,
        weekend_profile=weekend,
        weekday_days=days["weekday"],
        weekend_days=days["weekend"],
        total_kwh=round(total, canon.PROFILE_DECIMALS),
        date_range_start=str(day_keys.min()),
        date_range_end=str(day_keys.max()),
        data_points=len(readings),
        peak_kw=round(peak, canon.PROFILE_DECIMALS),
        avg_kw=round(avg, canon.PROFILE_DECIMALS),
        detected_interval_minutes=int(interval_minutes),
    )
