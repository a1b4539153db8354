from __future__ import annotations
from typing import Optional, Sequence

from .config import ValidationConfig
from .types import LoadProfile, ValidationVerdict


def _is_constant(values: Sequence[float]) -> bool:
    return all(v == values[0] for v in values)


def _warnings(profile: LoadProfile, cfg: ValidationConfig) -> list[str]:
    out: list[str] = []
    if profile.data_points < cfg.min_data_points:
        out.append(
            f"Only {profile.data_points} data points processed; the profile may not be representative."
        )
    nonzero = [v for v in (*profile.weekday_profile, *profile.weekend_profile) if v != 0]
    if len(nonzero) > 1 and _is_constant(nonzero):
        out.append("All non-zero hourly values are identical; check the column mapping.")
    return out


def validate_profile(
    profile: LoadProfile, config: Optional[ValidationConfig] = None
) -> ValidationVerdict:
    """
    Check a finished profile for the signatures of a failed extraction.

    Checks run in order and the first failure wins. The verdict is advisory;
    the caller decides whether to block, re-map or accept with a warning.
    """
    cfg = config or ValidationConfig()
    wd, we = profile.weekday_profile, profile.weekend_profile

    if profile.data_points == 0:
        return ValidationVerdict(is_valid=False, reason="no_data", message="No data points parsed.")

    if all(v == 0 for v in wd) and all(v == 0 for v in we):
        return ValidationVerdict(
            is_valid=False, reason="all_zero", message="All profile values are zero."
        )

    # One flat value across both day-types. A flat weekday that differs from
    # a flat weekend is allowed through.
    if _is_constant(wd) and _is_constant(we) and wd[0] == we[0] and wd[0] != 0:
        return ValidationVerdict(
            is_valid=False,
            reason="flat_profile",
            message=f"Flat/identical profile ({wd[0]} every hour), likely extraction failure.",
        )

    if profile.peak_kw > cfg.peak_ceiling_kw:
        return ValidationVerdict(
            is_valid=False,
            reason="unrealistic_peak",
            message=f"Unrealistic peak of {profile.peak_kw:,.0f} kW, check units.",
        )

    return ValidationVerdict(
        is_valid=True, reason="ok", message="Profile looks plausible.", warnings=_warnings(profile, cfg)
    )
