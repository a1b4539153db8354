"""Unit normalisation to canonical kW (power) or kWh (energy).

Units live in one lookup table; adding a unit means adding a row, not a
branch. The quantity of a unit decides how a whole table is aggregated.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from . import canon
from .exceptions import UnitError, require
from .types import Quantity

# (value, voltage_v, power_factor) -> value
Converter = Callable[[float, float, float], float]

_SQRT3 = math.sqrt(3)


@dataclass(frozen=True)
class UnitSpec:
    quantity: Quantity
    to_canonical: Converter
    from_canonical: Converter


UNITS: Dict[str, UnitSpec] = {
    # power -> kW
    "kW": UnitSpec("power", lambda v, V, pf: v, lambda v, V, pf: v),
    "W": UnitSpec("power", lambda v, V, pf: v / 1000, lambda v, V, pf: v * 1000),
    "MW": UnitSpec("power", lambda v, V, pf: v * 1000, lambda v, V, pf: v / 1000),
    "kVA": UnitSpec("power", lambda v, V, pf: v * pf, lambda v, V, pf: v / pf),
    # three-phase real power from line current
    "A": UnitSpec(
        "power",
        lambda v, V, pf: _SQRT3 * V * v * pf / 1000,
        lambda v, V, pf: v * 1000 / (_SQRT3 * V * pf),
    ),
    # energy -> kWh
    "kWh": UnitSpec("energy", lambda v, V, pf: v, lambda v, V, pf: v),
    "Wh": UnitSpec("energy", lambda v, V, pf: v / 1000, lambda v, V, pf: v * 1000),
    "MWh": UnitSpec("energy", lambda v, V, pf: v * 1000, lambda v, V, pf: v / 1000),
    "kVAh": UnitSpec("energy", lambda v, V, pf: v * pf, lambda v, V, pf: v / pf),
}

_WORD_W = re.compile(r"\bw\b")
_WORD_A = re.compile(r"\ba\b")


def _spec(unit: str) -> UnitSpec:
    spec = UNITS.get(unit)
    require(spec is not None, f"Unknown unit {unit!r}; expected one of {', '.join(UNITS)}.", UnitError)
    return spec  # type: ignore[return-value]


def quantity_of(unit: str) -> Quantity:
    return _spec(unit).quantity


def detect_unit(header: Optional[str]) -> str:
    """
    Infer the unit from a value-column header.

    Compound tokens are checked before the looser ones they contain
    ('mwh' before 'mw', 'kvah' before 'kva', 'kwh' before 'kw').
    """
    h = (header or "").lower()

    if "mwh" in h:
        return "MWh"
    if "mw" in h:
        return "MW"
    if "kvah" in h:
        return "kVAh"
    if "kva" in h:
        return "kVA"
    if "kwh" in h:
        return "kWh"
    if "kw" in h:
        return "kW"
    if "wh" in h:
        return "Wh"
    if _WORD_W.search(h) or "watt" in h:
        return "W"
    if "amp" in h or _WORD_A.search(h) or "current" in h:
        return "A"
    # descriptive words only count when no unit token is present
    if "energy" in h or "consumption" in h:
        return "kWh"
    if "power" in h or "load" in h:
        return "kW"

    # interval-meter exports are energy unless they say otherwise
    return "kWh"


def resolve_unit(unit: Optional[str], header: Optional[str] = None) -> str:
    if not unit or unit == "auto":
        return detect_unit(header)
    _spec(unit)
    return unit


def normalize(
    value: float,
    unit: str,
    voltage_v: float = canon.DEFAULT_VOLTAGE_V,
    power_factor: float = canon.DEFAULT_POWER_FACTOR,
) -> float:
    """Convert a raw magnitude in `unit` to canonical kW or kWh."""
    return _spec(unit).to_canonical(value, voltage_v, power_factor)


def denormalize(
    value: float,
    unit: str,
    voltage_v: float = canon.DEFAULT_VOLTAGE_V,
    power_factor: float = canon.DEFAULT_POWER_FACTOR,
) -> float:
    """Inverse of normalize: canonical kW/kWh back to `unit`."""
    return _spec(unit).from_canonical(value, voltage_v, power_factor)
