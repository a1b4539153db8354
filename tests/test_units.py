import math

import pytest

from meterprofile import units
from meterprofile.exceptions import UnitError


@pytest.mark.parametrize(
    "header,expected",
    [
        ("kWh+", "kWh"),
        ("Active Energy (MWh)", "MWh"),
        ("Demand MW", "MW"),
        ("Apparent kVAh", "kVAh"),
        ("kVA", "kVA"),
        ("Power (kW)", "kW"),
        ("Energy (Wh)", "Wh"),
        ("Load W", "W"),
        ("Watts", "W"),
        ("Demand (A)", "A"),
        ("Phase current", "A"),
        ("Amps", "A"),
        ("Consumption", "kWh"),
        ("Site load", "kW"),
        ("Reading", "kWh"),
        ("", "kWh"),
        (None, "kWh"),
    ],
)
def test_detect_unit(header, expected):
    assert units.detect_unit(header) == expected


def test_quantity_table():
    for u in ("kW", "W", "MW", "kVA", "A"):
        assert units.quantity_of(u) == "power"
    for u in ("kWh", "Wh", "MWh", "kVAh"):
        assert units.quantity_of(u) == "energy"


def test_normalize_values():
    assert units.normalize(1500, "W") == pytest.approx(1.5)
    assert units.normalize(2, "MWh") == pytest.approx(2000)
    assert units.normalize(100, "kVA") == pytest.approx(90)
    assert units.normalize(100, "kVAh", power_factor=0.8) == pytest.approx(80)
    assert units.normalize(100, "A") == pytest.approx(math.sqrt(3) * 400 * 100 * 0.9 / 1000)
    assert units.normalize(10, "A", voltage_v=230, power_factor=1.0) == pytest.approx(
        math.sqrt(3) * 230 * 10 / 1000
    )


@pytest.mark.parametrize("unit", sorted(units.UNITS))
def test_normalize_denormalize_inverse(unit):
    v = 123.456
    assert units.denormalize(units.normalize(v, unit, 415, 0.95), unit, 415, 0.95) == pytest.approx(v)


def test_resolve_unit():
    assert units.resolve_unit("auto", "Demand (A)") == "A"
    assert units.resolve_unit(None, "kW") == "kW"
    assert units.resolve_unit("MW", "kWh") == "MW"


def test_unknown_unit_raises():
    with pytest.raises(UnitError):
        units.normalize(1.0, "BTU")
    with pytest.raises(UnitError):
        units.resolve_unit("gallons")
