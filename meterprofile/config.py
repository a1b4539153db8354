from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Mapping, Optional, Tuple

from . import canon
from .exceptions import ConfigError, require

DataType = Literal["date", "general", "skip"]

_UNITS = ("auto", "kW", "W", "MW", "kVA", "A", "kWh", "Wh", "MWh", "kVAh")
_ORDERS = ("DMY", "MDY", "YMD")


def _coerce(value: Any, cast: type, key: str, required: bool = False) -> Any:
    """Cast a wizard payload value; None means not set."""
    if value is None:
        require(not required, f"{key} is required.", ConfigError)
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a number, got {value!r}.") from None


def _or_default(value: Any, default: Any) -> Any:
    return default if value is None else value


@dataclass(frozen=True)
class ColumnConfig:
    """One column entry from a prior manual-mapping step."""

    index: int
    name: str = ""
    data_type: DataType = "general"
    date_format: Optional[str] = None

    def __post_init__(self):
        require(
            self.data_type in ("date", "general", "skip"),
            f"Unknown column dataType {self.data_type!r}.",
            ConfigError,
        )
        require(
            self.date_format is None or self.date_format in _ORDERS,
            f"Unknown dateFormat {self.date_format!r}; expected one of {', '.join(_ORDERS)}.",
            ConfigError,
        )


@dataclass(frozen=True)
class ProcessConfig:
    # Explicit column overrides (highest priority)
    value_column_index: Optional[int] = None
    date_column_index: Optional[int] = None
    time_column_index: Optional[int] = None
    meter_id_column_index: Optional[int] = None

    # Manual column mapping (second priority)
    columns: Tuple[ColumnConfig, ...] = ()

    # Units
    value_unit: str = "auto"
    voltage_v: float = canon.DEFAULT_VOLTAGE_V
    power_factor: float = canon.DEFAULT_POWER_FACTOR

    def __post_init__(self):
        require(self.value_unit in _UNITS, f"Unknown valueUnit {self.value_unit!r}.", ConfigError)
        require(self.voltage_v > 0, "voltageV must be positive.", ConfigError)
        require(
            0 < self.power_factor <= 1,
            "powerFactor must be in (0, 1].",
            ConfigError,
        )
        # accept any iterable of columns but store a tuple
        object.__setattr__(self, "columns", tuple(self.columns))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ProcessConfig":
        """Build from the column-mapping wizard's camelCase payload."""

        def _index(key: str) -> Optional[int]:
            v = _coerce(data.get(key), int, key)
            return v if v is not None and v >= 0 else None

        columns = tuple(
            ColumnConfig(
                index=_coerce(c.get("index"), int, "columns[].index", required=True),
                name=str(c.get("name", "")),
                data_type=c.get("dataType", "general"),
                date_format=c.get("dateFormat"),
            )
            for c in (data.get("columns") or [])
        )
        return cls(
            value_column_index=_index("valueColumnIndex"),
            date_column_index=_index("dateColumnIndex"),
            time_column_index=_index("timeColumnIndex"),
            meter_id_column_index=_index("meterIdColumnIndex"),
            columns=columns,
            value_unit=data.get("valueUnit") or "auto",
            voltage_v=_or_default(
                _coerce(data.get("voltageV"), float, "voltageV"), canon.DEFAULT_VOLTAGE_V
            ),
            power_factor=_or_default(
                _coerce(data.get("powerFactor"), float, "powerFactor"), canon.DEFAULT_POWER_FACTOR
            ),
        )

    def date_order(self, date_column: int) -> str:
        """Day/month ordering hint for the given date column."""
        col = next((c for c in self.columns if c.index == date_column), None)
        return (col.date_format if col and col.date_format else canon.DEFAULT_DATE_ORDER)


@dataclass(frozen=True)
class ValidationConfig:
    peak_ceiling_kw: float = canon.PEAK_CEILING_KW
    min_data_points: int = canon.MIN_DATA_POINTS  # fewer points only warns


def default_config() -> ProcessConfig:
    return ProcessConfig()


def coerce_config(config: ProcessConfig | Mapping[str, Any] | None) -> ProcessConfig:
    if config is None:
        return default_config()
    if isinstance(config, ProcessConfig):
        return config
    return ProcessConfig.from_mapping(config)
