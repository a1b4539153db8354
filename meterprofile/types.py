from __future__ import annotations
from typing import Literal, List, Dict, Optional
from dataclasses import dataclass, field
from datetime import date as _date

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

DateOrder = Literal["DMY", "MDY", "YMD"]
FormatTag = Literal["vendor-scada", "standard", "multi-meter", "cumulative", "unknown"]
Quantity = Literal["power", "energy"]
UnitName = Literal["kW", "W", "MW", "kVA", "A", "kWh", "Wh", "MWh", "kVAh"]
NegativePolicy = Literal["filter", "absolute", "keep"]
RoleSource = Literal["override", "header", "data", "default"]
ReasonCode = Literal["ok", "no_data", "all_zero", "flat_profile", "unrealistic_peak"]
CsvDataType = Literal["scada-meter", "tenant-list", "shop-types", "unknown"]

_CAMEL = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}


@dataclass(frozen=True, order=True)
class CalendarDate:
    """
    A plain calendar day with no time zone attached.

    Month is 1-based. Ordering is chronological.
    """

    year: int
    month: int
    day: int

    def weekday(self) -> int:
        """Mon=0..Sun=6"""
        return _date(self.year, self.month, self.day).weekday()

    def is_weekend(self) -> bool:
        return self.weekday() >= 5

    def isoformat(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d}"

    def ordinal(self) -> int:
        return _date(self.year, self.month, self.day).toordinal()

    @classmethod
    def from_iso(cls, s: str) -> "CalendarDate":
        d = _date.fromisoformat(s)
        return cls(d.year, d.month, d.day)

    def __str__(self) -> str:
        return self.isoformat()


@dataclass(frozen=True)
class ParsedReading:
    date: CalendarDate
    hour: int
    minute: int
    value: float  # kW or kWh; the quantity is tracked per table

    @property
    def minute_of_day(self) -> int:
        return self.hour * 60 + self.minute


@dataclass(frozen=True)
class ColumnRoles:
    """Column indices per logical role (-1 when absent) and how each was found."""

    date: int
    time: int
    value: int
    meter_id: int
    sources: Dict[str, RoleSource] = field(default_factory=dict)

    @property
    def value_resolved(self) -> bool:
        return self.sources.get("value", "default") != "default"


@dataclass
class ParseStats:
    total_rows: int = 0
    parsed_rows: int = 0
    date_errors: int = 0
    value_errors: int = 0

    @property
    def skipped_rows(self) -> int:
        return self.date_errors + self.value_errors


class DetectedLayout(BaseModel):
    delimiter: Optional[str] = None
    header_row: int = 1
    date_column: int
    time_column: int = -1
    value_column: int
    meter_id_column: int = -1
    format: FormatTag = "unknown"
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    model_config = {"frozen": True}


class LoadProfile(BaseModel):
    """
    Canonical 24-hour weekday/weekend load profile.

    Profile entries are kW for power readings and average kWh per hour for
    energy readings; either way one value per hour of day.
    """

    weekday_profile: List[float] = Field(min_length=24, max_length=24)
    weekend_profile: List[float] = Field(min_length=24, max_length=24)
    weekday_days: int = 0
    weekend_days: int = 0
    total_kwh: float = 0.0
    date_range_start: Optional[str] = None
    date_range_end: Optional[str] = None
    data_points: int = 0
    peak_kw: float = 0.0
    avg_kw: float = 0.0
    detected_interval_minutes: int = 60
    model_config = _CAMEL


class ValidationVerdict(BaseModel):
    is_valid: bool
    reason: ReasonCode
    message: str
    warnings: List[str] = Field(default_factory=list)
    model_config = _CAMEL


class FormatMetadata(BaseModel):
    meter_name: Optional[str] = None
    date_range: Optional[Dict[str, str]] = None
    meter_ids: Optional[List[str]] = None
    model_config = _CAMEL


class FormatDetectionResult(BaseModel):
    format: FormatTag
    delimiter: str
    header_row: int
    date_column: int
    time_column: int
    value_column: int
    meter_id_column: int
    has_negative_values: bool = False
    is_cumulative: bool = False
    estimated_interval: int = 60
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    metadata: FormatMetadata = Field(default_factory=FormatMetadata)
    model_config = _CAMEL

    def to_layout(self) -> DetectedLayout:
        return DetectedLayout(
            delimiter=self.delimiter,
            header_row=self.header_row,
            date_column=self.date_column,
            time_column=self.time_column,
            value_column=self.value_column,
            meter_id_column=self.meter_id_column,
            format=self.format,
            confidence=self.confidence,
        )


class CsvTypeDetection(BaseModel):
    detected_type: CsvDataType
    confidence: Literal["high", "medium", "low"]
    matched_patterns: List[str] = Field(default_factory=list)
    model_config = _CAMEL


@dataclass(frozen=True)
class ProcessResult:
    layout: DetectedLayout
    unit: str
    quantity: Quantity
    profile: LoadProfile
    stats: ParseStats
