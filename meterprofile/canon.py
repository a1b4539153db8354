from __future__ import annotations
from typing import Final, Dict

DELIMITERS: Final[tuple[str, ...]] = ("\t", ";", ",", "|")
DEFAULT_DELIMITER: Final[str] = ","
SNIFF_LINES: Final[int] = 10
HEADER_SEARCH_ROWS: Final[int] = 5
DETECT_SAMPLE_ROWS: Final[int] = 100
COLUMN_SAMPLE_ROWS: Final[int] = 20

DEFAULT_VOLTAGE_V: Final[float] = 400.0
DEFAULT_POWER_FACTOR: Final[float] = 0.9
DEFAULT_INTERVAL_MIN: Final[int] = 60
MAX_INTERVAL_MIN: Final[int] = 240
STANDARD_INTERVALS_MIN: Final[tuple[int, ...]] = (1, 5, 10, 15, 30, 60, 120, 180, 240)
INTERVAL_SAMPLE_SIZE: Final[int] = 100

# Header substrings per logical role, in priority order
DATE_PATTERNS: Final[tuple[str, ...]] = ("rdate", "date", "datetime", "timestamp", "day", "datum")
TIME_PATTERNS: Final[tuple[str, ...]] = ("rtime", "time", "hour", "zeit")
VALUE_PATTERNS: Final[tuple[str, ...]] = (
    "kwh+",
    "kwh-",
    "kwh",
    "kw",
    "energy",
    "consumption",
    "reading",
    "value",
    "power",
    "load",
    "demand",
    "active",
    "amount",
    "usage",
)
METER_PATTERNS: Final[tuple[str, ...]] = ("meter", "meter_id", "meterid", "device", "channel", "point", "site")

# Vendor SCADA export: preamble line, then a header with these markers
VENDOR_HEADER_MARKERS: Final[tuple[str, ...]] = ("rdate", "rtime", "kwh")
VENDOR_HEADER_ROW: Final[int] = 2
VENDOR_CONFIDENCE: Final[float] = 0.95
DETECTED_CONFIDENCE: Final[float] = 0.8
FALLBACK_CONFIDENCE: Final[float] = 0.5
CUMULATIVE_SHARE: Final[float] = 0.9

MONTHS: Final[Dict[str, int]] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}
TWO_DIGIT_YEAR_PIVOT: Final[int] = 50
DEFAULT_DATE_ORDER: Final[str] = "YMD"
DETECT_DATE_ORDER: Final[str] = "DMY"

HOURS: Final[int] = 24
PROFILE_DECIMALS: Final[int] = 2

# Validator thresholds
PEAK_CEILING_KW: Final[float] = 100_000.0
MIN_DATA_POINTS: Final[int] = 48

# Header vocabularies used to tell meter exports apart from other uploads
SCADA_TYPE_PATTERNS: Final[tuple[str, ...]] = (
    "rdate",
    "rtime",
    "kwh+",
    "kwh-",
    "kvarh",
    "kva",
    "pf",
    "status",
    "active energy",
    "reactive energy",
    "power factor",
    "meter reading",
)
TENANT_TYPE_PATTERNS: Final[tuple[str, ...]] = (
    "name",
    "tenant",
    "shop",
    "store",
    "unit",
    "area",
    "sqm",
    "size",
    "m2",
    "m²",
    "square",
)
SHOP_TYPE_PATTERNS: Final[tuple[str, ...]] = (
    "name",
    "type",
    "category",
    "kwh",
    "consumption",
    "h0",
    "h1",
    "h2",
    "h3",
)
