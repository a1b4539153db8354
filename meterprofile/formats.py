from __future__ import annotations

import csv
import re
from typing import Optional, Sequence

from . import canon, columns, dates, interval, logs, utils
from .logs import LogFn
from .types import (
    ColumnRoles,
    CsvTypeDetection,
    FormatDetectionResult,
    FormatMetadata,
    FormatTag,
    ParsedReading,
)

_PREAMBLE = re.compile(
    r'^,?(?:"([^"]+)"|([^",]+)),(\d{4}-\d{2}-\d{2}),(\d{4}-\d{2}-\d{2})'
)
_SEP_HINT = re.compile(r"^sep=(.)$", re.IGNORECASE)
_HOURLY_HEADER = re.compile(r"^h\d+$")


def _split_lines(content: str) -> list[str]:
    return content.lstrip("\ufeff").splitlines()


def detect_delimiter(content: str) -> str:
    """
    Most frequent of tab, semicolon, comma and pipe in the first lines.
    Falls back to comma when nothing is found or the top count is tied.
    """
    sample = "\n".join(_split_lines(content)[: canon.SNIFF_LINES])
    counts = {d: sample.count(d) for d in canon.DELIMITERS}
    best = max(counts.values())
    if best == 0:
        return canon.DEFAULT_DELIMITER
    winners = [d for d, n in counts.items() if n == best]
    return winners[0] if len(winners) == 1 else canon.DEFAULT_DELIMITER


def clean_lines(content: str) -> tuple[list[str], Optional[str]]:
    """
    Trimmed, non-blank lines plus the delimiter from an Excel 'sep=' hint
    line, if the file carries one.
    """
    lines: list[str] = []
    hinted: Optional[str] = None
    for raw in _split_lines(content):
        line = raw.replace("\ufeff", "").strip()
        if not line:
            continue
        m = _SEP_HINT.match(line)
        if m:
            hinted = m.group(1)
            continue
        lines.append(line)
    return lines, hinted


def split_rows(lines: Sequence[str], delimiter: str) -> list[list[str]]:
    rows = []
    for line in lines:
        # per line: an unclosed quote never spans rows
        row = next(csv.reader([line], delimiter=delimiter, skipinitialspace=True), [])
        rows.append([c.strip().strip("\"'").strip() for c in row])
    return rows


def detect_vendor_preamble(lines: Sequence[str]) -> Optional[FormatMetadata]:
    """
    Recognise the vendor SCADA export: a ',"<meter>",<start>,<end>' preamble
    followed by an RDate/RTime/kWh header. Returns its metadata or None.
    """
    if len(lines) < 2:
        return None
    m = _PREAMBLE.match(lines[0].strip())
    second = lines[1].lower()
    if m and all(marker in second for marker in canon.VENDOR_HEADER_MARKERS):
        return FormatMetadata(
            meter_name=m.group(1) or m.group(2),
            date_range={"start": m.group(3), "end": m.group(4)},
        )
    return None


def find_header_row(rows: Sequence[Sequence[str]]) -> int:
    """1-based index of the header: first early row not starting with a number."""
    for i, row in enumerate(rows[: canon.HEADER_SEARCH_ROWS]):
        first = utils.cell(row, 0)
        if first and not first[0].isdigit():
            return i + 1
    return 1


def _read(content: str):
    lines, hinted = clean_lines(content)
    delimiter = hinted or detect_delimiter("\n".join(lines))
    vendor = detect_vendor_preamble(lines)
    rows = split_rows(lines, delimiter)
    # the vendor layout has a fixed header position
    header_row = canon.VENDOR_HEADER_ROW if vendor is not None else find_header_row(rows)
    headers = rows[header_row - 1] if len(rows) >= header_row else []
    return headers, rows[header_row:], delimiter, header_row, vendor


def read_table(content: str) -> tuple[list[str], list[list[str]], str, int]:
    """Split raw file text into (headers, rows, delimiter, header_row)."""
    headers, rows, delimiter, header_row, _ = _read(content)
    return headers, rows, delimiter, header_row


def _sample_readings(
    rows: Sequence[Sequence[str]], date_col: int, time_col: int
) -> list[ParsedReading]:
    out: list[ParsedReading] = []
    for row in rows[: canon.DETECT_SAMPLE_ROWS]:
        time_str = utils.cell(row, time_col) if time_col >= 0 else None
        parsed = dates.parse_datetime(utils.cell(row, date_col), time_str, canon.DETECT_DATE_ORDER)
        if parsed:
            d, hour, minute = parsed
            out.append(ParsedReading(d, hour, minute, 0.0))
    return out


def inspect_sample(
    rows: Sequence[Sequence[str]], roles: ColumnRoles
) -> tuple[list[str], bool, bool]:
    """Distinct meter ids, whether any value is negative, whether values look cumulative."""
    sample = rows[: canon.DETECT_SAMPLE_ROWS]
    meter_ids: list[str] = []
    if roles.meter_id >= 0:
        for row in sample:
            mid = utils.cell(row, roles.meter_id)
            if mid and mid not in meter_ids:
                meter_ids.append(mid)

    values = [
        v for v in (utils.parse_number(utils.cell(r, roles.value)) for r in sample) if v is not None
    ]
    has_negative = any(v < 0 for v in values)
    is_cumulative = len(values) >= 2 and utils.increasing_share(values) >= canon.CUMULATIVE_SHARE
    return meter_ids, has_negative, is_cumulative


def format_tag(headers: Sequence[str], meter_ids: Sequence[str], is_cumulative: bool) -> FormatTag:
    if not headers:
        return "unknown"
    if len(meter_ids) > 1:
        return "multi-meter"
    if is_cumulative:
        return "cumulative"
    return "standard"


def detect_format(content: str, *, log: Optional[LogFn] = None) -> FormatDetectionResult:
    """
    Sniff a raw export and suggest delimiter, header row, column roles and
    a format tag for the column-mapping step. Cumulative and negative
    readings are only flagged here, never corrected.
    """
    emit = logs.resolve(log)
    headers, data_rows, delimiter, header_row, vendor = _read(content)

    roles = columns.detect_columns(headers, data_rows)
    sample = data_rows[: canon.DETECT_SAMPLE_ROWS]

    meter_ids, has_negative, is_cumulative = inspect_sample(sample, roles)

    estimated = interval.detect_interval(_sample_readings(sample, roles.date, roles.time))

    fmt: FormatTag
    if vendor is not None:
        fmt = "vendor-scada"
        confidence = canon.VENDOR_CONFIDENCE
        metadata = vendor
    else:
        fmt = format_tag(headers, meter_ids, is_cumulative)
        confidence = (
            canon.DETECTED_CONFIDENCE
            if headers and roles.value_resolved
            else canon.FALLBACK_CONFIDENCE
        )
        metadata = FormatMetadata(meter_ids=meter_ids if len(meter_ids) > 1 else None)

    result = FormatDetectionResult(
        format=fmt,
        delimiter=delimiter,
        header_row=header_row,
        date_column=roles.date,
        time_column=roles.time,
        value_column=roles.value,
        meter_id_column=roles.meter_id,
        has_negative_values=has_negative,
        is_cumulative=is_cumulative,
        estimated_interval=estimated,
        confidence=confidence,
        metadata=metadata,
    )
    emit(
        "info",
        "format.detected",
        {
            "format": fmt,
            "delimiter": delimiter,
            "header_row": header_row,
            "date_column": roles.date,
            "value_column": roles.value,
            "interval_min": estimated,
        },
    )
    return result


def detect_csv_type(headers: Sequence[str]) -> CsvTypeDetection:
    """Tell meter exports apart from tenant lists and shop-type tables."""
    lower = [h.lower().strip() for h in headers]

    def _matches(patterns: Sequence[str]) -> list[str]:
        return [p for p in patterns if any(p in h for h in lower)]

    def _any(*words: str) -> bool:
        return any(w in h for h in lower for w in words)

    scada = _matches(canon.SCADA_TYPE_PATTERNS)
    if _any("date", "time") and _any("kwh", "kva", "kvarh", "energy") and len(scada) >= 2:
        return CsvTypeDetection(
            detected_type="scada-meter",
            confidence="high" if len(scada) >= 4 else "medium",
            matched_patterns=scada,
        )

    has_name = _any("name", "tenant", "shop", "store")
    if has_name and _any("area", "sqm", "m2", "size"):
        tenant = _matches(canon.TENANT_TYPE_PATTERNS)
        return CsvTypeDetection(
            detected_type="tenant-list",
            confidence="high" if len(tenant) >= 3 else "medium",
            matched_patterns=tenant,
        )

    hourly = any(_HOURLY_HEADER.match(h) for h in lower) or _any("hour")
    if has_name and (_any("kwh", "consumption") or hourly):
        shop = _matches(canon.SHOP_TYPE_PATTERNS)
        return CsvTypeDetection(
            detected_type="shop-types",
            confidence="high" if len(shop) >= 3 else "medium",
            matched_patterns=shop,
        )

    return CsvTypeDetection(detected_type="unknown", confidence="low")
