from __future__ import annotations
from typing import Any, Iterator, Mapping, Optional, Sequence, Tuple

from . import aggregate, canon, columns, dates, formats, interval, logs, units, utils
from .config import ProcessConfig, coerce_config
from .logs import LogFn
from .types import (
    ColumnRoles,
    DetectedLayout,
    LoadProfile,
    ParsedReading,
    ParseStats,
    ProcessResult,
)

ConfigLike = ProcessConfig | Mapping[str, Any] | None


def _mapped_overrides(cfg: ProcessConfig) -> dict[str, Optional[int]]:
    """
    Column overrides from the config: explicit indices first, then the
    manual column mapping. A mapped column whose name mentions time is the
    time column and is never taken as the value column.
    """
    date_idx = cfg.date_column_index
    time_idx = cfg.time_column_index
    value_idx = cfg.value_column_index

    if date_idx is None:
        date_idx = next((c.index for c in cfg.columns if c.data_type == "date"), None)
    if time_idx is None:
        time_idx = next(
            (
                c.index
                for c in cfg.columns
                if c.data_type != "skip" and "time" in c.name.lower() and c.index != date_idx
            ),
            None,
        )
    if value_idx is None:
        value_idx = next(
            (
                c.index
                for c in cfg.columns
                if c.data_type == "general" and c.index not in (date_idx, time_idx)
            ),
            None,
        )
    return {
        "date_column": date_idx,
        "time_column": time_idx,
        "value_column": value_idx,
        "meter_id_column": cfg.meter_id_column_index,
    }


def resolve_layout(
    headers: Sequence[str], rows: Sequence[Sequence[str]], cfg: ProcessConfig
) -> tuple[ColumnRoles, DetectedLayout]:
    sample = rows[: canon.DETECT_SAMPLE_ROWS]
    roles = columns.detect_columns(headers, sample, **_mapped_overrides(cfg))
    meter_ids, _, is_cumulative = formats.inspect_sample(sample, roles)
    layout = DetectedLayout(
        date_column=roles.date,
        time_column=roles.time,
        value_column=roles.value,
        meter_id_column=roles.meter_id,
        format=formats.format_tag(headers, meter_ids, is_cumulative),
        confidence=(
            canon.DETECTED_CONFIDENCE if roles.value_resolved else canon.FALLBACK_CONFIDENCE
        ),
    )
    return roles, layout


def _table_width(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> int:
    return max([len(headers), *(len(r) for r in rows[: canon.DETECT_SAMPLE_ROWS])], default=0)


def parse_rows(
    rows: Sequence[Sequence[str]],
    roles: ColumnRoles,
    *,
    unit: str,
    order: str,
    voltage_v: float,
    power_factor: float,
    stats: ParseStats,
) -> Iterator[Tuple[str, ParsedReading]]:
    """
    Yield (meter_id, reading) per usable row. Rows with an unparseable date
    or value are skipped and counted in `stats`.
    """
    for row in rows:
        stats.total_rows += 1
        time_str = utils.cell(row, roles.time) if roles.time >= 0 else None
        parsed = dates.parse_datetime(utils.cell(row, roles.date), time_str, order)
        if parsed is None:
            stats.date_errors += 1
            continue
        raw = utils.parse_number(utils.cell(row, roles.value))
        if raw is None:
            stats.value_errors += 1
            continue
        stats.parsed_rows += 1
        d, hour, minute = parsed
        value = units.normalize(raw, unit, voltage_v, power_factor)
        yield utils.cell(row, roles.meter_id), ParsedReading(d, hour, minute, value)


def _prepare(headers, rows, cfg: ProcessConfig, emit: LogFn):
    roles, layout = resolve_layout(headers, rows, cfg)
    emit(
        "info",
        "columns.detected",
        {
            "date": roles.date,
            "time": roles.time,
            "value": roles.value,
            "meter_id": roles.meter_id,
            "sources": dict(roles.sources),
        },
    )
    value_header = headers[roles.value] if 0 <= roles.value < len(headers) else ""
    unit = units.resolve_unit(cfg.value_unit, value_header)
    quantity = units.quantity_of(unit)
    emit("info", "unit.resolved", {"unit": unit, "quantity": quantity, "header": value_header})
    return roles, layout, unit, quantity


def _missing_columns(headers, rows, roles: ColumnRoles) -> bool:
    width = _table_width(headers, rows)
    return width == 0 or roles.date >= width or roles.value >= width


def process_table(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    config: ConfigLike = None,
    *,
    log: Optional[LogFn] = None,
) -> ProcessResult:
    """
    Run the full pipeline on an already-split table and return the profile
    together with the layout, resolved unit and parse statistics.

    Malformed data never raises: a table without usable date/value columns
    or without a single parseable row yields the zero-filled profile.
    """
    cfg = coerce_config(config)
    emit = logs.resolve(log)
    roles, layout, unit, quantity = _prepare(headers, rows, cfg, emit)
    stats = ParseStats()

    if _missing_columns(headers, rows, roles):
        emit("warning", "profile.empty", {"reason": "missing_columns", "headers": list(headers)})
        profile = aggregate.empty_profile()
        return ProcessResult(layout, unit, quantity, profile, stats)

    readings = [
        r
        for _, r in parse_rows(
            rows,
            roles,
            unit=unit,
            order=cfg.date_order(roles.date),
            voltage_v=cfg.voltage_v,
            power_factor=cfg.power_factor,
            stats=stats,
        )
    ]
    emit(
        "info",
        "rows.parsed",
        {
            "total": stats.total_rows,
            "parsed": stats.parsed_rows,
            "date_errors": stats.date_errors,
            "value_errors": stats.value_errors,
        },
    )
    if not readings:
        emit("warning", "profile.empty", {"reason": "no_rows_parsed", "sample": list(rows[0]) if rows else []})
        return ProcessResult(layout, unit, quantity, aggregate.empty_profile(), stats)

    minutes = interval.detect_interval(readings)
    profile = aggregate.aggregate(readings, quantity, minutes)
    emit(
        "info",
        "profile.built",
        {
            "data_points": profile.data_points,
            "total_kwh": profile.total_kwh,
            "peak_kw": profile.peak_kw,
            "interval_min": minutes,
            "unit": unit,
        },
    )
    return ProcessResult(layout, unit, quantity, profile, stats)


def process(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    config: ConfigLike = None,
    *,
    log: Optional[LogFn] = None,
) -> LoadProfile:
    """Headers and string rows in, 24-hour weekday/weekend profile out."""
    return process_table(headers, rows, config, log=log).profile


def process_content(
    content: str, config: ConfigLike = None, *, log: Optional[LogFn] = None
) -> ProcessResult:
    """
    Run the pipeline on raw file text: sniff delimiter, header row and
    vendor layout first, then process the split table.
    """
    detected = formats.detect_format(content, log=log)
    headers, rows, delimiter, header_row = formats.read_table(content)
    result = process_table(headers, rows, config, log=log)
    layout = result.layout.model_copy(
        update={
            "delimiter": delimiter,
            "header_row": header_row,
            "format": detected.format if detected.format == "vendor-scada" else result.layout.format,
            "confidence": max(detected.confidence, result.layout.confidence)
            if detected.format == "vendor-scada"
            else result.layout.confidence,
        }
    )
    return ProcessResult(layout, result.unit, result.quantity, result.profile, result.stats)


def process_by_meter(
    headers: Sequence[str],
    rows: Sequence[Sequence[str]],
    config: ConfigLike = None,
    *,
    log: Optional[LogFn] = None,
) -> dict[str, LoadProfile]:
    """
    One profile per meter id for multi-meter exports. Tables without a
    meter-id column come back as a single entry under the empty key.
    """
    cfg = coerce_config(config)
    emit = logs.resolve(log)
    roles, _, unit, quantity = _prepare(headers, rows, cfg, emit)
    stats = ParseStats()
    if _missing_columns(headers, rows, roles):
        emit("warning", "profile.empty", {"reason": "missing_columns", "headers": list(headers)})
        return {}

    grouped: dict[str, list[ParsedReading]] = {}
    for meter_id, reading in parse_rows(
        rows,
        roles,
        unit=unit,
        order=cfg.date_order(roles.date),
        voltage_v=cfg.voltage_v,
        power_factor=cfg.power_factor,
        stats=stats,
    ):
        grouped.setdefault(meter_id, []).append(reading)

    out = {
        meter_id: aggregate.aggregate(readings, quantity, interval.detect_interval(readings))
        for meter_id, readings in sorted(grouped.items())
    }
    emit("info", "meters.built", {"meters": len(out), "parsed": stats.parsed_rows})
    return out
