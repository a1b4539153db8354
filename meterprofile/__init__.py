from . import (
    canon,
    types,
    exceptions,
    config,
    logs,
    utils,
    formats,
    columns,
    dates,
    units,
    interval,
    aggregate,
    validate,
    ingest,
)

__all__ = [
    "canon",
    "types",
    "exceptions",
    "config",
    "logs",
    "utils",
    "formats",
    "columns",
    "dates",
    "units",
    "interval",
    "aggregate",
    "validate",
    "ingest",
]
