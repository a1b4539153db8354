"""Structured diagnostics for the pipeline.

Every component that reports progress takes a ``log(level, event, fields)``
callable. The default sink forwards to the stdlib ``meterprofile`` logger;
tests pass their own callable and assert on the recorded events.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

LogFn = Callable[[str, str, Mapping[str, Any]], None]

logger = logging.getLogger("meterprofile")

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def default_log(level: str, event: str, fields: Mapping[str, Any]) -> None:
    lvl = _LEVELS.get(level.lower(), logging.INFO)
    if logger.isEnabledFor(lvl):
        detail = " ".join(f"{k}={v!r}" for k, v in fields.items())
        logger.log(lvl, "%s %s", event, detail, extra={"event": event, "fields": dict(fields)})


def resolve(log: Optional[LogFn]) -> LogFn:
    return log if log is not None else default_log
