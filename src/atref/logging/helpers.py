from __future__ import annotations

"""Logger naming, handler setup and opt-in I/O tracing for atref.

Every module logs through a child of the `atref` logger (`atref.compiler`,
`atref.graph`, ...). The handler lives on `atref` only; libraries that embed
atref and never call `setup_base_logger` get the standard library's default
propagation instead.

Set `ATREF_TRACE_IO=1` to log every filesystem read and write at debug level.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO, TYPE_CHECKING

if TYPE_CHECKING:
    from atref.core.interfaces.logging import LoggerLikeProtocol

BASE_LOGGER = "atref"
TEXT_FORMAT = "%(levelname)s: %(message)s"

_HANDLER_ATTR = "_atref_handler"


def _package_version() -> str:
    try:
        from atref import __version__
    except ImportError:
        return os.getenv("ATREF_VERSION", "unknown")
    return str(__version__)


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: `ts` (UTC, millisecond ISO-8601 with a `Z` suffix), `level`,
    `module` (logger name), `msg`, `version`, and `ctx` when the record
    carries a non-empty `context` dict (see `trace_io`).
    """

    def __init__(self) -> None:
        super().__init__()
        self._version = _package_version()

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload = {
            "ts": ts.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
            "version": self._version,
        }
        ctx = getattr(record, "context", None)
        if isinstance(ctx, dict) and ctx:
            payload["ctx"] = ctx
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _make_formatter(json_logs: bool) -> logging.Formatter:
    return JsonLogFormatter() if json_logs else logging.Formatter(TEXT_FORMAT)


def setup_base_logger(
    *, json_logs: bool = False, level: int = logging.INFO, stream: Optional[TextIO] = None
) -> logging.Logger:
    """Install (or retune) the single atref-owned handler on the `atref` logger.

    Calling again updates the level and the formatter in place, so a CLI run
    that switches to JSON output never ends up with two handlers.
    """
    base = logging.getLogger(BASE_LOGGER)
    base.setLevel(level)
    base.propagate = False

    handler = next((h for h in base.handlers if getattr(h, _HANDLER_ATTR, False)), None)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        setattr(handler, _HANDLER_ATTR, True)
        base.addHandler(handler)
    elif stream is not None and isinstance(handler, logging.StreamHandler):
        handler.setStream(stream)
    handler.setFormatter(_make_formatter(json_logs))
    return base


def get_logger(name: str | None = None) -> logging.Logger:
    """`get_logger('graph')` → `atref.graph`; already-qualified names pass through."""
    if not name or name == BASE_LOGGER:
        return logging.getLogger(BASE_LOGGER)
    if name.startswith(f"{BASE_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{BASE_LOGGER}.{name}")


def is_trace_io_enabled() -> bool:
    return os.getenv("ATREF_TRACE_IO") == "1"


def trace_io(logger: "LoggerLikeProtocol", message: str, **ctx) -> None:
    """Log a filesystem operation when `ATREF_TRACE_IO=1` and debug is on."""
    if not is_trace_io_enabled() or not logger.isEnabledFor(logging.DEBUG):
        return
    if ctx:
        logger.debug("%s | ctx=%r", message, ctx, extra={"context": ctx})
    else:
        logger.debug("%s", message)
