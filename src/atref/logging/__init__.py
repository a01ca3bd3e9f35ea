"""Logging helpers for atref (stdlib `logging` under the `atref` namespace)."""

from atref.logging.factory import DefaultLoggerFactory
from atref.logging.helpers import get_logger, setup_base_logger, trace_io

__all__ = ["DefaultLoggerFactory", "get_logger", "setup_base_logger", "trace_io"]
