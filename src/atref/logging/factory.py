from __future__ import annotations

import logging
import os
from typing import Optional, TextIO

from atref.logging.helpers import get_logger, setup_base_logger

JSON_LOGS_ENV = "ATREF_JSON_LOGS"


class DefaultLoggerFactory:
    """Hands out `atref.*` loggers after configuring the base handler once.

    `json_logs` switches the handler to `JsonLogFormatter`; `verbose` lowers
    the level to DEBUG.
    """

    def __init__(
        self,
        *,
        json_logs: bool = False,
        verbose: bool = False,
        stream: Optional[TextIO] = None,
    ) -> None:
        self.json_logs = bool(json_logs)
        self.level = logging.DEBUG if verbose else logging.INFO
        self._stream = stream
        self._ready = False

    @classmethod
    def from_env(cls, *, json_logs: bool = False, verbose: bool = False) -> "DefaultLoggerFactory":
        """Like the constructor, with `ATREF_JSON_LOGS=1` forcing JSON output."""
        return cls(json_logs=json_logs or os.getenv(JSON_LOGS_ENV) == "1", verbose=verbose)

    def get_logger(self, name: str) -> logging.Logger:
        if not self._ready:
            setup_base_logger(json_logs=self.json_logs, level=self.level, stream=self._stream)
            self._ready = True
        return get_logger(name)
