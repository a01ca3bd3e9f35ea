from __future__ import annotations
from typing import Protocol, runtime_checkable


@runtime_checkable
class LoggerLikeProtocol(Protocol):
    """What atref components call on the logger they are given.

    `logging.Logger` and `logging.LoggerAdapter` both satisfy it, so callers
    can pass an adapter that stamps extra context on every record.
    """

    def isEnabledFor(self, level: int) -> bool: ...

    def debug(self, msg: str, *args, **kwargs) -> None: ...

    def info(self, msg: str, *args, **kwargs) -> None: ...

    def warning(self, msg: str, *args, **kwargs) -> None: ...

    def error(self, msg: str, *args, **kwargs) -> None: ...


@runtime_checkable
class LoggerFactoryProtocol(Protocol):
    def get_logger(self, name: str) -> LoggerLikeProtocol:
        """Return the logger for area *name* (`'cli'`, `'graph'`, ...)."""
        ...
