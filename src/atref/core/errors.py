from __future__ import annotations

"""Exception types raised by atref.

Expected conditions (missing targets, directories, cycles) are reported as
data on the compile/validation results. Exceptions are reserved for the
cases where a whole call cannot produce a result.
"""

from typing import Optional


class AtRefError(Exception):
    """Base class for atref failures."""


class DocumentReadError(AtRefError):
    """Raised when the top-level requested document cannot be read."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason or "unknown error"
        super().__init__(f"cannot read {path}: {self.reason}")


class OutputWriteError(AtRefError):
    """Raised when a compiled document cannot be written to disk."""

    def __init__(self, path: str, reason: Optional[str] = None) -> None:
        self.path = path
        self.reason = reason or "unknown error"
        super().__init__(f"cannot write {path}: {self.reason}")
