from __future__ import annotations

"""Run-scoped compilation state.

A `CompilationSession` lives for one single-file compile or one whole
folder compile. It holds the per-file import counts and the imported-files
set that decides whether an occurrence is the first inline of its target.
The ancestor stack used for cycle detection is not part of the session; it
belongs to one recursion chain.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Set


@dataclass(frozen=True)
class ImportStats:
    """Read-only snapshot of a session's import counts."""
    file_import_counts: Mapping[str, int] = field(default_factory=dict)
    duplicate_files: List[str] = field(default_factory=list)

    @property
    def total_imports(self) -> int:
        return sum(self.file_import_counts.values())


class CompilationSession:
    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}
        self._imported: Set[str] = set()

    def record_import(self, path: str) -> int:
        """Increment and return the import count of *path*."""
        count = self._counts.get(path, 0) + 1
        self._counts[path] = count
        return count

    def import_count(self, path: str) -> int:
        return self._counts.get(path, 0)

    def is_imported(self, path: str) -> bool:
        return path in self._imported

    def claim(self, path: str) -> bool:
        """Mark *path* as imported; False when an earlier occurrence owns it."""
        if path in self._imported:
            return False
        self._imported.add(path)
        return True

    def release(self, path: str) -> None:
        """Drop the claim on *path* after its inline failed."""
        self._imported.discard(path)

    @property
    def imported_files(self) -> frozenset[str]:
        return frozenset(self._imported)

    def stats(self) -> ImportStats:
        counts = dict(self._counts)
        return ImportStats(
            file_import_counts=counts,
            duplicate_files=sorted(p for p, n in counts.items() if n > 1),
        )
