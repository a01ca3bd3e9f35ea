from __future__ import annotations
"""File-name tail filters for document discovery.

A token without a dot is a bare extension (`md` → `.md`); a token with a
dot is an explicit tail kept as written (`.md`, `CLAUDE.md`). Matching is
`str.endswith` over the base name, never the full path.
"""

from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional

from atref.constants import BUILT_SUFFIX


def normalize_suffixes(tokens: Optional[Iterable[str]]) -> list[str]:
    out: list[str] = []
    for raw in tokens or ():
        token = (raw or "").strip()
        if token:
            out.append(token if "." in token else f".{token}")
    return out


@dataclass(frozen=True)
class SuffixFilter:
    """Include/exclude tails; an empty include set accepts every name."""

    include: FrozenSet[str] = frozenset()
    exclude: FrozenSet[str] = frozenset()

    @classmethod
    def for_documents(
        cls, suffixes: Iterable[str], exclude: Iterable[str] = ()
    ) -> "SuffixFilter":
        """Filter for source documents.

        Compiled siblings (`name.built.md` for `.md`) are excluded so that a
        previous single-file build is never picked up as a source.
        """
        inc = frozenset(normalize_suffixes(suffixes))
        exc = frozenset(normalize_suffixes(exclude)) - inc
        built = {f"{BUILT_SUFFIX}{s}" for s in inc if s.startswith(".")}
        return cls(include=inc, exclude=exc | built)

    def allows(self, filename: str) -> bool:
        if self.include and not filename.endswith(tuple(self.include)):
            return False
        return not filename.endswith(tuple(self.exclude))
