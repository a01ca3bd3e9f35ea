# src/atref/utils/paths.py
"""
paths – Small, centralized path helpers for atref.

Provides:
  • is_hidden_path(Path)          – dot-segment detection
  • is_within_dir(path, parent)   – containment check
  • built_output_path(str)        – `name.built.ext` sibling of a document
  • find_workspace_root(str)      – nearest ancestor holding `.git`
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from atref.constants import BUILT_SUFFIX, WORKSPACE_MARKERS


def is_hidden_path(p: Path) -> bool:
    """Return True if *p* has any hidden segment (leading-dot component)."""
    return any(part.startswith(".") and part not in (".", "..") for part in p.parts)


def is_within_dir(path: Path, parent: Path) -> bool:
    """Return True if *path* is contained inside *parent*."""
    try:
        Path(os.path.abspath(path)).relative_to(os.path.abspath(parent))
        return True
    except ValueError:
        return False


def built_output_path(input_path: str) -> str:
    """Return the default output path for a compiled document.

    Examples:
        README.md      → README.built.md
        docs/CLAUDE.md → docs/CLAUDE.built.md
        Makefile       → Makefile.built
    """
    directory, name = os.path.split(input_path)
    stem, ext = os.path.splitext(name)
    return os.path.join(directory, f"{stem}{BUILT_SUFFIX}{ext}")


def find_workspace_root(start: str, explicit: Optional[str] = None) -> str:
    """Return *explicit* (absolute) or the nearest ancestor of *start* with a VCS marker.

    Falls back to *start* itself when no marker is found up to the
    filesystem root.
    """
    if explicit:
        return os.path.abspath(explicit)
    current = os.path.abspath(start)
    while True:
        if any(os.path.exists(os.path.join(current, m)) for m in WORKSPACE_MARKERS):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            return os.path.abspath(start)
        current = parent
