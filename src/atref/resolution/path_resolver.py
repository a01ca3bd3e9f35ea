from __future__ import annotations
"""
Path resolver for `@path` references.

Resolution order for a reference path:

1. absolute paths are taken as-is when they (or one of their probes) exist;
2. `./` and `../` paths are joined to the base directory;
3. otherwise a leading `/` means "relative to the base" (workspace-rooted);
4. anything else is joined to the base directory.

The candidate is normalised. When it does not exist, every configured
extension is tried as `<candidate><ext>`, then as `<candidate>/index<ext>`.
The first hit wins.

The resolver never raises for expected conditions; missing targets and stat
failures come back as `ResolvedPath(exists=False, error=...)`.
"""

import logging
import os
from typing import Iterator, Optional, Sequence

from atref.core.interfaces.fs import FileSystemProtocol
from atref.core.models import ResolvedPath
from atref.core.options import ResolveOptions
from atref.io.filesystem import default_filesystem
from atref.logging.helpers import get_logger
from atref.utils.paths import find_workspace_root

__all__ = [
    "PathResolver",
    "base_for_reference",
    "find_workspace_root",
    "path_exists",
    "resolve_path",
]


class PathResolver:
    """Resolve reference paths against a base directory."""

    def __init__(
        self,
        *,
        filesystem: Optional[FileSystemProtocol] = None,
        try_extensions: Sequence[str] = (),
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._fs = default_filesystem(filesystem)
        self._exts = tuple(try_extensions)
        self._log = logger or get_logger("resolver")

    @property
    def filesystem(self) -> FileSystemProtocol:
        return self._fs

    # Candidates -------------------------------------------------------------

    @staticmethod
    def candidate(path: str, base_path: Optional[str] = None) -> str:
        """Return the normalised absolute candidate for *path* (no probing)."""
        base = os.path.abspath(base_path) if base_path else os.getcwd()
        # Rooted POSIX paths were tried as-is by `resolve`; here they are base-relative.
        if os.path.isabs(path) and not path.startswith("/"):
            return os.path.normpath(path)
        if path.startswith("/"):
            return os.path.normpath(os.path.join(base, path.lstrip("/")))
        return os.path.normpath(os.path.join(base, path))

    def _probes(self, candidate: str) -> Iterator[str]:
        yield candidate
        for ext in self._exts:
            yield f"{candidate}{ext}"
        for ext in self._exts:
            yield os.path.join(candidate, f"index{ext}")

    # Resolution -------------------------------------------------------------

    def _first_hit(self, candidate: str) -> Optional[ResolvedPath]:
        for probe in self._probes(candidate):
            if not self._fs.exists(probe):
                continue
            try:
                is_dir = self._fs.is_dir(probe)
            except OSError as exc:
                self._log.debug("stat failed for %s: %s", probe, exc)
                return ResolvedPath(path=probe, exists=False, error=f"Cannot stat file: {probe}")
            return ResolvedPath(path=probe, exists=True, is_directory=is_dir)
        return None

    def resolve(self, path: str, base_path: Optional[str] = None) -> ResolvedPath:
        """Resolve *path* against *base_path* (cwd when None).

        A rooted path that exists on the filesystem wins; a missing one falls
        back to the base-relative form, so `/docs/x.md` still reaches
        `<base>/docs/x.md`.
        """
        if path.startswith("/") and os.path.isabs(path):
            hit = self._first_hit(os.path.normpath(path))
            if hit is not None:
                return hit
        candidate = self.candidate(path, base_path)
        hit = self._first_hit(candidate)
        if hit is not None:
            return hit
        return ResolvedPath(path=candidate, exists=False, error=f"File not found: {candidate}")

    def exists(self, path: str, base_path: Optional[str] = None) -> bool:
        return self.resolve(path, base_path).exists


def base_for_reference(ref_path: str, source_path: Optional[str], base_path: Optional[str] = None) -> Optional[str]:
    """Return the directory a reference found in *source_path* resolves against.

    `./` and `../` paths follow the containing document; other paths use
    *base_path* when set, else the document directory.
    """
    doc_dir = os.path.dirname(source_path) if source_path else None
    if ref_path.startswith(("./", "../")):
        return doc_dir or base_path
    return base_path or doc_dir


def resolve_path(path: str, options: Optional[ResolveOptions] = None) -> ResolvedPath:
    """Resolve one reference path; see the module docstring for the rules."""
    opts = options or ResolveOptions()
    resolver = PathResolver(filesystem=opts.filesystem, try_extensions=opts.try_extensions)
    return resolver.resolve(path, opts.base_path)


def path_exists(path: str, base_path: Optional[str] = None) -> bool:
    """Boolean shortcut for `resolve_path(path).exists`."""
    return resolve_path(path, ResolveOptions(base_path=base_path)).exists
