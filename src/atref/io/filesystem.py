from __future__ import annotations

"""Filesystem collaborators.

`LocalFileSystem` is the default implementation used by every public entry
point. `MemoryFileSystem` keeps a dictionary of POSIX-style absolute paths
and is meant for tests and editor buffers that are not on disk.
"""

import logging
import os
import posixpath
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

from atref.core.interfaces.fs import FileSystemProtocol
from atref.logging.helpers import get_logger, trace_io

ENCODING = "utf-8"


class LocalFileSystem(FileSystemProtocol):
    def __init__(self, *, logger: Optional[logging.Logger] = None) -> None:
        self._log = logger or get_logger("io.fs")

    def read_text(self, path: str) -> str:
        trace_io(self._log, "read", path=path)
        return Path(path).read_text(encoding=ENCODING)

    def write_text(self, path: str, text: str) -> None:
        trace_io(self._log, "write", path=path, size=len(text))
        dest = Path(path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text(text, encoding=ENCODING)

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def walk(self, top: str) -> Iterator[Tuple[str, List[str], List[str]]]:
        return os.walk(top)


class MemoryFileSystem(FileSystemProtocol):
    """In-memory tree. Directories are implied by the files they contain."""

    def __init__(self, files: Optional[Dict[str, str]] = None) -> None:
        self._files: Dict[str, str] = {}
        self._dirs: set[str] = {"/"}
        self.reads: List[str] = []
        for path, text in (files or {}).items():
            self.write_text(path, text)

    @staticmethod
    def _norm(path: str) -> str:
        return posixpath.normpath(path.replace("\\", "/"))

    def add_dir(self, path: str) -> None:
        norm = self._norm(path)
        while norm not in self._dirs:
            self._dirs.add(norm)
            norm = posixpath.dirname(norm)

    def read_text(self, path: str) -> str:
        norm = self._norm(path)
        if norm in self._dirs:
            raise IsADirectoryError(f"Is a directory: {path}")
        try:
            text = self._files[norm]
        except KeyError:
            raise FileNotFoundError(f"No such file or directory: {path}") from None
        self.reads.append(norm)
        return text

    def write_text(self, path: str, text: str) -> None:
        norm = self._norm(path)
        if norm in self._dirs:
            raise IsADirectoryError(f"Is a directory: {path}")
        self.add_dir(posixpath.dirname(norm))
        self._files[norm] = text

    def exists(self, path: str) -> bool:
        norm = self._norm(path)
        return norm in self._files or norm in self._dirs

    def is_dir(self, path: str) -> bool:
        return self._norm(path) in self._dirs

    def is_file(self, path: str) -> bool:
        return self._norm(path) in self._files

    def walk(self, top: str) -> Iterator[Tuple[str, List[str], List[str]]]:
        root = self._norm(top)
        if root not in self._dirs:
            return
        pending = [root]
        while pending:
            current = pending.pop()
            dirnames = sorted(
                posixpath.basename(d) for d in self._dirs
                if d != current and posixpath.dirname(d) == current
            )
            filenames = sorted(
                posixpath.basename(f) for f in self._files
                if posixpath.dirname(f) == current
            )
            yield current, dirnames, filenames
            for name in reversed(dirnames):
                pending.append(posixpath.join(current, name))


_DEFAULT_FS: Optional[LocalFileSystem] = None


def default_filesystem(fs: Optional[FileSystemProtocol] = None) -> FileSystemProtocol:
    """Return *fs* or a shared `LocalFileSystem`."""
    global _DEFAULT_FS
    if fs is not None:
        return fs
    if _DEFAULT_FS is None:
        _DEFAULT_FS = LocalFileSystem()
    return _DEFAULT_FS
