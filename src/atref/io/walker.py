from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence, Set

from atref.constants import DEFAULT_DOC_SUFFIXES, DEFAULT_EXCLUDED_DIRS
from atref.core.interfaces.fs import FileSystemProtocol
from atref.io.filesystem import default_filesystem
from atref.logging.helpers import get_logger
from atref.utils.paths import is_hidden_path, is_within_dir
from atref.utils.suffixes import SuffixFilter


class DocumentWalker:
    """Collect the documents of a folder run.

    Hidden segments, excluded directory names and explicitly excluded
    directories are pruned. Compiled `*.built.*` siblings are never
    collected back as sources.
    """

    def __init__(
        self,
        *,
        filesystem: Optional[FileSystemProtocol] = None,
        suffixes: Sequence[str] = DEFAULT_DOC_SUFFIXES,
        exclude_suffixes: Sequence[str] = (),
        exclude_dir_names: Sequence[str] = DEFAULT_EXCLUDED_DIRS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._fs = default_filesystem(filesystem)
        self._filter = SuffixFilter.for_documents(suffixes, exclude_suffixes)
        self._dir_names = set(exclude_dir_names)
        self._log = logger or get_logger('io.walker')

    def gather_files(self, roots: Sequence[str], exclude_dirs: Sequence[str] = ()) -> List[str]:
        collected: Set[str] = set()
        ex_dirs = [Path(os.path.abspath(d)) for d in exclude_dirs]

        def _dir_excluded(path: str) -> bool:
            return any(is_within_dir(Path(path), ex) for ex in ex_dirs)

        for raw in roots:
            root = os.path.abspath(raw)
            if self._fs.is_file(root):
                collected.add(root)
                continue
            if not self._fs.is_dir(root):
                self._log.error('⚠  %s does not exist – skipped', root)
                continue
            for dirpath, dirnames, filenames in self._fs.walk(root):
                dirnames[:] = [
                    d for d in dirnames
                    if not d.startswith('.')
                    and d not in self._dir_names
                    and not _dir_excluded(os.path.join(dirpath, d))
                ]
                for fn in filenames:
                    fp = os.path.join(dirpath, fn)
                    if is_hidden_path(Path(os.path.relpath(fp, root))):
                        continue
                    if not self._filter.allows(fn):
                        continue
                    collected.add(fp)

        return sorted(collected)
