from __future__ import annotations

from typing import Iterator, List, Protocol, Tuple, runtime_checkable


@runtime_checkable
class FileSystemProtocol(Protocol):
    """Filesystem surface consumed by the resolver, compiler and walker.

    Paths are absolute strings. `walk` mirrors `os.walk` (top-down) and lets
    callers prune `dirnames` in place.
    """

    def read_text(self, path: str) -> str:
        ...

    def write_text(self, path: str, text: str) -> None:
        ...

    def exists(self, path: str) -> bool:
        ...

    def is_dir(self, path: str) -> bool:
        ...

    def is_file(self, path: str) -> bool:
        ...

    def walk(self, top: str) -> Iterator[Tuple[str, List[str], List[str]]]:
        ...
