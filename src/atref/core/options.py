from __future__ import annotations

"""Typed option dataclasses, one per public operation.

Every field is independently defaulted so callers only name what they
change. Options are frozen and passed by value down the call tree.
"""

import enum
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from atref.core.interfaces.fs import FileSystemProtocol
    from atref.core.models import Reference

ContentWrapper = Callable[[str, str, "Reference"], str]

DEFAULT_MAX_DEPTH = 64


class HeadingMode(str, enum.Enum):
    """How inlined documents have their headings renumbered."""

    NORMALIZE = "normalize"
    ADDITIVE = "additive"
    NONE = "none"

    @classmethod
    def parse(cls, value: "HeadingMode | str") -> "HeadingMode":
        if isinstance(value, HeadingMode):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown heading mode {value!r} (expected one of: {choices})") from None


@dataclass(frozen=True)
class ExtractOptions:
    """Options for `extract_references`.

    Attributes:
        zero_indexed: Report 0-based line/column instead of 1-based.
    """
    zero_indexed: bool = False


@dataclass(frozen=True)
class ResolveOptions:
    """Options for `resolve_path`.

    Attributes:
        base_path: Directory bare and './' references resolve against (cwd when None).
        try_extensions: Suffixes probed when the literal path is missing,
            first as `<path><ext>` then as `<path>/index<ext>`.
        filesystem: Filesystem collaborator (local disk when None).
    """
    base_path: Optional[str] = None
    try_extensions: Sequence[str] = ()
    filesystem: Optional["FileSystemProtocol"] = None


@dataclass(frozen=True)
class ValidateOptions:
    """Options for the validator.

    Attributes:
        base_path: Resolution base (the document's directory for file-level calls).
        try_extensions: See `ResolveOptions.try_extensions`.
        ignore_patterns: Regexes; references whose path matches any are skipped.
        filesystem: Filesystem collaborator (local disk when None).
    """
    base_path: Optional[str] = None
    try_extensions: Sequence[str] = ()
    ignore_patterns: Sequence[re.Pattern[str]] = ()
    filesystem: Optional["FileSystemProtocol"] = None

    def is_ignored(self, path: str) -> bool:
        return any(rx.search(path) for rx in self.ignore_patterns)


@dataclass(frozen=True)
class CompileOptions:
    """Options for single-file compilation.

    Attributes:
        base_path: Base for bare and '/'-prefixed references across the whole
            run. When None each document resolves against its own directory.
            './' and '../' references always resolve against the directory of
            the document that contains them.
        try_extensions: See `ResolveOptions.try_extensions`.
        output_path: Destination of the compiled text (`name.built.ext` when None).
        write_output: Write the compiled text to `output_path`.
        optimize_duplicates: Inline each target once per run and leave a
            self-closing stub for later occurrences.
        heading_mode: Heading renumbering mode for inlined documents.
        warn_on_clamp: Log a warning when headings are clamped to h1..h6.
        max_depth: Maximum nesting of inlined documents.
        content_wrapper: Replaces the default `<file path="...">` wrapping.
        filesystem: Filesystem collaborator (local disk when None).
    """
    base_path: Optional[str] = None
    try_extensions: Sequence[str] = ()
    output_path: Optional[str] = None
    write_output: bool = True
    optimize_duplicates: bool = False
    heading_mode: HeadingMode = HeadingMode.NORMALIZE
    warn_on_clamp: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    content_wrapper: Optional[ContentWrapper] = None
    filesystem: Optional["FileSystemProtocol"] = None


@dataclass(frozen=True)
class FolderCompileOptions:
    """Options for `compile_folder`.

    Attributes mirror `CompileOptions`, plus:
        output_dir: Root of the compiled tree (`<dir>/dist` when None).
        suffixes: File-name tails that select documents.
        exclude_dirs: Directory names skipped during discovery.
    """
    base_path: Optional[str] = None
    try_extensions: Sequence[str] = ()
    output_dir: Optional[str] = None
    write_output: bool = True
    optimize_duplicates: bool = False
    heading_mode: HeadingMode = HeadingMode.NORMALIZE
    warn_on_clamp: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH
    content_wrapper: Optional[ContentWrapper] = None
    suffixes: Sequence[str] = (".md",)
    exclude_dirs: Sequence[str] = field(default_factory=lambda: ("node_modules", ".git", "dist"))
    filesystem: Optional["FileSystemProtocol"] = None

    def compile_options(self, *, output_path: Optional[str], write_output: bool) -> CompileOptions:
        """Derive the per-document options used inside a folder run."""
        return CompileOptions(
            base_path=self.base_path,
            try_extensions=self.try_extensions,
            output_path=output_path,
            write_output=write_output,
            optimize_duplicates=self.optimize_duplicates,
            heading_mode=self.heading_mode,
            warn_on_clamp=self.warn_on_clamp,
            max_depth=self.max_depth,
            content_wrapper=self.content_wrapper,
            filesystem=self.filesystem,
        )
