from __future__ import annotations

"""Reference validation.

Validation only resolves references; nothing is read beyond the documents
being validated. `validate_tree` follows valid references into other
documents and validates each reached document once.
"""

import logging
import os
from typing import Dict, Iterable, List, Optional, Sequence

from atref.constants import DEFAULT_DOC_SUFFIXES
from atref.core.errors import DocumentReadError
from atref.core.models import (
    BrokenReferenceByTarget,
    FileValidation,
    ReferenceSource,
    ResolvedReference,
    ValidationResult,
    ValidationStats,
)
from atref.core.options import ResolveOptions, ValidateOptions
from atref.io.filesystem import default_filesystem
from atref.logging.helpers import get_logger
from atref.parsing.references import extract_references
from atref.resolution.path_resolver import PathResolver, base_for_reference, resolve_path

_log = get_logger("validator")


def validate_references(
    text: str,
    options: Optional[ValidateOptions] = None,
    *,
    source_path: Optional[str] = None,
) -> ValidationResult:
    """Resolve every reference of *text* and split valid from invalid.

    References whose path matches one of `ignore_patterns` are left out
    entirely. With *source_path*, `./` and `../` references follow that
    document's directory.
    """
    opts = options or ValidateOptions()
    resolver = PathResolver(filesystem=opts.filesystem, try_extensions=opts.try_extensions)

    resolved: List[ResolvedReference] = []
    for ref in extract_references(text):
        if opts.is_ignored(ref.path):
            continue
        base = base_for_reference(ref.path, source_path, opts.base_path) if source_path else opts.base_path
        resolved.append(ResolvedReference(reference=ref, resolution=resolver.resolve(ref.path, base)))

    valid = [r for r in resolved if r.resolution.exists]
    invalid = [r for r in resolved if not r.resolution.exists]
    return ValidationResult(
        references=resolved,
        valid=valid,
        invalid=invalid,
        stats=ValidationStats(total=len(resolved), valid=len(valid), invalid=len(invalid)),
    )


def _read(path: str, opts: ValidateOptions) -> str:
    fs = default_filesystem(opts.filesystem)
    try:
        return fs.read_text(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(path, str(exc)) from exc


def validate_file(path: str, options: Optional[ValidateOptions] = None) -> ValidationResult:
    """Validate the document at *path*.

    Bare references resolve against `base_path` or, when unset, the
    document's directory.

    Raises:
        DocumentReadError: the document cannot be read.
    """
    opts = options or ValidateOptions()
    src = os.path.abspath(path)
    return validate_references(_read(src, opts), opts, source_path=src)


def validate_tree(
    path: str,
    options: Optional[ValidateOptions] = None,
    *,
    suffixes: Sequence[str] = DEFAULT_DOC_SUFFIXES,
    logger: Optional[logging.Logger] = None,
) -> List[FileValidation]:
    """Validate *path* and every document it reaches through valid references.

    Only targets whose name ends with one of *suffixes* are followed. The
    result is in depth-first discovery order, each document once.

    Raises:
        DocumentReadError: *path* itself cannot be read.
    """
    opts = options or ValidateOptions()
    log = logger or _log
    fs = default_filesystem(opts.filesystem)
    root = os.path.abspath(path)

    out: List[FileValidation] = []
    seen = {root}
    pending = [root]
    while pending:
        current = pending.pop()
        try:
            result = validate_file(current, opts)
        except DocumentReadError as exc:
            if current == root:
                raise
            log.warning("⚠  %s", exc)
            continue
        out.append(FileValidation(path=current, result=result))

        children: List[str] = []
        for ref in result.valid:
            target = ref.resolution.path
            if target in seen or ref.resolution.is_directory:
                continue
            if not target.endswith(tuple(suffixes)) or not fs.is_file(target):
                continue
            seen.add(target)
            children.append(target)
        pending.extend(reversed(children))

    return out


def is_valid_reference(path: str, base_path: Optional[str] = None) -> bool:
    """Quick check: does *path* resolve from *base_path* (cwd when None)?"""
    return resolve_path(path, ResolveOptions(base_path=base_path)).exists


def extract_broken_references_by_target(results: Iterable[FileValidation]) -> List[BrokenReferenceByTarget]:
    """Group invalid references of *results* by resolved target path.

    The first occurrence of a target provides `raw` and `error`; every
    occurrence contributes a source location.
    """
    by_target: Dict[str, BrokenReferenceByTarget] = {}
    for item in results:
        for ref in item.result.invalid:
            target = ref.resolution.path
            entry = by_target.get(target)
            if entry is None:
                entry = BrokenReferenceByTarget(
                    target_path=target,
                    raw=ref.reference.raw,
                    error=ref.resolution.error or "File not found",
                )
                by_target[target] = entry
            entry.sources.append(
                ReferenceSource(path=item.path, line=ref.reference.line, column=ref.reference.column)
            )
    return list(by_target.values())
