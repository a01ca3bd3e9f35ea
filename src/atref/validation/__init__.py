"""Reference validation (shallow and recursive)."""

from atref.validation.validator import (
    extract_broken_references_by_target,
    is_valid_reference,
    validate_file,
    validate_references,
    validate_tree,
)

__all__ = [
    "extract_broken_references_by_target",
    "is_valid_reference",
    "validate_file",
    "validate_references",
    "validate_tree",
]
