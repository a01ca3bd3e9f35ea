"""Console formatters (strings only, no printing)."""

from atref.formatting.formatter import (
    format_broken_references_by_target,
    format_check_report,
    format_compile_result,
    format_folder_result,
    format_summary,
    format_validation_result,
    format_validation_summary,
)

__all__ = [
    "format_broken_references_by_target",
    "format_check_report",
    "format_compile_result",
    "format_folder_result",
    "format_summary",
    "format_validation_result",
    "format_validation_summary",
]
