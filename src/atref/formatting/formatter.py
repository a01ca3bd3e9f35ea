from __future__ import annotations

"""Console rendering of validation and compile results.

Every function returns a string; printing is left to the caller. ANSI
colours are used unless `no_color` is set.
"""

import os
from typing import List, Optional, Sequence

from atref.core.models import (
    BrokenReferenceByTarget,
    CompileResult,
    FileValidation,
    FolderCompileResult,
    ResolvedReference,
    ValidationResult,
)
from atref.validation.validator import extract_broken_references_by_target

RED = "\x1b[31m"
GREEN = "\x1b[32m"
YELLOW = "\x1b[33m"
CYAN = "\x1b[36m"
DIM = "\x1b[2m"
BOLD = "\x1b[1m"
RESET = "\x1b[0m"

RULE = "─" * 50


def color(text: str, code: str, no_color: bool = False) -> str:
    if no_color:
        return text
    return f"{code}{text}{RESET}"


def _rel(path: str, cwd: Optional[str]) -> str:
    try:
        return os.path.relpath(path, cwd or os.getcwd()) or path
    except ValueError:
        return path


def _plural(n: int, word: str) -> str:
    return f"{n} {word}" if n == 1 else f"{n} {word}s"


# --------------------------------------------------------------------------- #
#  Validation                                                                 #
# --------------------------------------------------------------------------- #
def format_reference(ref: ResolvedReference, no_color: bool = False) -> str:
    ok = ref.resolution.exists
    status = color("✓", GREEN, no_color) if ok else color("✗", RED, no_color)
    location = color(f"{ref.reference.line}:{ref.reference.column}", DIM, no_color)
    target = ref.reference.path if ok else color(ref.reference.path, RED, no_color)
    line = f"  {status} {location} {target}"
    if not ok and ref.resolution.error:
        line += f"\n      {color(ref.resolution.error, DIM, no_color)}"
    return line


def format_validation_result(
    result: ValidationResult,
    *,
    no_color: bool = False,
    errors_only: bool = False,
    show_file_path: Optional[str] = None,
) -> str:
    """One line per reference plus a `N references: V valid, I invalid` footer."""
    lines: List[str] = []
    if show_file_path:
        lines.append(color(show_file_path, CYAN, no_color))

    for ref in result.invalid if errors_only else result.references:
        lines.append(format_reference(ref, no_color))

    stats = result.stats
    if stats.total > 0:
        lines.append("")
        valid = color(f"{stats.valid} valid", GREEN, no_color)
        invalid = f"{stats.invalid} invalid"
        if stats.invalid:
            invalid = color(invalid, RED, no_color)
        lines.append(f"  {stats.total} references: {valid}, {invalid}")

    return "\n".join(lines)


def format_summary(results: Sequence[FileValidation], *, no_color: bool = False) -> str:
    total = sum(r.result.stats.total for r in results)
    valid = sum(r.result.stats.valid for r in results)
    invalid = sum(r.result.stats.invalid for r in results)

    lines = [
        "",
        color("Summary", CYAN, no_color),
        f"  Files checked: {len(results)}",
        f"  Total references: {total}",
        f"  Valid: {color(str(valid), GREEN, no_color)}",
        f"  Invalid: {color(str(invalid), RED, no_color) if invalid else invalid}",
    ]
    return "\n".join(lines)


def format_broken_references_by_target(
    broken: Sequence[BrokenReferenceByTarget],
    *,
    no_color: bool = False,
    cwd: Optional[str] = None,
) -> str:
    """List broken targets alphabetically, each with its source locations."""
    if not broken:
        return ""

    lines = ["", color("Broken References:", RED, no_color), ""]
    for entry in sorted(broken, key=lambda b: b.target_path):
        lines.append(f"  {color(entry.raw, RED, no_color)}")
        lines.append(f"    {color(entry.error, DIM, no_color)}")
        for src in entry.sources:
            location = color(f"(line {src.line}, col {src.column})", DIM, no_color)
            lines.append(f"      {_rel(src.path, cwd)} {location}")
        lines.append("")
    return "\n".join(lines)


def format_validation_summary(
    results: Sequence[FileValidation],
    *,
    recursive: bool = False,
    duration_ms: Optional[float] = None,
    no_color: bool = False,
    cwd: Optional[str] = None,
) -> str:
    """Compact multi-file summary with broken references grouped by target."""
    total = sum(r.result.stats.total for r in results)
    valid = sum(r.result.stats.valid for r in results)
    invalid = sum(r.result.stats.invalid for r in results)

    mode = "recursive" if recursive else "shallow"
    scope = "(across dependency trees)" if recursive else "(direct references only)"
    lines = [
        color(f"Validation complete ({mode})", CYAN, no_color),
        "",
        f"  {color('Files:', DIM, no_color)}  {_plural(len(results), 'markdown file')}",
        "",
        f"  {total} references validated {color(scope, DIM, no_color)}",
    ]
    invalid_text = f"{invalid} invalid"
    if invalid:
        invalid_text = color(invalid_text, RED, no_color)
    lines.append(f"    {color(f'{valid} valid', GREEN, no_color)}, {invalid_text}")

    if duration_ms is not None:
        lines.append("")
        lines.append(f"  {color('Duration:', DIM, no_color)} {duration_ms:.0f}ms")

    if invalid:
        grouped = format_broken_references_by_target(
            extract_broken_references_by_target(results), no_color=no_color, cwd=cwd
        )
        if grouped:
            lines.append(grouped)

    lines.append("")
    if invalid:
        lines.append(color(f"⚠  {_plural(invalid, 'broken reference')} found", YELLOW, no_color))
    else:
        lines.append(color("✓ All references are valid!", GREEN, no_color))
    return "\n".join(lines)


def format_check_report(
    results: Sequence[FileValidation],
    *,
    no_color: bool = False,
    cwd: Optional[str] = None,
) -> str:
    """Per-file broken link report used by `atref check`."""
    broken_files = [r for r in results if r.result.invalid]
    total_valid = sum(len(r.result.valid) for r in results)

    lines = [
        color("@Reference Check Report", BOLD, no_color),
        color(RULE, DIM, no_color),
        f"Scanned {color(str(len(results)), CYAN, no_color)} markdown file(s)",
        "",
    ]
    if not broken_files:
        lines.append(color("✓ All references are valid!", GREEN, no_color))
        lines.append(f"  {total_valid} reference(s) checked")
        return "\n".join(lines)

    lines.append(color("Broken References:", RED, no_color))
    lines.append("")
    total_broken = 0
    for item in broken_files:
        lines.append(color(_rel(item.path, cwd), CYAN, no_color))
        for ref in item.result.invalid:
            total_broken += 1
            location = color(f"(line {ref.reference.line}, col {ref.reference.column})", DIM, no_color)
            lines.append(f"  {color('✗', RED, no_color)} {ref.reference.raw} {location}")
            lines.append(f"    {color('→ ' + (ref.resolution.error or 'File not found'), DIM, no_color)}")
        lines.append("")

    lines.extend([
        color(RULE, DIM, no_color),
        color("Summary:", BOLD, no_color),
        f"  Files with broken refs: {color(str(len(broken_files)), RED, no_color)} / {len(results)}",
        f"  Total broken refs:      {color(str(total_broken), RED, no_color)}",
        f"  Total valid refs:       {color(str(total_valid), GREEN, no_color)}",
    ])
    return "\n".join(lines)


# --------------------------------------------------------------------------- #
#  Compilation                                                                #
# --------------------------------------------------------------------------- #
def format_reference_tree(result: CompileResult, *, no_color: bool = False, cwd: Optional[str] = None) -> str:
    """Indented tree of every reference record, children under parents."""
    lines: List[str] = []
    for rec in result.references:
        indent = "  " * (rec.depth + 1)
        target = _rel(rec.resolved_path, cwd)
        if rec.circular:
            lines.append(f"{indent}{color('↺', YELLOW, no_color)} {target} {color('(circular)', DIM, no_color)}")
        elif rec.stub:
            lines.append(f"{indent}{color('=', DIM, no_color)} {target} {color('(duplicate)', DIM, no_color)}")
        elif rec.found:
            lines.append(f"{indent}{color('✓', GREEN, no_color)} {target}")
        else:
            lines.append(f"{indent}{color('✗', RED, no_color)} {rec.reference.raw}")
            if rec.error:
                lines.append(f"{indent}    {color(rec.error, DIM, no_color)}")
    return "\n".join(lines)


def format_compile_result(result: CompileResult, *, no_color: bool = False, cwd: Optional[str] = None) -> str:
    lines = [color(f"# {os.path.basename(result.input_path)}", CYAN, no_color), ""]

    if result.references:
        lines.append(color("Resolved files:", CYAN, no_color))
        lines.append(format_reference_tree(result, no_color=no_color, cwd=cwd))
        lines.append("")

    summary: List[str] = []
    if result.success_count:
        summary.append(color(f"{result.success_count} resolved", GREEN, no_color))
    if result.failed_count:
        summary.append(color(f"{result.failed_count} failed", RED, no_color))
    dups = result.import_stats.duplicate_files
    if dups:
        summary.append(color(f"{len(dups)} duplicates", YELLOW, no_color))
    if not summary:
        summary.append("no references")
    lines.append(f"{color('Summary:', CYAN, no_color)} {', '.join(summary)}")

    if result.clamped_headings:
        lines.append(color(f"⚠  {result.clamped_headings} heading(s) clamped to h1-h6", YELLOW, no_color))
    if result.written:
        lines.append(f"{color('✓', GREEN, no_color)} Output written to {result.output_path}")
    return "\n".join(lines)


def format_folder_result(result: FolderCompileResult, *, no_color: bool = False, cwd: Optional[str] = None) -> str:
    lines = [
        color(f"Compiled {_rel(result.root_dir, cwd)}", CYAN, no_color),
        color(RULE, DIM, no_color),
    ]
    for res in result.results:
        failed = f", {color(str(res.failed_count) + ' failed', RED, no_color)}" if res.failed_count else ""
        lines.append(f"  {_rel(res.input_path, cwd)}: {res.success_count} resolved{failed}")
    for fail in result.failures:
        lines.append(f"  {color('✘', RED, no_color)} {_rel(fail.path, cwd)}: {fail.error}")

    if result.cyclic_documents:
        lines.append("")
        lines.append(color("Dependency cycles:", YELLOW, no_color))
        for path in result.cyclic_documents:
            lines.append(f"  ↺ {_rel(path, cwd)}")
    if result.circular_files:
        lines.append("")
        lines.append(color("Circular references:", YELLOW, no_color))
        for path in result.circular_files:
            lines.append(f"  ↺ {_rel(path, cwd)}")

    lines.append("")
    failures = color(str(result.total_failures), RED, no_color) if result.total_failures else "0"
    lines.append(
        f"{color('Total:', CYAN, no_color)} {_plural(result.total_files, 'file')}, "
        f"{result.total_references} references, {failures} failures "
        f"({result.duration_s * 1000:.0f}ms)"
    )
    if any(r.written for r in result.results):
        lines.append(f"{color('✓', GREEN, no_color)} Output written to {result.output_dir}")
    return "\n".join(lines)
