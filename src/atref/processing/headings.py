from __future__ import annotations

"""ATX heading analysis and renumbering.

Headings are `#`..`######` at the start of a line followed by blanks and
text. Headings inside fenced blocks, inline code spans and (optionally)
`<file>` blocks are ignored everywhere in this module.

Adjusted levels are clamped to h1..h6; clamping is reported through
`adjust_headings_report` and, on request, a logger warning. It is never an
error.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence

from atref.constants import MAX_HEADING_LEVEL, MIN_HEADING_LEVEL
from atref.core.models import Heading, HeadingAdjustment, HeadingContext, Reference
from atref.logging.helpers import get_logger
from atref.parsing.code_spans import (
    RangeIndex,
    Span,
    find_excluded_ranges,
    is_inside_ranges,
)

__all__ = [
    "Span",
    "adjust_headings",
    "adjust_headings_report",
    "analyze_heading_context",
    "clamp_level",
    "extract_headings",
    "find_excluded_ranges",
    "first_heading_level",
    "is_inside_ranges",
    "normalize_headings",
]

_HEADING_RE = re.compile(r"^(#{1,6})([ \t]+.+)$", re.MULTILINE)

_log = get_logger("headings")


def clamp_level(level: int) -> int:
    return max(MIN_HEADING_LEVEL, min(level, MAX_HEADING_LEVEL))


def extract_headings(text: str, skip_file_blocks: bool = True) -> List[Heading]:
    """Return the visible ATX headings of *text* in document order."""
    excluded = RangeIndex(find_excluded_ranges(text, include_file_blocks=skip_file_blocks))
    return [
        Heading(level=len(m.group(1)), position=m.start(), text=m.group(2).strip())
        for m in _HEADING_RE.finditer(text)
        if m.start() not in excluded
    ]


def first_heading_level(text: str) -> int:
    """Level of the first visible heading, 0 when there is none."""
    headings = extract_headings(text)
    return headings[0].level if headings else 0


def analyze_heading_context(text: str, references: Sequence[Reference]) -> Dict[int, HeadingContext]:
    """Map each reference start offset to the heading that precedes it.

    The context level is the level of the nearest heading strictly before the
    reference (0 when none); `shift_amount` equals the context level.
    """
    headings = extract_headings(text)
    contexts: Dict[int, HeadingContext] = {}
    idx = 0
    level = 0
    for ref in sorted(references, key=lambda r: r.start):
        while idx < len(headings) and headings[idx].position < ref.start:
            level = headings[idx].level
            idx += 1
        contexts[ref.start] = HeadingContext(context_level=level, shift_amount=level)
    return contexts


def adjust_headings_report(
    text: str,
    shift: int,
    *,
    warn_on_clamp: bool = False,
    skip_file_blocks: bool = False,
    protect: Sequence[Span] = (),
    logger: Optional[logging.Logger] = None,
) -> HeadingAdjustment:
    """Shift every visible heading by *shift* levels and count clamps.

    With *skip_file_blocks* false, headings inside `<file>` blocks are
    shifted too; code is always left alone. Headings starting inside a
    *protect* span are kept as they are.
    """
    if shift == 0:
        return HeadingAdjustment(text=text, shift=0)

    ranges = find_excluded_ranges(text, include_file_blocks=skip_file_blocks)
    excluded = RangeIndex([*ranges, *protect])
    parts: List[str] = []
    cursor = 0
    clamped = 0
    for m in _HEADING_RE.finditer(text):
        if m.start() in excluded:
            continue
        target = len(m.group(1)) + shift
        if target < MIN_HEADING_LEVEL or target > MAX_HEADING_LEVEL:
            clamped += 1
        parts.append(text[cursor:m.start()])
        parts.append("#" * clamp_level(target))
        cursor = m.start(2)
    parts.append(text[cursor:])

    if warn_on_clamp and clamped:
        (logger or _log).warning("⚠  %d heading(s) clamped to h1-h6 range", clamped)

    return HeadingAdjustment(text="".join(parts), shift=shift, clamped=clamped)


def adjust_headings(
    text: str,
    shift: int,
    *,
    warn_on_clamp: bool = False,
    skip_file_blocks: bool = False,
    logger: Optional[logging.Logger] = None,
) -> str:
    """Return *text* with every visible heading shifted by *shift* levels."""
    return adjust_headings_report(
        text,
        shift,
        warn_on_clamp=warn_on_clamp,
        skip_file_blocks=skip_file_blocks,
        logger=logger,
    ).text


def normalize_headings(
    text: str,
    target_level: int,
    *,
    warn_on_clamp: bool = False,
    skip_file_blocks: bool = False,
    logger: Optional[logging.Logger] = None,
) -> str:
    """Shift headings so the first visible one lands on *target_level*.

    Relative distances between headings are kept. Text without headings is
    returned unchanged.
    """
    first = first_heading_level(text)
    if not first:
        return text
    return adjust_headings(
        text,
        target_level - first,
        warn_on_clamp=warn_on_clamp,
        skip_file_blocks=skip_file_blocks,
        logger=logger,
    )
