from __future__ import annotations

"""Excluded-range scanning shared by the extractor and the heading adjuster.

Ranges are half-open `(start, end)` offsets into the scanned text:

* fenced blocks (```...```) are found first and take precedence;
* inline spans (`...`, no newline) count only when they do not overlap a fence;
* `<file ...>...</file>` blocks and self-closing `<file ... />` tags are
  optional, matched with nesting so that an outer block covers everything
  inlined inside it.
"""

import bisect
import re
from typing import List, NamedTuple, Sequence

from atref.constants import FILE_TAG


class Span(NamedTuple):
    start: int
    end: int


_FENCED_RE = re.compile(r"```[\s\S]*?```")
_INLINE_RE = re.compile(r"`[^`\n]+`")
_FILE_TAG_RE = re.compile(rf"<{FILE_TAG}\s[^>]*>|</{FILE_TAG}\s*>")


def _overlaps(span: Span, ranges: Sequence[Span]) -> bool:
    return any(span.start < r.end and r.start < span.end for r in ranges)


def find_code_ranges(text: str) -> List[Span]:
    """Return fenced blocks followed by inline spans outside them."""
    ranges: List[Span] = [Span(m.start(), m.end()) for m in _FENCED_RE.finditer(text)]
    fences = list(ranges)
    for m in _INLINE_RE.finditer(text):
        span = Span(m.start(), m.end())
        if not _overlaps(span, fences):
            ranges.append(span)
    return ranges


def find_file_block_ranges(text: str, code_ranges: Sequence[Span] = ()) -> List[Span]:
    """Return outermost `<file>` blocks and standalone self-closing tags.

    Tags that sit inside *code_ranges* are ignored; unclosed blocks are not
    reported.
    """
    ranges: List[Span] = []
    depth = 0
    open_at = 0
    for m in _FILE_TAG_RE.finditer(text):
        if is_inside_ranges(m.start(), code_ranges):
            continue
        tag = m.group(0)
        if tag.startswith("</"):
            if depth == 0:
                continue
            depth -= 1
            if depth == 0:
                ranges.append(Span(open_at, m.end()))
        elif tag.endswith("/>"):
            if depth == 0:
                ranges.append(Span(m.start(), m.end()))
        else:
            if depth == 0:
                open_at = m.start()
            depth += 1
    return ranges


def find_excluded_ranges(text: str, include_file_blocks: bool = True) -> List[Span]:
    """Return code ranges plus, optionally, `<file>` block ranges."""
    ranges = find_code_ranges(text)
    if include_file_blocks:
        ranges.extend(find_file_block_ranges(text, ranges))
    return ranges


def is_inside_ranges(offset: int, ranges: Sequence[Span]) -> bool:
    """Return True when *offset* falls in any half-open range."""
    return any(r.start <= offset < r.end for r in ranges)


class RangeIndex:
    """Sorted, merged view of excluded ranges for O(log n) membership tests."""

    def __init__(self, ranges: Sequence[Span]) -> None:
        merged: List[Span] = []
        for span in sorted(ranges):
            if merged and span.start <= merged[-1].end:
                last = merged[-1]
                merged[-1] = Span(last.start, max(last.end, span.end))
            else:
                merged.append(span)
        self._spans = merged
        self._starts = [s.start for s in merged]

    def __contains__(self, offset: object) -> bool:
        if not isinstance(offset, int):
            return False
        idx = bisect.bisect_right(self._starts, offset) - 1
        return idx >= 0 and offset < self._spans[idx].end

    def __len__(self) -> int:
        return len(self._spans)
