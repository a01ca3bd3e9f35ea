from __future__ import annotations

"""`@path` reference extraction.

Grammar: an `@` preceded by start of text, whitespace or an opening
bracket/paren/brace, followed by an optional `./`, `../` or `/` prefix and
one or more path characters (word characters, `-`, `.`, `/`).

A candidate is rejected when it sits inside a code span, when the text
around the `@` forms an e-mail address, or when the path has neither a `/`
nor an extension-like suffix (`@Component`, `@param`).
"""

import bisect
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from atref.core.models import Reference
from atref.core.options import ExtractOptions
from atref.parsing.code_spans import RangeIndex, find_code_ranges

_REFERENCE_RE = re.compile(r"(?:^|(?<=[\s\[\(\{]))(@(?:\.{0,2}/)?[\w\-./]+)", re.MULTILINE)
_EMAIL_RE = re.compile(r"^[\w.-]+@[\w.-]+\.[a-z]{2,}$", re.IGNORECASE)
_EMAIL_LOCAL_CHAR_RE = re.compile(r"[\w.-]")
_EMAIL_DOMAIN_STOP_RE = re.compile(r"[\s\[\]\(\)\{\}]")
_EXTENSION_RE = re.compile(r"\.\w+$")


def build_line_offsets(text: str) -> List[int]:
    """Return the start offset of every line in *text*."""
    offsets = [0]
    pos = text.find("\n")
    while pos != -1:
        offsets.append(pos + 1)
        pos = text.find("\n", pos + 1)
    return offsets


def offset_to_position(offset: int, line_offsets: Sequence[int], zero_indexed: bool = False) -> tuple[int, int]:
    """Convert a character offset into `(line, column)`."""
    line = bisect.bisect_right(line_offsets, offset) - 1
    column = offset - line_offsets[line]
    adjust = 0 if zero_indexed else 1
    return line + adjust, column + adjust


def looks_like_email(text: str, at_index: int) -> bool:
    """Return True when the `@` at *at_index* is part of an e-mail address."""
    i = at_index - 1
    while i >= 0 and _EMAIL_LOCAL_CHAR_RE.match(text[i]):
        i -= 1
    if i == at_index - 1:
        return False
    local = text[i + 1:at_index]
    domain = _EMAIL_DOMAIN_STOP_RE.split(text[at_index + 1:], maxsplit=1)[0]
    return bool(_EMAIL_RE.match(f"{local}@{domain}"))


def is_reference_path(path: str) -> bool:
    """A reference path needs a separator or an extension-like suffix."""
    return "/" in path or bool(_EXTENSION_RE.search(path))


@dataclass(frozen=True)
class ReferenceExtractor:
    """Stateless extractor; `extract` is pure and deterministic."""

    options: ExtractOptions = ExtractOptions()

    def extract(self, text: str) -> List[Reference]:
        if "@" not in text:
            return []
        line_offsets = build_line_offsets(text)
        code = RangeIndex(find_code_ranges(text))
        refs: List[Reference] = []

        for m in _REFERENCE_RE.finditer(text):
            raw = m.group(1)
            start = m.start(1)
            if start in code:
                continue
            if looks_like_email(text, start):
                continue
            path = raw[1:]
            if not is_reference_path(path):
                continue
            line, column = offset_to_position(start, line_offsets, self.options.zero_indexed)
            refs.append(
                Reference(
                    raw=raw,
                    path=path,
                    start=start,
                    end=start + len(raw),
                    line=line,
                    column=column,
                )
            )
        return refs


def extract_references(text: str, options: Optional[ExtractOptions] = None) -> List[Reference]:
    """Extract every `@path` reference from *text* in source order."""
    return ReferenceExtractor(options or ExtractOptions()).extract(text)
