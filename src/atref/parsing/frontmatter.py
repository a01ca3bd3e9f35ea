from __future__ import annotations

"""Leading metadata block (front matter) handling."""

import re

_FRONT_MATTER_RE = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?:.*?\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


def split_front_matter(text: str) -> tuple[str, str]:
    """Return `(front_matter, body)`; front matter is '' when absent."""
    m = _FRONT_MATTER_RE.match(text)
    if not m:
        return "", text
    return m.group(0), text[m.end():]


def strip_front_matter(text: str) -> str:
    """Drop a leading `---` delimited block, if any."""
    return split_front_matter(text)[1]
