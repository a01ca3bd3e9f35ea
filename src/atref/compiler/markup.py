from __future__ import annotations

"""`<file>` markup written into compiled documents."""

from html import escape

from atref.constants import FILE_TAG


def _attr(path: str) -> str:
    return escape(path, quote=True)


def wrap_file(content: str, path: str) -> str:
    """Wrap inlined *content* in a `<file path="...">` block."""
    return f'<{FILE_TAG} path="{_attr(path)}">\n\n{content}\n\n</{FILE_TAG}>'


def stub_file(path: str) -> str:
    """Self-closing tag left in place of a deduplicated inline."""
    return f'<{FILE_TAG} path="{_attr(path)}" />'
