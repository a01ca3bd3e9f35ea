"""Public API surface for atref.processing."""
__all__ = [
    "headings",
]
