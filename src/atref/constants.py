from __future__ import annotations

"""Project-wide constants used across modules.

This module isolates public constants to reduce cross-module coupling.
"""

# Tag used to wrap inlined documents: <file path="...">...</file> and <file path="..." />.
FILE_TAG: str = 'file'

# Infix added to compiled single-file outputs: README.md -> README.built.md.
BUILT_SUFFIX: str = '.built'

# Default output folder for folder compilation, relative to the compiled root.
DIST_DIR: str = 'dist'

DEFAULT_DOC_SUFFIXES: tuple[str, ...] = ('.md',)
DEFAULT_EXCLUDED_DIRS: tuple[str, ...] = ('node_modules', '.git', DIST_DIR)

# Files/dirs whose presence marks a workspace root.
WORKSPACE_MARKERS: tuple[str, ...] = ('.git',)

MIN_HEADING_LEVEL: int = 1
MAX_HEADING_LEVEL: int = 6
