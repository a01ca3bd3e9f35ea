from __future__ import annotations

"""Public surface for atref.core.

Data model, option dataclasses, errors and the filesystem protocol live
here so that downstream layers share one import location:

    from atref.core import Reference, CompileOptions, FileSystemProtocol
"""

from atref.core.errors import AtRefError, DocumentReadError, OutputWriteError
from atref.core.interfaces.fs import FileSystemProtocol
from atref.core.models import (
    BrokenReferenceByTarget,
    CompiledReference,
    CompileResult,
    DependencyGraph,
    DocumentFailure,
    FileValidation,
    FolderCompileResult,
    GraphError,
    GraphNode,
    Heading,
    HeadingAdjustment,
    HeadingContext,
    Reference,
    ReferenceSource,
    ResolvedPath,
    ResolvedReference,
    SortResult,
    ValidationResult,
    ValidationStats,
)
from atref.core.options import (
    CompileOptions,
    ExtractOptions,
    FolderCompileOptions,
    HeadingMode,
    ResolveOptions,
    ValidateOptions,
)

__all__ = [
    # Errors
    "AtRefError",
    "DocumentReadError",
    "OutputWriteError",
    # Protocols
    "FileSystemProtocol",
    # Models
    "BrokenReferenceByTarget",
    "CompiledReference",
    "CompileResult",
    "DependencyGraph",
    "DocumentFailure",
    "FileValidation",
    "FolderCompileResult",
    "GraphError",
    "GraphNode",
    "Heading",
    "HeadingAdjustment",
    "HeadingContext",
    "Reference",
    "ReferenceSource",
    "ResolvedPath",
    "ResolvedReference",
    "SortResult",
    "ValidationResult",
    "ValidationStats",
    # Options
    "CompileOptions",
    "ExtractOptions",
    "FolderCompileOptions",
    "HeadingMode",
    "ResolveOptions",
    "ValidateOptions",
]
