from __future__ import annotations

from atref.compiler.api import built_output_path, compile_content, compile_file
from atref.compiler.session import CompilationSession, ImportStats
from atref.core.errors import AtRefError, DocumentReadError, OutputWriteError
from atref.core.models import (
    CompiledReference,
    CompileResult,
    DependencyGraph,
    FolderCompileResult,
    Reference,
    ResolvedPath,
    SortResult,
    ValidationResult,
)
from atref.core.options import (
    CompileOptions,
    ExtractOptions,
    FolderCompileOptions,
    HeadingMode,
    ResolveOptions,
    ValidateOptions,
)
from atref.graph.builder import build_dependency_graph
from atref.graph.folder import compile_folder
from atref.graph.toposort import topological_sort
from atref.io.filesystem import LocalFileSystem, MemoryFileSystem
from atref.parsing.references import extract_references
from atref.processing.headings import (
    adjust_headings,
    analyze_heading_context,
    extract_headings,
    normalize_headings,
)
from atref.resolution.path_resolver import find_workspace_root, path_exists, resolve_path
from atref.validation.validator import (
    extract_broken_references_by_target,
    is_valid_reference,
    validate_file,
    validate_references,
    validate_tree,
)

__version__ = '0.3.0'

__all__ = [
    '__version__',
    # Errors
    'AtRefError',
    'DocumentReadError',
    'OutputWriteError',
    # Options
    'CompileOptions',
    'ExtractOptions',
    'FolderCompileOptions',
    'HeadingMode',
    'ResolveOptions',
    'ValidateOptions',
    # Models
    'CompilationSession',
    'CompiledReference',
    'CompileResult',
    'DependencyGraph',
    'FolderCompileResult',
    'ImportStats',
    'Reference',
    'ResolvedPath',
    'SortResult',
    'ValidationResult',
    # Filesystems
    'LocalFileSystem',
    'MemoryFileSystem',
    # Operations
    'adjust_headings',
    'analyze_heading_context',
    'build_dependency_graph',
    'built_output_path',
    'compile_content',
    'compile_file',
    'compile_folder',
    'extract_broken_references_by_target',
    'extract_headings',
    'extract_references',
    'find_workspace_root',
    'is_valid_reference',
    'normalize_headings',
    'path_exists',
    'resolve_path',
    'topological_sort',
    'validate_file',
    'validate_references',
    'validate_tree',
]
