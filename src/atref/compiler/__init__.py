"""Recursive transclusion compiler."""

from atref.compiler.api import built_output_path, compile_content, compile_file
from atref.compiler.engine import NodeOutput, RecursiveCompiler
from atref.compiler.session import CompilationSession, ImportStats

__all__ = [
    "CompilationSession",
    "ImportStats",
    "NodeOutput",
    "RecursiveCompiler",
    "built_output_path",
    "compile_content",
    "compile_file",
]
