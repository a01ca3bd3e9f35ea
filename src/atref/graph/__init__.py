"""Folder-level dependency graph, ordering and compilation."""

from atref.graph.builder import build_dependency_graph
from atref.graph.folder import compile_folder
from atref.graph.toposort import topological_sort

__all__ = ["build_dependency_graph", "compile_folder", "topological_sort"]
