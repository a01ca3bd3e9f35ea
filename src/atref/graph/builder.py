from __future__ import annotations

"""Dependency graph over a set of documents.

An edge `doc -> target` exists when *doc* references *target* and *target*
is itself one of the documents. External targets are resolved and checked
but never become nodes.
"""

import logging
import os
from typing import Iterable, Optional, Union

from atref.core.models import DependencyGraph, GraphError, GraphNode
from atref.core.options import CompileOptions, FolderCompileOptions
from atref.io.filesystem import default_filesystem
from atref.logging.helpers import get_logger
from atref.parsing.frontmatter import strip_front_matter
from atref.parsing.references import extract_references
from atref.resolution.path_resolver import PathResolver, base_for_reference

GraphOptions = Union[CompileOptions, FolderCompileOptions]


def build_dependency_graph(
    paths: Iterable[str],
    options: Optional[GraphOptions] = None,
    *,
    logger: Optional[logging.Logger] = None,
) -> DependencyGraph:
    """Build the intra-set dependency graph of *paths*.

    Node order follows *paths* (duplicates collapse onto the first). Roots
    are the documents with no dependency inside the set. Unreadable
    documents and unresolved references are collected in `graph.errors`.
    """
    opts = options or FolderCompileOptions()
    log = logger or get_logger("graph")
    fs = default_filesystem(opts.filesystem)
    resolver = PathResolver(filesystem=fs, try_extensions=opts.try_extensions)

    graph = DependencyGraph()
    for raw in paths:
        path = os.path.abspath(raw)
        graph.nodes.setdefault(path, GraphNode(path=path))

    for path, node in graph.nodes.items():
        try:
            text = strip_front_matter(fs.read_text(path))
        except (OSError, UnicodeDecodeError) as exc:
            log.error("⚠  could not read %s (%s)", path, exc)
            graph.errors.append(GraphError(path=path, message=str(exc)))
            continue

        for ref in extract_references(text):
            res = resolver.resolve(ref.path, base_for_reference(ref.path, path, opts.base_path))
            if not res.exists:
                graph.errors.append(
                    GraphError(path=path, message=res.error or f"File not found: {res.path}", reference=ref)
                )
                continue
            target = graph.nodes.get(res.path)
            if target is None:
                continue
            node.dependencies.add(res.path)
            target.dependents.add(path)

    graph.root_files = {p for p, n in graph.nodes.items() if not n.dependencies}
    log.debug("graph: %d node(s), %d root(s), %d error(s)", len(graph.nodes), len(graph.root_files), len(graph.errors))
    return graph
