#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Dependency graph construction and topological ordering.
"""
import unittest

from atref.core.models import DependencyGraph, GraphNode
from atref.core.options import FolderCompileOptions
from atref.graph.builder import build_dependency_graph
from atref.graph.toposort import to_digraph, topological_sort
from atref.io.filesystem import MemoryFileSystem
from tools.fixtures import memory_tree


def _graph(edges):
    """Build a graph from {node: [dependencies]} in insertion order."""
    graph = DependencyGraph()
    for path in edges:
        graph.nodes[path] = GraphNode(path=path)
    for path, deps in edges.items():
        for dep in deps:
            graph.nodes[path].dependencies.add(dep)
            graph.nodes[dep].dependents.add(path)
    graph.root_files = {p for p, n in graph.nodes.items() if not n.dependencies}
    return graph


class BuildGraphTests(unittest.TestCase):
    def setUp(self):
        self.fs = MemoryFileSystem(memory_tree({
            "/ws/a.md": "# A\n@b.md\n",
            "/ws/b.md": "# B\n@c.md\n",
            "/ws/c.md": "# C\n",
            "/ws/d.md": "@../outside/ext.md and @a.md\n",
            "/outside/ext.md": "external\n",
            "/ws/broken.md": "@nowhere.md\n",
            "/ws/meta.md": "---\nsee: @b.md\n---\nbody\n",
        }))
        self.opts = FolderCompileOptions(filesystem=self.fs)

    def test_chain_edges_and_roots(self):
        graph = build_dependency_graph(["/ws/a.md", "/ws/b.md", "/ws/c.md"], self.opts)
        self.assertEqual(len(graph), 3)
        self.assertEqual(graph.nodes["/ws/a.md"].dependencies, {"/ws/b.md"})
        self.assertEqual(graph.nodes["/ws/c.md"].dependents, {"/ws/b.md"})
        self.assertEqual(graph.root_files, {"/ws/c.md"})
        self.assertEqual(graph.errors, [])

    def test_external_targets_are_not_nodes(self):
        graph = build_dependency_graph(["/ws/d.md", "/ws/a.md"], self.opts)
        self.assertNotIn("/outside/ext.md", graph)
        self.assertEqual(graph.nodes["/ws/d.md"].dependencies, {"/ws/a.md"})
        self.assertEqual(graph.root_files, {"/ws/a.md"})

    def test_unresolved_reference_is_an_error(self):
        graph = build_dependency_graph(["/ws/broken.md"], self.opts)
        self.assertEqual(len(graph.errors), 1)
        err = graph.errors[0]
        self.assertEqual(err.path, "/ws/broken.md")
        self.assertEqual(err.reference.path, "nowhere.md")
        self.assertTrue(err.message.startswith("File not found:"))
        self.assertEqual(graph.root_files, {"/ws/broken.md"})

    def test_unreadable_document_is_an_error(self):
        graph = build_dependency_graph(["/ws/gone.md", "/ws/c.md"], self.opts)
        self.assertIn("/ws/gone.md", graph)
        self.assertEqual([e.path for e in graph.errors], ["/ws/gone.md"])
        self.assertIsNone(graph.errors[0].reference)

    def test_front_matter_references_are_ignored(self):
        graph = build_dependency_graph(["/ws/meta.md", "/ws/b.md"], self.opts)
        self.assertEqual(graph.nodes["/ws/meta.md"].dependencies, set())

    def test_duplicate_inputs_collapse(self):
        graph = build_dependency_graph(["/ws/c.md", "/ws/c.md"], self.opts)
        self.assertEqual(list(graph.nodes), ["/ws/c.md"])


class TopologicalSortTests(unittest.TestCase):
    def test_dependencies_come_first(self):
        result = topological_sort(_graph({"a": ["b"], "b": ["c"], "c": []}))
        self.assertEqual(result.sorted, ["c", "b", "a"])
        self.assertEqual(result.ordering, ["c", "b", "a"])
        self.assertFalse(result.has_cycles)

    def test_ties_keep_discovery_order(self):
        result = topological_sort(_graph({"z": [], "y": [], "x": ["z"]}))
        self.assertEqual(result.sorted, ["z", "y", "x"])

    def test_cycle_members_are_appended(self):
        result = topological_sort(_graph({
            "w": [],
            "x": ["y"],
            "y": ["x"],
            "z": ["x"],
        }))
        self.assertEqual(result.sorted, ["w"])
        self.assertEqual(result.cyclic_nodes, ["x", "y"])
        self.assertEqual(result.blocked_nodes, ["z"])
        self.assertEqual(result.cycles, [("x", "y")])
        self.assertEqual(result.ordering, ["w", "x", "y", "z"])
        self.assertTrue(result.has_cycles)

    def test_self_loop_is_a_cycle(self):
        result = topological_sort(_graph({"s": ["s"]}))
        self.assertEqual(result.sorted, [])
        self.assertEqual(result.cyclic_nodes, ["s"])
        self.assertEqual(result.cycles, [("s",)])

    def test_independent_cycles(self):
        result = topological_sort(_graph({
            "a": ["b"],
            "b": ["a"],
            "c": ["d"],
            "d": ["c"],
        }))
        self.assertEqual(sorted(result.cycles), [("a", "b"), ("c", "d")])
        self.assertEqual(sorted(result.ordering), ["a", "b", "c", "d"])

    def test_every_node_is_ordered_once(self):
        graph = _graph({"a": ["b"], "b": ["c"], "c": ["b"], "d": ["a"], "e": []})
        result = topological_sort(graph)
        self.assertEqual(sorted(result.ordering), sorted(graph.nodes))
        self.assertEqual(result.ordering[0], "e")
        # b and c form the cycle; a and d depend on it.
        self.assertEqual(result.ordering[1:3], ["b", "c"])
        self.assertLess(result.ordering.index("a"), result.ordering.index("d"))

    def test_digraph_edges_point_at_dependents(self):
        dg = to_digraph(_graph({"a": ["b"], "b": [], "c": ["c"]}))
        self.assertEqual(list(dg.nodes), ["a", "b", "c"])
        self.assertTrue(dg.has_edge("b", "a"))
        self.assertFalse(dg.has_edge("a", "b"))
        self.assertTrue(dg.has_edge("c", "c"))

    def test_empty_graph(self):
        result = topological_sort(DependencyGraph())
        self.assertEqual((result.sorted, result.ordering, result.cyclic_nodes), ([], [], []))


if __name__ == "__main__":
    unittest.main(verbosity=2)
