from __future__ import annotations

"""Topological ordering of a `DependencyGraph`.

The document graph is mirrored into a `networkx.DiGraph` with edges running
dependency -> dependent. Strongly connected components with more than one
member, or with a self-loop, are cycles. Everything reachable from a cycle
is left out of the strict order and appended afterwards, component by
component in dependency-first order, so that a folder run still compiles
every document. Ties are always broken by discovery order.
"""

from typing import Dict, List, Set, Tuple

import networkx as nx

from atref.core.models import DependencyGraph, SortResult


def to_digraph(graph: DependencyGraph) -> nx.DiGraph:
    """Return *graph* as a DiGraph (dependency -> dependent), nodes in discovery order."""
    dg = nx.DiGraph()
    dg.add_nodes_from(graph.nodes)
    for path, node in graph.nodes.items():
        dg.add_edges_from((dep, path) for dep in node.dependencies)
    return dg


def topological_sort(graph: DependencyGraph) -> SortResult:
    """Order *graph* so every document follows its in-set dependencies.

    `sorted` holds the strictly ordered nodes only. Cycle members are listed
    in `cyclic_nodes` (and grouped in `cycles`); nodes that merely depend on
    a cycle are `blocked_nodes`. `ordering` is `sorted` followed by the
    leftovers, dependency-first, discovery order inside a cycle.
    """
    order: Dict[str, int] = {path: i for i, path in enumerate(graph.nodes)}
    dg = to_digraph(graph)

    condensed = nx.condensation(dg)
    members: Dict[int, List[str]] = {
        c: sorted(data["members"], key=order.__getitem__) for c, data in condensed.nodes(data=True)
    }
    cyclic_components: Set[int] = {
        c for c, nodes in members.items()
        if len(nodes) > 1 or dg.has_edge(nodes[0], nodes[0])
    }

    tainted: Set[int] = set(cyclic_components)
    for c in cyclic_components:
        tainted.update(nx.descendants(condensed, c))

    clean = dg.subgraph([n for n in dg if condensed.graph["mapping"][n] not in tainted])
    ordered = list(nx.lexicographical_topological_sort(clean, key=order.__getitem__))
    if not tainted:
        return SortResult(sorted=ordered, cyclic_nodes=[], ordering=list(ordered))

    cyclic: List[str] = []
    blocked: List[str] = []
    cycles: List[Tuple[str, ...]] = []
    tail: List[str] = []
    leftover = condensed.subgraph(tainted)
    for c in nx.lexicographical_topological_sort(leftover, key=lambda comp: order[members[comp][0]]):
        group = members[c]
        tail.extend(group)
        if c in cyclic_components:
            cyclic.extend(group)
            cycles.append(tuple(group))
        else:
            blocked.extend(group)

    return SortResult(
        sorted=ordered,
        cyclic_nodes=cyclic,
        blocked_nodes=blocked,
        cycles=cycles,
        ordering=ordered + tail,
    )
