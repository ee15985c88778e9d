"""Post-breakdown checks and traversal of UI containment graphs."""

from __future__ import annotations

from kbreakdown.model import UINodeDigraph


def walk_preorder(graph: UINodeDigraph) -> list[tuple[str, int]]:
    """Return ``(uid, depth)`` pairs, each root followed by its subtree in call order."""
    order: list[tuple[str, int]] = []
    visited: set[str] = set()

    def _visit(uid: str, depth: int) -> None:
        if uid in visited:
            return
        visited.add(uid)
        order.append((uid, depth))
        for child in graph.edges.get(uid, ()):
            _visit(child, depth + 1)

    for root in graph.roots:
        _visit(root, 0)

    return order


def containment_violations(graph: UINodeDigraph) -> list[str]:
    """Describe every node that breaks the containment shape.

    Roots must have in-degree zero, every other node exactly one incoming
    edge, and every node must be reachable from a root.  An empty list means
    the graph is well formed.
    """
    indegree: dict[str, int] = {uid: 0 for uid in graph.nodes}
    problems: list[str] = []

    for source, targets in graph.edges.items():
        if source not in graph.nodes:
            problems.append(f"edge from unknown node {source}")
        for target in targets:
            if target not in indegree:
                problems.append(f"edge to unknown node {target}")
                continue
            indegree[target] += 1

    roots = set(graph.roots)
    for uid, degree in indegree.items():
        if uid in roots and degree != 0:
            problems.append(f"root {uid} has {degree} incoming edges")
        elif uid not in roots and degree != 1:
            problems.append(f"{uid} has {degree} incoming edges")

    reachable = {uid for uid, _ in walk_preorder(graph)}
    for uid in graph.nodes:
        if uid not in reachable:
            problems.append(f"{uid} is unreachable from any root")

    return problems
