# workflow_mermaid/graph.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, NamedTuple, Optional, Protocol, TypeVar

from .errors import CycleDetectedError


class Keyed(Protocol):
    @property
    def key(self) -> str: ...


T = TypeVar("T", bound=Keyed)


class Edge(NamedTuple):
    source: Any
    destination: Any
    label: Optional[str] = None


@dataclass(eq=False)
class Graph(Generic[T]):
    """Directed multigraph keyed by each node's `key`.

    Insertion is deduplicated: the first node for a key and the first edge
    for a (source, destination) pair win; later inserts are ignored.
    """

    nodes: dict[str, T] = field(default_factory=dict)
    edges: list[Edge] = field(default_factory=list)

    def add_node(self, node: T) -> None:
        if node.key not in self.nodes:
            self.nodes[node.key] = node

    def add_edge(self, source: T, destination: T, label: Optional[str] = None) -> None:
        pair = (source.key, destination.key)
        for edge in self.edges:
            if (edge.source.key, edge.destination.key) == pair:
                return
        self.edges.append(Edge(source, destination, label))

    def merge(self, other: "Graph[T]") -> None:
        for node in other.nodes.values():
            self.add_node(node)
        for edge in other.edges:
            self.add_edge(*edge)

    def cull(self) -> None:
        """Remove nodes without any incident edge."""
        seen: set[str] = set()
        for edge in self.edges:
            seen.add(edge.source.key)
            seen.add(edge.destination.key)

        for key in [k for k in self.nodes if k not in seen]:
            del self.nodes[key]

    def roots(self) -> list[T]:
        """Nodes that are never an edge destination, in insertion order."""
        destinations = {edge.destination.key for edge in self.edges}
        return [node for key, node in self.nodes.items() if key not in destinations]

    def outgoing(self, node: T) -> list[Edge]:
        return [edge for edge in self.edges if edge.source.key == node.key]

    def search(self, root: T, visit: Callable[[T], None]) -> None:
        """Depth-first walk calling `visit` once per traversal step.

        A node reachable through several paths is visited once per path.
        Reaching a node that is already on the current path raises
        CycleDetectedError.
        """
        self._search(root, visit, [])

    def _search(self, node: T, visit: Callable[[T], None], path: list[str]) -> None:
        if node.key in path:
            cycle = " -> ".join([*path[path.index(node.key):], node.key])
            raise CycleDetectedError(f"cycle detected: {cycle}")

        visit(node)
        path.append(node.key)
        for edge in self.outgoing(node):
            self._search(edge.destination, visit, path)
        path.pop()

    def reachable(self, root: T) -> "Graph[T]":
        """Subgraph of every node and edge reachable from `root`."""
        sub: Graph[T] = Graph()

        def collect(node: T) -> None:
            sub.add_node(node)
            for edge in self.outgoing(node):
                sub.add_edge(*edge)

        self.search(root, collect)
        return sub

    def connected_subgraphs(self) -> list["Graph[T]"]:
        """Partition the graph into disjoint components.

        Each root contributes everything reachable from it; roots whose
        reachable sets share a node (e.g. two triggers of one workflow) end
        up in the same component, ordered by their first root.
        Raises CycleDetectedError when some node is unreachable from every
        root, which after `cull` only happens for a cycle with no way in.
        """
        components: list[Graph[T]] = []
        for root in self.roots():
            sub = self.reachable(root)
            overlapping = [c for c in components if c.nodes.keys() & sub.nodes.keys()]
            if not overlapping:
                components.append(sub)
                continue

            target = overlapping[0]
            for other in overlapping[1:]:
                target.merge(other)
                components.remove(other)
            target.merge(sub)

        covered: set[str] = set()
        for component in components:
            covered.update(component.nodes)
        missing = [key for key in self.nodes if key not in covered]
        if missing:
            # Only a cycle with no way in leaves nodes unreachable from every root.
            raise CycleDetectedError(f"cycle detected without a root: {missing[0]} is unreachable")
        return components
