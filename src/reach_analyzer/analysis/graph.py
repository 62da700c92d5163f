"""ReachabilityGraph: retained functions plus call and closure adjacency."""

from __future__ import annotations

from collections import defaultdict

from reach_analyzer.program.nodes import FunctionNode


class ReachabilityGraph:
    """Adjacency over the functions of one module.

    Edges come from the filtered call graph and from closure linking; closure
    edges are tracked separately for reporting only. Successors are returned
    in qualname order so searches are reproducible.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, FunctionNode] = {}
        # Forward adjacency: caller qualname -> callee qualnames
        self._fwd: dict[str, set[str]] = defaultdict(set)
        self._closure_edges: set[tuple[str, str]] = set()

    def add_node(self, node: FunctionNode) -> None:
        self._nodes[node.qualname] = node

    def add_edge(self, caller: str, callee: str, *, closure: bool = False) -> bool:
        """Add caller -> callee. Returns False if the edge already existed."""
        if caller not in self._nodes or callee not in self._nodes:
            raise KeyError(f"edge {caller} -> {callee} references an unknown node")
        if callee in self._fwd[caller]:
            return False
        self._fwd[caller].add(callee)
        if closure:
            self._closure_edges.add((caller, callee))
        return True

    def has_edge(self, caller: str, callee: str) -> bool:
        return callee in self._fwd.get(caller, ())

    def successors(self, node: FunctionNode) -> list[FunctionNode]:
        return [self._nodes[q] for q in sorted(self._fwd.get(node.qualname, ()))]

    def all_nodes(self) -> list[FunctionNode]:
        return [self._nodes[q] for q in sorted(self._nodes)]

    def edge_count(self) -> int:
        return sum(len(callees) for callees in self._fwd.values())

    def closure_edge_count(self) -> int:
        return len(self._closure_edges)

    def is_closure_edge(self, caller: str, callee: str) -> bool:
        return (caller, callee) in self._closure_edges

    def __contains__(self, qualname: object) -> bool:
        return qualname in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)
