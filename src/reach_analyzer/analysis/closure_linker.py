"""Link named functions to the closures lexically nested inside them.

A closure stored in a variable or handed off as a callback is often never
called directly by its enclosing function, so the call graph has no edge
into it. Linking ``F -> F$1``, ``F -> F$1$2``, ... makes whatever the
closure calls reachable from ``F``.
"""

from __future__ import annotations

import logging
from collections import defaultdict

from reach_analyzer.analysis.graph import ReachabilityGraph
from reach_analyzer.program.nodes import CLOSURE_DELIMITER, FunctionNode

log = logging.getLogger(__name__)


def closure_index(nodes: list[FunctionNode]) -> dict[str, list[FunctionNode]]:
    """Map each enclosing-name prefix to the closures nested under it, at any depth."""
    index: dict[str, list[FunctionNode]] = defaultdict(list)
    for node in nodes:
        base, sep, _ = node.qualname.partition(CLOSURE_DELIMITER)
        if sep:
            index[base].append(node)
    return index


def link_closures(graph: ReachabilityGraph) -> int:
    """Add an edge from every named function to each of its closures.

    Never removes edges. Returns the number of edges added.
    """
    nodes = graph.all_nodes()
    index = closure_index(nodes)

    added = 0
    for node in nodes:
        if node.is_closure:
            continue
        for closure in index.get(node.qualname, ()):
            if graph.add_edge(node.qualname, closure.qualname, closure=True):
                added += 1

    log.info("Closure linker added %d edges", added)
    return added
