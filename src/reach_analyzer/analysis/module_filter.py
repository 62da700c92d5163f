"""Restrict the raw program model to the authored functions of one module."""

from __future__ import annotations

import logging

from reach_analyzer.analysis.graph import ReachabilityGraph
from reach_analyzer.program.nodes import FunctionNode, Program

log = logging.getLogger(__name__)


def is_retained(fn: FunctionNode, module: str, generated_markers: tuple[str, ...]) -> bool:
    """A function is kept iff it has a position, belongs to the module, and is not generated."""
    if not fn.has_position:
        return False
    if module not in fn.qualname:
        return False
    return not any(marker in fn.file for marker in generated_markers)


def filter_module(
    program: Program,
    module: str,
    generated_markers: tuple[str, ...],
) -> ReachabilityGraph:
    """Build the module's ReachabilityGraph from the raw program model.

    Edges survive only when both endpoints survive.
    """
    graph = ReachabilityGraph()
    dropped = 0
    for fn in program.functions.values():
        if is_retained(fn, module, generated_markers):
            graph.add_node(fn)
        else:
            dropped += 1

    for caller, callee in sorted(program.edges):
        if caller in graph and callee in graph:
            graph.add_edge(caller, callee)

    log.info(
        "Module filter (%s): kept %d of %d functions, %d call edges",
        module, len(graph), len(program), graph.edge_count(),
    )
    log.debug("Module filter dropped %d functions", dropped)
    return graph
