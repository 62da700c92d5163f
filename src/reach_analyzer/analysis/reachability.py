"""Search the ReachabilityGraph for source -> sink witness paths.

Acceptance is file-granular by default: a search stops at the first function
declared in the same file as the sink, which may be a different function
than the sink itself. With ``match_file=False`` only the sink node counts.
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field
from typing import Iterator

from reach_analyzer.analysis.graph import ReachabilityGraph
from reach_analyzer.program.nodes import FunctionNode

log = logging.getLogger(__name__)


@dataclass
class SinkHit:
    sink: FunctionNode
    path: list[FunctionNode]      # starts at the source


@dataclass
class SourceResult:
    source: FunctionNode
    reached: list[SinkHit] = field(default_factory=list)


def _accepts(node: FunctionNode, sink: FunctionNode, match_file: bool) -> bool:
    if match_file:
        return node.file == sink.file
    return node.qualname == sink.qualname


def find_path(
    graph: ReachabilityGraph,
    source: FunctionNode,
    sink: FunctionNode,
    *,
    match_file: bool = True,
) -> list[FunctionNode] | None:
    """Depth-first search for one path from source to sink.

    Uses an explicit stack and a visited set local to this search, so cycles
    and deep graphs are safe. Returns the path (first element is source) or
    None when the sink is unreachable.
    """
    if _accepts(source, sink, match_file):
        return [source]

    visited = {source.qualname}
    stack: list[tuple[FunctionNode, Iterator[FunctionNode]]] = [
        (source, iter(graph.successors(source))),
    ]
    while stack:
        _, successors = stack[-1]
        for nxt in successors:
            if nxt.qualname in visited:
                continue
            if _accepts(nxt, sink, match_file):
                return [frame[0] for frame in stack] + [nxt]
            visited.add(nxt.qualname)
            stack.append((nxt, iter(graph.successors(nxt))))
            break
        else:
            stack.pop()
    return None


def search_source(
    graph: ReachabilityGraph,
    source: FunctionNode,
    sinks: list[FunctionNode],
    *,
    match_file: bool = True,
) -> SourceResult:
    """Find at most one witness path from source to each sink."""
    result = SourceResult(source=source)
    for sink in sinks:
        path = find_path(graph, source, sink, match_file=match_file)
        if path is not None:
            result.reached.append(SinkHit(sink=sink, path=path))
    log.debug("Source %s reached %d of %d sinks",
              source.qualname, len(result.reached), len(sinks))
    return result


def search_all(
    graph: ReachabilityGraph,
    sources: list[FunctionNode],
    sinks: list[FunctionNode],
    *,
    match_file: bool = True,
    workers: int = 1,
) -> list[SourceResult]:
    """Search every source independently, results in source order.

    With workers > 1 the sources are searched on a thread pool; the graph is
    only read, so no locking is needed.
    """
    ordered_sources = sorted(sources, key=lambda n: n.qualname)
    ordered_sinks = sorted(sinks, key=lambda n: n.qualname)

    if workers <= 1 or len(ordered_sources) <= 1:
        return [
            search_source(graph, s, ordered_sinks, match_file=match_file)
            for s in ordered_sources
        ]

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [
            executor.submit(search_source, graph, s, ordered_sinks, match_file=match_file)
            for s in ordered_sources
        ]
        return [f.result() for f in futures]
