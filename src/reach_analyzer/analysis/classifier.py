"""Partition module functions into sources and sinks by declaring file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from reach_analyzer.program.nodes import FunctionNode

log = logging.getLogger(__name__)


@dataclass
class Classification:
    sources: list[FunctionNode] = field(default_factory=list)
    sinks: list[FunctionNode] = field(default_factory=list)
    unmatched_sources: list[str] = field(default_factory=list)  # listed files with no function
    unmatched_sinks: list[str] = field(default_factory=list)


def classify(
    nodes: list[FunctionNode],
    source_files: tuple[Path, ...] | list[Path],
    sink_files: tuple[Path, ...] | list[Path],
) -> Classification:
    """Select the functions declared in the listed files.

    Matching is exact string equality of absolute paths. A function may be
    both a source and a sink. Files that declare no retained function are
    reported as unmatched, not as errors.
    """
    source_set = {str(p) for p in source_files}
    sink_set = {str(p) for p in sink_files}

    result = Classification()
    seen_files: set[str] = set()
    for node in sorted(nodes, key=lambda n: n.qualname):
        if node.file is None:
            continue
        if node.file in source_set:
            result.sources.append(node)
            seen_files.add(node.file)
        if node.file in sink_set:
            result.sinks.append(node)
            seen_files.add(node.file)

    result.unmatched_sources = sorted(source_set - seen_files)
    result.unmatched_sinks = sorted(sink_set - seen_files)
    for path in result.unmatched_sources + result.unmatched_sinks:
        log.warning("No module functions declared in %s", path)

    log.info("Classified %d sources, %d sinks", len(result.sources), len(result.sinks))
    return result
