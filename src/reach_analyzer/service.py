"""
reach-analyzer: analysis entrypoint.

Usage:
    from reach_analyzer.config import build_config
    from reach_analyzer.service import analyze

    config = build_config(
        repo="shop",
        sources="shop/api.py",
        sinks="shop/repo.py",
        root="/path/to/checkout",
    )
    report = analyze(config)

    # report.sources: one SourceReport per source function
    # report.stats:   graph sizes before and after filtering
"""

from __future__ import annotations

import logging

from reach_analyzer.analysis.classifier import classify
from reach_analyzer.analysis.closure_linker import link_closures
from reach_analyzer.analysis.models import (
    FunctionRef,
    GraphStats,
    ReachabilityReport,
    ReachedSink,
    SourceReport,
)
from reach_analyzer.analysis.module_filter import filter_module
from reach_analyzer.analysis.reachability import SourceResult, search_all
from reach_analyzer.config import AnalysisConfig
from reach_analyzer.program import load_program

log = logging.getLogger(__name__)


def analyze(config: AnalysisConfig) -> ReachabilityReport:
    """Run the full pipeline for one configuration.

    Raises:
        ProgramLoadError: the program model could not be loaded.
    """
    log.info("Analyzing module %s under %s", config.module, config.root)

    program = load_program(config)
    graph = filter_module(program, config.module, config.generated_markers)
    if config.link_closures:
        link_closures(graph)

    classification = classify(graph.all_nodes(), config.sources, config.sinks)
    results = search_all(
        graph,
        classification.sources,
        classification.sinks,
        match_file=config.match_file,
        workers=config.workers,
    )

    report = ReachabilityReport(
        repo=config.repo,
        module=config.module,
        root=str(config.root),
        match="file" if config.match_file else "function",
        stats=GraphStats(
            functions_total=len(program),
            functions_retained=len(graph),
            call_edges=graph.edge_count(),
            closure_edges=graph.closure_edge_count(),
            sources=len(classification.sources),
            sinks=len(classification.sinks),
        ),
        sources=[_to_source_report(r) for r in results],
        unmatched_sources=classification.unmatched_sources,
        unmatched_sinks=classification.unmatched_sinks,
    )
    log.info("%d of %d sources reach at least one sink",
             report.reached_count, len(report.sources))
    return report


def _to_source_report(result: SourceResult) -> SourceReport:
    return SourceReport(
        source=FunctionRef.from_node(result.source),
        reached=[
            ReachedSink(
                sink=FunctionRef.from_node(hit.sink),
                path=[FunctionRef.from_node(n) for n in hit.path],
            )
            for hit in result.reached
        ],
    )
