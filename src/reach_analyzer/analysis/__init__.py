"""Reachability core: module filter, closure linker, classifier, path search."""

from reach_analyzer.analysis.classifier import Classification, classify
from reach_analyzer.analysis.closure_linker import link_closures
from reach_analyzer.analysis.graph import ReachabilityGraph
from reach_analyzer.analysis.module_filter import filter_module
from reach_analyzer.analysis.reachability import find_path, search_all, search_source

__all__ = [
    "Classification",
    "ReachabilityGraph",
    "classify",
    "filter_module",
    "find_path",
    "link_closures",
    "search_all",
    "search_source",
]
