"""Tests for source/sink classification."""

from __future__ import annotations

from pathlib import Path

from reach_analyzer.analysis.classifier import classify
from reach_analyzer.program.nodes import FunctionNode


def fn(qualname: str, file: str | None, line: int = 1) -> FunctionNode:
    return FunctionNode(qualname=qualname, name=qualname.rsplit(".", 1)[-1], file=file, line=line)


def test_all_functions_of_a_listed_file_are_members():
    nodes = [fn("app.A", "/r/h.go"), fn("app.B", "/r/h.go"), fn("app.C", "/r/s.go")]
    result = classify(nodes, [Path("/r/h.go")], [Path("/r/s.go")])

    assert [n.qualname for n in result.sources] == ["app.A", "app.B"]
    assert [n.qualname for n in result.sinks] == ["app.C"]


def test_a_function_can_be_source_and_sink():
    nodes = [fn("app.A", "/r/h.go")]
    result = classify(nodes, [Path("/r/h.go")], [Path("/r/h.go")])

    assert result.sources == result.sinks == nodes


def test_matching_is_exact():
    nodes = [fn("app.A", "/r/pkg/h.go")]
    result = classify(nodes, [Path("/r/h.go")], [Path("/r/pkg/h.go.bak")])

    assert result.sources == []
    assert result.sinks == []
    assert result.unmatched_sources == ["/r/h.go"]
    assert result.unmatched_sinks == ["/r/pkg/h.go.bak"]


def test_functions_without_position_are_ignored():
    result = classify([fn("app.init", None)], [Path("/r/h.go")], [])

    assert result.sources == []
