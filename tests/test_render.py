"""Tests for the text and Markdown renderers."""

from __future__ import annotations

from reach_analyzer.analysis.models import (
    FunctionRef,
    GraphStats,
    ReachabilityReport,
    ReachedSink,
    SourceReport,
)
from reach_analyzer.render.markdown import render_markdown
from reach_analyzer.render.text import render_text


def ref(name: str, file: str, line: int) -> FunctionRef:
    return FunctionRef(qualname=f"app.{name}", name=name, file=file, line=line)


def _report(**overrides) -> ReachabilityReport:
    handler = ref("Handler", "/r/h.py", 10)
    process = ref("Process", "/r/s.py", 20)
    save = ref("Save", "/r/r.py", 30)
    fields = dict(
        repo="app",
        module="app",
        root="/r",
        stats=GraphStats(
            functions_total=9, functions_retained=5, call_edges=4,
            closure_edges=1, sources=2, sinks=1,
        ),
        sources=[
            SourceReport(
                source=handler,
                reached=[ReachedSink(sink=save, path=[handler, process, save])],
            ),
            SourceReport(source=ref("Health", "/r/h.py", 40)),
        ],
    )
    fields.update(overrides)
    return ReachabilityReport(**fields)


def test_text_report_layout():
    text = render_text(_report())

    assert text == (
        "Analyzing paths from sources to sinks:\n"
        "\n"
        "Source: Handler (/r/h.py:10)\n"
        "  Sink reached: Save (/r/r.py:30)\n"
        "  Path:\n"
        "    1. Handler (/r/h.py:10)\n"
        "    2. Process (/r/s.py:20)\n"
        "    3. Save (/r/r.py:30)\n"
        "\n"
        "Source: Health (/r/h.py:40)\n"
        "  No sinks reached from this source.\n"
    )


def test_text_report_lists_unmatched_files():
    text = render_text(_report(unmatched_sinks=["/r/gone.py"]))

    assert text.endswith("No functions found in sink file: /r/gone.py\n")


def test_text_report_without_sources():
    text = render_text(_report(sources=[]))

    assert "No source functions found." in text


def test_markdown_report():
    md = render_markdown(_report())

    assert md.startswith("# Change Impact: app\n")
    assert "- **Functions retained**: 5 of 9" in md
    assert "- **Call edges**: 4 (1 closure links)" in md
    assert "- **Affected sources**: 1 of 2" in md
    assert "### Sink `Save` (`/r/r.py:30`)" in md
    assert "| 2 | `app.Process` | `/r/s.py:20` |" in md
    assert "_No sinks reached from this source._" in md
    assert "Files With No Functions" not in md
