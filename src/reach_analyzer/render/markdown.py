"""Render a reachability report as Markdown."""

from __future__ import annotations

from reach_analyzer.analysis.models import ReachabilityReport
from reach_analyzer.render._helpers import md_escape


def render_markdown(report: ReachabilityReport) -> str:
    """Produce a Markdown report: summary, then one section per source."""
    sections: list[str] = []
    st = report.stats

    # ── Title ────────────────────────────────────────────────────────────
    sections.append(f"# Change Impact: {report.repo}\n")

    # ── Summary ──────────────────────────────────────────────────────────
    sections.append("\n".join([
        f"- **Module**: `{report.module}`",
        f"- **Root**: `{report.root}`",
        f"- **Functions retained**: {st.functions_retained} of {st.functions_total}",
        f"- **Call edges**: {st.call_edges} ({st.closure_edges} closure links)",
        f"- **Sources / sinks**: {st.sources} / {st.sinks}",
        f"- **Sink matching**: {report.match}",
        f"- **Affected sources**: {report.reached_count} of {len(report.sources)}",
    ]) + "\n")

    # ── Sources ──────────────────────────────────────────────────────────
    for src in report.sources:
        ref = src.source
        sections.append(f"## `{md_escape(ref.name)}`\n")
        sections.append(f"`{ref.file}:{ref.line}`\n")
        if not src.reached:
            sections.append("_No sinks reached from this source._\n")
            continue
        for hit in src.reached:
            sink = hit.sink
            sections.append(f"### Sink `{md_escape(sink.name)}` (`{sink.file}:{sink.line}`)\n")
            sections.append("| # | Function | Location |")
            sections.append("|---|---|---|")
            for i, step in enumerate(hit.path, 1):
                sections.append(f"| {i} | `{md_escape(step.qualname)}` | `{step.file}:{step.line}` |")
            sections.append("")

    # ── Unmatched files ──────────────────────────────────────────────────
    if report.unmatched_sources or report.unmatched_sinks:
        sections.append("## Files With No Functions\n")
        for p in report.unmatched_sources:
            sections.append(f"- source: `{p}`")
        for p in report.unmatched_sinks:
            sections.append(f"- sink: `{p}`")
        sections.append("")

    return "\n".join(sections)
