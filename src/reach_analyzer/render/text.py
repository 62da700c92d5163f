"""Render a reachability report as plain text."""

from __future__ import annotations

from reach_analyzer.analysis.models import ReachabilityReport
from reach_analyzer.render._helpers import fmt_ref


def render_text(report: ReachabilityReport) -> str:
    lines = ["Analyzing paths from sources to sinks:"]

    for src in report.sources:
        lines.append("")
        lines.append(f"Source: {fmt_ref(src.source)}")
        for hit in src.reached:
            lines.append(f"  Sink reached: {fmt_ref(hit.sink)}")
            lines.append("  Path:")
            for i, step in enumerate(hit.path, 1):
                lines.append(f"    {i}. {fmt_ref(step)}")
        if not src.reached:
            lines.append("  No sinks reached from this source.")

    if not report.sources:
        lines.append("")
        lines.append("No source functions found.")

    notes = [f"No functions found in source file: {p}" for p in report.unmatched_sources]
    notes += [f"No functions found in sink file: {p}" for p in report.unmatched_sinks]
    if notes:
        lines.append("")
        lines.extend(notes)

    return "\n".join(lines) + "\n"
