"""Shared formatting helpers for renderers."""

from __future__ import annotations

from reach_analyzer.analysis.models import FunctionRef


def fmt_ref(ref: FunctionRef) -> str:
    """``name (file:line)``, the form every report line uses."""
    return f"{ref.name} ({ref.file}:{ref.line})"


def md_escape(text: str) -> str:
    return text.replace("|", "\\|").replace("`", "'")
