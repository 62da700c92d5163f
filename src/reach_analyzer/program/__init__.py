"""Program model providers.

Provides:
    load_program(config) -> Program
"""

from __future__ import annotations

from reach_analyzer.config import AnalysisConfig
from reach_analyzer.program.json_loader import load_program_dump
from reach_analyzer.program.nodes import FunctionNode, Program
from reach_analyzer.program.python_frontend import build_program


def load_program(config: AnalysisConfig) -> Program:
    """Load the program model for a run.

    Uses the call graph dump when one is configured, the Python frontend
    over ``config.root`` otherwise. Errors propagate as ProgramLoadError.
    """
    if config.callgraph is not None:
        return load_program_dump(config.callgraph, config.root)
    return build_program(config.root)


__all__ = ["load_program", "build_program", "load_program_dump", "FunctionNode", "Program"]
