"""Pydantic models for the reachability report."""

from __future__ import annotations

from pydantic import BaseModel, Field

from reach_analyzer.program.nodes import FunctionNode


class FunctionRef(BaseModel):
    """A function as it appears in the report."""
    qualname: str
    name: str
    file: str
    line: int

    @classmethod
    def from_node(cls, node: FunctionNode) -> FunctionRef:
        return cls(qualname=node.qualname, name=node.name, file=node.file or "", line=node.line)


class ReachedSink(BaseModel):
    sink: FunctionRef
    path: list[FunctionRef] = Field(default_factory=list)   # source first


class SourceReport(BaseModel):
    source: FunctionRef
    reached: list[ReachedSink] = Field(default_factory=list)


class GraphStats(BaseModel):
    functions_total: int = 0
    functions_retained: int = 0
    call_edges: int = 0          # includes closure edges
    closure_edges: int = 0
    sources: int = 0
    sinks: int = 0


class ReachabilityReport(BaseModel):
    """Everything one run produces."""
    repo: str
    module: str
    root: str
    match: str = "file"          # "file" | "function"
    stats: GraphStats = Field(default_factory=GraphStats)
    sources: list[SourceReport] = Field(default_factory=list)
    unmatched_sources: list[str] = Field(default_factory=list)
    unmatched_sinks: list[str] = Field(default_factory=list)

    @property
    def reached_count(self) -> int:
        return sum(1 for s in self.sources if s.reached)
