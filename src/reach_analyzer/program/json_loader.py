"""Load a pre-computed call graph dump into a Program.

Lets graphs produced by other toolchains go through the same reachability
core. Expected shape::

    {
      "functions": [
        {"qualname": "shop.api.handler", "name": "handler",
         "file": "shop/api.py", "line": 12}
      ],
      "edges": [["shop.api.handler", "shop.service.place_order"]]
    }

Edges may also be objects with "caller" and "callee" keys.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from reach_analyzer.errors import ProgramLoadError
from reach_analyzer.program.nodes import FunctionNode, Program
from reach_analyzer.utils import resolve_under

log = logging.getLogger(__name__)


class DumpFunction(BaseModel):
    qualname: str
    name: str | None = None
    file: str | None = None
    line: int = 0


class DumpEdge(BaseModel):
    caller: str
    callee: str


class ProgramDump(BaseModel):
    functions: list[DumpFunction] = Field(default_factory=list)
    edges: list[DumpEdge] = Field(default_factory=list)

    @field_validator("edges", mode="before")
    @classmethod
    def _pairs_to_edges(cls, value):
        if not isinstance(value, list):
            return value
        return [
            {"caller": item[0], "callee": item[1]}
            if isinstance(item, (list, tuple)) and len(item) == 2 else item
            for item in value
        ]


def load_program_dump(path: Path, root: Path) -> Program:
    """Read a JSON call graph dump.

    Args:
        path: JSON file to read.
        root: Directory relative ``file`` entries are resolved against.

    Raises:
        ProgramLoadError: the file cannot be read, is not JSON, or does not
            match the expected shape.
    """
    try:
        raw = json.loads(path.read_text())
    except OSError as exc:
        raise ProgramLoadError(f"cannot read call graph dump {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ProgramLoadError(f"call graph dump {path} is not valid JSON: {exc}") from exc

    try:
        dump = ProgramDump.model_validate(raw)
    except ValidationError as exc:
        raise ProgramLoadError(f"invalid call graph dump {path}: {exc}") from exc

    program = Program()
    for fn in dump.functions:
        file = str(resolve_under(root, fn.file)) if fn.file else None
        program.add_function(FunctionNode(
            qualname=fn.qualname,
            name=fn.name or _short_name(fn.qualname),
            file=file,
            line=fn.line,
        ))

    for edge in dump.edges:
        for endpoint in (edge.caller, edge.callee):
            if program.get(endpoint) is None:
                # Undeclared endpoints carry no position and never survive filtering
                log.debug("Call graph endpoint %s has no declaration", endpoint)
                program.add_function(FunctionNode(
                    qualname=endpoint, name=_short_name(endpoint), file=None,
                ))
        program.add_edge(edge.caller, edge.callee)

    log.info(
        "Call graph dump loaded: %d functions, %d call edges from %s",
        len(program), len(program.edges), path,
    )
    return program


def _short_name(qualname: str) -> str:
    return qualname.rsplit(".", 1)[-1]
