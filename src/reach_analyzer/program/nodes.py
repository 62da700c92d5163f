"""FunctionNode and Program: the raw program model handed to the core."""

from __future__ import annotations

from dataclasses import dataclass, field

# Separates an enclosing function's qualname from a closure ordinal
CLOSURE_DELIMITER = "$"


@dataclass(frozen=True)
class FunctionNode:
    qualname: str            # "shop.api.handler", "shop.api.Cart.add", "shop.api.handler$1"
    name: str                # short display name
    file: str | None         # absolute declaring path; None when unresolved
    line: int = 0

    @property
    def is_closure(self) -> bool:
        return CLOSURE_DELIMITER in self.qualname

    @property
    def has_position(self) -> bool:
        return bool(self.file)


@dataclass
class Program:
    """All functions of the analyzed universe and the raw static call graph."""

    functions: dict[str, FunctionNode] = field(default_factory=dict)
    edges: set[tuple[str, str]] = field(default_factory=set)  # (caller, callee) qualnames

    def add_function(self, fn: FunctionNode) -> None:
        """Add a function (first definition wins on qualname conflict)."""
        self.functions.setdefault(fn.qualname, fn)

    def add_edge(self, caller: str, callee: str) -> None:
        self.edges.add((caller, callee))

    def get(self, qualname: str) -> FunctionNode | None:
        return self.functions.get(qualname)

    def __len__(self) -> int:
        return len(self.functions)
