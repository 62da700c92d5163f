"""Build a Program (functions + static call graph) from Python ASTs.

Passes:
  1. Per file: one walk that records every def/async def/lambda as a
     FunctionNode, the file's imports and classes, and each call site
     together with the scopes visible at that point.
  2. Once all files are walked: resolve call sites against the project-wide
     indexes and emit caller -> callee edges.

Resolution is a conservative over-approximation in the spirit of class
hierarchy analysis: a method call on a receiver of unknown type links to
every project method with that name.
"""

from __future__ import annotations

import ast
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path

from reach_analyzer.errors import ProgramLoadError
from reach_analyzer.program.nodes import CLOSURE_DELIMITER, FunctionNode, Program
from reach_analyzer.utils import discover_python_files, resolve_under

log = logging.getLogger(__name__)


@dataclass
class _ClassInfo:
    module: str
    bases: list[str]          # base expressions as dotted strings, unresolved


@dataclass
class _ModuleInfo:
    name: str                 # dotted module name
    file: str                 # absolute path
    is_package: bool
    imports: dict[str, str] = field(default_factory=dict)  # local name -> dotted target


@dataclass
class _CallSite:
    caller: str                            # FunctionNode.qualname
    module: str
    func: ast.expr                         # ast.Call.func
    bindings: tuple[dict[str, str], ...]   # nested defs visible here, innermost first
    class_qualname: str | None


@dataclass
class _Scope:
    qualname: str
    short: str
    kind: str                 # "module" | "class" | "function"
    class_qualname: str | None = None
    bindings: dict[str, str] = field(default_factory=dict)
    ordinal: int = 0

    def next_closure(self) -> tuple[str, str]:
        self.ordinal += 1
        suffix = f"{CLOSURE_DELIMITER}{self.ordinal}"
        return self.qualname + suffix, self.short + suffix


def build_program(root: Path, files: list[Path] | None = None) -> Program:
    """Build a Program for the Python source tree under root.

    Args:
        root: Analysis root. Module names are computed relative to it.
        files: Python files to analyze. Defaults to every .py file under root.

    Returns:
        Program with one FunctionNode per function and lambda, and the
        resolved call edges between them.

    Raises:
        ProgramLoadError: root is not a directory, holds no Python files, or
            a file fails to parse.
    """
    root = root.resolve()
    if not root.is_dir():
        raise ProgramLoadError(f"analysis root {root} is not a directory")

    if files is None:
        py_files = discover_python_files(root)
    else:
        py_files = [resolve_under(root, str(f)) for f in files]
    if not py_files:
        raise ProgramLoadError(f"no Python files found under {root}")

    program = Program()
    modules: dict[str, _ModuleInfo] = {}
    classes: dict[str, _ClassInfo] = {}
    call_sites: list[_CallSite] = []
    root_is_package = (root / "__init__.py").is_file()

    # Pass 1: definitions, imports, call sites
    for fpath in py_files:
        try:
            source = fpath.read_text(errors="replace")
            tree = ast.parse(source, filename=str(fpath))
        except SyntaxError as exc:
            raise ProgramLoadError(
                f"cannot parse {fpath}: {exc.msg} (line {exc.lineno})"
            ) from exc
        except OSError as exc:
            raise ProgramLoadError(f"cannot read {fpath}: {exc}") from exc

        name, is_package = _module_name(fpath.relative_to(root), root.name, root_is_package)
        info = _ModuleInfo(name=name, file=str(fpath), is_package=is_package)
        modules[name] = info

        collector = _FileCollector(info, program, classes, call_sites)
        collector.visit(tree)

    # Pass 2: resolve call sites
    resolver = _Resolver(program, modules, classes)
    for site in call_sites:
        for callee in resolver.resolve(site):
            program.add_edge(site.caller, callee)

    log.info(
        "Program built: %d functions, %d call edges from %d files",
        len(program), len(program.edges), len(py_files),
    )
    return program


# ── Pass 1 ────────────────────────────────────────────────────────────────


class _FileCollector(ast.NodeVisitor):
    """Walk one module, tracking lexical scopes."""

    def __init__(
        self,
        module: _ModuleInfo,
        program: Program,
        classes: dict[str, _ClassInfo],
        call_sites: list[_CallSite],
    ) -> None:
        self.module = module
        self.program = program
        self.classes = classes
        self.call_sites = call_sites
        short = module.name.rsplit(".", 1)[-1]
        self.stack: list[_Scope] = [_Scope(qualname=module.name, short=short, kind="module")]

    # Definitions

    def visit_FunctionDef(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> None:
        # Decorators, defaults and annotations evaluate in the enclosing scope
        for dec in node.decorator_list:
            self.visit(dec)
        self.visit(node.args)
        if node.returns is not None:
            self.visit(node.returns)

        parent = self.stack[-1]
        if parent.kind == "function":
            qualname, _ = parent.next_closure()
            parent.bindings[node.name] = qualname
        else:
            qualname = f"{parent.qualname}.{node.name}"

        self._add_function(qualname, node.name, node.lineno)
        self.stack.append(_Scope(
            qualname=qualname,
            short=node.name,
            kind="function",
            class_qualname=parent.qualname if parent.kind == "class" else parent.class_qualname,
        ))
        for stmt in node.body:
            self.visit(stmt)
        self.stack.pop()

    visit_AsyncFunctionDef = visit_FunctionDef

    def visit_Lambda(self, node: ast.Lambda) -> None:
        self.visit(node.args)
        parent = self.stack[-1]
        qualname, short = parent.next_closure()
        self._add_function(qualname, short, node.lineno)
        self.stack.append(_Scope(
            qualname=qualname,
            short=short,
            kind="function",
            class_qualname=parent.qualname if parent.kind == "class" else parent.class_qualname,
        ))
        self.visit(node.body)
        self.stack.pop()

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        for dec in node.decorator_list:
            self.visit(dec)
        for base in node.bases:
            self.visit(base)
        for kw in node.keywords:
            self.visit(kw)

        parent = self.stack[-1]
        qualname = f"{parent.qualname}.{node.name}"
        if parent.kind == "function":
            parent.bindings[node.name] = qualname
        bases = [d for d in (_dotted(b) for b in node.bases) if d]
        self.classes[qualname] = _ClassInfo(module=self.module.name, bases=bases)

        self.stack.append(_Scope(
            qualname=qualname, short=node.name, kind="class", class_qualname=qualname,
        ))
        for stmt in node.body:
            self.visit(stmt)
        self.stack.pop()

    # Imports

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            if alias.asname:
                self.module.imports[alias.asname] = alias.name
            else:
                root = alias.name.split(".")[0]
                self.module.imports[root] = root

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        if node.level:
            base = _resolve_relative(self.module, node.level, node.module)
        else:
            base = node.module or ""
        if not base:
            return
        for alias in node.names:
            if alias.name == "*":
                continue
            self.module.imports[alias.asname or alias.name] = f"{base}.{alias.name}"

    # Calls

    def visit_Call(self, node: ast.Call) -> None:
        scope = self.stack[-1]
        if scope.kind == "function":
            self.call_sites.append(_CallSite(
                caller=scope.qualname,
                module=self.module.name,
                func=node.func,
                bindings=tuple(
                    s.bindings for s in reversed(self.stack) if s.kind == "function"
                ),
                class_qualname=scope.class_qualname,
            ))
        self.generic_visit(node)

    def _add_function(self, qualname: str, name: str, line: int) -> None:
        self.program.add_function(FunctionNode(
            qualname=qualname, name=name, file=self.module.file, line=line,
        ))


# ── Pass 2 ────────────────────────────────────────────────────────────────


class _Resolver:
    """Resolve call sites to callee qualnames using project-wide indexes."""

    def __init__(
        self,
        program: Program,
        modules: dict[str, _ModuleInfo],
        classes: dict[str, _ClassInfo],
    ) -> None:
        self.functions = program.functions
        self.modules = modules
        self.classes = classes
        # Method short name -> every method with that name (name-based CHA)
        self.methods_by_name: dict[str, list[str]] = defaultdict(list)
        for qualname in sorted(program.functions):
            owner, _, short = qualname.rpartition(".")
            if owner in classes and CLOSURE_DELIMITER not in short:
                self.methods_by_name[short].append(qualname)

    def resolve(self, site: _CallSite) -> list[str]:
        module = self.modules[site.module]
        func = site.func

        if isinstance(func, ast.Name):
            for bindings in site.bindings:
                if func.id in bindings:
                    return self._callees_for(bindings[func.id])
            target = self._qualify(func.id, module)
            return self._callees_for(target) if target else []

        if not isinstance(func, ast.Attribute):
            return []

        dotted = _dotted(func)
        if dotted:
            head, _, rest = dotted.partition(".")
            if head in ("self", "cls") and site.class_qualname and "." not in rest:
                method = self._lookup_method(site.class_qualname, rest, set())
                if method:
                    return [method]
            elif not any(head in b for b in site.bindings):
                target = self._qualify(dotted, module)
                if target is not None:
                    return self._callees_for(target)

        # Receiver of unknown type: every project method with this name
        return list(self.methods_by_name.get(func.attr, []))

    def _qualify(self, dotted: str, module: _ModuleInfo) -> str | None:
        """Expand a dotted reference through imports or module-level names.

        Returns None when the head is not a name this module knows about.
        """
        head, sep, rest = dotted.partition(".")
        if head in module.imports:
            return module.imports[head] + sep + rest
        local = f"{module.name}.{head}"
        if local in self.functions or local in self.classes:
            return f"{module.name}.{dotted}"
        if head in self.modules or any(m.startswith(head + ".") for m in self.modules):
            return dotted
        return None

    def _canonical(self, target: str, seen: set[str] | None = None) -> str:
        """Follow package re-exports (``from .repo import save`` in an __init__) to the defining name."""
        seen = set() if seen is None else seen
        while target not in self.functions and target not in self.classes and target not in seen:
            seen.add(target)
            owner, _, attr = target.rpartition(".")
            if not owner:
                break
            if owner not in self.modules and owner not in self.classes:
                owner = self._canonical(owner, seen)
            module = self.modules.get(owner)
            if module is None or attr not in module.imports:
                target = f"{owner}.{attr}"
                break
            target = module.imports[attr]
        return target

    def _callees_for(self, target: str) -> list[str]:
        target = self._canonical(target)
        if target in self.functions:
            return [target]
        if target in self.classes:
            init = self._lookup_method(target, "__init__", set())
            return [init] if init else []
        owner, _, attr = target.rpartition(".")
        if owner in self.classes:
            inherited = self._lookup_method(owner, attr, set())
            return [inherited] if inherited else []
        return []

    def _lookup_method(self, class_qualname: str, name: str, seen: set[str]) -> str | None:
        """Find name on the class or, depth-first, its project base classes."""
        if class_qualname in seen:
            return None
        seen.add(class_qualname)

        candidate = f"{class_qualname}.{name}"
        if candidate in self.functions:
            return candidate
        info = self.classes.get(class_qualname)
        if info is None:
            return None
        module = self.modules[info.module]
        for base in info.bases:
            base_qualname = self._qualify(base, module)
            if base_qualname is not None:
                base_qualname = self._canonical(base_qualname)
            if base_qualname in self.classes:
                found = self._lookup_method(base_qualname, name, seen)
                if found:
                    return found
        return None


# ── Helpers ───────────────────────────────────────────────────────────────


def _module_name(rel: Path, root_name: str, root_is_package: bool) -> tuple[str, bool]:
    """Dotted module name for a root-relative file, and whether it is a package."""
    parts = list(rel.with_suffix("").parts)
    if root_is_package:
        parts.insert(0, root_name)
    elif len(parts) > 1 and parts[0] == "src":
        parts = parts[1:]
    is_package = parts[-1] == "__init__"
    if is_package:
        parts = parts[:-1]
    return ".".join(parts) or root_name, is_package


def _resolve_relative(module: _ModuleInfo, level: int, target: str | None) -> str:
    parts = module.name.split(".")
    if not module.is_package:
        parts = parts[:-1]
    if level > 1:
        parts = parts[: max(len(parts) - (level - 1), 0)]
    if target:
        parts.append(target)
    return ".".join(parts)


def _dotted(node: ast.expr) -> str | None:
    """Flatten ``a.b.c`` to "a.b.c"; None when the chain is not rooted at a name."""
    attrs: list[str] = []
    while isinstance(node, ast.Attribute):
        attrs.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return None
    attrs.append(node.id)
    return ".".join(reversed(attrs))
