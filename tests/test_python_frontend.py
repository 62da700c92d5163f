"""Tests for the Python frontend: function naming and call edge resolution."""

import tempfile
from pathlib import Path

import pytest

from reach_analyzer.errors import ProgramLoadError
from reach_analyzer.program.python_frontend import build_program


def _write(tmpdir: Path, name: str, content: str) -> Path:
    p = tmpdir / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(content)
    return p


def _edges(program) -> set[tuple[str, str]]:
    return set(program.edges)


# ── Naming ────────────────────────────────────────────────────────────────


def test_top_level_and_method_qualnames():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/models.py", '''
def helper():
    return 1

class Cart:
    def add(self, item):
        return item
''')
        program = build_program(ws)

        assert "app.models.helper" in program.functions
        assert "app.models.Cart.add" in program.functions
        add = program.get("app.models.Cart.add")
        assert add.name == "add"
        assert add.line == 6
        assert add.file == str((ws / "app/models.py").resolve())


def test_closures_get_ordinal_suffixes():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/h.py", '''
def handler():
    def first():
        return 1
    second = lambda: first()
    def third():
        inner = lambda: 2
        return inner
    return second
''')
        program = build_program(ws)

        assert program.get("app.h.handler$1").name == "first"
        assert program.get("app.h.handler$2").name == "handler$2"
        assert program.get("app.h.handler$3").name == "third"
        assert "app.h.handler$3$1" in program.functions
        # Nested defs are closures, not dotted children
        assert "app.h.handler.first" not in program.functions


def test_src_layout_and_package_init():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "src/app/__init__.py", "def boot():\n    pass\n")
        _write(ws, "src/app/core.py", "def run():\n    pass\n")
        program = build_program(ws)

        assert "app.boot" in program.functions
        assert "app.core.run" in program.functions


def test_root_that_is_a_package_prefixes_its_name():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d) / "app"
        _write(ws, "__init__.py", "")
        _write(ws, "core.py", "def run():\n    pass\n")
        program = build_program(ws)

        assert "app.core.run" in program.functions


def test_skip_dirs_are_ignored():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/core.py", "def run():\n    pass\n")
        _write(ws, ".venv/lib/dep.py", "def dep():\n    pass\n")
        program = build_program(ws)

        assert not any("dep" in q for q in program.functions)


# ── Call resolution ───────────────────────────────────────────────────────


def test_same_module_and_imported_calls():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/__init__.py", "")
        _write(ws, "app/util.py", '''
def compute(x):
    return x * 2
''')
        _write(ws, "app/main.py", '''
from app.util import compute
from . import util as u
import app.util

def local():
    return 1

def run():
    local()
    compute(1)
    u.compute(2)
    app.util.compute(3)
''')
        program = build_program(ws)
        edges = _edges(program)

        assert ("app.main.run", "app.main.local") in edges
        assert ("app.main.run", "app.util.compute") in edges


def test_relative_import_from_sibling_module():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/svc/__init__.py", "")
        _write(ws, "app/svc/a.py", "from .b import go\n\ndef start():\n    go()\n")
        _write(ws, "app/svc/b.py", "def go():\n    pass\n")
        program = build_program(ws)

        assert ("app.svc.a.start", "app.svc.b.go") in _edges(program)


def test_names_reexported_by_a_package_init():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/__init__.py", "from .repo import save\nfrom .store import Store\n")
        _write(ws, "app/repo.py", "def save():\n    pass\n")
        _write(ws, "app/store.py", '''
class Store:
    def __init__(self):
        pass
''')
        _write(ws, "app/api.py", '''
import app
from app import save, Store

class Cache(app.Store):
    def warm(self):
        self.__init__()

def handler():
    save()
    app.save()
    Store()
''')
        program = build_program(ws)
        edges = _edges(program)

        assert ("app.api.handler", "app.repo.save") in edges
        assert ("app.api.handler", "app.store.Store.__init__") in edges
        assert ("app.api.Cache.warm", "app.store.Store.__init__") in edges


def test_reexport_cycle_terminates():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/__init__.py", "from .a import ghost\n")
        _write(ws, "app/a.py", "from app import ghost\n\ndef run():\n    ghost()\n")
        program = build_program(ws)

        assert not any(caller == "app.a.run" for caller, _ in program.edges)


def test_constructor_and_self_method_calls():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/repo.py", '''
class Base:
    def __init__(self):
        self.rows = {}

    def flush(self):
        pass

class Repo(Base):
    def save(self, row):
        self.flush()

def make():
    return Repo()
''')
        program = build_program(ws)
        edges = _edges(program)

        # Repo has no __init__: the inherited one is the callee
        assert ("app.repo.make", "app.repo.Base.__init__") in edges
        assert ("app.repo.Repo.save", "app.repo.Base.flush") in edges


def test_unknown_receiver_links_every_method_with_that_name():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/store.py", '''
class SqlStore:
    def save(self):
        pass

class MemStore:
    def save(self):
        pass

def save():
    pass

def persist(store):
    store.save()
''')
        program = build_program(ws)
        edges = _edges(program)

        assert ("app.store.persist", "app.store.SqlStore.save") in edges
        assert ("app.store.persist", "app.store.MemStore.save") in edges
        # Module-level functions are not method candidates
        assert ("app.store.persist", "app.store.save") not in edges


def test_external_module_calls_create_no_edges():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/io.py", '''
import os

class Reader:
    def join(self):
        pass

def where():
    return os.path.join("a", "b")
''')
        program = build_program(ws)

        assert not any(caller == "app.io.where" for caller, _ in program.edges)


def test_calls_inside_closures_belong_to_the_closure():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/h.py", '''
def save():
    pass

def run_later(fn):
    return fn

def handler():
    def job():
        save()
    run_later(job)
    run_later(lambda: save())
''')
        program = build_program(ws)
        edges = _edges(program)

        assert ("app.h.handler$1", "app.h.save") in edges
        assert ("app.h.handler$2", "app.h.save") in edges
        assert ("app.h.handler", "app.h.run_later") in edges
        # Passing a function as a value is not a call
        assert ("app.h.handler", "app.h.handler$1") not in edges
        assert ("app.h.handler", "app.h.save") not in edges


def test_direct_call_of_nested_def_is_an_edge():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/h.py", '''
def handler():
    def step():
        pass
    step()
''')
        program = build_program(ws)

        assert ("app.h.handler", "app.h.handler$1") in _edges(program)


def test_module_level_calls_have_no_caller():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/boot.py", '''
def setup():
    pass

setup()
''')
        program = build_program(ws)

        assert program.edges == set()


# ── Load errors ───────────────────────────────────────────────────────────


def test_syntax_error_is_fatal():
    with tempfile.TemporaryDirectory() as d:
        ws = Path(d)
        _write(ws, "app/broken.py", "def oops(:\n")
        with pytest.raises(ProgramLoadError, match="cannot parse"):
            build_program(ws)


def test_missing_root_is_fatal():
    with tempfile.TemporaryDirectory() as d:
        with pytest.raises(ProgramLoadError, match="not a directory"):
            build_program(Path(d) / "nope")


def test_empty_root_is_fatal():
    with tempfile.TemporaryDirectory() as d:
        with pytest.raises(ProgramLoadError, match="no Python files"):
            build_program(Path(d))
