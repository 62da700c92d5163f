"""Analysis configuration: one immutable value built once per run.

Settings come from the command line and, optionally, a YAML config file
whose keys mirror the CLI options. ``build_config`` validates the merged
settings and resolves every path to an absolute one before any component
sees it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from reach_analyzer.errors import ConfigError
from reach_analyzer.utils import resolve_under, split_file_list

log = logging.getLogger(__name__)

# Substrings of file paths that identify generated, non-authored code
DEFAULT_GENERATED_MARKERS = ("wire_gen", "_pb2.py", "_pb2_grpc.py")


@dataclass(frozen=True)
class AnalysisConfig:
    repo: str
    module: str                      # substring every retained qualname must contain
    root: Path                       # absolute analysis root
    sources: tuple[Path, ...]        # absolute source file paths
    sinks: tuple[Path, ...]          # absolute sink file paths
    generated_markers: tuple[str, ...] = DEFAULT_GENERATED_MARKERS
    link_closures: bool = True
    match_file: bool = True          # same-file acceptance (False: exact sink function)
    callgraph: Path | None = None    # pre-computed call graph dump, if any
    workers: int = 1


class ConfigFile(BaseModel):
    """Schema of the optional YAML config file."""

    model_config = ConfigDict(extra="forbid")

    repo: str | None = None
    sources: list[str] | str | None = None
    sinks: list[str] | str | None = None
    test: bool | None = None
    root: str | None = None
    module: str | None = None
    module_prefix: str | None = None
    generated_markers: list[str] | None = None
    link_closures: bool | None = None
    exact_sinks: bool | None = None
    callgraph: str | None = None
    workers: int | None = Field(default=None, ge=1)


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML config file and return only the keys it sets."""
    try:
        text = path.read_text()
    except OSError as exc:
        raise ConfigError(f"cannot read config file {path}: {exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid YAML in {path}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")
    try:
        parsed = ConfigFile.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"invalid config file {path}: {exc}") from exc

    settings = parsed.model_dump(exclude_none=True)
    log.debug("Loaded %d settings from %s", len(settings), path)
    return settings


def merge_settings(
    file_settings: dict[str, Any],
    cli_settings: dict[str, Any],
) -> dict[str, Any]:
    """Overlay command-line values on config file values (CLI wins)."""
    merged = dict(file_settings)
    for key, value in cli_settings.items():
        if value is None or value == ():
            continue
        merged[key] = value
    return merged


def build_config(
    *,
    repo: str | None = None,
    sources: str | list[str] | tuple[str, ...] | None = None,
    sinks: str | list[str] | tuple[str, ...] | None = None,
    test: bool = False,
    root: str | Path | None = None,
    module: str | None = None,
    module_prefix: str = "",
    generated_markers: list[str] | tuple[str, ...] | None = None,
    link_closures: bool = True,
    exact_sinks: bool = False,
    callgraph: str | Path | None = None,
    workers: int = 1,
    cwd: Path | None = None,
) -> AnalysisConfig:
    """Validate settings and build the run's AnalysisConfig.

    The analysis root is ``root`` when given, ``../<repo>`` in test mode,
    and the working directory otherwise. Source and sink entries are joined
    to the root and resolved to absolute paths.

    Raises:
        ConfigError: repo, sources or sinks missing, or a value is invalid.
    """
    repo = (repo or "").strip()
    source_entries = split_file_list(sources)
    sink_entries = split_file_list(sinks)
    missing = [
        name for name, value in (
            ("repo", repo), ("sources", source_entries), ("sinks", sink_entries),
        )
        if not value
    ]
    if missing:
        raise ConfigError(
            "repo, sources, and sinks are required (missing: " + ", ".join(missing) + ")"
        )
    if workers < 1:
        raise ConfigError(f"workers must be at least 1, got {workers}")

    base = cwd or Path.cwd()
    if root is not None:
        root_dir = (base / root).resolve()
    elif test:
        root_dir = (base / ".." / repo).resolve()
    else:
        root_dir = base.resolve()

    module_id = module if module else f"{module_prefix or ''}{repo}"

    markers = DEFAULT_GENERATED_MARKERS
    if generated_markers is not None:
        markers = tuple(m for m in generated_markers if m)

    callgraph_path = (base / callgraph).resolve() if callgraph else None

    return AnalysisConfig(
        repo=repo,
        module=module_id,
        root=root_dir,
        sources=tuple(resolve_under(root_dir, e) for e in source_entries),
        sinks=tuple(resolve_under(root_dir, e) for e in sink_entries),
        generated_markers=markers,
        link_closures=link_closures,
        match_file=not exact_sinks,
        callgraph=callgraph_path,
        workers=workers,
    )
