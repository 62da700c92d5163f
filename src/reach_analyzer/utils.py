"""Shared utilities for reach-analyzer."""

from __future__ import annotations

import os
from pathlib import Path

# Directories to skip during file discovery
SKIP_DIRS = {
    ".git", "__pycache__", "node_modules", "venv", ".venv", "env",
    ".tox", ".mypy_cache", ".pytest_cache", ".ruff_cache", "dist",
    "build", ".eggs", ".nox", ".ipynb_checkpoints",
}

# Maximum file size to read (skip generated blobs)
MAX_FILE_SIZE = 2 * 1024 * 1024  # 2 MB


def discover_python_files(root: Path) -> list[Path]:
    """Walk root for .py files, skipping ignored dirs and large files."""
    files: list[Path] = []
    for item in sorted(root.rglob("*.py")):
        if item.is_dir():
            continue
        parts = item.relative_to(root).parts
        if any(part in SKIP_DIRS or part.endswith(".egg-info") for part in parts):
            continue
        try:
            if item.stat().st_size > MAX_FILE_SIZE:
                continue
        except OSError:
            continue
        files.append(item)
    return files


def split_file_list(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Split a comma-separated file list, trimming whitespace and dropping blanks."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = [part for entry in value for part in str(entry).split(",")]
    return [item.strip() for item in items if item.strip()]


def resolve_under(root: Path, entry: str) -> Path:
    """Join entry to root and normalize it. Symlinks are not followed."""
    return Path(os.path.normpath(root / entry))
