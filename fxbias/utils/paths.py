"""Locate the fxbias project directory and resolve files relative to it."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, Optional, Union


ROOT_ENV_VAR = "FXBIAS_ROOT"
ROOT_MARKERS = ("config.yaml", "pyproject.toml", ".git")


def _ancestors(path: Path) -> Iterator[Path]:
    yield path
    yield from path.parents


def find_project_root(start: Optional[Path] = None) -> Path:
    """Directory holding config.yaml (or another root marker).

    FXBIAS_ROOT wins when it names an existing directory. Otherwise the
    search walks up from `start`, then the working directory, then this
    package; the working directory is the last resort.
    """
    override = os.getenv(ROOT_ENV_VAR)
    if override:
        root = Path(override).expanduser().resolve()
        if root.is_dir():
            return root

    origins = [Path(start).resolve()] if start is not None else []
    origins += [Path.cwd(), Path(__file__).resolve().parent]

    for origin in origins:
        for candidate in _ancestors(origin):
            if any((candidate / marker).exists() for marker in ROOT_MARKERS):
                return candidate
    return Path.cwd()


def resolve_project_path(path: Union[str, Path], root: Optional[Path] = None) -> Path:
    """Absolute paths pass through; relative ones hang off the project root."""
    target = Path(path).expanduser()
    if target.is_absolute():
        return target
    return ((root or find_project_root()) / target).resolve()
