"""Filesystem helpers for the model and output directories."""

from __future__ import annotations

import os
from pathlib import Path

from neuralpixel.constants import (
    MODEL_SUBDIRS,
    MODELS_DIR_NAME,
    OPTIONAL_ITEMS,
    OUTPUTS_DIR_NAME,
    OUTPUTS_PATH,
)
from neuralpixel.strutils import casefold_key


def is_file_empty(path: str | os.PathLike[str]) -> bool:
    """True when the file at ``path`` has no content; missing files raise."""
    return Path(path).stat().st_size == 0


def _plain_files(directory: Path) -> list[str]:
    return [entry.name for entry in directory.iterdir() if not entry.is_dir()]


def count_output_files(outputs_dir: str | os.PathLike[str] = OUTPUTS_PATH) -> int:
    """Number to give the next output image: existing files plus one."""
    return len(_plain_files(Path(outputs_dir))) + 1


def has_files(directory: str | os.PathLike[str]) -> bool:
    """True when ``directory`` exists and contains at least one entry."""
    path = Path(directory)
    if not path.is_dir():
        return False
    return any(path.iterdir())


def ensure_model_dirs(root: str | os.PathLike[str] = ".") -> list[Path]:
    """Create the models tree and outputs directory if models is absent.

    Returns the directories that were created; nothing is created when the
    models directory already exists.
    """
    base = Path(root)
    models = base / MODELS_DIR_NAME
    if models.exists():
        return []
    models.mkdir(parents=True)
    created = [models]
    for target in [base / OUTPUTS_DIR_NAME, *(models / name for name in MODEL_SUBDIRS)]:
        if not target.exists():
            target.mkdir()
            created.append(target)
    return created


def list_model_files(path: str | os.PathLike[str]) -> list[str]:
    """'None' followed by the files in ``path``, sorted without regard to case."""
    directory = Path(path)
    if not directory.is_dir():
        ensure_model_dirs(directory.parent.parent)
    return [OPTIONAL_ITEMS, *sorted(_plain_files(directory), key=casefold_key)]