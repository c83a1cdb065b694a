"""Output path utilities: archive directories, collision numbering, copying."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Container
from pathlib import Path

from mailnamer.errors import ValidationError

logger = logging.getLogger(__name__)


def ensure_directory(directory: str | Path) -> Path:
    """Create the archive directory and its parents when missing."""
    path = Path(directory)
    if path.exists() and not path.is_dir():
        raise ValidationError(
            what=f"output directory is not a directory: {path}",
            why="a file already exists at the configured archive location",
            remediation="point output.directory at a folder or remove the conflicting file",
        )
    path.mkdir(parents=True, exist_ok=True)
    return path


def resolve_collision(base_path: str | Path, extension: str, *, reserved: Container[Path] = ()) -> Path:
    """Return the first of ``base.ext``, ``base (1).ext``, ``base (2).ext``, ... that does not exist.

    Paths in ``reserved`` count as taken even though nothing is on disk yet.

    The existence check is not atomic: two callers probing the same base path
    at once can both pick the same candidate. Callers that need exclusivity
    must create the file with an exclusive open themselves.
    """
    base = str(base_path)
    suffix = f".{extension.lstrip('.')}" if extension.lstrip(".") else ""

    candidate = Path(f"{base}{suffix}")
    collision_index = 0
    while candidate.exists() or candidate in reserved:
        logger.debug("Path already taken: %s", candidate)
        collision_index += 1
        candidate = Path(f"{base} ({collision_index}){suffix}")
    return candidate


def copy_message(*, source: str | Path, destination: str | Path) -> Path:
    """Copy a message file to its archive path, keeping file timestamps."""
    target = Path(destination)
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)
    logger.info("Archived %s -> %s", source, target)
    return target
