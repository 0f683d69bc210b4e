"""Small helpers shared across wagtail-asset-volumes."""

from __future__ import annotations

import logging
import os
from importlib import import_module
from pathlib import Path

logger = logging.getLogger(__name__)


def import_class(dotted_path: str) -> type:
    """Import a class from a dotted path string."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = import_module(module_path)
    return getattr(module, class_name)  # type: ignore[no-any-return]


def get_extension(filename: str) -> str:
    """Return the lowercased extension of a filename, without the dot."""
    return os.path.splitext(filename)[1].lstrip(".").lower()


def join_path(folder_path: str | None, filename: str) -> str:
    """Join a folder path (``""`` or ending in ``/``) and a filename."""
    if not folder_path:
        return filename
    return f"{folder_path.rstrip('/')}/{filename}"


def remove_file(path: str | Path) -> None:
    """Remove a local file, ignoring it if it is already gone."""
    try:
        Path(path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove temp file %s: %s", path, e)
