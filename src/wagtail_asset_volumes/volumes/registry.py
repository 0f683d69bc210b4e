"""Resolve volume ids to backend instances."""

from __future__ import annotations

import logging
from typing import Any

from ..conf import get_setting
from ..errors import AssetLogicError
from ..utils import import_class
from .base import BaseVolume

logger = logging.getLogger(__name__)


class VolumeRegistry:
    """Instantiate and cache the backend configured for each ``Volume`` row.

    A ``None`` volume id is the scratch volume used for temporary uploads.
    """

    def __init__(self) -> None:
        self._volumes: dict[int | None, BaseVolume] = {}

    def get_volume(self, volume_id: int | None) -> BaseVolume:
        if volume_id not in self._volumes:
            self._volumes[volume_id] = self._build(volume_id)
        return self._volumes[volume_id]

    def register(self, volume_id: int | None, backend: BaseVolume) -> None:
        """Bind a backend instance to a volume id, replacing any cached one."""
        self._volumes[volume_id] = backend

    def _build(self, volume_id: int | None) -> BaseVolume:
        if volume_id is None:
            return get_backend(get_setting("TEMP_VOLUME_BACKEND"), {})

        from ..models import Volume

        try:
            volume = Volume.objects.get(pk=volume_id)
        except Volume.DoesNotExist as e:
            raise AssetLogicError(f"Invalid volume ID: {volume_id}") from e

        backend = get_backend(
            volume.backend or get_setting("DEFAULT_VOLUME_BACKEND"),
            dict(volume.options or {}),
        )
        if volume.url and not backend.url:
            backend.url = volume.url
            backend.has_urls = True
        logger.debug("Resolved volume %d (%s) to %s", volume.pk, volume.handle, type(backend).__name__)
        return backend


def get_backend(backend_path: str, options: dict[str, Any]) -> BaseVolume:
    """Import and instantiate a volume backend class."""
    cls = import_class(backend_path)
    return cls(**options)  # type: ignore[no-any-return]
