"""Local scratch paths used while moving bytes between volumes."""

from __future__ import annotations

import os
import secrets
import tempfile
from pathlib import Path

from .conf import get_setting


class PathService:
    """Resolve the local directories used for temp files and transform sources."""

    def _resolve(self, key: str, default_name: str) -> Path:
        configured: str | None = get_setting(key)
        path = Path(configured) if configured else Path(tempfile.gettempdir()) / default_name
        path.mkdir(parents=True, exist_ok=True)
        return path

    def get_temp_path(self) -> Path:
        return self._resolve("TEMP_PATH", "wagtail-asset-volumes")

    def get_temp_uploads_path(self) -> Path:
        return self._resolve("TEMP_UPLOADS_PATH", "wagtail-asset-volumes-uploads")

    def get_image_source_path(self) -> Path:
        return self._resolve("IMAGE_SOURCE_PATH", "wagtail-asset-volumes-sources")

    def make_temp_file_path(self, filename: str) -> Path:
        """Return a unique path in the temp directory that keeps the extension.

        A random suffix keeps concurrent operations on the same filename apart.
        """
        stem, ext = os.path.splitext(os.path.basename(filename))
        return self.get_temp_path() / f"{stem}{secrets.token_hex(8)}{ext}"
