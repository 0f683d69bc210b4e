"""Configuration and settings for wagtail-asset-volumes."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    # Scratch locations (None means the system temp directory)
    "TEMP_PATH": None,
    "TEMP_UPLOADS_PATH": None,
    "IMAGE_SOURCE_PATH": None,
    # Volume backends
    "DEFAULT_VOLUME_BACKEND": "wagtail_asset_volumes.volumes.local.LocalVolume",
    "TEMP_VOLUME_BACKEND": "wagtail_asset_volumes.volumes.temp.TempVolume",
    # Asset naming
    "MAX_FILENAME_LENGTH": 255,
    "FILENAME_WORD_SEPARATOR": "-",
    "CONVERT_FILENAMES_TO_ASCII": False,
    "ALLOWED_FILE_EXTENSIONS": None,
    # Kind -> extensions override (None uses the built-in table)
    "FILE_KINDS": None,
    # Transforms
    "MANIPULATABLE_IMAGE_EXTENSIONS": ["jpg", "jpeg", "gif", "png", "webp", "bmp", "tif", "tiff"],
    "DEFAULT_TRANSFORM_QUALITY": 82,
    "TRANSFORM_DIRECTORY_PREFIX": "_",
}


_UNSET = object()


def get_setting(key: str, default: Any = _UNSET) -> Any:
    """Get a setting from WAGTAIL_ASSET_VOLUMES dict or return default."""
    user_settings: dict[str, Any] = getattr(settings, "WAGTAIL_ASSET_VOLUMES", {})
    fallback = DEFAULTS.get(key) if default is _UNSET else default
    return user_settings.get(key, fallback)
