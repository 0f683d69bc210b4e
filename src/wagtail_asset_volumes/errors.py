"""Exceptions raised by asset file operations.

Filename and folder conflicts are not exceptions; they are returned as
:class:`~wagtail_asset_volumes.results.FilenameConflict` and
:class:`~wagtail_asset_volumes.results.FolderConflict`.
"""

from __future__ import annotations


class AssetError(Exception):
    """Base class for all asset errors."""


class MalformedLocationError(AssetError, ValueError):
    """A ``{folder:<id>}`` marker was present but could not be parsed."""

    def __init__(self, location: str) -> None:
        super().__init__(f"Malformed asset location: {location!r}")
        self.location = location


class DisallowedExtensionError(AssetError):
    """The filename uses an extension that is not allowed for uploads."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"The file extension of {filename!r} is not allowed.")
        self.filename = filename


class StorageIOError(AssetError):
    """A volume backend failed to read, write, delete or rename a path."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        message = f"Storage operation failed for {path!r}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.path = path
        self.cause = cause


class FileAccessError(AssetError):
    """A local temp file could not be created or opened."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        super().__init__(f"Could not open file for streaming at {path}")
        self.path = path
        self.cause = cause


class AssetLogicError(AssetError):
    """Folder tree operations could not be completed."""


class InvalidTransformError(AssetError, ValueError):
    """A transform could not be normalized or applied."""
