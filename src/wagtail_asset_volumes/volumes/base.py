from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

from ..errors import StorageIOError


class BaseVolume(ABC):
    """Abstract base class for asset volume backends.

    Volumes hold the physical bytes of assets. Paths are relative to the
    volume root and use ``/`` separators. Every failure is raised as
    :class:`~wagtail_asset_volumes.errors.StorageIOError`.

    Renames only happen within a single volume; moving a file between two
    volumes is done by streaming it out of one and into the other.
    """

    has_urls: bool = False
    url: str | None = None

    @abstractmethod
    def read_stream(self, path: str) -> BinaryIO:
        """Open a file for binary reading.

        Args:
            path: The path of the file in the volume

        Returns:
            A readable binary stream; the caller closes it
        """
        ...

    @abstractmethod
    def write_from_stream(self, path: str, stream: BinaryIO) -> None:
        """Write the contents of a stream to a path, replacing any existing file.

        Args:
            path: The destination path in the volume
            stream: A readable binary stream
        """
        ...

    @abstractmethod
    def write_local_copy(self, path: str, local_destination: str | Path) -> None:
        """Materialize a file from the volume on local disk.

        Args:
            path: The path of the file in the volume
            local_destination: The local filesystem path to write to
        """
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete a file. Missing files are ignored.

        Args:
            path: The path to delete
        """
        ...

    @abstractmethod
    def delete_directory(self, path: str) -> None:
        """Delete a directory and everything below it.

        Args:
            path: The directory path to delete
        """
        ...

    @abstractmethod
    def rename(self, old_path: str, new_path: str) -> None:
        """Rename a file within this volume.

        Args:
            old_path: The current path
            new_path: The new path
        """
        ...

    @abstractmethod
    def rename_directory(self, old_path: str, new_path: str) -> None:
        """Rename a directory and everything below it within this volume.

        Args:
            old_path: The current directory path
            new_path: The new directory path; it must not exist yet
        """
        ...

    @abstractmethod
    def directory_exists(self, path: str) -> bool:
        """Check if a directory exists in the volume.

        Args:
            path: The directory path to check

        Returns:
            True if the directory exists
        """
        ...

    def file_exists(self, path: str) -> bool:
        try:
            stream = self.read_stream(path)
        except StorageIOError:
            return False
        stream.close()
        return True

    def create_directory(self, path: str) -> None:
        """Create a directory. Backends without real directories do nothing."""

    def get_url(self, path: str) -> str | None:
        if not self.has_urls or not self.url:
            return None
        return f"{self.url.rstrip('/')}/{path}"


class LocalVolumeMixin:
    """Marks a volume whose files live under a local filesystem root."""

    root_path: Path

    def get_local_path(self, path: str) -> Path:
        return self.root_path / path
