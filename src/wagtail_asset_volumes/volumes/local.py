from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import BinaryIO

from ..errors import StorageIOError
from .base import BaseVolume, LocalVolumeMixin


class LocalVolume(LocalVolumeMixin, BaseVolume):
    """Volume stored in a directory on the local filesystem."""

    def __init__(self, root: str | Path, url: str | None = None) -> None:
        self.root_path = Path(root)
        self.url = url
        self.has_urls = bool(url)

    def _get_full_path(self, path: str) -> Path:
        full_path = (self.root_path / path).resolve()
        root_resolved = self.root_path.resolve()
        if not full_path.is_relative_to(root_resolved):
            raise StorageIOError(
                path, ValueError("path resolves outside the volume root")
            )
        return full_path

    def get_local_path(self, path: str) -> Path:
        return self._get_full_path(path)

    def read_stream(self, path: str) -> BinaryIO:
        try:
            return self._get_full_path(path).open("rb")
        except OSError as e:
            raise StorageIOError(path, e) from e

    def write_from_stream(self, path: str, stream: BinaryIO) -> None:
        full_path = self._get_full_path(path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            with full_path.open("wb") as target:
                shutil.copyfileobj(stream, target)
        except OSError as e:
            raise StorageIOError(path, e) from e

    def write_local_copy(self, path: str, local_destination: str | Path) -> None:
        try:
            Path(local_destination).parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self._get_full_path(path), local_destination)
        except OSError as e:
            raise StorageIOError(path, e) from e

    def delete(self, path: str) -> None:
        try:
            self._get_full_path(path).unlink(missing_ok=True)
        except OSError as e:
            raise StorageIOError(path, e) from e

    def delete_directory(self, path: str) -> None:
        full_path = self._get_full_path(path)
        if not full_path.is_dir():
            return
        try:
            shutil.rmtree(full_path)
        except OSError as e:
            raise StorageIOError(path, e) from e

    def rename(self, old_path: str, new_path: str) -> None:
        source = self._get_full_path(old_path)
        target = self._get_full_path(new_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source, target)
        except OSError as e:
            raise StorageIOError(old_path, e) from e

    def rename_directory(self, old_path: str, new_path: str) -> None:
        source = self._get_full_path(old_path)
        target = self._get_full_path(new_path)
        if target.exists():
            raise StorageIOError(new_path, FileExistsError("directory already exists"))
        try:
            if source.is_dir():
                source.rename(target)
            else:
                target.mkdir(parents=True)
        except OSError as e:
            raise StorageIOError(old_path, e) from e

    def directory_exists(self, path: str) -> bool:
        return self._get_full_path(path).is_dir()

    def file_exists(self, path: str) -> bool:
        return self._get_full_path(path).is_file()

    def create_directory(self, path: str) -> None:
        try:
            self._get_full_path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError(path, e) from e
