from __future__ import annotations

import shutil
from pathlib import Path
from typing import Any, BinaryIO

from django.core.files import File
from django.core.files.storage import Storage, storages

from ..errors import StorageIOError
from .base import BaseVolume


class DjangoStorageVolume(BaseVolume):
    """Volume backed by a configured Django storage.

    Works with any Django storage backend (S3 via django-storages,
    local filesystem, GCS, Azure, in-memory, etc.). Object stores have no
    native rename, so renames copy the object and delete the original.
    """

    def __init__(
        self,
        storage_alias: str = "default",
        url: str | None = None,
        storage: Storage | None = None,
    ) -> None:
        self.storage = storage if storage is not None else storages[storage_alias]
        self.url = url
        self.has_urls = bool(url)

    def read_stream(self, path: str) -> BinaryIO:
        try:
            return self.storage.open(path, "rb")  # type: ignore[no-any-return]
        except Exception as e:  # noqa: BLE001
            raise StorageIOError(path, e) from e

    def write_from_stream(self, path: str, stream: BinaryIO) -> None:
        try:
            if self.storage.exists(path):
                self.storage.delete(path)
            saved_path = self.storage.save(path, File(stream, name=path))
        except Exception as e:  # noqa: BLE001
            raise StorageIOError(path, e) from e
        if saved_path != path:
            raise StorageIOError(path, ValueError(f"storage saved the file as {saved_path!r}"))

    def write_local_copy(self, path: str, local_destination: str | Path) -> None:
        try:
            Path(local_destination).parent.mkdir(parents=True, exist_ok=True)
            with self.storage.open(path, "rb") as source, open(local_destination, "wb") as target:
                shutil.copyfileobj(source, target)
        except Exception as e:  # noqa: BLE001
            raise StorageIOError(path, e) from e

    def delete(self, path: str) -> None:
        try:
            if self.storage.exists(path):
                self.storage.delete(path)
        except Exception as e:  # noqa: BLE001
            raise StorageIOError(path, e) from e

    def delete_directory(self, path: str) -> None:
        directory = path.rstrip("/")
        try:
            dirs, files = self._listdir(directory)
            for name in files:
                self.storage.delete(f"{directory}/{name}")
            for name in dirs:
                self.delete_directory(f"{directory}/{name}")
            if self.storage.exists(directory):
                self.storage.delete(directory)
        except StorageIOError:
            raise
        except Exception as e:  # noqa: BLE001
            raise StorageIOError(path, e) from e

    def rename(self, old_path: str, new_path: str) -> None:
        try:
            with self.storage.open(old_path, "rb") as source:
                self.write_from_stream(new_path, source)
            self.storage.delete(old_path)
        except StorageIOError:
            raise
        except Exception as e:  # noqa: BLE001
            raise StorageIOError(old_path, e) from e

    def rename_directory(self, old_path: str, new_path: str) -> None:
        source = old_path.rstrip("/")
        target = new_path.rstrip("/")
        dirs, files = self._listdir(source)
        for name in files:
            self.rename(f"{source}/{name}", f"{target}/{name}")
        for name in dirs:
            self.rename_directory(f"{source}/{name}", f"{target}/{name}")

    def directory_exists(self, path: str) -> bool:
        directory = path.rstrip("/")
        dirs, files = self._listdir(directory)
        return bool(dirs or files) or self.storage.exists(directory)

    def file_exists(self, path: str) -> bool:
        return bool(self.storage.exists(path))

    def _listdir(self, directory: str) -> tuple[list[Any], list[Any]]:
        try:
            return self.storage.listdir(directory)  # type: ignore[no-any-return]
        except (FileNotFoundError, NotADirectoryError):
            return [], []
