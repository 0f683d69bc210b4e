"""Reconcile an asset's pending location change with the bytes in its volumes.

:meth:`FileOperationEngine.handle_file` runs before an asset record is
saved. It moves, renames or replaces the physical file, then refreshes the
file metadata on the asset. If it raises, the record must not be saved.

Pipeline: Parse -> Move/Stream -> Invalidate transforms -> Refresh metadata
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .errors import AssetLogicError, FileAccessError
from .files import FileInfo, get_file_info, get_file_kind_by_extension
from .locations import parse_location
from .paths import PathService
from .utils import join_path, remove_file
from .volumes import BaseVolume, VolumeRegistry

if TYPE_CHECKING:
    from .models import Asset, VolumeFolder

logger = logging.getLogger(__name__)


class FileOperationEngine:
    """Perform the physical side of asset moves, renames, uploads and replaces."""

    def __init__(
        self,
        repository: Any = None,
        volumes: VolumeRegistry | None = None,
        transforms: Any = None,
        paths: PathService | None = None,
    ) -> None:
        if repository is None:
            from .repository import AssetRepository

            repository = AssetRepository()
        self.repository = repository
        self.volumes = volumes or VolumeRegistry()
        self.paths = paths or PathService()
        if transforms is None:
            from .transforms import TransformCache

            transforms = TransformCache(self.volumes, self.paths, repository)
        self.transforms = transforms

    def handle_file(self, asset: Asset) -> bool:
        """Apply ``asset.new_location`` and ``asset.temp_file_path``.

        Returns:
            True if a file operation was performed, False for a no-op.

        Raises:
            StorageIOError: A volume operation failed.
            FileAccessError: The local temp file could not be opened.
            AssetLogicError: The target folder does not exist or there are no
                bytes to place.
        """
        if asset.new_location:
            folder_id, filename = parse_location(asset.new_location)
            if folder_id is None:
                folder_id = asset.folder_id
            has_new_folder = folder_id != asset.folder_id
            has_new_filename = filename != asset.filename
        else:
            folder_id, filename = asset.folder_id, asset.filename
            has_new_folder = has_new_filename = False

        if not (has_new_folder or has_new_filename or asset.temp_file_path):
            return False

        try:
            old_folder = self._get_folder(asset.folder_id) if asset.folder_id else None
            new_folder = self._get_folder(folder_id) if has_new_folder else old_folder
            if new_folder is None:
                raise AssetLogicError(f"Asset {asset.filename!r} has no target folder")

            old_volume = self.volumes.get_volume(old_folder.volume_id) if old_folder else None
            new_volume = self.volumes.get_volume(new_folder.volume_id)
        except Exception:
            if asset.temp_file_path:
                remove_file(asset.temp_file_path)
            raise

        old_path = asset.get_uri() if old_folder is not None else None
        new_path = join_path(new_folder.path, filename)

        file_info: FileInfo | None = None
        if (
            not asset.temp_file_path
            and old_folder is not None
            and old_folder.volume_id == new_folder.volume_id
        ):
            logger.info("Renaming %s to %s in volume %s", old_path, new_path, new_folder.volume_id)
            old_volume.rename(old_path, new_path)  # type: ignore[union-attr, arg-type]
        else:
            if asset.temp_file_path:
                temp_path = Path(asset.temp_file_path)
            elif old_volume is not None and old_path is not None:
                temp_path = self._copy_to_temp(old_volume, old_path, filename)
            else:
                raise AssetLogicError(f"Asset {asset.filename!r} has no file to store")

            file_info = self._stream_to_volume(
                temp_path, filename, old_volume, old_path, new_volume, new_path
            )

        if old_folder is not None:
            self.transforms.delete_all_transform_data(asset)

        asset.volume_id = new_folder.volume_id
        asset.folder = new_folder
        asset.filename = filename

        if file_info is not None:
            self._apply_file_info(asset, file_info)
        else:
            self._refresh_kind_after_rename(asset, new_volume, new_path)

        asset.new_folder_id = None
        asset.new_filename = None
        asset.new_location = None
        asset.temp_file_path = None
        asset.avoid_filename_conflicts = False
        return True

    def _get_folder(self, folder_id: int) -> VolumeFolder:
        folder = self.repository.get_folder_by_id(folder_id)
        if folder is None:
            raise AssetLogicError(f"Invalid folder ID: {folder_id}")
        return folder  # type: ignore[no-any-return]

    def _copy_to_temp(self, volume: BaseVolume, path: str, filename: str) -> Path:
        temp_path = self.paths.make_temp_file_path(filename)
        try:
            volume.write_local_copy(path, temp_path)
        except Exception:
            remove_file(temp_path)
            raise
        return temp_path

    def _stream_to_volume(
        self,
        temp_path: Path,
        filename: str,
        old_volume: BaseVolume | None,
        old_path: str | None,
        new_volume: BaseVolume,
        new_path: str,
    ) -> FileInfo:
        """Replace the old file with the temp file's bytes at the new path.

        The old file is deleted before the new one is written. If the write
        then fails, neither file exists. The temp file is always removed.
        """
        try:
            stream = open(temp_path, "rb")
        except OSError as e:
            remove_file(temp_path)
            raise FileAccessError(str(temp_path), e) from e

        try:
            with stream:
                file_info = get_file_info(temp_path, filename)
                if old_volume is not None and old_path is not None:
                    old_volume.delete(old_path)
                new_volume.write_from_stream(new_path, stream)
        finally:
            remove_file(temp_path)

        logger.info("Stored %s (%d bytes)", new_path, file_info.size)
        return file_info

    def _apply_file_info(self, asset: Asset, file_info: FileInfo) -> None:
        asset.kind = file_info.kind
        asset.width = file_info.width
        asset.height = file_info.height
        asset.size = file_info.size
        asset.date_modified = file_info.date_modified

    def _refresh_kind_after_rename(self, asset: Asset, volume: BaseVolume, path: str) -> None:
        """Keep kind and dimensions consistent when a rename changes the extension.

        The bytes are unchanged, so size and modification time stay as they are.
        """
        kind = get_file_kind_by_extension(asset.filename)
        if kind == asset.kind:
            return
        asset.kind = kind
        if kind != "image":
            asset.width = asset.height = None
            return

        temp_path = self.paths.make_temp_file_path(asset.filename)
        try:
            volume.write_local_copy(path, temp_path)
            file_info = get_file_info(temp_path, asset.filename)
        finally:
            remove_file(temp_path)
        asset.width = file_info.width
        asset.height = file_info.height
