"""Asset workflows: upload, move, replace, delete.

Every workflow ends in :meth:`AssetService.save_asset`, which validates the
pending location, runs the file operation engine and persists the record.
Filename conflicts come back as :class:`FilenameConflict` results.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, BinaryIO

from django.db import transaction
from wagtail import hooks

from .file_operations import FileOperationEngine
from .files import get_file_kind_by_extension
from .locations import LocationResolver, build_location, prepare_asset_name
from .paths import PathService
from .results import FilenameConflict, Ok, SaveResult
from .utils import join_path, remove_file
from .volumes import VolumeRegistry

if TYPE_CHECKING:
    from .models import Asset, VolumeFolder

logger = logging.getLogger(__name__)

BEFORE_HANDLE_FILE_HOOK = "before_handle_asset_file"


class AssetService:
    """Entry point for asset file workflows."""

    def __init__(
        self,
        repository: Any = None,
        volumes: VolumeRegistry | None = None,
        transforms: Any = None,
        paths: PathService | None = None,
        engine: FileOperationEngine | None = None,
        locations: LocationResolver | None = None,
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
        self.engine = engine or FileOperationEngine(
            repository, self.volumes, self.transforms, self.paths
        )
        self.locations = locations or LocationResolver(repository)

    def save_asset(self, asset: Asset) -> SaveResult:
        """Validate, apply pending file operations and persist an asset.

        Returns:
            ``Ok(asset)`` on success, or a ``FilenameConflict`` when the target
            name is taken and ``avoid_filename_conflicts`` is off. Nothing is
            written in the conflict case.
        """
        self._before_validate(asset)

        conflict = self.locations.validate_location(asset)
        if conflict is not None:
            logger.info(
                "Filename conflict for %r in folder %s", conflict.filename, conflict.folder_id
            )
            return conflict

        self.engine.handle_file(asset)
        with transaction.atomic():
            self.repository.save_asset(asset)
        return Ok(asset)

    def _before_validate(self, asset: Asset) -> None:
        if not asset.new_location and (asset.new_folder_id or asset.new_filename):
            folder_id = asset.new_folder_id or asset.folder_id
            filename = asset.new_filename or asset.filename
            asset.new_location = build_location(folder_id, filename)  # type: ignore[arg-type]

        if asset.new_location or asset.temp_file_path:
            is_new = asset.pk is None
            for fn in hooks.get_hooks(BEFORE_HANDLE_FILE_HOOK):
                fn(asset, is_new)

        if (not asset.kind or asset.kind == "unknown") and asset.filename:
            asset.kind = get_file_kind_by_extension(asset.filename)

    def upload_asset(
        self,
        temp_path: str | Path,
        folder: VolumeFolder,
        filename: str,
        focal_point: str | None = None,
    ) -> SaveResult:
        """Create a new asset from a local file, renaming it if the name is taken."""
        from .models import Asset

        asset = Asset(
            filename=prepare_asset_name(filename),
            volume_id=folder.volume_id,
            focal_point=focal_point,
        )
        asset.temp_file_path = str(temp_path)
        asset.new_folder_id = folder.pk
        asset.avoid_filename_conflicts = True
        return self.save_asset(asset)

    def move_asset(
        self,
        asset: Asset,
        folder: VolumeFolder,
        filename: str | None = None,
        force: bool = False,
    ) -> SaveResult:
        """Move and/or rename an asset.

        With ``force`` whatever occupies the target name is removed first: a
        conflicting asset is deleted along with its file, and an unindexed
        file at the target path is deleted from the volume.
        """
        target_filename = filename or asset.filename
        if force:
            conflicting = self.repository.find_asset(
                folder_id=folder.pk, filename=target_filename, exclude_id=asset.pk
            )
            if conflicting is not None:
                logger.info(
                    "Replacing asset %d with asset %d in folder %d",
                    conflicting.pk,
                    asset.pk,
                    folder.pk,
                )
                self.delete_asset(conflicting)
            elif (
                asset.volume_id != folder.volume_id
                or asset.get_uri().lower() != join_path(folder.path, target_filename).lower()
            ):
                volume = self.volumes.get_volume(folder.volume_id)
                volume.delete(join_path(folder.path, target_filename))

        asset.new_folder_id = folder.pk
        asset.new_filename = target_filename
        asset.avoid_filename_conflicts = False
        return self.save_asset(asset)

    def replace_asset_file(
        self, asset: Asset, temp_path: str | Path, filename: str
    ) -> SaveResult:
        """Replace an asset's bytes with a local file, optionally renaming it."""
        asset.temp_file_path = str(temp_path)
        asset.new_filename = filename
        asset.avoid_filename_conflicts = True
        return self.save_asset(asset)

    def replace_with_asset(
        self,
        source: Asset,
        target: Asset | None = None,
        target_filename: str | None = None,
    ) -> SaveResult:
        """Use the file of ``source`` to replace another file in its folder.

        If ``target`` is not given it is looked up by ``target_filename`` in
        the source folder. When a target asset exists its file is replaced and
        ``source`` is deleted; otherwise ``source`` is renamed onto
        ``target_filename``, overwriting any unindexed file there.
        """
        if target is None and target_filename:
            target = self.repository.find_asset(
                folder_id=source.folder_id, filename=target_filename, exclude_id=source.pk
            )

        if target is not None:
            temp_path = self.get_copy_of_file(source)
            result = self.replace_asset_file(target, temp_path, target.filename)
            if not isinstance(result, FilenameConflict):
                self.delete_asset(source)
            return result

        if not target_filename:
            raise ValueError("A target asset or a target filename is required")

        volume = self.volumes.get_volume(source.volume_id)
        volume.delete(join_path(source.folder_path, target_filename))
        source.new_filename = target_filename
        return self.save_asset(source)

    def delete_asset(self, asset: Asset) -> None:
        """Delete the record; the ``pre_delete`` signal removes the files."""
        self.repository.delete_asset(asset)

    def delete_asset_files(self, asset: Asset) -> None:
        """Remove an asset's file (unless kept) and all of its transforms."""
        if not asset.keep_file_on_delete:
            volume = self.volumes.get_volume(asset.volume_id)
            volume.delete(asset.get_uri())
            logger.info("Deleted file %s of asset %s", asset.get_uri(), asset.pk)
        self.transforms.delete_all_transform_data(asset)

    def get_copy_of_file(self, asset: Asset) -> Path:
        """Materialize the asset's file at a unique local temp path."""
        temp_path = self.paths.make_temp_file_path(asset.filename)
        volume = self.volumes.get_volume(asset.volume_id)
        try:
            volume.write_local_copy(asset.get_uri(), temp_path)
        except Exception:
            remove_file(temp_path)
            raise
        return temp_path

    def get_stream(self, asset: Asset) -> BinaryIO:
        return self.volumes.get_volume(asset.volume_id).read_stream(asset.get_uri())

    def get_url(self, asset: Asset, transform: Any = None) -> str | None:
        return self.transforms.get_url(asset, transform)  # type: ignore[no-any-return]
