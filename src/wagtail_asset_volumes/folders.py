"""Folder tree operations and bulk transfer planning for folder moves.

Moving a folder happens in two phases. :meth:`FolderService.move_folder`
mirrors the folder tree under the destination and returns a transfer plan
with one entry per asset. :meth:`FolderService.execute_transfer_plan` then
moves each asset and removes the emptied source tree. Neither phase is
transactional; running the move again with ``merge`` resumes it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .errors import AssetError, AssetLogicError
from .locations import prepare_asset_name
from .results import FolderConflict, Ok
from .volumes import VolumeRegistry

if TYPE_CHECKING:
    from .assets import AssetService
    from .models import Asset, VolumeFolder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferPlanEntry:
    asset_id: int
    old_folder_id: int
    new_folder_id: int
    new_volume_id: int | None
    relative_path: str


@dataclass
class FolderMovePlan:
    folder_id: int
    new_folder_id: int | None
    folder_id_changes: dict[int, int] = field(default_factory=dict)
    transfers: list[TransferPlanEntry] = field(default_factory=list)


class FolderService:
    """Create, delete and move volume folders."""

    def __init__(self, repository: Any = None, volumes: VolumeRegistry | None = None) -> None:
        if repository is None:
            from .repository import AssetRepository

            repository = AssetRepository()
        self.repository = repository
        self.volumes = volumes or VolumeRegistry()

    def create_folder(self, parent: VolumeFolder, name: str) -> VolumeFolder:
        """Create a subfolder in the record store and in the volume.

        Raises:
            AssetLogicError: A folder with that name already exists or the
                volume could not create it.
        """
        from .models import VolumeFolder

        name = prepare_asset_name(name, is_filename=False)
        if self.repository.find_folder(parent_id=parent.pk, name=name) is not None:
            raise AssetLogicError(f"A folder with the name “{name}” already exists in the folder.")

        folder = VolumeFolder(
            parent_id=parent.pk,
            volume_id=parent.volume_id,
            name=name,
            path=f"{parent.path}{name}/",
        )
        try:
            self.volumes.get_volume(parent.volume_id).create_directory(folder.path)
        except AssetError as e:
            raise AssetLogicError(f"Could not create folder {folder.path}: {e}") from e
        self.repository.save_folder(folder)
        logger.info("Created folder %s (%d) in volume %s", folder.path, folder.pk, folder.volume_id)
        return folder

    def delete_folders_by_ids(
        self, folder_ids: int | Iterable[int], delete_directory: bool = True
    ) -> None:
        """Delete folders, their subfolders and assets.

        Raises:
            AssetLogicError: A folder is unknown or its directory could not be
                deleted.
        """
        if isinstance(folder_ids, int):
            folder_ids = [folder_ids]
        folder_ids = list(folder_ids)
        for folder_id in folder_ids:
            folder = self.repository.get_folder_by_id(folder_id)
            if folder is None:
                raise AssetLogicError(f"Invalid folder ID: {folder_id}")
            if delete_directory:
                try:
                    self.volumes.get_volume(folder.volume_id).delete_directory(folder.path)
                except AssetError as e:
                    raise AssetLogicError(f"Could not delete folder {folder.path}: {e}") from e
        self.repository.delete_folders(folder_ids)
        logger.info("Deleted folder(s) %s", folder_ids)

    def rename_folder(self, folder: VolumeFolder, new_name: str) -> str:
        """Rename a folder in the volume and rewrite the paths of its subtree.

        Returns:
            The prepared name the folder now has.

        Raises:
            AssetLogicError: The folder is a volume root, a sibling already
                has that name, or the volume could not rename the directory.
        """
        if folder.parent_id is None:
            raise AssetLogicError("Cannot rename the root folder of a volume")

        new_name = prepare_asset_name(new_name, is_filename=False)
        if new_name == folder.name:
            return new_name

        existing = self.repository.find_folder(parent_id=folder.parent_id, name=new_name)
        if existing is not None and existing.pk != folder.pk:
            raise AssetLogicError(f"A folder with the name “{new_name}” already exists in the folder.")

        old_path = folder.path
        new_path = f"{self._parent_path(folder)}{new_name}/"
        try:
            self.volumes.get_volume(folder.volume_id).rename_directory(old_path, new_path)
        except AssetError as e:
            raise AssetLogicError(f"Could not rename folder {old_path}: {e}") from e

        for descendant in self.get_all_descendant_folders(folder).values():
            descendant.path = f"{new_path}{descendant.path[len(old_path):]}"
            if descendant.pk == folder.pk:
                descendant.name = new_name
            self.repository.save_folder(descendant)

        folder.name = new_name
        folder.path = new_path
        logger.info("Renamed folder %s to %s in volume %s", old_path, new_path, folder.volume_id)
        return new_name

    def get_all_descendant_folders(
        self, folder: VolumeFolder, with_parent: bool = True
    ) -> dict[int, VolumeFolder]:
        return self.repository.get_all_descendant_folders(folder, with_parent)  # type: ignore[no-any-return]

    def mirror_folder_structure(
        self,
        source: VolumeFolder,
        destination: VolumeFolder,
        target_tree_map: dict[str, int] | None = None,
    ) -> dict[int, int]:
        """Recreate the tree rooted at ``source`` under ``destination``.

        Folders whose path relative to the source's parent appears in
        ``target_tree_map`` are reused instead of created.

        Returns:
            A map of every source folder id (including ``source``) to the id of
            its counterpart under ``destination``.

        Raises:
            AssetLogicError: A folder could not be created.
        """
        from .models import VolumeFolder

        target_tree_map = target_tree_map or {}
        source_tree = self.get_all_descendant_folders(source)
        prefix_length = len(self._parent_path(source))

        folder_id_changes: dict[int, int] = {}
        for source_folder in source_tree.values():
            relative_path = source_folder.path[prefix_length:]
            if relative_path in target_tree_map:
                folder_id_changes[source_folder.pk] = target_tree_map[relative_path]
                continue

            parent_id = folder_id_changes.get(source_folder.parent_id, destination.pk)  # type: ignore[arg-type]
            folder = VolumeFolder(
                parent_id=parent_id,
                volume_id=destination.volume_id,
                name=source_folder.name,
                path=f"{destination.path}{relative_path}",
            )
            try:
                self.volumes.get_volume(destination.volume_id).create_directory(folder.path)
                self.repository.save_folder(folder)
            except Exception as e:
                raise AssetLogicError(f"Could not create folder {folder.path}: {e}") from e
            folder_id_changes[source_folder.pk] = folder.pk

        logger.info(
            "Mirrored %d folder(s) from %s to %s",
            len(folder_id_changes),
            source.path,
            destination.path,
        )
        return folder_id_changes

    def file_transfer_list(
        self,
        assets: Iterable[Asset],
        folder_id_changes: dict[int, int],
        new_volume_id: int | None,
        source_parent_path: str = "",
    ) -> list[TransferPlanEntry]:
        """Plan one transfer per asset into its mirrored folder."""
        transfers = []
        for asset in assets:
            folder_path = asset.folder_path or ""
            transfers.append(
                TransferPlanEntry(
                    asset_id=asset.pk,
                    old_folder_id=asset.folder_id,
                    new_folder_id=folder_id_changes[asset.folder_id],
                    new_volume_id=new_volume_id,
                    relative_path=f"{folder_path[len(source_parent_path):]}{asset.filename}",
                )
            )
        return transfers

    def move_folder(
        self,
        folder: VolumeFolder,
        new_parent: VolumeFolder,
        force: bool = False,
        merge: bool = False,
    ) -> Ok[FolderMovePlan] | FolderConflict:
        """Mirror ``folder`` under ``new_parent`` and plan its asset transfers.

        If a folder with the same name already exists under ``new_parent``
        the move stops with a ``FolderConflict`` unless ``force`` (delete the
        existing folder) or ``merge`` (reuse its subtree) is set. ``force``
        wins over ``merge``. Moving a folder into its current parent returns
        an empty plan.

        Raises:
            AssetLogicError: The folder would move into its own subtree, or a
                folder could not be created or deleted.
        """
        if new_parent.volume_id == folder.volume_id and new_parent.path.startswith(folder.path):
            raise AssetLogicError(f"Cannot move folder {folder.path} into itself")
        if folder.parent_id == new_parent.pk:
            return Ok(FolderMovePlan(folder_id=folder.pk, new_folder_id=folder.pk))

        merge = merge and not force
        target_volume = self.volumes.get_volume(new_parent.volume_id)
        existing_path = f"{new_parent.path}{folder.name}/"

        existing_folder = self.repository.find_folder(parent_id=new_parent.pk, name=folder.name)
        unindexed_exists = existing_folder is None and target_volume.directory_exists(existing_path)

        if (existing_folder is not None or unindexed_exists) and not force and not merge:
            return FolderConflict(folder_id=folder.pk, parent_id=new_parent.pk, name=folder.name)

        target_tree_map: dict[str, int] = {}
        if existing_folder is not None:
            if force:
                self.delete_folders_by_ids(existing_folder.pk)
            else:
                prefix_length = len(new_parent.path)
                for existing in self.get_all_descendant_folders(existing_folder).values():
                    target_tree_map[existing.path[prefix_length:]] = existing.pk
        elif unindexed_exists and force:
            try:
                target_volume.delete_directory(existing_path)
            except AssetError as e:
                raise AssetLogicError(f"Could not delete folder {existing_path}: {e}") from e

        folder_id_changes = self.mirror_folder_structure(folder, new_parent, target_tree_map)

        source_tree = self.get_all_descendant_folders(folder)
        assets = self.repository.find_assets_in_folders(source_tree.keys())
        transfers = self.file_transfer_list(
            assets, folder_id_changes, new_parent.volume_id, self._parent_path(folder)
        )
        return Ok(
            FolderMovePlan(
                folder_id=folder.pk,
                new_folder_id=folder_id_changes.get(folder.pk),
                folder_id_changes=folder_id_changes,
                transfers=transfers,
            )
        )

    def execute_transfer_plan(
        self, plan: FolderMovePlan, asset_service: AssetService
    ) -> list[Any]:
        """Move every planned asset, then delete the source folder tree.

        Returns:
            The result of each asset move, in plan order.
        """
        if plan.new_folder_id == plan.folder_id:
            return []

        results = []
        for entry in plan.transfers:
            asset = self.repository.get_asset_by_id(entry.asset_id)
            new_folder = self.repository.get_folder_by_id(entry.new_folder_id)
            if asset is None or new_folder is None:
                raise AssetLogicError(f"Cannot transfer asset {entry.asset_id}")
            results.append(asset_service.move_asset(asset, new_folder, force=True))

        self.delete_folders_by_ids(plan.folder_id)
        return results

    def _parent_path(self, folder: VolumeFolder) -> str:
        if folder.parent_id is None:
            return ""
        parent = self.repository.get_folder_by_id(folder.parent_id)
        return parent.path if parent is not None else ""
