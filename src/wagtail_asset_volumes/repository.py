"""Read/write access to asset and folder records."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Asset, AssetTransform, VolumeFolder


class AssetRepository:
    """Django ORM implementation of the record store used by the services.

    Services receive an instance of this class; tests substitute a mock with
    the same methods.
    """

    def get_asset_by_id(self, asset_id: int) -> Asset | None:
        return Asset.objects.select_related("folder").filter(pk=asset_id).first()

    def find_asset(
        self, *, folder_id: int, filename: str, exclude_id: int | None = None
    ) -> Asset | None:
        """Find the asset occupying ``filename`` in a folder (case-insensitive)."""
        qs = Asset.objects.filter(folder_id=folder_id, filename__iexact=filename)
        if exclude_id is not None:
            qs = qs.exclude(pk=exclude_id)
        return qs.first()

    def find_assets_in_folders(self, folder_ids: Iterable[int]) -> list[Asset]:
        return list(
            Asset.objects.select_related("folder")
            .filter(folder_id__in=list(folder_ids))
            .order_by("folder__path", "filename")
        )

    def save_asset(self, asset: Asset) -> None:
        asset.save()

    def delete_asset(self, asset: Asset) -> None:
        asset.delete()

    def get_folder_by_id(self, folder_id: int) -> VolumeFolder | None:
        return VolumeFolder.objects.filter(pk=folder_id).first()

    def find_folder(self, *, parent_id: int, name: str) -> VolumeFolder | None:
        return VolumeFolder.objects.filter(parent_id=parent_id, name=name).first()

    def get_all_descendant_folders(
        self, folder: VolumeFolder, with_parent: bool = True
    ) -> dict[int, VolumeFolder]:
        """Return the folder's subtree keyed by id, parents before children."""
        qs = VolumeFolder.objects.filter(
            volume_id=folder.volume_id, path__startswith=folder.path
        )
        if not with_parent:
            qs = qs.exclude(pk=folder.pk)
        return {f.pk: f for f in qs.order_by("path")}

    def save_folder(self, folder: VolumeFolder) -> None:
        folder.save()

    def delete_folders(self, folder_ids: Iterable[int]) -> None:
        VolumeFolder.objects.filter(pk__in=list(folder_ids)).delete()

    def get_transform_by_handle(self, handle: str) -> AssetTransform | None:
        return AssetTransform.objects.filter(handle=handle).first()
