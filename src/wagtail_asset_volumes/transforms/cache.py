"""Generation and invalidation of cached transform derivatives.

Derivatives live next to their source file in a sibling directory named
after the transform::

    photos/_thumb/cat.jpg
    photos/_200x100_crop_center-center/cat.jpg
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from ..conf import get_setting
from ..errors import InvalidTransformError
from ..images import RasterImage, is_image_manipulatable
from ..paths import PathService
from ..utils import join_path, remove_file
from ..volumes import LocalVolumeMixin, VolumeRegistry
from .dimensions import resolve_transform_dimensions
from .spec import POSITIONS, TransformSpec, normalize_transform

if TYPE_CHECKING:
    from ..models import Asset

logger = logging.getLogger(__name__)


def transform_string(transform: TransformSpec) -> str:
    """Return the directory name used for a transform's derivatives."""
    prefix: str = get_setting("TRANSFORM_DIRECTORY_PREFIX")
    if transform.handle:
        return f"{prefix}{transform.handle}"
    width = transform.width or "AUTO"
    height = transform.height or "AUTO"
    return f"{prefix}{width}x{height}_{transform.mode}_{transform.position}"


class TransformCache:
    """Create, locate and invalidate transform derivatives of assets."""

    def __init__(
        self,
        volumes: VolumeRegistry | None = None,
        paths: PathService | None = None,
        repository: Any = None,
    ) -> None:
        self.volumes = volumes or VolumeRegistry()
        self.paths = paths or PathService()
        self.repository = repository

    def get_transform_uri(self, asset: Asset, transform: TransformSpec) -> str:
        folder = join_path(asset.folder_path, transform_string(transform))
        return f"{folder}/{self._derivative_filename(asset, transform)}"

    def get_image_transform_source_path(self, asset: Asset) -> Path:
        """Return where the local source for this asset's transforms lives.

        Assets on a local volume are read in place; others are copied into
        ``IMAGE_SOURCE_PATH`` first.
        """
        volume = self.volumes.get_volume(asset.volume_id)
        if isinstance(volume, LocalVolumeMixin):
            return volume.get_local_path(asset.get_uri())
        return self.paths.get_image_source_path() / f"{asset.pk}.{asset.extension}"

    def get_local_image_source(self, asset: Asset) -> Path:
        source = self.get_image_transform_source_path(asset)
        if not source.exists():
            volume = self.volumes.get_volume(asset.volume_id)
            volume.write_local_copy(asset.get_uri(), source)
        return source

    def ensure_transform(self, asset: Asset, transform: Any) -> str:
        """Return the volume path of a derivative, generating it if needed."""
        from ..models import TransformIndex

        spec = normalize_transform(transform, self.repository)
        if not spec or asset.kind != "image" or not is_image_manipulatable(asset.extension):
            raise InvalidTransformError(
                f"Asset {asset.pk} ({asset.filename}) cannot be transformed"
            )

        location = transform_string(spec)
        uri = self.get_transform_uri(asset, spec)
        index = TransformIndex.objects.filter(asset=asset, location=location).first()
        if index is not None and index.file_exists:
            return uri

        self._generate(asset, spec, uri)

        TransformIndex.objects.update_or_create(
            asset=asset,
            location=location,
            defaults={
                "volume_id": asset.volume_id,
                "filename": self._derivative_filename(asset, spec),
                "format": spec.format or "",
                "file_exists": True,
            },
        )
        logger.info("Generated transform %s for asset %d: %s", location, asset.pk, uri)
        return uri

    def get_url(self, asset: Asset, transform: Any = None) -> str | None:
        volume = self.volumes.get_volume(asset.volume_id)
        if not volume.has_urls:
            return None
        if transform is None:
            transform = asset.transform
        if not transform:
            return volume.get_url(asset.get_uri())
        return volume.get_url(self.ensure_transform(asset, transform))

    def delete_all_transform_data(self, asset: Asset) -> None:
        """Delete every derivative, index row and cached source of an asset."""
        from ..models import TransformIndex

        volume = self.volumes.get_volume(asset.volume_id)
        indexes = list(TransformIndex.objects.filter(asset_id=asset.pk))
        for index in indexes:
            uri = f"{join_path(asset.folder_path, index.location)}/{index.filename}"
            volume.delete(uri)
        TransformIndex.objects.filter(asset_id=asset.pk).delete()

        if not isinstance(volume, LocalVolumeMixin):
            remove_file(self.paths.get_image_source_path() / f"{asset.pk}.{asset.extension}")

        if indexes:
            logger.info("Deleted %d transform(s) for asset %d", len(indexes), asset.pk)

    def _derivative_filename(self, asset: Asset, transform: TransformSpec) -> str:
        if transform.format:
            stem = Path(asset.filename).stem
            return f"{stem}.{transform.format}"
        return asset.filename

    def _generate(self, asset: Asset, spec: TransformSpec, uri: str) -> None:
        source = self.get_local_image_source(asset)
        image = RasterImage.load(source)
        width, height = resolve_transform_dimensions(
            asset.width or image.width, asset.height or image.height, spec
        )

        if spec.mode == "fit":
            image.scale_to_fit(width, height)
        elif spec.mode == "stretch":
            image.resize(width, height)
        else:
            focal = asset.get_focal_point() if asset.focal_point else None
            centering = (focal["x"], focal["y"]) if focal else POSITIONS[spec.position]
            image.scale_and_crop(width, height, centering)

        temp_path = self.paths.make_temp_file_path(self._derivative_filename(asset, spec))
        try:
            image.save_as(temp_path, spec.quality)
            volume = self.volumes.get_volume(asset.volume_id)
            with open(temp_path, "rb") as stream:
                volume.write_from_stream(uri, stream)
        finally:
            remove_file(temp_path)
