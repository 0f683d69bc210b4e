"""Apply image editor changes (flip, zoom, rotate, crop) to an asset."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .images import RasterImage, image_size
from .results import SaveResult
from .utils import remove_file

if TYPE_CHECKING:
    from .assets import AssetService
    from .models import Asset

logger = logging.getLogger(__name__)

VIEWPORT_ROTATIONS = (0, 90, 180, 270)
CROP_KEYS = frozenset({"offset_x", "offset_y", "width", "height"})


class ImageEditor:
    """Save the result of an image editing session.

    Crop and focal point offsets are measured from the centre of the image as
    displayed in the editor, whose size is given by ``image_dimensions``.
    """

    def __init__(self, asset_service: AssetService | None = None) -> None:
        if asset_service is None:
            from .assets import AssetService

            asset_service = AssetService()
        self.asset_service = asset_service

    def save_image(
        self,
        asset: Asset,
        *,
        viewport_rotation: int,
        image_rotation: float,
        crop_data: dict[str, float],
        image_dimensions: dict[str, float],
        replace: bool = False,
        focal_point: dict[str, Any] | None = None,
        flip: dict[str, bool] | None = None,
        zoom: float = 1,
    ) -> SaveResult:
        """Edit a copy of the asset's image and store it.

        Args:
            asset: The asset being edited.
            viewport_rotation: Rotation of the editor viewport, a multiple of 90.
            image_rotation: Additional free rotation in degrees.
            crop_data: ``offset_x``, ``offset_y``, ``width`` and ``height`` of
                the crop rectangle in editor pixels.
            image_dimensions: ``width`` and ``height`` of the image in the editor.
            replace: Replace the asset's file instead of saving a new asset.
            focal_point: ``offset_x``, ``offset_y`` and ``image_dimensions`` of
                the focal point, in editor pixels.
            flip: ``x`` and/or ``y`` flags.
            zoom: Editor zoom factor.

        Returns:
            The result of saving the edited file.

        Raises:
            ValueError: The editing parameters are invalid.
        """
        if viewport_rotation not in VIEWPORT_ROTATIONS:
            raise ValueError("Viewport rotation must be 0, 90, 180 or 270 degrees")
        if not isinstance(crop_data, dict) or CROP_KEYS - crop_data.keys():
            raise ValueError("Invalid cropping parameters passed")
        if not image_dimensions or not image_dimensions.get("width") or not image_dimensions.get("height"):
            raise ValueError("Invalid image dimensions passed")
        if asset.folder_id is None:
            raise ValueError("The folder cannot be found")

        flip = flip or {}
        image_copy = self.asset_service.get_copy_of_file(asset)
        try:
            original_width, original_height = image_size(image_copy)
            if not original_width or not original_height:
                raise ValueError(f"Asset {asset.pk} is not a readable image")

            image = RasterImage.load(image_copy)
            if flip.get("x"):
                image.flip_horizontally()
            if flip.get("y"):
                image.flip_vertically()

            image.scale_to_fit(original_width * zoom, original_height * zoom)
            image.rotate(image_rotation + viewport_rotation)

            center_x = image.width / 2
            center_y = image.height / 2

            ratio = min(
                original_width / image_dimensions["width"],
                original_height / image_dimensions["height"],
            )
            width = crop_data["width"] * zoom * ratio
            height = crop_data["height"] * zoom * ratio
            x = center_x + crop_data["offset_x"] * zoom * ratio - width / 2
            y = center_y + crop_data["offset_y"] * zoom * ratio - height / 2

            focal = None
            if focal_point:
                dimensions = focal_point["image_dimensions"]
                ratio = min(
                    original_width / dimensions["width"],
                    original_height / dimensions["height"],
                )
                fx = center_x + focal_point["offset_x"] * zoom * ratio - x
                fy = center_y + focal_point["offset_y"] * zoom * ratio - y
                focal = f"{fx / original_width:.4f};{fy / original_height:.4f}"

            image.crop(x, x + width, y, y + height)
            image.save_as(image_copy)
        except Exception:
            remove_file(image_copy)
            raise

        logger.info("Saving edited image of asset %s (replace=%s)", asset.pk, replace)
        if replace:
            return self.asset_service.replace_asset_file(asset, image_copy, asset.filename)

        from .models import Asset

        folder = asset.folder
        new_asset = Asset(
            filename=asset.filename,
            volume_id=folder.volume_id,
            focal_point=focal,
        )
        new_asset.temp_file_path = str(image_copy)
        new_asset.new_folder_id = folder.pk
        new_asset.avoid_filename_conflicts = True
        return self.asset_service.save_asset(new_asset)
