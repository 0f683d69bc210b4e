"""Raster image operations used by transforms and the image editor."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from .conf import get_setting

logger = logging.getLogger(__name__)

_SAVE_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "webp": "WEBP",
    "bmp": "BMP",
    "tif": "TIFF",
    "tiff": "TIFF",
}


def is_image_manipulatable(extension: str) -> bool:
    """Check whether images with this extension can be transformed."""
    allowed: list[str] = get_setting("MANIPULATABLE_IMAGE_EXTENSIONS")
    return extension.lower() in allowed


def image_size(path: str | Path) -> tuple[int, int]:
    """Measure an image on disk. Unreadable images measure as ``(0, 0)``."""
    try:
        with Image.open(path) as img:
            return img.size
    except (OSError, UnidentifiedImageError) as e:
        logger.warning("Could not measure image %s: %s", path, e)
        return 0, 0


class RasterImage:
    """A loaded raster image with the operations the asset workflows need."""

    def __init__(self, image: Image.Image, format: str | None = None) -> None:
        self.image = image
        self.format = format

    @classmethod
    def load(cls, path: str | Path) -> RasterImage:
        with Image.open(path) as img:
            img.load()
            image = ImageOps.exif_transpose(img) or img
            return cls(image.copy(), img.format)

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def flip_horizontally(self) -> RasterImage:
        self.image = ImageOps.mirror(self.image)
        return self

    def flip_vertically(self) -> RasterImage:
        self.image = ImageOps.flip(self.image)
        return self

    def rotate(self, degrees: float) -> RasterImage:
        """Rotate clockwise, growing the canvas to fit the rotated image."""
        if degrees % 360:
            self.image = self.image.rotate(-degrees, expand=True)
        return self

    def resize(self, width: int, height: int) -> RasterImage:
        self.image = self.image.resize(
            (max(1, int(width)), max(1, int(height))), Image.Resampling.LANCZOS
        )
        return self

    def scale_to_fit(self, width: float, height: float) -> RasterImage:
        """Scale preserving aspect ratio so the image fits inside the box."""
        factor = min(width / self.width, height / self.height)
        return self.resize(round(self.width * factor), round(self.height * factor))

    def scale_and_crop(
        self, width: int, height: int, centering: tuple[float, float] = (0.5, 0.5)
    ) -> RasterImage:
        """Fill the box exactly, cropping around ``centering`` (fractions)."""
        self.image = ImageOps.fit(
            self.image,
            (max(1, int(width)), max(1, int(height))),
            Image.Resampling.LANCZOS,
            centering=centering,
        )
        return self

    def crop(self, x1: float, x2: float, y1: float, y2: float) -> RasterImage:
        self.image = self.image.crop((round(x1), round(y1), round(x2), round(y2)))
        return self

    def save_as(self, path: str | Path, quality: int | None = None) -> None:
        extension = Path(path).suffix.lstrip(".").lower()
        save_format = _SAVE_FORMATS.get(extension, self.format or "PNG")
        image = self.image
        if save_format == "JPEG" and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")
        options = {}
        if save_format in ("JPEG", "WEBP"):
            options["quality"] = quality or get_setting("DEFAULT_TRANSFORM_QUALITY")
        image.save(path, format=save_format, **options)
