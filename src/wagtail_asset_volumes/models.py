"""Models for wagtail-asset-volumes."""

from __future__ import annotations

import copy
import mimetypes
from typing import Any

from django.db import models

from .utils import get_extension, join_path


class Volume(models.Model):
    """A configured storage backend that holds physical asset bytes."""

    name = models.CharField(max_length=255)
    handle = models.SlugField(max_length=255, unique=True)
    backend = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Dotted path of the volume backend class. Blank uses DEFAULT_VOLUME_BACKEND.",
    )
    options = models.JSONField(default=dict, blank=True)
    url = models.CharField(max_length=2048, blank=True, default="")

    def __str__(self) -> str:
        return self.name


class VolumeFolder(models.Model):
    """A node in a volume's folder tree.

    ``path`` is the full path from the volume root and ends in ``/``; root
    folders have an empty path. Folders without a volume form the scratch tree.
    """

    parent = models.ForeignKey(
        "self",
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="children",
    )
    volume = models.ForeignKey(
        Volume,
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="folders",
    )
    name = models.CharField(max_length=255)
    path = models.CharField(max_length=1024, blank=True, default="", db_index=True)

    class Meta:
        ordering = ["path"]

    def __str__(self) -> str:
        return f"VolumeFolder({self.pk}, {self.path or self.name})"


class Asset(models.Model):
    """An uploaded file living in a volume folder.

    The attributes declared below the fields are transient: they describe a
    pending file operation and are never stored.
    """

    volume = models.ForeignKey(
        Volume,
        null=True,
        blank=True,
        on_delete=models.CASCADE,
        related_name="assets",
    )
    folder = models.ForeignKey(
        VolumeFolder,
        on_delete=models.CASCADE,
        related_name="assets",
    )
    filename = models.CharField(max_length=255)
    kind = models.CharField(max_length=50, default="unknown")
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)
    size = models.BigIntegerField(null=True, blank=True)
    focal_point = models.CharField(max_length=20, null=True, blank=True)
    date_modified = models.DateTimeField(null=True, blank=True)
    date_created = models.DateTimeField(auto_now_add=True)
    date_updated = models.DateTimeField(auto_now=True)

    # Pending file operation
    new_location: str | None = None
    new_folder_id: int | None = None
    new_filename: str | None = None
    temp_file_path: str | None = None
    avoid_filename_conflicts: bool = False
    suggested_filename: str | None = None
    conflicting_filename: str | None = None
    keep_file_on_delete: bool = False

    _transform: Any = None

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["folder", "filename"],
                name="wagtail_asset_volumes_unique_folder_filename",
            ),
        ]

    def __str__(self) -> str:
        return self.filename

    @property
    def folder_path(self) -> str | None:
        if self.folder_id is None:
            return None
        return self.folder.path

    @property
    def extension(self) -> str:
        return get_extension(self.filename or "")

    @property
    def mime_type(self) -> str:
        guessed, _ = mimetypes.guess_type(self.filename or "")
        return guessed or "application/octet-stream"

    def get_uri(self, filename: str | None = None) -> str:
        """Return the path of the file within its volume."""
        return join_path(self.folder_path, filename or self.filename)

    def get_focal_point(self) -> dict[str, float] | None:
        if self.kind != "image":
            return None
        if self.focal_point:
            parts = self.focal_point.split(";")
            if len(parts) == 2:
                return {"x": float(parts[0]), "y": float(parts[1])}
        return {"x": 0.5, "y": 0.5}

    def with_transform(self, transform: Any) -> Asset:
        """Return a shallow copy of this asset bound to a transform.

        Width, height and URL lookups on the copy use the transform unless
        another one is passed explicitly.
        """
        from .transforms.spec import normalize_transform

        clone = copy.copy(self)
        clone._transform = normalize_transform(transform)
        return clone

    @property
    def transform(self) -> Any:
        return self._transform

    def get_width(self, transform: Any = None) -> int | None:
        return self._get_dimension("width", transform)

    def get_height(self, transform: Any = None) -> int | None:
        return self._get_dimension("height", transform)

    def _get_dimension(self, dimension: str, transform: Any) -> int | None:
        from .images import is_image_manipulatable
        from .transforms.dimensions import resolve_transform_dimensions
        from .transforms.spec import normalize_transform

        if self.kind != "image":
            return None

        if transform is not None and not is_image_manipulatable(self.extension):
            transform = None

        if transform is None:
            transform = self._transform

        if not transform:
            return getattr(self, dimension)  # type: ignore[no-any-return]

        width, height = resolve_transform_dimensions(
            self.width, self.height, normalize_transform(transform)
        )
        return width if dimension == "width" else height


class TransformMode(models.TextChoices):
    CROP = "crop", "Crop"
    FIT = "fit", "Fit"
    STRETCH = "stretch", "Stretch"


class AssetTransform(models.Model):
    """A named image transform that templates and code refer to by handle."""

    name = models.CharField(max_length=255)
    handle = models.SlugField(max_length=255, unique=True)
    width = models.PositiveIntegerField(null=True, blank=True)
    height = models.PositiveIntegerField(null=True, blank=True)
    mode = models.CharField(
        max_length=7, choices=TransformMode.choices, default=TransformMode.CROP
    )
    position = models.CharField(max_length=50, default="center-center")
    quality = models.PositiveSmallIntegerField(null=True, blank=True)
    format = models.CharField(max_length=10, blank=True, default="")

    def __str__(self) -> str:
        return f"AssetTransform({self.handle})"


class TransformIndex(models.Model):
    """Records a generated transform derivative of an asset."""

    asset = models.ForeignKey(
        Asset,
        on_delete=models.CASCADE,
        related_name="transform_indexes",
    )
    volume = models.ForeignKey(
        Volume,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="+",
    )
    location = models.CharField(max_length=255)
    filename = models.CharField(max_length=255)
    format = models.CharField(max_length=10, blank=True, default="")
    file_exists = models.BooleanField(default=False)
    date_indexed = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = [("asset", "location")]

    def __str__(self) -> str:
        return f"TransformIndex({self.asset_id}, {self.location})"
