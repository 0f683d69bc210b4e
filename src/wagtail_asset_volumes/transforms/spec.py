"""Transform specifications and their normalization."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import InvalidTransformError

TRANSFORM_MODES = ("crop", "fit", "stretch")

POSITIONS: dict[str, tuple[float, float]] = {
    "top-left": (0.0, 0.0),
    "top-center": (0.5, 0.0),
    "top-right": (1.0, 0.0),
    "center-left": (0.0, 0.5),
    "center-center": (0.5, 0.5),
    "center-right": (1.0, 0.5),
    "bottom-left": (0.0, 1.0),
    "bottom-center": (0.5, 1.0),
    "bottom-right": (1.0, 1.0),
}


@dataclass(frozen=True)
class TransformSpec:
    """Desired output of an image transform.

    ``handle`` is set when the spec came from a named ``AssetTransform``.
    """

    width: int | None = None
    height: int | None = None
    mode: str = "crop"
    position: str = "center-center"
    quality: int | None = None
    format: str | None = None
    handle: str | None = None

    def __post_init__(self) -> None:
        if self.mode not in TRANSFORM_MODES:
            raise InvalidTransformError(f"Unknown transform mode: {self.mode!r}")
        if self.position not in POSITIONS:
            raise InvalidTransformError(f"Unknown transform position: {self.position!r}")

    def __bool__(self) -> bool:
        return bool(self.width or self.height)


def normalize_transform(transform: Any, repository: Any = None) -> TransformSpec | None:
    """Turn a handle, dict, named transform or spec into a ``TransformSpec``.

    Raises:
        InvalidTransformError: The handle is unknown or the value unsupported.
    """
    if transform is None or isinstance(transform, TransformSpec):
        return transform

    if isinstance(transform, str):
        if repository is None:
            from ..repository import AssetRepository

            repository = AssetRepository()
        named = repository.get_transform_by_handle(transform)
        if named is None:
            raise InvalidTransformError(f"Invalid transform handle: {transform}")
        transform = named

    if isinstance(transform, dict):
        width = transform.get("width")
        height = transform.get("height")
        return TransformSpec(
            width=round(width) if width is not None else None,
            height=round(height) if height is not None else None,
            mode=transform.get("mode") or "crop",
            position=transform.get("position") or "center-center",
            quality=transform.get("quality"),
            format=transform.get("format"),
        )

    from ..models import AssetTransform

    if isinstance(transform, AssetTransform):
        return TransformSpec(
            width=transform.width,
            height=transform.height,
            mode=transform.mode,
            position=transform.position,
            quality=transform.quality,
            format=transform.format or None,
            handle=transform.handle,
        )

    raise InvalidTransformError(f"Unsupported transform: {transform!r}")
