"""Resolve the output dimensions of a transform against an image's natural size."""

from __future__ import annotations

import math

from .spec import TransformSpec


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_missing_dimension(
    target_width: int | None,
    target_height: int | None,
    natural_width: int,
    natural_height: int,
) -> tuple[int | None, int | None]:
    """Fill in a missing target dimension from the natural aspect ratio.

    The filled dimension is rounded down.
    """
    if target_width and not target_height and natural_width:
        return target_width, target_width * natural_height // natural_width
    if target_height and not target_width and natural_height:
        return target_height * natural_width // natural_height, target_height
    return target_width, target_height


def resolve_transform_dimensions(
    natural_width: int | None,
    natural_height: int | None,
    transform: TransformSpec | None,
) -> tuple[int | None, int | None]:
    """Return the effective ``(width, height)`` an image gets under a transform.

    Crop and stretch report the target box. Fit shrinks or grows the natural
    size to fit inside the box, so its output can be smaller on one axis.
    """
    if not transform:
        return natural_width, natural_height

    if not natural_width or not natural_height:
        return transform.width, transform.height

    width, height = calculate_missing_dimension(
        transform.width, transform.height, natural_width, natural_height
    )

    if transform.mode == "fit" and width and height:
        factor = max(natural_width / width, natural_height / height)
        width = _round_half_up(natural_width / factor)
        height = _round_half_up(natural_height / factor)

    return width, height
