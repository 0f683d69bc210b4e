from .cache import TransformCache, transform_string
from .dimensions import calculate_missing_dimension, resolve_transform_dimensions
from .spec import TransformSpec, normalize_transform

__all__ = [
    "TransformCache",
    "TransformSpec",
    "calculate_missing_dimension",
    "normalize_transform",
    "resolve_transform_dimensions",
    "transform_string",
]
