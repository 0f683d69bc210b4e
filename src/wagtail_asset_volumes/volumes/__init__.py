from .base import BaseVolume, LocalVolumeMixin
from .registry import VolumeRegistry, get_backend

__all__ = ["BaseVolume", "LocalVolumeMixin", "VolumeRegistry", "get_backend"]
