from __future__ import annotations

from ..paths import PathService
from .local import LocalVolume


class TempVolume(LocalVolume):
    """Scratch volume for assets that do not belong to a real volume yet.

    Files are kept under ``TEMP_UPLOADS_PATH`` and never get public URLs.
    """

    def __init__(self, paths: PathService | None = None) -> None:
        super().__init__((paths or PathService()).get_temp_uploads_path())
