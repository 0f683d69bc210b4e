"""File kinds and on-disk file information."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .conf import get_setting
from .images import image_size
from .utils import get_extension

FILE_KINDS: dict[str, list[str]] = {
    "access": ["adp", "accdb", "mdb", "accde", "accdt", "accdr"],
    "audio": ["3gp", "aac", "act", "aif", "aiff", "aifc", "alac", "amr", "au", "dct", "dss", "dvf", "flac", "gsm", "iklax", "ivs", "m4a", "m4p", "mmf", "mp3", "mpc", "msv", "oga", "ogg", "opus", "ra", "tta", "vox", "wav", "wma", "wv"],
    "compressed": ["7z", "bz2", "gz", "rar", "tar", "tgz", "zip"],
    "excel": ["xls", "xlsx", "xlsm", "xltx", "xltm"],
    "html": ["html", "htm"],
    "illustrator": ["ai"],
    "image": ["jfif", "jp2", "jpx", "jpg", "jpeg", "jpe", "tiff", "tif", "png", "gif", "bmp", "webp", "ico", "svg"],
    "javascript": ["js"],
    "json": ["json"],
    "pdf": ["pdf"],
    "photoshop": ["psd", "psb"],
    "php": ["php"],
    "powerpoint": ["pps", "ppsm", "ppsx", "ppt", "pptm", "pptx", "potx"],
    "text": ["txt", "text", "md", "csv"],
    "video": ["avchd", "asf", "asx", "avi", "flv", "fla", "mov", "m4v", "mng", "mpeg", "mpg", "m1s", "mp2v", "m2v", "m2s", "mp4", "mkv", "qt", "flv", "mp4", "ogg", "ogv", "rm", "wmv", "webm", "vob"],
    "word": ["doc", "docx", "dot", "docm", "dotm"],
    "xml": ["xml"],
}


def get_file_kinds() -> dict[str, list[str]]:
    return get_setting("FILE_KINDS") or FILE_KINDS  # type: ignore[no-any-return]


def get_file_kind_by_extension(filename: str) -> str:
    """Classify a file by its extension; unmatched files are ``unknown``."""
    extension = get_extension(filename)
    for kind, extensions in get_file_kinds().items():
        if extension in extensions:
            return kind
    return "unknown"


def is_extension_allowed(filename: str) -> bool:
    allowed: list[str] | None = get_setting("ALLOWED_FILE_EXTENSIONS")
    if allowed is None:
        return True
    return get_extension(filename) in {ext.lower() for ext in allowed}


@dataclass(frozen=True)
class FileInfo:
    """Metadata measured from the final bytes of an asset."""

    kind: str
    width: int | None
    height: int | None
    size: int
    date_modified: datetime


def get_file_info(path: str | Path, filename: str) -> FileInfo:
    """Measure a local file that is about to become ``filename``."""
    kind = get_file_kind_by_extension(filename)
    width: int | None = None
    height: int | None = None
    if kind == "image":
        width, height = image_size(path)
    stat = os.stat(path)
    return FileInfo(
        kind=kind,
        width=width,
        height=height,
        size=stat.st_size,
        date_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
    )
