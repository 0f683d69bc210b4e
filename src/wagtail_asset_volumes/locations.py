"""Asset location tokens, filename sanitizing and filename conflict handling.

A location token names a folder and a filename in one string::

    {folder:12}photo.jpg

A bare filename keeps the asset in its current folder.
"""

from __future__ import annotations

import itertools
import logging
import os
import re
import secrets
import unicodedata
from typing import TYPE_CHECKING, Any

from anyascii import anyascii

from .conf import get_setting
from .errors import DisallowedExtensionError, MalformedLocationError
from .files import is_extension_allowed
from .results import FilenameConflict

if TYPE_CHECKING:
    from .models import Asset

logger = logging.getLogger(__name__)

_LOCATION_RE = re.compile(r"^\{folder:(\d+)\}(.+)$", re.DOTALL)
_DISALLOWED_CHARS_RE = re.compile(r"[\\?%*:|\"<>'\x00-\x1f\x7f]")


def parse_location(location: str) -> tuple[int | None, str]:
    """Split a location token into ``(folder_id, filename)``.

    ``folder_id`` is ``None`` for a bare filename.

    Raises:
        MalformedLocationError: The folder marker is present but unparsable.
    """
    if not location.startswith("{folder:"):
        return None, location
    match = _LOCATION_RE.match(location)
    if match is None:
        raise MalformedLocationError(location)
    return int(match.group(1)), match.group(2)


def build_location(folder_id: int, filename: str) -> str:
    return f"{{folder:{folder_id}}}{filename}"


def prepare_asset_name(
    name: str,
    is_filename: bool = True,
    allow_directory_separators: bool = False,
) -> str:
    """Make a user supplied name safe to use as a file or folder name.

    Unsafe characters are dropped, whitespace runs become the configured word
    separator and the result is cut to ``MAX_FILENAME_LENGTH`` while keeping
    the extension. An empty result falls back to a generated name.
    """
    separator: str = get_setting("FILENAME_WORD_SEPARATOR")
    max_length: int = get_setting("MAX_FILENAME_LENGTH")

    if is_filename:
        base_name, extension = os.path.splitext(name)
    else:
        base_name, extension = name, ""

    if not allow_directory_separators:
        base_name = base_name.replace("/", "")
    base_name = unicodedata.normalize("NFC", base_name)
    if get_setting("CONVERT_FILENAMES_TO_ASCII"):
        base_name = anyascii(base_name)
        extension = anyascii(extension)

    base_name = _DISALLOWED_CHARS_RE.sub("", base_name)
    extension = _DISALLOWED_CHARS_RE.sub("", extension).replace("/", "")
    base_name = re.sub(r"\s+", separator, base_name.strip())
    if separator:
        base_name = re.sub(f"(?:{re.escape(separator)}){{2,}}", separator, base_name)
        base_name = base_name.strip(separator)
    if allow_directory_separators:
        base_name = re.sub(r"/{2,}", "/", base_name).strip("/")

    if not base_name.strip("."):
        base_name = f"upload-{secrets.token_hex(4)}"

    budget = max(1, max_length - len(extension))
    return f"{base_name[:budget]}{extension}"


class LocationResolver:
    """Detect filename conflicts and pick non-conflicting names."""

    def __init__(self, repository: Any = None) -> None:
        if repository is None:
            from .repository import AssetRepository

            repository = AssetRepository()
        self.repository = repository

    def is_conflict(
        self, folder_id: int, filename: str, exclude_id: int | None = None
    ) -> bool:
        return (
            self.repository.find_asset(
                folder_id=folder_id, filename=filename, exclude_id=exclude_id
            )
            is not None
        )

    def get_name_replacement_in_folder(
        self, filename: str, folder_id: int, exclude_id: int | None = None
    ) -> str:
        """Return ``filename`` or the first free ``name-N.ext`` in the folder."""
        if not self.is_conflict(folder_id, filename, exclude_id):
            return filename

        base_name, extension = os.path.splitext(filename)
        for i in itertools.count(1):
            candidate = f"{base_name}-{i}{extension}"
            if not self.is_conflict(folder_id, candidate, exclude_id):
                break
        return candidate

    def validate_location(self, asset: Asset) -> FilenameConflict | None:
        """Resolve ``asset.new_location`` into the name that will be committed.

        With ``avoid_filename_conflicts`` a conflicting name is swapped for a
        suggested one and the requested name is kept in
        ``asset.conflicting_filename``. Without it the conflict is returned and
        the location is left untouched.

        Raises:
            MalformedLocationError: The location token is malformed.
            DisallowedExtensionError: The filename's extension is not allowed.
        """
        if not asset.new_location:
            return None

        folder_id, filename = parse_location(asset.new_location)
        if folder_id is None:
            folder_id = asset.folder_id

        if not is_extension_allowed(filename):
            raise DisallowedExtensionError(filename)

        if asset.avoid_filename_conflicts:
            suggested = self.get_name_replacement_in_folder(filename, folder_id, asset.pk)
            if suggested != filename:
                logger.info(
                    "Filename %r is taken in folder %s, using %r", filename, folder_id, suggested
                )
                asset.conflicting_filename = filename
                filename = suggested
        else:
            conflicting = self.repository.find_asset(
                folder_id=folder_id, filename=filename, exclude_id=asset.pk
            )
            if conflicting is not None:
                suggested = self.get_name_replacement_in_folder(filename, folder_id, asset.pk)
                asset.suggested_filename = suggested
                asset.conflicting_filename = filename
                return FilenameConflict(
                    filename=filename,
                    suggested_filename=suggested,
                    folder_id=folder_id,
                    asset_id=asset.pk,
                    conflicting_asset_id=conflicting.pk,
                )

        asset.new_location = build_location(folder_id, filename)
        return None
