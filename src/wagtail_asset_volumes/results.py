"""Result types for operations whose conflicts are an expected outcome."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

T = TypeVar("T")


@dataclass
class Ok(Generic[T]):
    value: T

    @property
    def is_conflict(self) -> bool:
        return False


@dataclass
class FilenameConflict:
    """A file with the requested name already lives in the target folder."""

    filename: str
    suggested_filename: str
    folder_id: int | None = None
    asset_id: int | None = None
    conflicting_asset_id: int | None = None
    error_code: str = "filename_conflict"
    message: str = field(default="")

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"A file with the name “{self.filename}” already exists."

    @property
    def is_conflict(self) -> bool:
        return True


@dataclass
class FolderConflict:
    """A folder with the same name already exists under the destination."""

    folder_id: int
    parent_id: int
    name: str
    message: str = field(default="")

    def __post_init__(self) -> None:
        if not self.message:
            self.message = f"Folder “{self.name}” already exists at target location"

    @property
    def is_conflict(self) -> bool:
        return True


SaveResult = Union[Ok[Any], FilenameConflict]
