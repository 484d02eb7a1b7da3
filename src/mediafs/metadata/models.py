"""Entry descriptor models produced by the describer and lister."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

RASTER_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png"})


@dataclass(frozen=True, slots=True)
class SniffResult:
    """Outcome of binary signature detection.

    Both fields are ``None`` when the type could not be classified.
    """

    extension: Optional[str] = None
    mime: Optional[str] = None

    @property
    def known(self) -> bool:
        return self.mime is not None

    @property
    def is_raster_image(self) -> bool:
        return self.mime in RASTER_MIME_TYPES


UNKNOWN = SniffResult()


@dataclass(frozen=True, slots=True)
class ImageDimensions:
    width: int
    height: int


@dataclass(frozen=True, slots=True)
class AccessUrls:
    """URLs attached to a file entry.

    ``img_url`` and ``img_lazy_url`` are only set for raster images.
    """

    file_path: str
    img_url: Optional[str] = None
    img_lazy_url: Optional[str] = None


class BaseEntry(BaseModel):
    """Fields shared by every filesystem entry.

    Attributes:
        name: Base name of the file or directory.
        path: Full path of the entry as passed to the describer.
        id: Digest of the path and modification time.
        uid: Owning user identifier.
        created_date: Status change time reported by the filesystem.
        modified_date: Last modification time.
        assigned_date: Last access time.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    id: str
    uid: int
    created_date: datetime
    modified_date: datetime
    assigned_date: datetime


class DirectoryEntry(BaseEntry):
    """Descriptor for a directory."""

    type: Literal["dir"] = "dir"
    mime_type: Literal["directory"] = "directory"
    color: str


class FileEntry(BaseEntry):
    """Descriptor for a regular file.

    Attributes:
        mime_type: Sniffed MIME type, ``None`` when unknown.
        extension: Sniffed extension, ``None`` when unknown.
        size: Size in bytes.
        width: Pixel width for raster images.
        height: Pixel height for raster images.
        file_path: Download URL; the image URL for raster images.
        img_url: Full-resolution image URL.
        img_lazy_url: Thumbnail URL used for lazy loading.
        ext_img: Base64 token for the fallback extension icon.
    """

    type: Literal["file"] = "file"
    mime_type: Optional[str] = None
    extension: Optional[str] = None
    size: int
    width: Optional[int] = None
    height: Optional[int] = None
    file_path: Optional[str] = None
    img_url: Optional[str] = None
    img_lazy_url: Optional[str] = None
    ext_img: Optional[str] = None

    @property
    def is_image(self) -> bool:
        return self.img_url is not None


EntryDescriptor = Annotated[Union[FileEntry, DirectoryEntry], Field(discriminator="type")]


@dataclass(slots=True)
class ListingResult:
    """Entries produced for one directory plus messages for skipped children."""

    entries: List[Union[FileEntry, DirectoryEntry]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


__all__ = [
    "RASTER_MIME_TYPES",
    "SniffResult",
    "UNKNOWN",
    "ImageDimensions",
    "AccessUrls",
    "BaseEntry",
    "DirectoryEntry",
    "FileEntry",
    "EntryDescriptor",
    "ListingResult",
]
