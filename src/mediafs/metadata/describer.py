"""Build one descriptor per filesystem entry."""

from __future__ import annotations

import logging
import os
import stat as stat_module
from datetime import datetime, timezone
from pathlib import Path
from typing import Union

from mediafs.errors import CorruptImageError, PathNotFoundError

from .detectors import IdentityHasher, ImageProbe, TypeSniffer
from .models import UNKNOWN, DirectoryEntry, FileEntry, SniffResult
from .urls import UrlComposer

LOGGER = logging.getLogger(__name__)

DEFAULT_DIRECTORY_COLOR = "#3949AB"


def _timestamp(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


class EntryDescriber:
    """Combine stat metadata, type sniffing, probing, and URLs into descriptors."""

    def __init__(
        self,
        sniffer: TypeSniffer,
        probe: ImageProbe,
        hasher: IdentityHasher,
        composer: UrlComposer,
        directory_color: str = DEFAULT_DIRECTORY_COLOR,
    ) -> None:
        self.sniffer = sniffer
        self.probe = probe
        self.hasher = hasher
        self.composer = composer
        self.directory_color = directory_color

    def describe(self, parent: Union[str, Path], name: str) -> Union[FileEntry, DirectoryEntry]:
        """Return the descriptor for ``name`` inside ``parent``.

        Args:
            parent: Directory containing the entry.
            name: Entry name within ``parent``.

        Returns:
            FileEntry | DirectoryEntry: Freshly computed descriptor.

        Raises:
            PathNotFoundError: If the entry does not exist.
            OSError: If the entry cannot be stat'ed for another reason.
        """
        full_path = os.path.join(os.fspath(parent), name)
        try:
            stats = os.stat(full_path)
        except FileNotFoundError as exc:
            raise PathNotFoundError(f"Path does not exist: {full_path}") from exc

        modified = _timestamp(stats.st_mtime)
        common = {
            "name": name,
            "path": full_path,
            "id": self.hasher.identity(full_path, modified),
            "uid": stats.st_uid,
            "created_date": _timestamp(stats.st_ctime),
            "modified_date": modified,
            "assigned_date": _timestamp(stats.st_atime),
        }

        if stat_module.S_ISDIR(stats.st_mode):
            return DirectoryEntry(color=self.directory_color, **common)

        return self._describe_file(
            Path(full_path),
            stats.st_size,
            common,
            regular=stat_module.S_ISREG(stats.st_mode),
        )

    def describe_path(self, path: Union[str, Path]) -> Union[FileEntry, DirectoryEntry]:
        """Describe a full path by splitting it into parent and name."""
        parent, name = os.path.split(os.fspath(path).rstrip(os.sep) or os.sep)
        return self.describe(parent, name)

    def _describe_file(self, path: Path, size: int, common: dict, *, regular: bool) -> FileEntry:
        # Opening a FIFO or device for reading can block, so only regular files are sniffed.
        if regular:
            sniffed = self._sniff(path)
        else:
            LOGGER.debug("Not sniffing special file %s", path)
            sniffed = UNKNOWN
        width = height = None
        if sniffed.is_raster_image:
            try:
                dimensions = self.probe.dimensions(path)
            except CorruptImageError as exc:
                LOGGER.debug("Omitting dimensions for %s: %s", path, exc)
            else:
                width, height = dimensions.width, dimensions.height

        urls = self.composer.compose(
            common["path"],
            common["id"],
            sniffed.extension,
            sniffed.mime,
            size,
            is_image=sniffed.is_raster_image,
        )
        return FileEntry(
            mime_type=sniffed.mime,
            extension=sniffed.extension,
            size=size,
            width=width,
            height=height,
            file_path=urls.file_path,
            img_url=urls.img_url,
            img_lazy_url=urls.img_lazy_url,
            ext_img=self.composer.icon_token(sniffed.extension),
            **common,
        )

    def _sniff(self, path: Path) -> SniffResult:
        try:
            sniffed = self.sniffer.sniff(path)
        except OSError as exc:
            LOGGER.debug("Could not read %s for type detection: %s", path, exc)
            return UNKNOWN
        if not sniffed.known:
            LOGGER.debug("Unrecognized file signature for %s", path)
        return sniffed


__all__ = ["EntryDescriber", "DEFAULT_DIRECTORY_COLOR"]
