"""Local filesystem adapter confined to a configured root directory."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from mediafs.config.models import MediaFSConfig
from mediafs.errors import SandboxViolationError
from mediafs.metadata import (
    DirectoryEntry,
    DirectoryLister,
    EntryDescriber,
    FileEntry,
    IdentityHasher,
    ImageProbe,
    ListingResult,
    TypeSniffer,
    UrlComposer,
)
from mediafs.operations import PathOperations

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]


def resolve_root(root_path: Optional[PathLike]) -> str:
    """Return the absolute root, falling back to the working directory.

    Args:
        root_path: Requested root directory.

    Returns:
        str: ``root_path`` when it is an existing directory, otherwise the
        current working directory.
    """
    if root_path is not None and os.path.isdir(root_path):
        return os.path.abspath(root_path)
    fallback = os.getcwd()
    LOGGER.warning("Root path %r is not a directory; using %s instead.", root_path, fallback)
    return fallback


class LocalAdapter:
    """List, describe, and manage entries beneath a sandbox root."""

    def __init__(
        self,
        root_path: Optional[PathLike],
        lister: DirectoryLister,
        operations: PathOperations,
    ) -> None:
        self._root = resolve_root(root_path)
        self.lister = lister
        self.operations = operations

    @classmethod
    def from_config(cls, config: MediaFSConfig) -> "LocalAdapter":
        """Wire the adapter and its collaborators from configuration.

        Args:
            config: Resolved mediafs configuration.

        Returns:
            LocalAdapter: Adapter rooted at ``config.adapter.root_path``.
        """
        describer = EntryDescriber(
            sniffer=TypeSniffer(
                prefix_bytes=config.sniffing.prefix_bytes,
                detect_text=config.sniffing.detect_text,
            ),
            probe=ImageProbe(),
            hasher=IdentityHasher(),
            composer=UrlComposer(
                thumb_width=config.thumbnails.width,
                thumb_height=config.thumbnails.height,
                images_prefix=config.urls.images_prefix,
                files_prefix=config.urls.files_prefix,
                icon_prefix=config.urls.icon_prefix,
            ),
            directory_color=config.adapter.directory_color,
        )
        return cls(
            config.adapter.root_path,
            lister=DirectoryLister(describer),
            operations=PathOperations(dir_mode=config.adapter.dir_mode),
        )

    @property
    def root(self) -> str:
        """Return the absolute sandbox root."""
        return self._root

    def resolve(self, path: PathLike = "") -> str:
        """Join ``path`` onto the root and reject results outside it.

        Absolute paths are accepted when they already lie beneath the root.
        The check is lexical: symbolic links are not resolved, so a link
        inside the root that points elsewhere still gives access to its
        target.

        Raises:
            SandboxViolationError: If the path escapes the root.
        """
        candidate = os.path.abspath(os.path.join(self._root, os.fspath(path)))
        if os.path.commonpath([self._root, candidate]) != self._root:
            raise SandboxViolationError(f"Path {path!r} resolves outside {self._root}")
        return candidate

    def get_files(self, path: PathLike = "") -> List[Union[FileEntry, DirectoryEntry]]:
        """Return descriptors for the children of a directory under the root."""
        return self.lister.list(self.resolve(path))

    def scan(self, path: PathLike = "") -> ListingResult:
        """Return descriptors plus per-entry errors for a directory under the root."""
        return self.lister.scan(self.resolve(path))

    def get_info(self, path: PathLike) -> Union[FileEntry, DirectoryEntry]:
        """Describe a single entry under the root."""
        return self.lister.describer.describe_path(self.resolve(path))

    def get_dir(self, path: PathLike = "") -> str:
        """Return ``path`` when it is a directory, otherwise its parent directory."""
        target = self.resolve(path)
        if os.path.isdir(target):
            return target
        return os.path.dirname(target)

    def create_dir(self, path: PathLike, name: Optional[str] = None) -> Path:
        target = self.resolve(os.path.join(os.fspath(path), name) if name else path)
        return self.operations.create_dir(target)

    def copy(self, source: PathLike, destination: PathLike) -> Path:
        return self.operations.copy(self.resolve(source), self.resolve(destination))

    def delete(self, path: PathLike) -> bool:
        """Delete an entry under the root; the root itself cannot be deleted.

        Raises:
            SandboxViolationError: If ``path`` is the root or escapes it.
        """
        target = self.resolve(path)
        if target == self._root:
            raise SandboxViolationError("Refusing to delete the adapter root.")
        return self.operations.delete(target)


__all__ = ["LocalAdapter", "resolve_root"]
