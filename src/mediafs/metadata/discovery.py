"""Directory listing built on the entry describer."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Union

from mediafs.errors import NotADirectoryPathError, PathNotFoundError

from .describer import EntryDescriber
from .models import DirectoryEntry, FileEntry, ListingResult

LOGGER = logging.getLogger(__name__)


class DirectoryLister:
    """Describe the immediate children of a directory."""

    def __init__(self, describer: EntryDescriber) -> None:
        self.describer = describer

    def list(self, path: Union[str, Path]) -> List[Union[FileEntry, DirectoryEntry]]:
        """Return descriptors for every child of ``path`` that could be described."""
        return self.scan(path).entries

    def scan(self, path: Union[str, Path]) -> ListingResult:
        """Describe each child of ``path`` in filesystem enumeration order.

        Children that disappear, cannot be stat'ed, or cannot be turned into a
        valid descriptor are skipped and recorded in the result's ``errors``
        instead of aborting the listing.

        Args:
            path: Directory to list.

        Returns:
            ListingResult: Descriptors and per-entry error messages.

        Raises:
            PathNotFoundError: If ``path`` does not exist.
            NotADirectoryPathError: If ``path`` is not a directory.
        """
        directory = os.fspath(path)
        try:
            names = os.listdir(directory)
        except FileNotFoundError as exc:
            raise PathNotFoundError(f"Directory does not exist: {directory}") from exc
        except NotADirectoryError as exc:
            raise NotADirectoryPathError(f"Not a directory: {directory}") from exc

        result = ListingResult()
        for name in names:
            try:
                result.entries.append(self.describer.describe(directory, name))
            # ValueError covers encoding failures and pydantic validation errors.
            except (OSError, ValueError) as exc:
                LOGGER.warning("Skipping %s in %s: %s", name, directory, exc)
                result.errors.append(f"{os.path.join(directory, name)}: {exc}")
        return result


__all__ = ["DirectoryLister"]
