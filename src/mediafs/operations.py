"""Directory creation, recursive copy, and recursive delete."""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Union

from mediafs.errors import (
    NotADirectoryPathError,
    NotAFilePathError,
    PathNotFoundError,
    PathOperationError,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_DIR_MODE = 0o755

PathLike = Union[str, Path]


class PathOperations:
    """Apply create/copy/delete requests directly to the filesystem.

    Failed recursive operations leave partially copied or partially deleted
    trees in place.
    """

    def __init__(self, dir_mode: int = DEFAULT_DIR_MODE) -> None:
        self.dir_mode = dir_mode

    def create_dir(self, path: PathLike, name: Optional[str] = None) -> Path:
        """Create a directory, treating an existing directory as success.

        Args:
            path: Directory to create, or its parent when ``name`` is given.
            name: Optional child name joined onto ``path``.

        Returns:
            Path: The directory that now exists.

        Raises:
            NotADirectoryPathError: If a non-directory already occupies the path.
            PathOperationError: If the directory cannot be created.
        """
        target = Path(path) / name if name else Path(path)
        try:
            target.mkdir(mode=self.dir_mode)
        except FileExistsError:
            if not target.is_dir():
                raise NotADirectoryPathError(f"A non-directory already exists at {target}")
            LOGGER.debug("Directory already exists: %s", target)
            return target
        except OSError as exc:
            raise PathOperationError(f"Could not create directory {target}: {exc}") from exc
        LOGGER.info("Created directory %s", target)
        return target

    def copy(self, source: PathLike, destination: PathLike) -> Path:
        """Copy a file or mirror a directory tree to ``destination``.

        Symbolic links inside a copied tree are recreated as links and never
        followed, so link cycles cannot make the walk unbounded.

        Args:
            source: File or directory to copy.
            destination: Target path.

        Returns:
            Path: The destination path.

        Raises:
            PathNotFoundError: If ``source`` does not exist.
            NotAFilePathError: If a file would be copied onto a directory.
            PathOperationError: If the copy is rejected or fails on disk.
        """
        src = Path(source)
        dst = Path(destination)
        if not src.exists():
            raise PathNotFoundError(f"Source path does not exist: {src}")

        try:
            if src.is_dir():
                if _is_within(dst, src):
                    raise PathOperationError(f"Cannot copy {src} into its own subtree {dst}")
                shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
            elif dst.is_dir():
                raise NotAFilePathError(f"Destination {dst} is a directory; expected a file path")
            else:
                shutil.copyfile(src, dst)
        except (PathOperationError, NotAFilePathError):
            raise
        except OSError as exc:
            raise PathOperationError(f"Could not copy {src} to {dst}: {exc}") from exc

        LOGGER.info("Copied %s to %s", src, dst)
        return dst

    def delete(self, path: PathLike) -> bool:
        """Remove a file, symbolic link, or directory tree.

        Args:
            path: Path to remove.

        Returns:
            bool: ``False`` if nothing existed at ``path``; otherwise whether
            the path is gone afterwards.

        Raises:
            PathOperationError: If removal fails for a reason other than the
                path already being gone.
        """
        target = Path(path)
        if not os.path.lexists(target):
            return False

        try:
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            else:
                target.unlink()
        except FileNotFoundError as exc:
            LOGGER.debug("Path vanished during delete: %s", exc)
        except OSError as exc:
            raise PathOperationError(f"Could not delete {target}: {exc}") from exc

        removed = not os.path.lexists(target)
        if removed:
            LOGGER.info("Deleted %s", target)
        return removed


def _is_within(candidate: Path, ancestor: Path) -> bool:
    resolved = candidate.resolve()
    root = ancestor.resolve()
    return resolved == root or root in resolved.parents


__all__ = ["PathOperations", "DEFAULT_DIR_MODE"]
