"""Filesystem metadata and asset-access URLs for media managers."""

from importlib import metadata as _metadata

from mediafs.adapter import LocalAdapter
from mediafs.config import ConfigManager, MediaFSConfig
from mediafs.metadata import DirectoryEntry, EntryDescriptor, FileEntry

__all__ = [
    "LocalAdapter",
    "ConfigManager",
    "MediaFSConfig",
    "EntryDescriptor",
    "FileEntry",
    "DirectoryEntry",
    "__version__",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("mediafs")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
