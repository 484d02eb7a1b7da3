"""Exceptions raised by the adapter and its path operations."""


class MediaFSError(Exception):
    """Base exception for adapter operations."""


class PathNotFoundError(MediaFSError, FileNotFoundError):
    """Raised when a path does not exist at the time it is inspected."""


class NotADirectoryPathError(MediaFSError, NotADirectoryError):
    """Raised when a directory operation targets something else."""


class NotAFilePathError(MediaFSError, IsADirectoryError):
    """Raised when a file operation targets a directory."""


class CorruptImageError(MediaFSError):
    """Raised when image dimensions cannot be read from a file."""


class PathOperationError(MediaFSError, OSError):
    """Raised when a create, copy, or delete operation fails on disk."""


class SandboxViolationError(MediaFSError, PermissionError):
    """Raised when a requested path resolves outside the adapter root."""
