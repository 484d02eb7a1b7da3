"""Entry description and directory listing."""

from .describer import EntryDescriber
from .detectors import IdentityHasher, ImageProbe, TypeSniffer
from .discovery import DirectoryLister
from .models import (
    UNKNOWN,
    DirectoryEntry,
    EntryDescriptor,
    FileEntry,
    ImageDimensions,
    ListingResult,
    SniffResult,
)
from .urls import UrlComposer, decode_path_token, encode_path_token

__all__ = [
    "EntryDescriber",
    "DirectoryLister",
    "TypeSniffer",
    "ImageProbe",
    "IdentityHasher",
    "UrlComposer",
    "encode_path_token",
    "decode_path_token",
    "EntryDescriptor",
    "FileEntry",
    "DirectoryEntry",
    "ImageDimensions",
    "ListingResult",
    "SniffResult",
    "UNKNOWN",
]
