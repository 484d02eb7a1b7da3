"""File type detection, image probing, and identity hashing."""

from __future__ import annotations

import codecs
import hashlib
import os
import warnings
from datetime import datetime
from pathlib import Path

import filetype
from PIL import Image, JpegImagePlugin, PngImagePlugin

from mediafs.errors import CorruptImageError

from .models import UNKNOWN, ImageDimensions, SniffResult

DEFAULT_PREFIX_BYTES = 4100
TEXT_MIME = "text/plain"
TEXT_EXTENSION = "txt"

_HEADER_READERS = (PngImagePlugin.PngImageFile, JpegImagePlugin.JpegImageFile)


class TypeSniffer:
    """Classify files from a bounded prefix of their bytes using filetype."""

    def __init__(self, prefix_bytes: int = DEFAULT_PREFIX_BYTES, detect_text: bool = True) -> None:
        self.prefix_bytes = prefix_bytes
        self.detect_text = detect_text

    def sniff(self, path: Path) -> SniffResult:
        """Return the detected extension and MIME type, or ``UNKNOWN``.

        Raises:
            OSError: If the file cannot be opened or read.
        """
        with path.open("rb") as fh:
            head = fh.read(self.prefix_bytes)
        return self.sniff_bytes(head)

    def sniff_bytes(self, head: bytes) -> SniffResult:
        """Classify an already-read byte prefix."""
        if not head:
            return UNKNOWN
        kind = filetype.guess(head)
        if kind is not None:
            return SniffResult(extension=kind.extension, mime=kind.mime)
        if self.detect_text and _looks_like_text(head):
            return SniffResult(extension=TEXT_EXTENSION, mime=TEXT_MIME)
        return UNKNOWN


def _looks_like_text(head: bytes) -> bool:
    if b"\x00" in head:
        return False
    # The prefix may end mid-character; the incremental decoder holds those bytes back.
    decoder = codecs.getincrementaldecoder("utf-8")()
    try:
        decoder.decode(head, final=False)
    except UnicodeDecodeError:
        return False
    return True


class ImageProbe:
    """Read pixel dimensions from raster image headers with Pillow.

    Pixel data is never decoded, so Pillow's decompression-bomb limit does not
    apply: oversized images still report their header dimensions.
    """

    def dimensions(self, path: Path) -> ImageDimensions:
        """Return the width and height stored in the image header.

        Raises:
            CorruptImageError: If Pillow cannot identify or parse the image.
        """
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", Image.DecompressionBombWarning)
                with Image.open(path) as img:
                    width, height = img.size
        except Image.DecompressionBombError:
            width, height = _header_size(path)
        except (OSError, SyntaxError, ValueError) as exc:
            raise CorruptImageError(f"Cannot read image dimensions from {path}: {exc}") from exc
        return ImageDimensions(width=width, height=height)


def _header_size(path: Path) -> tuple[int, int]:
    # Plugin constructors parse the header without Image.open's pixel-count check.
    for reader in _HEADER_READERS:
        try:
            with reader(path) as img:
                return img.size
        except SyntaxError:
            continue
        except (OSError, ValueError) as exc:
            raise CorruptImageError(f"Cannot read image dimensions from {path}: {exc}") from exc
    raise CorruptImageError(f"Cannot read image dimensions from {path}: unsupported header")


class IdentityHasher:
    """Derive entry identifiers from a path and its modification time."""

    def identity(self, path: str, modified: datetime) -> str:
        """Return the SHA-1 hex digest of the path followed by the ISO timestamp.

        The path is hashed as filesystem bytes, which equal its UTF-8 encoding
        for ordinary names and stay hashable for undecodable ones.
        """
        digest = hashlib.sha1(os.fsencode(path))
        digest.update(modified.isoformat().encode("ascii"))
        return digest.hexdigest()


__all__ = ["TypeSniffer", "ImageProbe", "IdentityHasher", "DEFAULT_PREFIX_BYTES"]
