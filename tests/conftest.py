"""Shared fixtures for mediafs tests."""

from __future__ import annotations

import struct
import zlib
from pathlib import Path

import pytest
from PIL import Image

from mediafs.metadata import (
    DirectoryLister,
    EntryDescriber,
    IdentityHasher,
    ImageProbe,
    TypeSniffer,
    UrlComposer,
)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def describer() -> EntryDescriber:
    return EntryDescriber(
        sniffer=TypeSniffer(),
        probe=ImageProbe(),
        hasher=IdentityHasher(),
        composer=UrlComposer(),
    )


@pytest.fixture
def lister(describer: EntryDescriber) -> DirectoryLister:
    return DirectoryLister(describer)


@pytest.fixture
def write_png():
    def _write(path: Path, size: tuple[int, int] = (10, 20)) -> Path:
        Image.new("RGB", size, color="red").save(path, format="PNG")
        return path

    return _write


@pytest.fixture
def write_jpeg():
    def _write(path: Path, size: tuple[int, int] = (8, 4)) -> Path:
        Image.new("RGB", size, color="blue").save(path, format="JPEG")
        return path

    return _write


@pytest.fixture
def write_corrupt_png():
    def _write(path: Path) -> Path:
        # Valid signature followed by a truncated IHDR chunk.
        path.write_bytes(PNG_SIGNATURE + b"\x00\x00\x00\x0dIHDR\x00\x00")
        return path

    return _write


def _png_chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


@pytest.fixture
def write_oversized_png():
    def _write(path: Path, size: tuple[int, int] = (20000, 20000)) -> Path:
        # Header only: far past Pillow's pixel limit, but tiny on disk.
        ihdr = struct.pack(">IIBBBBB", size[0], size[1], 8, 2, 0, 0, 0)
        path.write_bytes(PNG_SIGNATURE + _png_chunk(b"IHDR", ihdr) + _png_chunk(b"IEND", b""))
        return path

    return _write
