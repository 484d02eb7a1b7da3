"""Tests for building entry descriptors."""

import base64
import hashlib
import os
from pathlib import Path

import pytest
from pydantic import TypeAdapter

from mediafs.errors import PathNotFoundError
from mediafs.metadata import (
    DirectoryEntry,
    EntryDescriber,
    EntryDescriptor,
    FileEntry,
    decode_path_token,
)


def _bump_mtime(path: Path, seconds: int = 60) -> None:
    stat = path.stat()
    os.utime(path, (stat.st_atime, stat.st_mtime + seconds))


def test_png_descriptor_matches_expected_shape(
    tmp_path: Path, describer: EntryDescriber, write_png
) -> None:
    write_png(tmp_path / "photo.png", (10, 20))

    entry = describer.describe(f"{tmp_path}/", "photo.png")

    full_path = f"{tmp_path}/photo.png"
    assert isinstance(entry, FileEntry)
    assert entry.type == "file"
    assert entry.name == "photo.png"
    assert entry.path == full_path
    assert entry.mime_type == "image/png"
    assert entry.extension == "png"
    assert (entry.width, entry.height) == (10, 20)
    assert entry.size == (tmp_path / "photo.png").stat().st_size
    assert entry.is_image
    assert "/t/png/d/200/200/m/image%2Fpng/" in entry.img_url
    assert entry.img_url.endswith(f"/{entry.id}")
    assert entry.img_lazy_url == entry.img_url
    assert entry.file_path == entry.img_url
    assert base64.b64decode(entry.ext_img).decode() == "/api/thirdParty/png.svg"

    expected_id = hashlib.sha1(
        f"{full_path}{entry.modified_date.isoformat()}".encode("utf-8")
    ).hexdigest()
    assert entry.id == expected_id


def test_parent_without_trailing_separator_yields_same_path(
    tmp_path: Path, describer: EntryDescriber, write_png
) -> None:
    write_png(tmp_path / "photo.png")

    with_sep = describer.describe(f"{tmp_path}/", "photo.png")
    without_sep = describer.describe(tmp_path, "photo.png")

    assert with_sep.path == without_sep.path
    assert with_sep.id == without_sep.id


def test_describe_is_stable_until_mtime_changes(tmp_path: Path, describer: EntryDescriber) -> None:
    note = tmp_path / "a.txt"
    note.write_text("hello", encoding="utf-8")

    first = describer.describe(tmp_path, "a.txt")
    second = describer.describe(tmp_path, "a.txt")

    assert (first.id, first.mime_type, first.size) == (second.id, second.mime_type, second.size)

    _bump_mtime(note)
    touched = describer.describe(tmp_path, "a.txt")

    assert touched.id != first.id
    assert touched.mime_type == first.mime_type
    assert touched.size == first.size


def test_directory_descriptor_has_no_file_fields(tmp_path: Path, describer: EntryDescriber) -> None:
    (tmp_path / "docs").mkdir()

    entry = describer.describe(tmp_path, "docs")

    assert isinstance(entry, DirectoryEntry)
    assert entry.type == "dir"
    assert entry.mime_type == "directory"
    assert entry.color == "#3949AB"
    dumped = entry.model_dump(exclude_none=True)
    for absent in ("width", "height", "size", "extension", "file_path", "img_url", "ext_img"):
        assert absent not in dumped
    assert entry.uid == (tmp_path / "docs").stat().st_uid


def test_directory_color_is_configurable(tmp_path: Path, describer: EntryDescriber) -> None:
    (tmp_path / "docs").mkdir()
    describer.directory_color = "#000000"

    assert describer.describe(tmp_path, "docs").color == "#000000"


def test_non_image_file_gets_generic_url(tmp_path: Path, describer: EntryDescriber) -> None:
    (tmp_path / "report.pdf").write_bytes(b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\n")

    entry = describer.describe(tmp_path, "report.pdf")

    assert entry.mime_type == "application/pdf"
    assert entry.width is None and entry.height is None
    assert entry.img_url is None and entry.img_lazy_url is None
    assert entry.file_path.startswith("/api/files/")
    assert f"/m/application%2Fpdf/s/{entry.size}/{entry.id}" in entry.file_path
    assert decode_path_token(entry.file_path.split("/")[3]) == entry.path
    assert not entry.is_image


def test_gif_is_recognized_but_not_probed(tmp_path: Path, describer: EntryDescriber) -> None:
    from PIL import Image

    Image.new("RGB", (3, 3)).save(tmp_path / "anim.gif", format="GIF")

    entry = describer.describe(tmp_path, "anim.gif")

    assert entry.mime_type == "image/gif"
    assert entry.width is None
    assert entry.file_path.startswith("/api/files/")


def test_jpeg_descriptor_has_dimensions(tmp_path: Path, describer: EntryDescriber, write_jpeg) -> None:
    write_jpeg(tmp_path / "shot.jpeg", (8, 4))

    entry = describer.describe(tmp_path, "shot.jpeg")

    assert entry.mime_type == "image/jpeg"
    assert entry.extension == "jpg"
    assert (entry.width, entry.height) == (8, 4)
    assert "/t/jpg/d/200/200/m/image%2Fjpeg/" in entry.img_url


def test_corrupt_image_omits_dimensions(
    tmp_path: Path, describer: EntryDescriber, write_corrupt_png
) -> None:
    write_corrupt_png(tmp_path / "broken.png")

    entry = describer.describe(tmp_path, "broken.png")

    assert entry.mime_type == "image/png"
    assert entry.width is None and entry.height is None
    assert entry.img_url is not None


def test_oversized_image_keeps_header_dimensions(
    tmp_path: Path, describer: EntryDescriber, write_oversized_png
) -> None:
    write_oversized_png(tmp_path / "panorama.png")

    entry = describer.describe(tmp_path, "panorama.png")

    assert entry.mime_type == "image/png"
    assert (entry.width, entry.height) == (20000, 20000)


def test_unknown_type_degrades_record(tmp_path: Path, describer: EntryDescriber) -> None:
    (tmp_path / "blob").write_bytes(b"\x00\x01\x02\x03binary")

    entry = describer.describe(tmp_path, "blob")

    assert entry.mime_type is None
    assert entry.extension is None
    assert entry.ext_img is None
    assert entry.size == 10
    assert "/t/bin/m/application%2Foctet-stream/" in entry.file_path
    dumped = entry.model_dump(exclude_none=True)
    assert "mime_type" not in dumped and "extension" not in dumped


def test_empty_file_is_unknown(tmp_path: Path, describer: EntryDescriber) -> None:
    (tmp_path / "empty.dat").touch()

    entry = describer.describe(tmp_path, "empty.dat")

    assert entry.mime_type is None
    assert entry.size == 0


def test_unreadable_file_degrades_instead_of_failing(
    tmp_path: Path, describer: EntryDescriber, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "secret.txt").write_text("classified", encoding="utf-8")

    def _deny(path: Path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(describer.sniffer, "sniff", _deny)

    entry = describer.describe(tmp_path, "secret.txt")

    assert entry.mime_type is None
    assert entry.size == len("classified")


def test_missing_entry_raises_not_found(tmp_path: Path, describer: EntryDescriber) -> None:
    with pytest.raises(PathNotFoundError):
        describer.describe(tmp_path, "ghost.png")


def test_timestamps_are_timezone_aware(tmp_path: Path, describer: EntryDescriber) -> None:
    note = tmp_path / "a.txt"
    note.write_text("x", encoding="utf-8")
    os.utime(note, (1_600_000_000, 1_700_000_000))

    entry = describer.describe(tmp_path, "a.txt")

    assert entry.modified_date.tzinfo is not None
    assert entry.modified_date.timestamp() == 1_700_000_000
    assert entry.assigned_date.timestamp() == 1_600_000_000
    assert entry.created_date.tzinfo is not None


def test_describe_path_splits_parent_and_name(tmp_path: Path, describer: EntryDescriber) -> None:
    (tmp_path / "docs").mkdir()

    entry = describer.describe_path(tmp_path / "docs")

    assert entry.name == "docs"
    assert entry.path == os.path.join(str(tmp_path), "docs")


def test_serialized_descriptors_parse_back_into_their_variant(
    tmp_path: Path, describer: EntryDescriber
) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "a.txt").write_text("alpha", encoding="utf-8")
    adapter = TypeAdapter(EntryDescriptor)

    directory = adapter.validate_python(describer.describe(tmp_path, "docs").model_dump(mode="json"))
    note = adapter.validate_python(describer.describe(tmp_path, "a.txt").model_dump(mode="json"))

    assert isinstance(directory, DirectoryEntry)
    assert isinstance(note, FileEntry)
    assert note.mime_type == "text/plain"
