"""Tests for directory creation, copy, and delete."""

import os
import stat
from pathlib import Path

import pytest

from mediafs.errors import (
    NotADirectoryPathError,
    NotAFilePathError,
    PathNotFoundError,
    PathOperationError,
)
from mediafs.operations import PathOperations


def _build_tree(root: Path) -> Path:
    (root / "nested" / "deeper").mkdir(parents=True)
    (root / "top.txt").write_text("top", encoding="utf-8")
    (root / "nested" / "mid.bin").write_bytes(b"\x00\x01\x02")
    (root / "nested" / "deeper" / "leaf.txt").write_text("leaf", encoding="utf-8")
    return root


def test_create_dir_is_idempotent(tmp_path: Path) -> None:
    ops = PathOperations()
    target = tmp_path / "albums"

    assert ops.create_dir(target) == target
    assert target.is_dir()
    assert ops.create_dir(target) == target


def test_create_dir_joins_name(tmp_path: Path) -> None:
    created = PathOperations().create_dir(tmp_path, "albums")

    assert created == tmp_path / "albums"
    assert created.is_dir()


def test_create_dir_applies_mode(tmp_path: Path) -> None:
    old_umask = os.umask(0)
    try:
        created = PathOperations(dir_mode=0o750).create_dir(tmp_path / "private")
    finally:
        os.umask(old_umask)

    assert stat.S_IMODE(created.stat().st_mode) == 0o750


def test_create_dir_rejects_existing_file(tmp_path: Path) -> None:
    occupied = tmp_path / "albums"
    occupied.write_text("not a dir", encoding="utf-8")

    with pytest.raises(NotADirectoryPathError):
        PathOperations().create_dir(occupied)


def test_create_dir_propagates_other_errors(tmp_path: Path) -> None:
    with pytest.raises(PathOperationError):
        PathOperations().create_dir(tmp_path / "missing" / "child")


def test_copy_mirrors_directory_tree(tmp_path: Path) -> None:
    source = _build_tree(tmp_path / "source")
    destination = tmp_path / "copy"

    result = PathOperations().copy(source, destination)

    assert result == destination
    assert (destination / "top.txt").read_text(encoding="utf-8") == "top"
    assert (destination / "nested" / "mid.bin").read_bytes() == b"\x00\x01\x02"
    assert (destination / "nested" / "deeper" / "leaf.txt").read_text(encoding="utf-8") == "leaf"
    assert (source / "top.txt").exists()


def test_copy_preserves_symbolic_links(tmp_path: Path) -> None:
    source = _build_tree(tmp_path / "source")
    os.symlink("top.txt", source / "link.txt")
    os.symlink("nested", source / "link-dir")
    destination = tmp_path / "copy"

    PathOperations().copy(source, destination)

    assert (destination / "link.txt").is_symlink()
    assert os.readlink(destination / "link.txt") == "top.txt"
    assert (destination / "link-dir").is_symlink()
    assert os.readlink(destination / "link-dir") == "nested"


def test_copy_does_not_follow_cyclic_links(tmp_path: Path) -> None:
    source = _build_tree(tmp_path / "source")
    os.symlink(".", source / "nested" / "loop")
    destination = tmp_path / "copy"

    PathOperations().copy(source, destination)

    assert (destination / "nested" / "loop").is_symlink()
    assert os.readlink(destination / "nested" / "loop") == "."


def test_copy_streams_single_file(tmp_path: Path) -> None:
    source = tmp_path / "photo.raw"
    payload = os.urandom(256 * 1024)
    source.write_bytes(payload)
    destination = tmp_path / "photo-copy.raw"

    PathOperations().copy(source, destination)

    assert destination.read_bytes() == payload


def test_copy_missing_source_fails_fast(tmp_path: Path) -> None:
    with pytest.raises(PathNotFoundError):
        PathOperations().copy(tmp_path / "ghost", tmp_path / "copy")
    assert not (tmp_path / "copy").exists()


def test_copy_into_own_subtree_is_rejected(tmp_path: Path) -> None:
    source = _build_tree(tmp_path / "source")

    with pytest.raises(PathOperationError):
        PathOperations().copy(source, source / "nested" / "again")
    assert not (source / "nested" / "again").exists()


def test_copy_failure_is_wrapped(tmp_path: Path) -> None:
    source = tmp_path / "a.txt"
    source.write_text("alpha", encoding="utf-8")

    with pytest.raises(PathOperationError):
        PathOperations().copy(source, tmp_path / "missing-dir" / "a.txt")


def test_delete_removes_nested_tree(tmp_path: Path) -> None:
    source = _build_tree(tmp_path / "source")

    assert PathOperations().delete(source) is True
    assert not source.exists()


def test_delete_file(tmp_path: Path) -> None:
    target = tmp_path / "a.txt"
    target.write_text("alpha", encoding="utf-8")

    assert PathOperations().delete(target) is True
    assert not target.exists()


def test_delete_missing_path_returns_false(tmp_path: Path) -> None:
    assert PathOperations().delete(tmp_path / "ghost") is False


def test_delete_symlink_keeps_target(tmp_path: Path) -> None:
    target = _build_tree(tmp_path / "source")
    link = tmp_path / "link"
    os.symlink(target, link)

    assert PathOperations().delete(link) is True
    assert not os.path.lexists(link)
    assert (target / "top.txt").exists()


def test_delete_tree_with_inner_link_keeps_link_target(tmp_path: Path) -> None:
    outside = _build_tree(tmp_path / "outside")
    doomed = tmp_path / "doomed"
    doomed.mkdir()
    os.symlink(outside, doomed / "to-outside")

    assert PathOperations().delete(doomed) is True
    assert (outside / "nested" / "deeper" / "leaf.txt").exists()


def test_delete_wraps_os_errors(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = _build_tree(tmp_path / "source")

    def _deny(path, *args, **kwargs):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr("mediafs.operations.shutil.rmtree", _deny)

    with pytest.raises(PathOperationError):
        PathOperations().delete(source)
    assert source.exists()


def test_copy_file_onto_directory_is_rejected(tmp_path: Path) -> None:
    source = tmp_path / "a.txt"
    source.write_text("alpha", encoding="utf-8")
    (tmp_path / "albums").mkdir()

    with pytest.raises(NotAFilePathError):
        PathOperations().copy(source, tmp_path / "albums")
