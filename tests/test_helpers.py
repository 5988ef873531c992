from __future__ import annotations

from pathlib import Path

import pytest

from scala_wrapper.filesystem import (
    collect_file_stat,
    contains_symlink,
    get_max_file_size,
    read_text_file,
    resolve_within,
    write_atomic,
)


def test_get_max_file_size_defaults(monkeypatch):
    monkeypatch.delenv("SCALA_WRAPPER_MAX_FILE_SIZE", raising=False)
    assert get_max_file_size(default=123) == 123
    assert get_max_file_size() is None


def test_get_max_file_size_reads_environment(monkeypatch):
    monkeypatch.setenv("SCALA_WRAPPER_MAX_FILE_SIZE", "2048")
    assert get_max_file_size(default=1) == 2048


@pytest.mark.parametrize("value", ["invalid", "0", "-5"])
def test_get_max_file_size_rejects_bad_values(monkeypatch, value):
    monkeypatch.setenv("SCALA_WRAPPER_MAX_FILE_SIZE", value)
    with pytest.raises(ValueError):
        get_max_file_size()


def test_resolve_within_accepts_nested_paths(tmp_path: Path):
    base = tmp_path.resolve()
    assert resolve_within("a/b.md", base) == base / "a" / "b.md"


@pytest.mark.parametrize("raw_path", ["../x.md", "a/../../x.md"])
def test_resolve_within_rejects_escapes(tmp_path: Path, raw_path: str):
    with pytest.raises(ValueError, match="outside of the source directory"):
        resolve_within(raw_path, tmp_path.resolve())


def test_resolve_within_rejects_absolute_paths(tmp_path: Path):
    with pytest.raises(ValueError, match="must be relative"):
        resolve_within(str(tmp_path / "x.md"), tmp_path.resolve())


def test_contains_symlink_detects_links(tmp_path: Path):
    target = tmp_path / "target"
    target.mkdir()
    link = tmp_path / "link"
    link.symlink_to(target, target_is_directory=True)

    assert contains_symlink(link / "file.md") is True
    assert contains_symlink(target / "file.md", stop_at=tmp_path) is False


def test_collect_file_stat_rejects_directories(tmp_path: Path):
    with pytest.raises(IOError, match="not a regular file"):
        collect_file_stat(tmp_path)


def test_read_text_file_rejects_invalid_utf8(tmp_path: Path):
    target = tmp_path / "bad.md"
    target.write_bytes(b"\xff\xfe\xfa")

    with pytest.raises(IOError, match="Invalid UTF-8"):
        read_text_file(target, 1024)


def test_write_atomic_creates_parents_and_replaces(tmp_path: Path):
    target = tmp_path / "out" / "nested" / "file.md"

    write_atomic(target, "first\n")
    write_atomic(target, "second\r\n")

    assert target.read_bytes() == b"second\r\n"
    assert sorted(path.name for path in target.parent.iterdir()) == ["file.md"]
