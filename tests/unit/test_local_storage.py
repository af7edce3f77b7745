from pathlib import Path

import pytest

from entryfs.adapters.storage.local_storage import LocalStorage
from entryfs.domain.enums import AccessMode, ExistenceResult, OpenMode


def test_exists_and_create(tmp_path: Path):
    s = LocalStorage()
    target = tmp_path / "nested" / "dir"
    s.create_directory(str(target))
    s.create_file(str(target / "a.txt"))
    assert s.exists(str(target)) is ExistenceResult.FOLDER_EXISTS
    assert s.exists(str(target / "a.txt")) is ExistenceResult.FILE_EXISTS
    assert s.exists(str(tmp_path / "none")) is ExistenceResult.NONE


def test_open_stream_modes(tmp_path: Path):
    s = LocalStorage()
    p = str(tmp_path / "a.txt")
    with s.open_stream(p, OpenMode.CREATE, AccessMode.WRITE) as fh:
        fh.write(b"one")
    with s.open_stream(p, OpenMode.APPEND, AccessMode.WRITE) as fh:
        fh.write(b"two")
    with s.open_stream(p, OpenMode.OPEN, AccessMode.READ) as fh:
        assert fh.read() == b"onetwo"
    with pytest.raises(FileExistsError):
        s.open_stream(p, OpenMode.CREATE_NEW, AccessMode.WRITE)
    with pytest.raises(FileNotFoundError):
        s.open_stream(str(tmp_path / "missing"), OpenMode.OPEN, AccessMode.READ)
    with pytest.raises(ValueError):
        s.open_stream(p, OpenMode.NONE, AccessMode.READ)


def test_move_copy_and_delete(tmp_path: Path):
    s = LocalStorage()
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "b.txt").write_text("b")
    with pytest.raises(FileExistsError):
        s.move(str(tmp_path / "a.txt"), str(tmp_path / "b.txt"))
    with pytest.raises(FileExistsError):
        s.copy_file(str(tmp_path / "a.txt"), str(tmp_path / "b.txt"))
    s.copy_file(str(tmp_path / "a.txt"), str(tmp_path / "c.txt"))
    s.move(str(tmp_path / "c.txt"), str(tmp_path / "d.txt"))
    assert (tmp_path / "d.txt").read_text() == "a"
    s.delete_file(str(tmp_path / "d.txt"))
    assert not (tmp_path / "d.txt").exists()


def test_delete_directory_recursive(tmp_path: Path):
    s = LocalStorage()
    (tmp_path / "d" / "e").mkdir(parents=True)
    (tmp_path / "d" / "e" / "f.txt").write_text("x")
    with pytest.raises(OSError):
        s.delete_directory(str(tmp_path / "d"))
    s.delete_directory(str(tmp_path / "d"), recursive=True)
    assert not (tmp_path / "d").exists()


def test_listing_and_times(tmp_path: Path):
    s = LocalStorage()
    (tmp_path / "b.txt").write_text("bb")
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "sub").mkdir()
    assert s.list_files(str(tmp_path)) == [str(tmp_path / "a.txt"), str(tmp_path / "b.txt")]
    assert s.list_directories(str(tmp_path)) == [str(tmp_path / "sub")]
    assert s.file_size(str(tmp_path / "b.txt")) == 2
    assert s.last_modified_time(str(tmp_path / "a.txt"), utc=True).tzinfo is not None
    assert s.creation_time(str(tmp_path / "a.txt")) is not None
    assert s.last_access_time(str(tmp_path / "missing")) is None
