import pytest

from entryfs.adapters.storage.memory_storage import MemoryStorage
from entryfs.adapters.storage.recording_storage import RecordingStorage
from entryfs.config import Settings
from entryfs.domain.enums import CollisionPolicy, ExistenceResult, NamingStrategy
from entryfs.domain.errors import EntryExistsError
from entryfs.domain.results import FailureKind
from entryfs.services import DirectoryEntry, FileSystem

INTEGER = Settings(naming_strategy=NamingStrategy.INTEGER)


def make(files=None):
    inner = MemoryStorage(files=files or {}, directories=["/data"])
    spy = RecordingStorage(inner)
    return inner, spy, FileSystem(spy, INTEGER)


def test_replace_existing_deletes_then_creates():
    inner, spy, fs = make({"/data/a.txt": b"old"})
    spy.reset()
    result = fs.create_file("/data/a.txt", CollisionPolicy.REPLACE_EXISTING)
    assert result.ok
    assert result.value.full_path == "/data/a.txt"
    assert [name for name, _ in spy.mutations] == ["delete_file", "create_file"]
    assert inner.read_bytes("/data/a.txt") == b""


def test_fail_if_exists_touches_nothing():
    inner, spy, fs = make({"/data/a.txt": b"old"})
    spy.reset()
    result = fs.create_file("/data/a.txt", CollisionPolicy.FAIL_IF_EXISTS)
    assert not result
    assert result.failure.kind is FailureKind.COLLISION
    assert spy.calls_to("create_file", "delete_file") == []
    assert spy.mutations == []
    assert inner.read_bytes("/data/a.txt") == b"old"


def test_throw_if_exists_raises():
    _, spy, fs = make({"/data/a.txt": b"old"})
    spy.reset()
    with pytest.raises(EntryExistsError):
        fs.create_file("/data/a.txt", CollisionPolicy.THROW_IF_EXISTS)
    assert spy.mutations == []


def test_open_if_exists_returns_existing_entry_untouched():
    inner, spy, fs = make({"/data/a.txt": b"keep"})
    spy.reset()
    result = fs.create_file("/data/a.txt", CollisionPolicy.OPEN_IF_EXISTS)
    assert result.value.full_path == "/data/a.txt"
    assert spy.mutations == []
    assert inner.read_bytes("/data/a.txt") == b"keep"


def test_generate_unique_name_creates_beside_existing():
    files = {"/data/a.txt": b"", **{f"/data/a-{i}.txt": b"" for i in range(5)}}
    inner, _, fs = make(files)
    result = fs.create_file("/data/a.txt", CollisionPolicy.GENERATE_UNIQUE_NAME)
    assert result.value.full_path == "/data/a-5.txt"
    assert inner.exists("/data/a-5.txt") is ExistenceResult.FILE_EXISTS


def test_generate_unique_name_exhaustion():
    files = {"/data/a.txt": b"", **{f"/data/a-{i}.txt": b"" for i in range(2)}}
    inner = MemoryStorage(files=files)
    fs = FileSystem(inner, INTEGER.with_overrides(max_attempts=2))
    result = fs.create_file("/data/a.txt", CollisionPolicy.GENERATE_UNIQUE_NAME)
    assert result.failure.kind is FailureKind.COLLISION
    assert result.failure.attempts == 2


def test_generate_unique_name_for_existing_moves_occupant_aside():
    inner, spy, fs = make({"/data/a.txt": b"old"})
    spy.reset()
    result = fs.create_file("/data/a.txt", CollisionPolicy.GENERATE_UNIQUE_NAME_FOR_EXISTING)
    assert result.value.full_path == "/data/a.txt"
    assert inner.read_bytes("/data/a-0.txt") == b"old"
    assert inner.read_bytes("/data/a.txt") == b""
    assert [name for name, _ in spy.mutations] == ["move", "create_file"]


def test_generate_unique_name_for_existing_on_directories():
    inner = MemoryStorage(files={"/data/logs/today.log": b"x"})
    fs = FileSystem(inner, INTEGER)
    result = fs.create_directory("/data/logs", CollisionPolicy.GENERATE_UNIQUE_NAME_FOR_EXISTING)
    assert result.ok
    assert inner.read_bytes("/data/logs-0/today.log") == b"x"
    assert inner.exists("/data/logs") is ExistenceResult.FOLDER_EXISTS
    assert DirectoryEntry("/data/logs", inner).get_file_names() == []


def test_policies_apply_to_moves():
    inner = MemoryStorage(files={"/data/a.txt": b"a", "/data/b.txt": b"b"})
    fs = FileSystem(inner, INTEGER)
    assert fs.move_file("/data/a.txt", "/data/b.txt").failure.kind is FailureKind.COLLISION
    moved = fs.move_file("/data/a.txt", "/data/b.txt", CollisionPolicy.REPLACE_EXISTING)
    assert moved.value.full_path == "/data/b.txt"
    assert inner.read_bytes("/data/b.txt") == b"a"
    assert inner.exists("/data/a.txt") is ExistenceResult.NONE
