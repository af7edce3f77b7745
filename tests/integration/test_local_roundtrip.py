from pathlib import Path

from entryfs.adapters.storage.local_storage import LocalStorage
from entryfs.config import Settings
from entryfs.domain.enums import AccessMode, CollisionPolicy, NamingStrategy, OpenMode, SearchScope, WriteMode
from entryfs.domain.results import FailureKind
from entryfs.services import FileSystem


def test_local_disk_roundtrip(tmp_path: Path):
    fs = FileSystem(LocalStorage(), Settings(naming_strategy=NamingStrategy.INTEGER))
    root = fs.get_directory(str(tmp_path / "project"))

    notes = root.create_file("notes.txt").value
    assert notes.write_all("line one\n").ok
    assert notes.write_all("line two\n", WriteMode.APPEND).ok
    assert notes.read_all_lines() == ["line one", "line two"]

    with notes:
        assert notes.open(AccessMode.READ, OpenMode.OPEN).ok
        assert notes.stream_read_line().value == b"line one\n"
        assert notes.rename("other").failure.kind is FailureKind.INVALID_STATE
    assert not notes.is_open

    dup = root.create_file("notes.txt", CollisionPolicy.GENERATE_UNIQUE_NAME).value
    assert Path(dup.full_path).name == "notes-0.txt"

    sub = root.create_directory("archive").value
    assert notes.move(str(Path(sub.full_path) / "notes.txt")).ok
    assert root.get_file_names(scope=SearchScope.ALL) == [
        "notes-0.txt",
        str(Path("archive") / "notes.txt"),
    ]

    report = root.copy(str(tmp_path / "backup"))
    assert report.ok
    assert (tmp_path / "backup" / "archive" / "notes.txt").read_text() == "line one\nline two\n"

    assert root.delete(recursive=True).ok
    assert not (tmp_path / "project").exists()
