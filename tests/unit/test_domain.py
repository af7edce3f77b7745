import pytest

from entryfs.domain import (
    EntryExistsError,
    EntryKind,
    ExistenceResult,
    FailureKind,
    OperationFailedError,
    Result,
)
from entryfs.domain.paths import combine, is_blank, normalize_extension, split_path


def test_result_truthiness_and_unwrap():
    ok = Result.success(5)
    assert ok and ok.ok
    assert ok.unwrap() == 5

    bad = Result.fail(FailureKind.NOT_FOUND, "missing", path="/x")
    assert not bad
    with pytest.raises(OperationFailedError) as exc:
        bad.unwrap()
    assert exc.value.failure.path == "/x"
    assert str(bad.failure) == "not_found: missing"


def test_entry_exists_error_is_a_file_exists_error():
    err = EntryExistsError("/d/a.txt")
    assert isinstance(err, FileExistsError)
    assert "/d/a.txt" in str(err)


@pytest.mark.parametrize(
    "is_file,is_dir,expected",
    [
        (False, False, ExistenceResult.NONE),
        (True, False, ExistenceResult.FILE_EXISTS),
        (False, True, ExistenceResult.FOLDER_EXISTS),
        (True, True, ExistenceResult.FILE_AND_FOLDER_EXISTS),
    ],
)
def test_existence_from_flags(is_file, is_dir, expected):
    result = ExistenceResult.from_flags(is_file, is_dir)
    assert result is expected
    assert result.has_file is is_file
    assert result.has_folder is is_dir


def test_split_path():
    assert split_path("/d/report.final.txt", EntryKind.FILE) == ("/d", "report.final", ".txt")
    assert split_path("/d/backup.old/", EntryKind.DIRECTORY) == ("/d", "backup.old", "")
    assert split_path("notes", EntryKind.FILE) == ("", "notes", "")


def test_combine_and_extensions():
    assert combine("/d", "a", ".txt") == "/d/a.txt"
    assert combine("", "a", ".txt") == "a.txt"
    assert normalize_extension("md") == ".md"
    assert normalize_extension(".md") == ".md"
    assert normalize_extension("  ") == ""


@pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
def test_is_blank(value):
    assert is_blank(value)
