import os

import pytest

from entryfs.config import Settings
from entryfs.domain.enums import EntryKind, ExistenceResult, NamingStrategy
from entryfs.domain.results import FailureKind
from entryfs.services.collision_resolver import resolve, resolve_unique


def occupied(*paths: str):
    taken = {os.path.normpath(p) for p in paths}
    seen = []

    def exists(path: str) -> ExistenceResult:
        seen.append(path)
        if os.path.normpath(path) in taken:
            return ExistenceResult.FILE_EXISTS
        return ExistenceResult.NONE

    exists.seen = seen
    return exists


def test_free_path_is_returned_unchanged_after_one_check():
    exists = occupied()
    result = resolve("/d/a.txt", EntryKind.FILE, NamingStrategy.INTEGER, 10, exists)
    assert result.ok
    assert result.value == "/d/a.txt"
    assert exists.seen == ["/d/a.txt"]


def test_integer_strategy_skips_taken_candidates():
    exists = occupied("/d/a.txt", *(f"/d/a-{i}.txt" for i in range(5)))
    result = resolve("/d/a.txt", EntryKind.FILE, NamingStrategy.INTEGER, 10, exists)
    assert result.value == "/d/a-5.txt"


def test_exhaustion_is_a_collision_failure_with_attempts():
    exists = occupied("/d/a.txt", "/d/a-0.txt", "/d/a-1.txt", "/d/a-2.txt")
    result = resolve("/d/a.txt", EntryKind.FILE, NamingStrategy.INTEGER, 3, exists)
    assert not result
    assert result.failure.kind is FailureKind.COLLISION
    assert result.failure.attempts == 3
    assert result.failure.path == "/d/a.txt"


def test_zero_attempts_fails_immediately_on_collision():
    exists = occupied("/d/a.txt")
    result = resolve("/d/a.txt", EntryKind.FILE, NamingStrategy.INTEGER, 0, exists)
    assert result.failure.kind is FailureKind.COLLISION
    assert result.failure.attempts == 0
    assert exists.seen == ["/d/a.txt"]


def test_folder_occupant_counts_as_collision():
    def exists(path):
        return ExistenceResult.FOLDER_EXISTS if path == "/d/a.txt" else ExistenceResult.NONE

    result = resolve("/d/a.txt", EntryKind.FILE, NamingStrategy.INTEGER, 5, exists)
    assert result.value == "/d/a-0.txt"


def test_directories_keep_dotted_names_whole():
    exists = occupied("/d/backup.old")
    result = resolve("/d/backup.old", EntryKind.DIRECTORY, NamingStrategy.INTEGER, 5, exists)
    assert result.value == "/d/backup.old-0"


def test_custom_name_format():
    exists = occupied("/d/a.txt")
    result = resolve(
        "/d/a.txt",
        EntryKind.FILE,
        NamingStrategy.INTEGER,
        5,
        exists,
        name_format="{name} ({suffix})",
    )
    assert result.value == "/d/a (0).txt"


def test_relative_path_without_directory():
    exists = occupied("a.txt")
    result = resolve("a.txt", EntryKind.FILE, NamingStrategy.INTEGER, 5, exists)
    assert result.value == "a-0.txt"


@pytest.mark.parametrize("strategy", list(NamingStrategy))
def test_generated_paths_never_exist(strategy):
    exists = occupied("/d/a.txt", "/d/a-0.txt", "/d/a-1.txt")
    result = resolve("/d/a.txt", EntryKind.FILE, strategy, 10, exists)
    assert result.ok
    assert result.value != "/d/a.txt"
    assert exists(result.value) is ExistenceResult.NONE
    assert result.value.startswith("/d/a-") and result.value.endswith(".txt")


def test_resolve_unique_reads_settings():
    exists = occupied("/d/a.txt", "/d/a-0.txt")
    settings = Settings(naming_strategy=NamingStrategy.INTEGER, max_attempts=1)
    result = resolve_unique("/d/a.txt", EntryKind.FILE, exists, settings)
    assert result.failure.kind is FailureKind.COLLISION
    assert result.failure.attempts == 1
