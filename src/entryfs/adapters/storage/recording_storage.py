# Licensed under the Apache License, Version 2.0
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, BinaryIO, List, Optional, Tuple

from ...domain.enums import AccessMode, ExistenceResult, OpenMode
from ...ports.storage import StoragePort

logger = logging.getLogger(__name__)

MUTATIONS = frozenset(
    {
        "create_file",
        "create_directory",
        "delete_file",
        "delete_directory",
        "move",
        "copy_file",
        "open_stream",
    }
)


class RecordingStorage(StoragePort):
    """
    Decorator that logs and records every call before delegating.

    `calls` keeps (method name, args) tuples in call order; handy for auditing
    what an operation actually asked the provider to do.
    """

    def __init__(self, inner: StoragePort) -> None:
        self._inner = inner
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []

    def _record(self, name: str, *args: Any) -> None:
        logger.debug("storage call: %s%r", name, args)
        self.calls.append((name, args))

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def calls_to(self, *names: str) -> List[Tuple[str, Tuple[Any, ...]]]:
        return [c for c in self.calls if c[0] in names]

    @property
    def mutations(self) -> List[Tuple[str, Tuple[Any, ...]]]:
        return [c for c in self.calls if c[0] in MUTATIONS]

    def reset(self) -> None:
        self.calls.clear()

    # --- StoragePort ----------------------------------------------------------

    def exists(self, path: str) -> ExistenceResult:
        self._record("exists", path)
        return self._inner.exists(path)

    def create_file(self, path: str) -> None:
        self._record("create_file", path)
        self._inner.create_file(path)

    def create_directory(self, path: str) -> None:
        self._record("create_directory", path)
        self._inner.create_directory(path)

    def delete_file(self, path: str) -> None:
        self._record("delete_file", path)
        self._inner.delete_file(path)

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        self._record("delete_directory", path, recursive)
        self._inner.delete_directory(path, recursive)

    def move(self, src: str, dst: str) -> None:
        self._record("move", src, dst)
        self._inner.move(src, dst)

    def copy_file(self, src: str, dst: str, overwrite: bool = False) -> None:
        self._record("copy_file", src, dst, overwrite)
        self._inner.copy_file(src, dst, overwrite)

    def open_stream(
        self, path: str, open_mode: OpenMode, access_mode: AccessMode
    ) -> BinaryIO:
        self._record("open_stream", path, open_mode, access_mode)
        return self._inner.open_stream(path, open_mode, access_mode)

    def list_files(self, path: str) -> List[str]:
        self._record("list_files", path)
        return self._inner.list_files(path)

    def list_directories(self, path: str) -> List[str]:
        self._record("list_directories", path)
        return self._inner.list_directories(path)

    def file_size(self, path: str) -> int:
        self._record("file_size", path)
        return self._inner.file_size(path)

    def creation_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        self._record("creation_time", path, utc)
        return self._inner.creation_time(path, utc)

    def last_access_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        self._record("last_access_time", path, utc)
        return self._inner.last_access_time(path, utc)

    def last_modified_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        self._record("last_modified_time", path, utc)
        return self._inner.last_modified_time(path, utc)

    def current_directory(self) -> str:
        self._record("current_directory")
        return self._inner.current_directory()
