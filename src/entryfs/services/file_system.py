# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import logging
import os
from typing import Optional, Union

from ..adapters.storage.local_storage import LocalStorage
from ..adapters.storage.memory_storage import MemoryStorage
from ..adapters.storage.recording_storage import RecordingStorage
from ..config import Settings
from ..domain.enums import (
    CollisionPolicy,
    EntryKind,
    ExistenceResult,
    LookupMode,
    NamingStrategy,
    WriteMode,
)
from ..domain.errors import InvalidPathError
from ..domain.paths import is_blank
from ..domain.results import FailureKind, Result
from ..ports.storage import StoragePort
from .async_bridge import CancellationToken, bridge, configure_worker_pool
from .collision_resolver import resolve
from .directory_entry import CopyReport, DirectoryEntry
from .entry import apply_collision_policy
from .file_entry import Contents, FileEntry

logger = logging.getLogger(__name__)


def build_storage(settings: Settings) -> StoragePort:
    """Storage provider named by `settings.storage`, wrapped in a recorder when asked."""
    storage: StoragePort = MemoryStorage() if settings.storage == "memory" else LocalStorage()
    if settings.record_calls:
        storage = RecordingStorage(storage)
    return storage


class FileSystem:
    """
    Path-based entry point over one storage provider.

    Hands out `FileEntry` / `DirectoryEntry` handles and offers the common
    create/copy/move/delete operations directly by path. Every structural
    operation takes a `CollisionPolicy`.
    """

    def __init__(
        self,
        storage: Optional[StoragePort] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._settings = settings or Settings()
        self._storage = storage if storage is not None else build_storage(self._settings)
        logger.debug(
            "FileSystem using %s (strategy=%s, max_attempts=%d)",
            type(self._storage).__name__,
            self._settings.naming_strategy.value,
            self._settings.max_attempts,
        )

    @classmethod
    def from_env(cls, storage: Optional[StoragePort] = None) -> FileSystem:
        """
        Build from ENTRYFS_* environment settings and size the async worker pool.

        Without an explicit `storage` the provider comes from ENTRYFS_STORAGE
        (and ENTRYFS_RECORD_CALLS).
        """
        settings = Settings.from_env()
        configure_worker_pool(settings.async_workers)
        return cls(storage, settings)

    @property
    def storage(self) -> StoragePort:
        return self._storage

    @property
    def settings(self) -> Settings:
        return self._settings

    # --- handles --------------------------------------------------------------

    def file(self, path: str) -> FileEntry:
        """Handle on `path` without touching storage."""
        return FileEntry(path, self._storage, self._settings)

    def directory(self, path: str) -> DirectoryEntry:
        return DirectoryEntry(path, self._storage, self._settings)

    def exists(self, path: str) -> ExistenceResult:
        if is_blank(path):
            raise InvalidPathError("path can not be null, empty, or contain only white space.")
        return self._storage.exists(os.fspath(path))

    def get_file(
        self, path: str, lookup: LookupMode = LookupMode.CREATE_IF_MISSING
    ) -> Optional[FileEntry]:
        entry = self.file(path)
        if not self._storage.exists(entry.full_path).has_file:
            if lookup is LookupMode.RETURN_NONE_IF_MISSING:
                return None
            if lookup is LookupMode.THROW_IF_MISSING:
                raise FileNotFoundError(f"File [{entry.full_path}] does not exist!")
            self._storage.create_file(entry.full_path)
        return entry

    def get_directory(
        self, path: str, lookup: LookupMode = LookupMode.CREATE_IF_MISSING
    ) -> Optional[DirectoryEntry]:
        entry = self.directory(path)
        if not self._storage.exists(entry.full_path).has_folder:
            if lookup is LookupMode.RETURN_NONE_IF_MISSING:
                return None
            if lookup is LookupMode.THROW_IF_MISSING:
                raise FileNotFoundError(f"Directory [{entry.full_path}] does not exist!")
            self._storage.create_directory(entry.full_path)
        return entry

    def current_directory(self) -> DirectoryEntry:
        return self.directory(self._storage.current_directory())

    # --- creation -------------------------------------------------------------

    def create_file(
        self, path: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[FileEntry]:
        if is_blank(path):
            return Result.fail(FailureKind.VALIDATION, "path can not be null, empty, or contain only white space.")
        claim = apply_collision_policy(self._storage, os.fspath(path), EntryKind.FILE, policy, self._settings)
        if not claim:
            return Result.from_failure(claim.failure)
        if not claim.value.open_existing:
            self._storage.create_file(claim.value.path)
        return Result.success(self.file(claim.value.path))

    def create_directory(
        self, path: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[DirectoryEntry]:
        if is_blank(path):
            return Result.fail(FailureKind.VALIDATION, "path can not be null, empty, or contain only white space.")
        claim = apply_collision_policy(
            self._storage, os.fspath(path), EntryKind.DIRECTORY, policy, self._settings
        )
        if not claim:
            return Result.from_failure(claim.failure)
        if not claim.value.open_existing:
            self._storage.create_directory(claim.value.path)
        return Result.success(self.directory(claim.value.path))

    # --- by-path structural operations ----------------------------------------

    def _refuse_blank(self, **paths: str) -> Optional[Result]:
        for name, value in paths.items():
            if is_blank(value):
                return Result.fail(
                    FailureKind.VALIDATION,
                    f"{name} can not be null, empty, or contain only white space.",
                )
        return None

    def copy_file(
        self, source: str, destination: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[FileEntry]:
        refused = self._refuse_blank(source=source, destination=destination)
        if refused:
            return refused
        return self.file(source).copy(destination, policy)

    def move_file(
        self, source: str, destination: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[FileEntry]:
        refused = self._refuse_blank(source=source, destination=destination)
        if refused:
            return refused
        return self.file(source).move(destination, policy)

    def delete_file(self, path: str) -> Result[bool]:
        refused = self._refuse_blank(path=path)
        if refused:
            return refused
        return self.file(path).delete()

    def copy_directory(
        self,
        source: str,
        destination: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        file_policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
    ) -> CopyReport:
        refused = self._refuse_blank(source=source)
        if refused:
            return CopyReport(source=source or "", failures=[refused.failure])
        return self.directory(source).copy(destination, policy, file_policy)

    def move_directory(
        self, source: str, destination: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[DirectoryEntry]:
        refused = self._refuse_blank(source=source, destination=destination)
        if refused:
            return refused
        return self.directory(source).move(destination, policy)

    def delete_directory(self, path: str, recursive: bool = False) -> Result[bool]:
        refused = self._refuse_blank(path=path)
        if refused:
            return refused
        return self.directory(path).delete(recursive)

    def rename(
        self, path: str, name: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[Union[FileEntry, DirectoryEntry]]:
        """Rename whatever lives at `path`; a file keeps its extension."""
        refused = self._refuse_blank(path=path)
        if refused:
            return refused
        existence = self._storage.exists(os.fspath(path))
        if existence.has_file:
            return self.file(path).rename(name, policy)
        if existence.has_folder:
            return self.directory(path).rename(name, policy)
        return Result.fail(FailureKind.NOT_FOUND, f"Nothing exists at [{path}]", path=path)

    def unique_path(
        self,
        path: str,
        kind: EntryKind = EntryKind.FILE,
        strategy: Optional[NamingStrategy] = None,
        max_attempts: Optional[int] = None,
    ) -> Result[str]:
        if is_blank(path):
            return Result.fail(FailureKind.VALIDATION, "path can not be null, empty, or contain only white space.")
        return resolve(
            os.fspath(path),
            kind,
            strategy or self._settings.naming_strategy,
            self._settings.max_attempts if max_attempts is None else max_attempts,
            self._storage.exists,
            timestamp_format=self._settings.timestamp_format,
            name_format=self._settings.unique_name_format,
        )

    # --- whole-file helpers ---------------------------------------------------

    def read_all_text(self, path: str) -> str:
        """Decoded contents of `path`; a blank path raises `InvalidPathError`."""
        return self.file(path).read_all()

    def write_all_text(
        self, path: str, contents: Contents, write_mode: WriteMode = WriteMode.TRUNCATE
    ) -> Result[None]:
        refused = self._refuse_blank(path=path)
        if refused:
            return refused
        return self.file(path).write_all(contents, write_mode)

    # --- async counterparts ---------------------------------------------------

    async def exists_async(
        self, path: str, cancel_token: Optional[CancellationToken] = None
    ) -> ExistenceResult:
        return await bridge(self.exists, path, cancel_token=cancel_token)

    async def create_file_async(
        self,
        path: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[FileEntry]:
        return await bridge(self.create_file, path, policy, cancel_token=cancel_token)

    async def create_directory_async(
        self,
        path: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[DirectoryEntry]:
        return await bridge(self.create_directory, path, policy, cancel_token=cancel_token)

    async def copy_file_async(
        self,
        source: str,
        destination: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[FileEntry]:
        return await bridge(self.copy_file, source, destination, policy, cancel_token=cancel_token)

    async def move_file_async(
        self,
        source: str,
        destination: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[FileEntry]:
        return await bridge(self.move_file, source, destination, policy, cancel_token=cancel_token)

    async def delete_file_async(
        self, path: str, cancel_token: Optional[CancellationToken] = None
    ) -> Result[bool]:
        return await bridge(self.delete_file, path, cancel_token=cancel_token)

    async def copy_directory_async(
        self,
        source: str,
        destination: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        file_policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CopyReport:
        return await bridge(
            self.copy_directory, source, destination, policy, file_policy, cancel_token=cancel_token
        )

    async def read_all_text_async(
        self, path: str, cancel_token: Optional[CancellationToken] = None
    ) -> str:
        return await bridge(self.read_all_text, path, cancel_token=cancel_token)
