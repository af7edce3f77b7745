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
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..adapters.storage.local_storage import LocalStorage
from ..config import Settings
from ..domain.enums import CollisionPolicy, EntryKind, EntryState, ExistenceResult
from ..domain.errors import EntryExistsError, InvalidPathError
from ..domain.paths import is_blank, is_inside, split_path
from ..domain.results import FailureKind, Result
from ..ports.storage import StoragePort
from .async_bridge import CancellationToken, bridge
from .collision_resolver import resolve_unique

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Claim:
    """
    A destination that is safe to act on.

    `open_existing` is set when OPEN_IF_EXISTS found an entry there: the caller
    must hand back that entry instead of performing its operation.
    """

    path: str
    open_existing: bool = False


def remove_existing(storage: StoragePort, path: str, existence: ExistenceResult) -> None:
    if existence.has_file:
        storage.delete_file(path)
    if existence.has_folder:
        storage.delete_directory(path, recursive=True)


def apply_collision_policy(
    storage: StoragePort,
    path: str,
    kind: EntryKind,
    policy: CollisionPolicy,
    settings: Settings,
) -> Result[Claim]:
    """
    Decide what to do with `path` before a structural operation writes there.

    Only the GENERATE_UNIQUE_NAME policies consult the collision resolver; the
    others are a branch on the existence check. THROW_IF_EXISTS raises
    `EntryExistsError`; every other collision outcome is a returned failure.
    """
    existence = storage.exists(path)
    if existence is ExistenceResult.NONE:
        return Result.success(Claim(path))

    if policy is CollisionPolicy.FAIL_IF_EXISTS:
        logger.info("collision: [%s] already exists (fail_if_exists)", path)
        return Result.fail(
            FailureKind.COLLISION, f"Entry [{path}] already exists", path=path
        )

    if policy is CollisionPolicy.THROW_IF_EXISTS:
        raise EntryExistsError(path)

    if policy is CollisionPolicy.OPEN_IF_EXISTS:
        return Result.success(Claim(path, open_existing=True))

    if policy is CollisionPolicy.REPLACE_EXISTING:
        logger.debug("collision: replacing existing entry at %s", path)
        remove_existing(storage, path, existence)
        return Result.success(Claim(path))

    if policy is CollisionPolicy.GENERATE_UNIQUE_NAME:
        resolved = resolve_unique(path, kind, storage.exists, settings)
        if not resolved:
            return Result.from_failure(resolved.failure)
        return Result.success(Claim(resolved.value))

    # GENERATE_UNIQUE_NAME_FOR_EXISTING: the occupant moves aside, we keep the name.
    occupant = EntryKind.DIRECTORY if existence is ExistenceResult.FOLDER_EXISTS else EntryKind.FILE
    aside = resolve_unique(path, occupant, storage.exists, settings)
    if not aside:
        return Result.from_failure(aside.failure)
    logger.debug("collision: moving existing %s aside to %s", path, aside.value)
    storage.move(path, aside.value)
    return Result.success(Claim(path))


class Entry:
    """
    State shared by file and directory handles.

    Construction performs no I/O. A handle is CLOSED until a stream is acquired
    and structural operations (rename/move/copy/delete) are refused while it
    is OPEN.
    """

    kind: EntryKind = EntryKind.FILE

    def __init__(
        self,
        path: str,
        storage: Optional[StoragePort] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        if is_blank(path):
            raise InvalidPathError("path can not be null, empty, or contain only white space.")
        self._storage = storage if storage is not None else LocalStorage()
        self._settings = settings or Settings()
        self._state = EntryState.CLOSED
        self._set_path(os.fspath(path))

    # --- identity -------------------------------------------------------------

    def _set_path(self, path: str) -> None:
        self._directory, self._name, self._extension = split_path(path, self.kind)
        self._full_path = path

    @property
    def full_path(self) -> str:
        return self._full_path

    @property
    def directory(self) -> str:
        """Path of the containing directory."""
        return self._directory

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self):
        """Handle on the containing directory, or None at a root."""
        from .directory_entry import DirectoryEntry

        if not self._directory or self._directory == self._full_path:
            return None
        return DirectoryEntry(self._directory, self._storage, self._settings)

    @property
    def storage(self) -> StoragePort:
        return self._storage

    @property
    def settings(self) -> Settings:
        return self._settings

    def __str__(self) -> str:
        return self._full_path

    def __fspath__(self) -> str:
        return self._full_path

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._full_path!r}, state={self._state.value})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Entry):
            return self._full_path == other._full_path
        if isinstance(other, str):
            return self._full_path == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._full_path)

    # --- state ----------------------------------------------------------------

    @property
    def state(self) -> EntryState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is EntryState.OPEN

    def close(self) -> bool:
        self._state = EntryState.CLOSED
        return True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            if getattr(self, "_state", None) is EntryState.OPEN:
                self.close()
        except Exception:
            pass

    def _refuse_if_open(self, operation: str) -> Optional[Result]:
        if self.is_open:
            logger.info("%s refused: %s is open", operation, self._full_path)
            return Result.fail(
                FailureKind.INVALID_STATE,
                f"Cannot {operation} [{self._full_path}] while it is open",
                path=self._full_path,
            )
        return None

    @staticmethod
    def _refuse_if_blank(value: Optional[str], parameter: str) -> Optional[Result]:
        if is_blank(value):
            return Result.fail(
                FailureKind.VALIDATION,
                f"{parameter} can not be null, empty, or contain only white space.",
            )
        return None

    def _refuse_if_ancestor(self, operation: str, destination: str) -> Optional[Result]:
        """VALIDATION failure when `destination` is this entry or one of its ancestors."""
        if is_inside(self._full_path, destination):
            return Result.fail(
                FailureKind.VALIDATION,
                f"Cannot {operation} [{self._full_path}] onto its own parent [{destination}]",
                path=destination,
            )
        return None

    def _claim(self, path: str, kind: EntryKind, policy: CollisionPolicy) -> Result[Claim]:
        return apply_collision_policy(self._storage, path, kind, policy, self._settings)

    # --- queries --------------------------------------------------------------

    @property
    def exists(self) -> bool:
        existence = self._storage.exists(self._full_path)
        if self.kind is EntryKind.DIRECTORY:
            return existence.has_folder
        return existence.has_file

    def creation_time(self, utc: bool = False) -> Optional[datetime]:
        return self._storage.creation_time(self._full_path, utc)

    def last_access_time(self, utc: bool = False) -> Optional[datetime]:
        return self._storage.last_access_time(self._full_path, utc)

    def last_modified_time(self, utc: bool = False) -> Optional[datetime]:
        return self._storage.last_modified_time(self._full_path, utc)

    async def creation_time_async(
        self, utc: bool = False, cancel_token: Optional[CancellationToken] = None
    ) -> Optional[datetime]:
        return await bridge(self.creation_time, utc, cancel_token=cancel_token)

    async def last_access_time_async(
        self, utc: bool = False, cancel_token: Optional[CancellationToken] = None
    ) -> Optional[datetime]:
        return await bridge(self.last_access_time, utc, cancel_token=cancel_token)

    async def last_modified_time_async(
        self, utc: bool = False, cancel_token: Optional[CancellationToken] = None
    ) -> Optional[datetime]:
        return await bridge(self.last_modified_time, utc, cancel_token=cancel_token)
