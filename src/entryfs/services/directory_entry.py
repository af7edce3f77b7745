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

import fnmatch
import logging
import os
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ..domain.enums import CollisionPolicy, EntryKind, ExistenceResult, SearchScope
from ..domain.paths import is_inside
from ..domain.results import Failure, FailureKind, Result
from .async_bridge import CancellationToken, bridge
from .entry import Entry
from .file_entry import FileEntry

logger = logging.getLogger(__name__)


@dataclass
class CopyReport:
    """
    Outcome of a recursive directory copy.

    Child failures are collected, never raised, so one bad entry does not stop
    its siblings from being copied. `destination` is None when the copy could
    not start at all.
    """

    source: str
    destination: Optional[DirectoryEntry] = None
    copied: List[str] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.destination is not None and not self.failures

    def __bool__(self) -> bool:
        return self.ok


class DirectoryEntry(Entry):
    """Handle on a directory. Directories never hold a stream."""

    kind = EntryKind.DIRECTORY

    def _child(self, name: str) -> str:
        return os.path.join(self._full_path, name)

    def _file(self, path: str) -> FileEntry:
        return FileEntry(path, self._storage, self._settings)

    def _directory_entry(self, path: str) -> DirectoryEntry:
        return DirectoryEntry(path, self._storage, self._settings)

    # --- creation -------------------------------------------------------------

    def create(self) -> Result[DirectoryEntry]:
        """Create this directory (and missing parents) if it does not exist."""
        if self._storage.exists(self._full_path) is ExistenceResult.NONE:
            self._storage.create_directory(self._full_path)
        return Result.success(self)

    def _ensure_exists(self) -> None:
        if not self.exists:
            self._storage.create_directory(self._full_path)

    def create_file(
        self, name: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[FileEntry]:
        refused = self._refuse_if_blank(name, "name")
        if refused:
            return refused
        self._ensure_exists()
        claim = self._claim(self._child(name), EntryKind.FILE, policy)
        if not claim:
            return Result.from_failure(claim.failure)
        if not claim.value.open_existing:
            self._storage.create_file(claim.value.path)
            logger.debug("created file %s", claim.value.path)
        return Result.success(self._file(claim.value.path))

    def create_directory(
        self, name: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[DirectoryEntry]:
        refused = self._refuse_if_blank(name, "name")
        if refused:
            return refused
        self._ensure_exists()
        claim = self._claim(self._child(name), EntryKind.DIRECTORY, policy)
        if not claim:
            return Result.from_failure(claim.failure)
        if not claim.value.open_existing:
            self._storage.create_directory(claim.value.path)
            logger.debug("created directory %s", claim.value.path)
        return Result.success(self._directory_entry(claim.value.path))

    # --- deletion -------------------------------------------------------------

    def delete(self, recursive: bool = False) -> Result[bool]:
        refused = self._refuse_if_open("delete")
        if refused:
            return refused
        if not self.exists:
            return Result.fail(
                FailureKind.NOT_FOUND,
                f"Cannot delete [{self._full_path}]: directory does not exist",
                path=self._full_path,
            )
        self._storage.delete_directory(self._full_path, recursive)
        logger.debug("deleted directory %s (recursive=%s)", self._full_path, recursive)
        return Result.success(True)

    def delete_file(self, name: str) -> Result[bool]:
        refused = self._refuse_if_blank(name, "name")
        if refused:
            return refused
        return self._file(self._child(name)).delete()

    def delete_directory(self, name: str, recursive: bool = False) -> Result[bool]:
        refused = self._refuse_if_blank(name, "name")
        if refused:
            return refused
        return self._directory_entry(self._child(name)).delete(recursive)

    # --- listing --------------------------------------------------------------

    def _walk(self, scope: SearchScope) -> Iterator[Tuple[EntryKind, str]]:
        """Yield (kind, full path) for every entry in `scope`, files first per level."""
        max_depth = 0 if scope is SearchScope.TOP_DIRECTORY_ONLY else None
        min_depth = 1 if scope is SearchScope.SUB_DIRECTORIES_ONLY else 0

        def descend(path: str, depth: int) -> Iterator[Tuple[EntryKind, str]]:
            if depth >= min_depth:
                for f in self._storage.list_files(path):
                    yield EntryKind.FILE, f
            for d in self._storage.list_directories(path):
                if depth >= min_depth:
                    yield EntryKind.DIRECTORY, d
                if max_depth is None or depth < max_depth:
                    yield from descend(d, depth + 1)

        yield from descend(self._full_path, 0)

    def _matching(
        self, kind: Optional[EntryKind], pattern: str, scope: SearchScope
    ) -> Iterator[Tuple[EntryKind, str]]:
        for found_kind, path in self._walk(scope):
            if kind is not None and found_kind is not kind:
                continue
            if fnmatch.fnmatch(os.path.basename(path), pattern):
                yield found_kind, path

    def _relative(self, path: str) -> str:
        return os.path.relpath(path, self._full_path)

    def get_file_names(self, pattern: str = "*", scope: SearchScope = SearchScope.ALL) -> List[str]:
        """Paths (relative to this directory) of the files matching `pattern`."""
        return [self._relative(p) for _, p in self._matching(EntryKind.FILE, pattern, scope)]

    def get_files(self, pattern: str = "*", scope: SearchScope = SearchScope.ALL) -> List[FileEntry]:
        return [self._file(p) for _, p in self._matching(EntryKind.FILE, pattern, scope)]

    def get_directory_names(
        self, pattern: str = "*", scope: SearchScope = SearchScope.ALL
    ) -> List[str]:
        return [self._relative(p) for _, p in self._matching(EntryKind.DIRECTORY, pattern, scope)]

    def get_directories(
        self, pattern: str = "*", scope: SearchScope = SearchScope.ALL
    ) -> List[DirectoryEntry]:
        return [self._directory_entry(p) for _, p in self._matching(EntryKind.DIRECTORY, pattern, scope)]

    def get_entries(self, pattern: str = "*", scope: SearchScope = SearchScope.ALL) -> List[Entry]:
        out: List[Entry] = []
        for kind, path in self._matching(None, pattern, scope):
            out.append(self._file(path) if kind is EntryKind.FILE else self._directory_entry(path))
        return out

    def _find(
        self, kind: EntryKind, name: str, scope: SearchScope, ignore_case: bool
    ) -> Optional[str]:
        wanted = name.lower() if ignore_case else name
        for found_kind, path in self._walk(scope):
            if found_kind is not kind:
                continue
            leaf = os.path.basename(path)
            if (leaf.lower() if ignore_case else leaf) == wanted:
                return path
        return None

    def file_exists(
        self,
        name: str,
        scope: SearchScope = SearchScope.TOP_DIRECTORY_ONLY,
        ignore_case: bool = True,
    ) -> bool:
        return self._find(EntryKind.FILE, name, scope, ignore_case) is not None

    def directory_exists(
        self,
        name: str,
        scope: SearchScope = SearchScope.TOP_DIRECTORY_ONLY,
        ignore_case: bool = True,
    ) -> bool:
        return self._find(EntryKind.DIRECTORY, name, scope, ignore_case) is not None

    def item_exists(self, name: str) -> ExistenceResult:
        return self._storage.exists(self._child(name))

    def get_file(
        self,
        name: str,
        scope: SearchScope = SearchScope.TOP_DIRECTORY_ONLY,
        ignore_case: bool = True,
    ) -> Optional[FileEntry]:
        path = self._find(EntryKind.FILE, name, scope, ignore_case)
        return None if path is None else self._file(path)

    def get_directory(
        self,
        name: str,
        scope: SearchScope = SearchScope.TOP_DIRECTORY_ONLY,
        ignore_case: bool = True,
    ) -> Optional[DirectoryEntry]:
        path = self._find(EntryKind.DIRECTORY, name, scope, ignore_case)
        return None if path is None else self._directory_entry(path)

    # --- structural operations ------------------------------------------------

    def _relocate(self, operation: str, destination: str, policy: CollisionPolicy) -> Result[DirectoryEntry]:
        if os.path.normpath(destination) == os.path.normpath(self._full_path):
            return Result.success(self)
        if is_inside(destination, self._full_path):
            return Result.fail(
                FailureKind.VALIDATION,
                f"Cannot {operation} [{self._full_path}] into itself",
                path=destination,
            )
        refused = self._refuse_if_ancestor(operation, destination)
        if refused:
            return refused
        if not self.exists:
            return Result.fail(
                FailureKind.NOT_FOUND,
                f"Cannot {operation} [{self._full_path}]: directory does not exist",
                path=self._full_path,
            )

        claim = self._claim(destination, EntryKind.DIRECTORY, policy)
        if not claim:
            return Result.from_failure(claim.failure)
        if claim.value.open_existing:
            return Result.success(self._directory_entry(claim.value.path))

        self._storage.move(self._full_path, claim.value.path)
        logger.debug("%s: %s -> %s", operation, self._full_path, claim.value.path)
        self._set_path(claim.value.path)
        return Result.success(self)

    def rename(
        self, name: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[DirectoryEntry]:
        refused = self._refuse_if_open("rename") or self._refuse_if_blank(name, "name")
        if refused:
            return refused
        if os.sep in name or (os.altsep and os.altsep in name):
            return Result.fail(FailureKind.VALIDATION, f"name [{name}] must not contain a path separator")
        return self._relocate("rename", os.path.join(self._directory, name), policy)

    def move(
        self, destination: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[DirectoryEntry]:
        """Move the directory to the full path `destination`."""
        refused = self._refuse_if_open("move") or self._refuse_if_blank(destination, "destination")
        if refused:
            return refused
        return self._relocate("move", os.fspath(destination), policy)

    def copy(
        self,
        destination: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        file_policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
    ) -> CopyReport:
        """
        Recursively copy this directory to the full path `destination`.

        `policy` applies to the destination and to every nested directory,
        `file_policy` to every copied file. THROW_IF_EXISTS and storage errors
        still propagate.
        """
        report = CopyReport(source=self._full_path)
        refused = self._refuse_if_open("copy") or self._refuse_if_blank(destination, "destination")
        if refused:
            report.failures.append(refused.failure)
            return report
        destination = os.fspath(destination)
        if is_inside(destination, self._full_path):
            report.failures.append(
                Failure(FailureKind.VALIDATION, "Cannot copy a directory into itself", path=destination)
            )
            return report
        refused = self._refuse_if_ancestor("copy", destination)
        if refused:
            report.failures.append(refused.failure)
            return report
        if not self.exists:
            report.failures.append(
                Failure(
                    FailureKind.NOT_FOUND,
                    f"Cannot copy [{self._full_path}]: directory does not exist",
                    path=self._full_path,
                )
            )
            return report

        report.destination = self._copy_tree(self._full_path, destination, policy, file_policy, report)
        if report.failures:
            logger.warning(
                "copy %s -> %s finished with %d failure(s)",
                self._full_path,
                destination,
                len(report.failures),
            )
        return report

    def _copy_tree(
        self,
        source: str,
        destination: str,
        policy: CollisionPolicy,
        file_policy: CollisionPolicy,
        report: CopyReport,
    ) -> Optional[DirectoryEntry]:
        claim = self._claim(destination, EntryKind.DIRECTORY, policy)
        if not claim:
            report.failures.append(claim.failure)
            return None
        target = claim.value.path
        if claim.value.open_existing:
            return self._directory_entry(target)

        self._storage.create_directory(target)
        report.copied.append(target)

        for f in self._storage.list_files(source):
            copied = self._file(f).copy(os.path.join(target, os.path.basename(f)), file_policy)
            if copied:
                report.copied.append(copied.value.full_path)
            else:
                logger.warning("copy: skipped %s (%s)", f, copied.failure)
                report.failures.append(copied.failure)

        for d in self._storage.list_directories(source):
            self._copy_tree(d, os.path.join(target, os.path.basename(d)), policy, file_policy, report)

        return self._directory_entry(target)

    # --- async counterparts ---------------------------------------------------

    async def create_file_async(
        self,
        name: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[FileEntry]:
        return await bridge(self.create_file, name, policy, cancel_token=cancel_token)

    async def create_directory_async(
        self,
        name: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[DirectoryEntry]:
        return await bridge(self.create_directory, name, policy, cancel_token=cancel_token)

    async def delete_async(
        self, recursive: bool = False, cancel_token: Optional[CancellationToken] = None
    ) -> Result[bool]:
        return await bridge(self.delete, recursive, cancel_token=cancel_token)

    async def get_files_async(
        self,
        pattern: str = "*",
        scope: SearchScope = SearchScope.ALL,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[FileEntry]:
        return await bridge(self.get_files, pattern, scope, cancel_token=cancel_token)

    async def get_directories_async(
        self,
        pattern: str = "*",
        scope: SearchScope = SearchScope.ALL,
        cancel_token: Optional[CancellationToken] = None,
    ) -> List[DirectoryEntry]:
        return await bridge(self.get_directories, pattern, scope, cancel_token=cancel_token)

    async def rename_async(
        self,
        name: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[DirectoryEntry]:
        return await bridge(self.rename, name, policy, cancel_token=cancel_token)

    async def move_async(
        self,
        destination: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[DirectoryEntry]:
        return await bridge(self.move, destination, policy, cancel_token=cancel_token)

    async def copy_async(
        self,
        destination: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        file_policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> CopyReport:
        return await bridge(self.copy, destination, policy, file_policy, cancel_token=cancel_token)
