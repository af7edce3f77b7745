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
from typing import BinaryIO, Iterator, List, Optional, Union

from ..config import Settings
from ..domain.enums import (
    AccessMode,
    CollisionPolicy,
    EntryKind,
    EntryState,
    OpenMode,
    WriteMode,
)
from ..domain.paths import combine, normalize_extension
from ..domain.results import FailureKind, Result
from ..ports.storage import StoragePort
from .access_validator import ensure_legal
from .async_bridge import CancellationToken, bridge
from .entry import Entry

logger = logging.getLogger(__name__)

Contents = Union[str, bytes]


class FileEntry(Entry):
    """
    Handle on a file.

    Stream operations need the handle to be open with a compatible access mode;
    whole-file operations (`read_all`, `write_all`, ...) open and close their
    own stream. Structural operations (rename/move/copy/delete/change_extension)
    are refused while a stream is open.
    """

    kind = EntryKind.FILE

    def __init__(
        self,
        path: str,
        storage: Optional[StoragePort] = None,
        settings: Optional[Settings] = None,
        *,
        encoding: Optional[str] = None,
    ) -> None:
        super().__init__(path, storage, settings)
        self.encoding = encoding or self._settings.encoding
        self._stream: Optional[BinaryIO] = None
        self._access = AccessMode.NONE
        self._mode = OpenMode.NONE

    @property
    def extension(self) -> str:
        return self._extension

    @property
    def stream(self) -> Optional[BinaryIO]:
        return self._stream

    @property
    def access_mode(self) -> AccessMode:
        return self._access

    @property
    def open_mode(self) -> OpenMode:
        return self._mode

    def size(self) -> int:
        return self._storage.file_size(self._full_path)

    # --- lifecycle ------------------------------------------------------------

    def open(
        self,
        access: AccessMode = AccessMode.READ_WRITE,
        mode: OpenMode = OpenMode.OPEN_OR_CREATE,
    ) -> Result[BinaryIO]:
        legal = ensure_legal(access, mode)
        if not legal:
            logger.info("open refused for %s: %s", self._full_path, legal.failure.message)
            return Result.from_failure(legal.failure)

        self.close()
        stream = self._storage.open_stream(self._full_path, mode, access)
        self._stream = stream
        self._access = access
        self._mode = mode
        self._state = EntryState.OPEN
        logger.debug("opened %s (%s, %s)", self._full_path, access.value, mode.value)
        return Result.success(stream)

    def close(self) -> bool:
        """Release the stream. Closing a closed handle is a no-op."""
        if not self.is_open:
            return True
        stream = self._stream
        try:
            if self._access.can_write:
                stream.flush()
        finally:
            stream.close()
            self._stream = None
            self._access = AccessMode.NONE
            self._mode = OpenMode.NONE
            self._state = EntryState.CLOSED
        return True

    # --- stream operations ----------------------------------------------------

    def _refuse_stream(self, reading: bool) -> Optional[Result]:
        if not self.is_open:
            return Result.fail(
                FailureKind.INVALID_STATE,
                f"[{self._full_path}] has no open stream",
                path=self._full_path,
            )
        allowed = self._access.can_read if reading else self._access.can_write
        if not allowed:
            action = "read from" if reading else "write to"
            return Result.fail(
                FailureKind.INVALID_MODE,
                f"Cannot {action} [{self._full_path}] opened with {self._access.value} access",
                path=self._full_path,
            )
        return None

    @property
    def eos(self) -> bool:
        """True when the stream position is at (or past) the end, or nothing is open."""
        if not self.is_open:
            return True
        position = self._stream.tell()
        end = self._stream.seek(0, os.SEEK_END)
        self._stream.seek(position)
        return position >= end

    def stream_read(self, count: int) -> Result[bytes]:
        if count < 0:
            return Result.fail(FailureKind.VALIDATION, "count must be >= 0")
        refused = self._refuse_stream(reading=True)
        if refused:
            return refused
        return Result.success(self._stream.read(count))

    def stream_read_all(self) -> Result[bytes]:
        refused = self._refuse_stream(reading=True)
        if refused:
            return refused
        return Result.success(self._stream.read())

    def stream_read_line(self) -> Result[bytes]:
        refused = self._refuse_stream(reading=True)
        if refused:
            return refused
        return Result.success(self._stream.readline())

    def stream_set_position(self, position: int) -> Result[int]:
        if position < 0:
            return Result.fail(FailureKind.VALIDATION, "position must be >= 0")
        if not self.is_open:
            return Result.fail(
                FailureKind.INVALID_STATE,
                f"[{self._full_path}] has no open stream",
                path=self._full_path,
            )
        current = self._stream.tell()
        end = self._stream.seek(0, os.SEEK_END)
        if position > end:
            self._stream.seek(current)
            return Result.fail(
                FailureKind.VALIDATION,
                f"position {position} is past the end of the stream ({end})",
            )
        return Result.success(self._stream.seek(position))

    def stream_write(self, contents: Contents) -> Result[int]:
        refused = self._refuse_stream(reading=False)
        if refused:
            return refused
        return Result.success(self._stream.write(self._encode(contents)))

    def stream_write_line(self, line: Contents) -> Result[int]:
        return self.stream_write(self._encode(line) + b"\n")

    def _encode(self, contents: Contents) -> bytes:
        if isinstance(contents, str):
            return contents.encode(self.encoding)
        return bytes(contents)

    # --- whole-file operations ------------------------------------------------

    def read_all_bytes(self) -> bytes:
        with self._storage.open_stream(self._full_path, OpenMode.OPEN, AccessMode.READ) as fh:
            return fh.read()

    def read_all(self) -> str:
        return self.read_all_bytes().decode(self.encoding)

    def read_all_lines(self) -> List[str]:
        return self.read_all().splitlines()

    def read_lines(self) -> Iterator[str]:
        """Lazily yield lines without their terminators."""
        with self._storage.open_stream(self._full_path, OpenMode.OPEN, AccessMode.READ) as fh:
            for raw in fh:
                yield raw.decode(self.encoding).rstrip("\r\n")

    def write_all(self, contents: Contents, write_mode: WriteMode = WriteMode.TRUNCATE) -> Result[None]:
        refused = self._refuse_if_open("write")
        if refused:
            return refused
        mode = OpenMode.APPEND if write_mode is WriteMode.APPEND else OpenMode.CREATE
        with self._storage.open_stream(self._full_path, mode, AccessMode.WRITE) as fh:
            fh.write(self._encode(contents))
        return Result.success()

    def write_line(self, line: Contents, write_mode: WriteMode = WriteMode.TRUNCATE) -> Result[None]:
        return self.write_all(self._encode(line) + b"\n", write_mode)

    def clear(self) -> Result[None]:
        return self.write_all(b"", WriteMode.TRUNCATE)

    # --- structural operations ------------------------------------------------

    def _relocate(self, operation: str, destination: str, policy: CollisionPolicy) -> Result[FileEntry]:
        if os.path.normpath(destination) == os.path.normpath(self._full_path):
            return Result.success(self)
        refused = self._refuse_if_ancestor(operation, destination)
        if refused:
            return refused
        if not self.exists:
            return Result.fail(
                FailureKind.NOT_FOUND,
                f"Cannot {operation} [{self._full_path}]: file does not exist",
                path=self._full_path,
            )

        claim = self._claim(destination, EntryKind.FILE, policy)
        if not claim:
            return Result.from_failure(claim.failure)
        if claim.value.open_existing:
            return Result.success(self._sibling(claim.value.path))

        self._storage.move(self._full_path, claim.value.path)
        logger.debug("%s: %s -> %s", operation, self._full_path, claim.value.path)
        self._set_path(claim.value.path)
        return Result.success(self)

    def rename(self, name: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS) -> Result[FileEntry]:
        """Give the file a new base name, keeping its directory and extension."""
        refused = self._refuse_if_open("rename") or self._refuse_if_blank(name, "name")
        if refused:
            return refused
        if os.sep in name or (os.altsep and os.altsep in name):
            return Result.fail(FailureKind.VALIDATION, f"name [{name}] must not contain a path separator")
        return self._relocate("rename", combine(self._directory, name, self._extension), policy)

    def change_extension(
        self, extension: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS
    ) -> Result[FileEntry]:
        refused = self._refuse_if_open("change the extension of") or self._refuse_if_blank(
            extension, "extension"
        )
        if refused:
            return refused
        new_path = combine(self._directory, self._name, normalize_extension(extension))
        return self._relocate("change_extension", new_path, policy)

    def move(self, destination: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS) -> Result[FileEntry]:
        """Move the file to the full path `destination`."""
        refused = self._refuse_if_open("move") or self._refuse_if_blank(destination, "destination")
        if refused:
            return refused
        return self._relocate("move", os.fspath(destination), policy)

    def copy(self, destination: str, policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS) -> Result[FileEntry]:
        """Copy to the full path `destination`; returns a handle on the copy."""
        refused = self._refuse_if_open("copy") or self._refuse_if_blank(destination, "destination")
        if refused:
            return refused
        destination = os.fspath(destination)
        if os.path.normpath(destination) == os.path.normpath(self._full_path):
            return Result.fail(FailureKind.VALIDATION, "Cannot copy a file onto itself", path=destination)
        refused = self._refuse_if_ancestor("copy", destination)
        if refused:
            return refused
        if not self.exists:
            return Result.fail(
                FailureKind.NOT_FOUND,
                f"Cannot copy [{self._full_path}]: file does not exist",
                path=self._full_path,
            )

        claim = self._claim(destination, EntryKind.FILE, policy)
        if not claim:
            return Result.from_failure(claim.failure)
        if not claim.value.open_existing:
            self._storage.copy_file(self._full_path, claim.value.path, overwrite=False)
            logger.debug("copy: %s -> %s", self._full_path, claim.value.path)
        return Result.success(self._sibling(claim.value.path))

    def delete(self) -> Result[bool]:
        refused = self._refuse_if_open("delete")
        if refused:
            return refused
        if not self.exists:
            return Result.fail(
                FailureKind.NOT_FOUND,
                f"Cannot delete [{self._full_path}]: file does not exist",
                path=self._full_path,
            )
        self._storage.delete_file(self._full_path)
        logger.debug("deleted %s", self._full_path)
        return Result.success(True)

    def _sibling(self, path: str) -> FileEntry:
        return FileEntry(path, self._storage, self._settings, encoding=self.encoding)

    # --- async counterparts ---------------------------------------------------

    async def open_async(
        self,
        access: AccessMode = AccessMode.READ_WRITE,
        mode: OpenMode = OpenMode.OPEN_OR_CREATE,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[BinaryIO]:
        return await bridge(self.open, access, mode, cancel_token=cancel_token)

    async def close_async(self, cancel_token: Optional[CancellationToken] = None) -> bool:
        return await bridge(self.close, cancel_token=cancel_token)

    async def read_all_async(self, cancel_token: Optional[CancellationToken] = None) -> str:
        return await bridge(self.read_all, cancel_token=cancel_token)

    async def read_all_bytes_async(self, cancel_token: Optional[CancellationToken] = None) -> bytes:
        return await bridge(self.read_all_bytes, cancel_token=cancel_token)

    async def write_all_async(
        self,
        contents: Contents,
        write_mode: WriteMode = WriteMode.TRUNCATE,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[None]:
        return await bridge(self.write_all, contents, write_mode, cancel_token=cancel_token)

    async def stream_read_async(
        self, count: int, cancel_token: Optional[CancellationToken] = None
    ) -> Result[bytes]:
        return await bridge(self.stream_read, count, cancel_token=cancel_token)

    async def stream_write_async(
        self, contents: Contents, cancel_token: Optional[CancellationToken] = None
    ) -> Result[int]:
        return await bridge(self.stream_write, contents, cancel_token=cancel_token)

    async def clear_async(self, cancel_token: Optional[CancellationToken] = None) -> Result[None]:
        return await bridge(self.clear, cancel_token=cancel_token)

    async def rename_async(
        self,
        name: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[FileEntry]:
        return await bridge(self.rename, name, policy, cancel_token=cancel_token)

    async def change_extension_async(
        self,
        extension: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[FileEntry]:
        return await bridge(self.change_extension, extension, policy, cancel_token=cancel_token)

    async def move_async(
        self,
        destination: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[FileEntry]:
        return await bridge(self.move, destination, policy, cancel_token=cancel_token)

    async def copy_async(
        self,
        destination: str,
        policy: CollisionPolicy = CollisionPolicy.FAIL_IF_EXISTS,
        cancel_token: Optional[CancellationToken] = None,
    ) -> Result[FileEntry]:
        return await bridge(self.copy, destination, policy, cancel_token=cancel_token)

    async def delete_async(self, cancel_token: Optional[CancellationToken] = None) -> Result[bool]:
        return await bridge(self.delete, cancel_token=cancel_token)
