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

import io
import logging
import os
from datetime import datetime, timezone
from typing import BinaryIO, Dict, Iterable, List, Optional, Set

from ...domain.enums import AccessMode, ExistenceResult, OpenMode
from ...ports.storage import StoragePort

logger = logging.getLogger(__name__)


class _Times:
    __slots__ = ("created", "accessed", "modified")

    def __init__(self) -> None:
        now = datetime.now(timezone.utc)
        self.created = now
        self.accessed = now
        self.modified = now


class _MemoryStream(io.BytesIO):
    """BytesIO that writes its buffer back to the owning storage on flush/close."""

    def __init__(
        self,
        storage: MemoryStorage,
        path: str,
        data: bytes,
        access_mode: AccessMode,
        append: bool,
    ) -> None:
        super().__init__(data)
        self._storage = storage
        self._path = path
        self._access = access_mode
        self._append = append
        if append:
            self.seek(0, io.SEEK_END)

    def readable(self) -> bool:
        return self._access.can_read

    def writable(self) -> bool:
        return self._access.can_write

    def read(self, size: Optional[int] = -1) -> bytes:
        if not self.readable():
            raise io.UnsupportedOperation("read")
        return super().read(size)

    def readline(self, size: Optional[int] = -1) -> bytes:
        if not self.readable():
            raise io.UnsupportedOperation("readline")
        return super().readline(size)

    def write(self, data) -> int:
        if not self.writable():
            raise io.UnsupportedOperation("write")
        if self._append:
            self.seek(0, io.SEEK_END)
        return super().write(data)

    def flush(self) -> None:
        super().flush()
        if not self.closed and self.writable():
            self._storage._commit(self._path, self.getvalue())

    def close(self) -> None:
        if not self.closed and self.writable():
            self._storage._commit(self._path, self.getvalue())
        super().close()


class MemoryStorage(StoragePort):
    """
    Dictionary-backed storage provider.

    Useful where no disk is available and as a deterministic provider in tests.
    Paths are normalised with os.path.normpath; parents are created implicitly
    only by `create_directory`.
    """

    def __init__(
        self,
        files: Optional[Dict[str, bytes]] = None,
        directories: Iterable[str] = (),
        cwd: str = os.sep,
    ) -> None:
        self._files: Dict[str, bytes] = {}
        self._dirs: Set[str] = set()
        self._times: Dict[str, _Times] = {}
        self._cwd = self._norm(cwd)
        for d in directories:
            self.create_directory(d)
        for path, data in (files or {}).items():
            self.create_directory(os.path.dirname(self._norm(path)) or self._cwd)
            self._commit(self._norm(path), data)

    # --- helpers --------------------------------------------------------------

    @staticmethod
    def _norm(path: str) -> str:
        return os.path.normpath(os.fspath(path))

    def _is_root(self, path: str) -> bool:
        return os.path.dirname(path) == path or path in ("", ".")

    def _parent_exists(self, path: str) -> bool:
        parent = os.path.dirname(path)
        return not parent or self._is_root(parent) or parent in self._dirs

    def _require_parent(self, path: str) -> None:
        if not self._parent_exists(path):
            raise FileNotFoundError(f"Parent directory of [{path}] does not exist")

    def _commit(self, path: str, data: bytes) -> None:
        self._files[path] = bytes(data)
        times = self._times.setdefault(path, _Times())
        times.modified = datetime.now(timezone.utc)

    def read_bytes(self, path: str) -> bytes:
        """Raw contents of a file; convenience for inspection."""
        return self._files[self._norm(path)]

    # --- StoragePort ----------------------------------------------------------

    def exists(self, path: str) -> ExistenceResult:
        p = self._norm(path)
        return ExistenceResult.from_flags(
            p in self._files, p in self._dirs or self._is_root(p)
        )

    def create_file(self, path: str) -> None:
        p = self._norm(path)
        self._require_parent(p)
        if p in self._dirs:
            raise IsADirectoryError(p)
        self._times.pop(p, None)
        self._commit(p, b"")

    def create_directory(self, path: str) -> None:
        p = self._norm(path)
        if p in self._files:
            raise FileExistsError(p)
        while not self._is_root(p) and p not in self._dirs:
            self._dirs.add(p)
            self._times[p] = _Times()
            p = os.path.dirname(p)

    def delete_file(self, path: str) -> None:
        p = self._norm(path)
        if p not in self._files:
            raise FileNotFoundError(p)
        del self._files[p]
        self._times.pop(p, None)

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        p = self._norm(path)
        if p not in self._dirs:
            raise FileNotFoundError(p)
        children = [c for c in (*self._files, *self._dirs) if self._is_under(c, p)]
        if children and not recursive:
            raise OSError(f"Directory not empty: [{p}]")
        for c in children:
            self._files.pop(c, None)
            self._dirs.discard(c)
            self._times.pop(c, None)
        self._dirs.discard(p)
        self._times.pop(p, None)

    def move(self, src: str, dst: str) -> None:
        s, d = self._norm(src), self._norm(dst)
        if self.exists(d) is not ExistenceResult.NONE:
            raise FileExistsError(f"Destination [{d}] already exists")
        self._require_parent(d)
        if s in self._files:
            self._files[d] = self._files.pop(s)
            self._times[d] = self._times.pop(s, _Times())
            return
        if s not in self._dirs:
            raise FileNotFoundError(s)
        for old in sorted(c for c in (*self._files, *self._dirs) if self._is_under(c, s) or c == s):
            new = d + old[len(s):]
            if old in self._files:
                self._files[new] = self._files.pop(old)
            else:
                self._dirs.discard(old)
                self._dirs.add(new)
            self._times[new] = self._times.pop(old, _Times())

    def copy_file(self, src: str, dst: str, overwrite: bool = False) -> None:
        s, d = self._norm(src), self._norm(dst)
        if s not in self._files:
            raise FileNotFoundError(s)
        if not overwrite and self.exists(d) is not ExistenceResult.NONE:
            raise FileExistsError(f"Destination [{d}] already exists")
        self._require_parent(d)
        self._commit(d, self._files[s])

    def open_stream(
        self, path: str, open_mode: OpenMode, access_mode: AccessMode
    ) -> BinaryIO:
        p = self._norm(path)
        if p in self._dirs:
            raise IsADirectoryError(p)
        present = p in self._files

        if open_mode in (OpenMode.OPEN, OpenMode.TRUNCATE) and not present:
            raise FileNotFoundError(p)
        if open_mode is OpenMode.CREATE_NEW and present:
            raise FileExistsError(p)
        if open_mode is OpenMode.NONE or access_mode is AccessMode.NONE:
            raise ValueError(
                f"Cannot open a stream with {access_mode.value}/{open_mode.value}"
            )
        if not present:
            self._require_parent(p)
            self._commit(p, b"")
        elif open_mode in (OpenMode.CREATE, OpenMode.TRUNCATE):
            self._commit(p, b"")

        self._times[p].accessed = datetime.now(timezone.utc)
        return _MemoryStream(
            self,
            p,
            self._files[p],
            access_mode,
            append=open_mode is OpenMode.APPEND,
        )

    def list_files(self, path: str) -> List[str]:
        p = self._norm(path)
        return sorted(f for f in self._files if os.path.dirname(f) == p)

    def list_directories(self, path: str) -> List[str]:
        p = self._norm(path)
        return sorted(d for d in self._dirs if os.path.dirname(d) == p and d != p)

    def file_size(self, path: str) -> int:
        p = self._norm(path)
        if p not in self._files:
            raise FileNotFoundError(p)
        return len(self._files[p])

    def creation_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        times = self._times.get(self._norm(path))
        return None if times is None else _localise(times.created, utc)

    def last_access_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        times = self._times.get(self._norm(path))
        return None if times is None else _localise(times.accessed, utc)

    def last_modified_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        times = self._times.get(self._norm(path))
        return None if times is None else _localise(times.modified, utc)

    def current_directory(self) -> str:
        return self._cwd

    @staticmethod
    def _is_under(child: str, parent: str) -> bool:
        return child.startswith(parent.rstrip(os.sep) + os.sep)


def _localise(value: datetime, utc: bool) -> datetime:
    return value if utc else value.astimezone().replace(tzinfo=None)
