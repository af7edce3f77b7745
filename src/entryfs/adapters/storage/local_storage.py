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

import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import BinaryIO, List, Optional

from ...domain.enums import AccessMode, ExistenceResult, OpenMode
from ...ports.storage import StoragePort

logger = logging.getLogger(__name__)

_BINARY = getattr(os, "O_BINARY", 0)

_OPEN_FLAGS = {
    OpenMode.CREATE: os.O_CREAT | os.O_TRUNC,
    OpenMode.CREATE_NEW: os.O_CREAT | os.O_EXCL,
    OpenMode.OPEN: 0,
    OpenMode.OPEN_OR_CREATE: os.O_CREAT,
    OpenMode.APPEND: os.O_CREAT | os.O_APPEND,
    OpenMode.TRUNCATE: os.O_TRUNC,
}

_ACCESS_FLAGS = {
    AccessMode.READ: os.O_RDONLY,
    AccessMode.WRITE: os.O_WRONLY,
    AccessMode.READ_WRITE: os.O_RDWR,
}

# fdopen mode strings; the flags above already did any create/truncate work.
_FDOPEN_MODES = {
    AccessMode.READ: "rb",
    AccessMode.WRITE: "wb",
    AccessMode.READ_WRITE: "r+b",
}


class LocalStorage(StoragePort):
    """Storage provider backed by the local disk (os / shutil / pathlib)."""

    def exists(self, path: str) -> ExistenceResult:
        p = Path(path)
        return ExistenceResult.from_flags(p.is_file(), p.is_dir())

    def create_file(self, path: str) -> None:
        logger.debug("LocalStorage.create_file %s", path)
        with open(path, "wb"):
            pass

    def create_directory(self, path: str) -> None:
        logger.debug("LocalStorage.create_directory %s", path)
        Path(path).mkdir(parents=True, exist_ok=True)

    def delete_file(self, path: str) -> None:
        logger.debug("LocalStorage.delete_file %s", path)
        os.remove(path)

    def delete_directory(self, path: str, recursive: bool = False) -> None:
        logger.debug("LocalStorage.delete_directory %s (recursive=%s)", path, recursive)
        if recursive:
            shutil.rmtree(path)
        else:
            os.rmdir(path)

    def move(self, src: str, dst: str) -> None:
        logger.debug("LocalStorage.move %s -> %s", src, dst)
        if os.path.lexists(dst):
            raise FileExistsError(f"Destination [{dst}] already exists")
        shutil.move(src, dst)

    def copy_file(self, src: str, dst: str, overwrite: bool = False) -> None:
        logger.debug("LocalStorage.copy_file %s -> %s (overwrite=%s)", src, dst, overwrite)
        if not overwrite and os.path.lexists(dst):
            raise FileExistsError(f"Destination [{dst}] already exists")
        shutil.copy2(src, dst)

    def open_stream(
        self, path: str, open_mode: OpenMode, access_mode: AccessMode
    ) -> BinaryIO:
        try:
            flags = _OPEN_FLAGS[open_mode] | _ACCESS_FLAGS[access_mode] | _BINARY
        except KeyError:
            raise ValueError(
                f"Cannot open a stream with {access_mode.value}/{open_mode.value}"
            ) from None
        logger.debug("LocalStorage.open_stream %s (%s, %s)", path, open_mode.value, access_mode.value)
        fd = os.open(path, flags, 0o666)
        try:
            stream = os.fdopen(fd, _FDOPEN_MODES[access_mode])
        except Exception:
            os.close(fd)
            raise
        if open_mode is OpenMode.APPEND:
            stream.seek(0, os.SEEK_END)
        return stream

    def list_files(self, path: str) -> List[str]:
        with os.scandir(path) as it:
            return sorted(e.path for e in it if e.is_file())

    def list_directories(self, path: str) -> List[str]:
        with os.scandir(path) as it:
            return sorted(e.path for e in it if e.is_dir())

    def file_size(self, path: str) -> int:
        return os.stat(path).st_size

    def creation_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        st = self._stat(path)
        if st is None:
            return None
        # NOTE: st_ctime is "inode change" on Linux; st_birthtime only exists on macOS/BSD/Windows.
        return _to_datetime(getattr(st, "st_birthtime", st.st_ctime), utc)

    def last_access_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        st = self._stat(path)
        return None if st is None else _to_datetime(st.st_atime, utc)

    def last_modified_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        st = self._stat(path)
        return None if st is None else _to_datetime(st.st_mtime, utc)

    def current_directory(self) -> str:
        return os.getcwd()

    @staticmethod
    def _stat(path: str) -> Optional[os.stat_result]:
        try:
            return os.stat(path)
        except FileNotFoundError:
            return None


def _to_datetime(ts: float, utc: bool) -> datetime:
    if utc:
        return datetime.fromtimestamp(ts, tz=timezone.utc)
    return datetime.fromtimestamp(ts)
