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

from abc import ABC, abstractmethod
from datetime import datetime
from typing import BinaryIO, List, Optional

from ..domain.enums import AccessMode, ExistenceResult, OpenMode


class StoragePort(ABC):
    """
    Abstract interface for the platform storage provider.

    Implementations do no policy work: they create, delete, move and stream
    exactly what they are told and raise OSError subclasses on failure.
    """

    @abstractmethod
    def exists(self, path: str) -> ExistenceResult:
        """Report whether a file and/or a directory lives at `path`."""
        raise NotImplementedError

    @abstractmethod
    def create_file(self, path: str) -> None:
        """Create an empty file (truncating any existing one)."""
        raise NotImplementedError

    @abstractmethod
    def create_directory(self, path: str) -> None:
        """Create a directory and any missing parents."""
        raise NotImplementedError

    @abstractmethod
    def delete_file(self, path: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_directory(self, path: str, recursive: bool = False) -> None:
        raise NotImplementedError

    @abstractmethod
    def move(self, src: str, dst: str) -> None:
        """Move a file or directory; `dst` must not exist."""
        raise NotImplementedError

    @abstractmethod
    def copy_file(self, src: str, dst: str, overwrite: bool = False) -> None:
        raise NotImplementedError

    @abstractmethod
    def open_stream(
        self, path: str, open_mode: OpenMode, access_mode: AccessMode
    ) -> BinaryIO:
        """Open a binary stream with the given (already validated) modes."""
        raise NotImplementedError

    @abstractmethod
    def list_files(self, path: str) -> List[str]:
        """Full paths of the files directly inside `path`."""
        raise NotImplementedError

    @abstractmethod
    def list_directories(self, path: str) -> List[str]:
        """Full paths of the directories directly inside `path`."""
        raise NotImplementedError

    @abstractmethod
    def file_size(self, path: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def creation_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        """Creation timestamp, or None when nothing exists at `path`."""
        raise NotImplementedError

    @abstractmethod
    def last_access_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        raise NotImplementedError

    @abstractmethod
    def last_modified_time(self, path: str, utc: bool = False) -> Optional[datetime]:
        raise NotImplementedError

    @abstractmethod
    def current_directory(self) -> str:
        raise NotImplementedError
