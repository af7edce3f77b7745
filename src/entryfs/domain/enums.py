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

from enum import Enum


class CollisionPolicy(str, Enum):
    """What a structural operation does when its destination already exists."""

    GENERATE_UNIQUE_NAME = "generate_unique_name"
    REPLACE_EXISTING = "replace_existing"
    FAIL_IF_EXISTS = "fail_if_exists"
    THROW_IF_EXISTS = "throw_if_exists"
    OPEN_IF_EXISTS = "open_if_exists"
    # The entry already at the destination is moved aside to a unique name.
    GENERATE_UNIQUE_NAME_FOR_EXISTING = "generate_unique_name_for_existing"


class NamingStrategy(str, Enum):
    """Style of the suffix used to disambiguate a colliding name."""

    INTEGER = "integer"
    TIMESTAMP_TICKS = "timestamp_ticks"
    TIMESTAMP = "timestamp"
    TIMESTAMP_UTC = "timestamp_utc"


class AccessMode(str, Enum):
    READ = "read"
    WRITE = "write"
    READ_WRITE = "read_write"
    NONE = "none"

    @property
    def can_read(self) -> bool:
        return self in (AccessMode.READ, AccessMode.READ_WRITE)

    @property
    def can_write(self) -> bool:
        return self in (AccessMode.WRITE, AccessMode.READ_WRITE)


class OpenMode(str, Enum):
    CREATE = "create"
    CREATE_NEW = "create_new"
    OPEN = "open"
    OPEN_OR_CREATE = "open_or_create"
    APPEND = "append"
    TRUNCATE = "truncate"
    NONE = "none"


class ExistenceResult(str, Enum):
    NONE = "none"
    FILE_EXISTS = "file_exists"
    FOLDER_EXISTS = "folder_exists"
    FILE_AND_FOLDER_EXISTS = "file_and_folder_exists"

    @classmethod
    def from_flags(cls, is_file: bool, is_dir: bool) -> ExistenceResult:
        if is_file and is_dir:
            return cls.FILE_AND_FOLDER_EXISTS
        if is_dir:
            return cls.FOLDER_EXISTS
        if is_file:
            return cls.FILE_EXISTS
        return cls.NONE

    @property
    def has_file(self) -> bool:
        return self in (ExistenceResult.FILE_EXISTS, ExistenceResult.FILE_AND_FOLDER_EXISTS)

    @property
    def has_folder(self) -> bool:
        return self in (
            ExistenceResult.FOLDER_EXISTS,
            ExistenceResult.FILE_AND_FOLDER_EXISTS,
        )


class EntryKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class EntryState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


class LookupMode(str, Enum):
    """What `FileSystem.get_file` / `get_directory` do when the entry is missing."""

    CREATE_IF_MISSING = "create_if_missing"
    RETURN_NONE_IF_MISSING = "return_none_if_missing"
    THROW_IF_MISSING = "throw_if_missing"


class WriteMode(str, Enum):
    TRUNCATE = "truncate"
    APPEND = "append"


class SearchScope(str, Enum):
    ALL = "all"
    TOP_DIRECTORY_ONLY = "top_directory_only"
    SUB_DIRECTORIES_ONLY = "sub_directories_only"
