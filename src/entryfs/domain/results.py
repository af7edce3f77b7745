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

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from .errors import OperationFailedError

T = TypeVar("T")


class FailureKind(str, Enum):
    VALIDATION = "validation"
    INVALID_MODE = "invalid_mode_combination"
    COLLISION = "collision"
    INVALID_STATE = "invalid_state"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Failure:
    """
    A predictable, non-fatal failure.

    `attempts` is only set when unique-name generation ran out of attempts.
    """

    kind: FailureKind
    message: str
    path: Optional[str] = None
    attempts: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of an operation that can fail predictably.

    Truthy only on success, so callers can branch with a plain `if`.
    """

    value: Optional[T] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        if self.failure is not None:
            raise OperationFailedError(self.failure)
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: Optional[T] = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def fail(
        cls,
        kind: FailureKind,
        message: str,
        *,
        path: Optional[str] = None,
        attempts: Optional[int] = None,
    ) -> Result[T]:
        return cls(failure=Failure(kind, message, path=path, attempts=attempts))

    @classmethod
    def from_failure(cls, failure: Failure) -> Result[T]:
        return cls(failure=failure)
