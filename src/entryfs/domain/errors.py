# Licensed under the Apache License, Version 2.0
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .results import Failure


class EntryFSError(Exception):
    """Base exception for domain-specific errors."""


class EntryExistsError(EntryFSError, FileExistsError):
    """A THROW_IF_EXISTS policy found its destination occupied."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Entry [{path}] already exists!")
        self.path = path


class InvalidPathError(EntryFSError, ValueError):
    """Empty or whitespace-only path handed to a handle constructor."""


class OperationCancelledError(EntryFSError):
    """A bridged call was cancelled before it was scheduled."""


class ConfigurationError(EntryFSError):
    """Unusable environment settings (unknown strategy, bad attempt count, etc.)."""


class OperationFailedError(EntryFSError):
    """Raised by `Result.unwrap()` when the result carries a failure."""

    def __init__(self, failure: Failure) -> None:
        super().__init__(failure.message)
        self.failure = failure
