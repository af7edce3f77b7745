from .enums import (
    AccessMode,
    CollisionPolicy,
    EntryKind,
    EntryState,
    ExistenceResult,
    LookupMode,
    NamingStrategy,
    OpenMode,
    SearchScope,
    WriteMode,
)
from .errors import (
    ConfigurationError,
    EntryExistsError,
    EntryFSError,
    InvalidPathError,
    OperationCancelledError,
    OperationFailedError,
)
from .results import Failure, FailureKind, Result

__all__ = [
    "AccessMode",
    "CollisionPolicy",
    "ConfigurationError",
    "EntryExistsError",
    "EntryFSError",
    "EntryKind",
    "EntryState",
    "ExistenceResult",
    "Failure",
    "FailureKind",
    "InvalidPathError",
    "LookupMode",
    "NamingStrategy",
    "OpenMode",
    "OperationCancelledError",
    "OperationFailedError",
    "Result",
    "SearchScope",
    "WriteMode",
]
