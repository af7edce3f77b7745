# Licensed under the Apache License, Version 2.0
from ..domain.enums import AccessMode, OpenMode
from ..domain.results import FailureKind, Result

# Open modes that imply writing; a read-only stream cannot honour them.
_WRITE_IMPLYING = frozenset({OpenMode.TRUNCATE, OpenMode.APPEND})


def is_legal(access: AccessMode, open_mode: OpenMode) -> bool:
    if open_mode is OpenMode.NONE or access is AccessMode.NONE:
        return False
    if access is AccessMode.READ:
        return open_mode not in _WRITE_IMPLYING
    return True


def ensure_legal(access: AccessMode, open_mode: OpenMode) -> Result[None]:
    if is_legal(access, open_mode):
        return Result.success()
    return Result.fail(
        FailureKind.INVALID_MODE,
        f"Invalid access/open mode combination: {access.value}/{open_mode.value}",
    )
