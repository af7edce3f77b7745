# Licensed under the Apache License, Version 2.0
import os
from typing import Optional, Tuple

from .enums import EntryKind


def is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def split_path(path: str, kind: EntryKind) -> Tuple[str, str, str]:
    """
    Split `path` into (directory, base name, extension).

    Directories never carry an extension: "backup.old" stays one name.
    """
    path = os.fspath(path)
    trimmed = path.rstrip("/\\") or path
    directory, leaf = os.path.split(trimmed)
    if kind is EntryKind.DIRECTORY:
        return directory, leaf, ""
    name, extension = os.path.splitext(leaf)
    return directory, name, extension


def combine(directory: str, name: str, extension: str = "") -> str:
    leaf = f"{name}{extension}"
    return os.path.join(directory, leaf) if directory else leaf


def normalize_extension(extension: str) -> str:
    extension = extension.strip()
    if extension and not extension.startswith("."):
        extension = "." + extension
    return extension


def is_inside(path: str, parent: str) -> bool:
    """True when `path` is `parent` itself or lies anywhere beneath it."""
    path, parent = os.path.normpath(path), os.path.normpath(parent)
    return path == parent or path.startswith(parent.rstrip(os.sep) + os.sep)
