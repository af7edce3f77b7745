from .access_validator import ensure_legal, is_legal
from .async_bridge import BridgedCall, CancellationToken, bridge, configure_worker_pool
from .collision_resolver import resolve
from .directory_entry import CopyReport, DirectoryEntry
from .entry import Entry
from .file_entry import FileEntry
from .file_system import FileSystem
from .naming import next_candidate_suffix


__all__ = [
    'BridgedCall',
    'CancellationToken',
    'CopyReport',
    'DirectoryEntry',
    'Entry',
    'FileEntry',
    'FileSystem',
    'bridge',
    'configure_worker_pool',
    'ensure_legal',
    'is_legal',
    'next_candidate_suffix',
    'resolve',
]
