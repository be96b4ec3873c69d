"""Content fingerprinting: the authority on whether a file changed."""

from .changes import ChangeKind, FileChange, classify_change, detect_changes, refresh_fingerprints
from .storage import DiskStorage, KeyValueStorage, MemoryStorage
from .store import STORAGE_KEY, FingerprintStore, SnapshotMap, compute_hash

__all__ = [
    "ChangeKind",
    "DiskStorage",
    "FileChange",
    "FingerprintStore",
    "KeyValueStorage",
    "MemoryStorage",
    "STORAGE_KEY",
    "SnapshotMap",
    "classify_change",
    "compute_hash",
    "detect_changes",
    "refresh_fingerprints",
]
