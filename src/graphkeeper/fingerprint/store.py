"""Content fingerprints for change detection.

The store decides whether a file changed since the last analysis by
comparing SHA-256 digests of its content, so touching a file without
editing it does not trigger re-analysis. The path -> digest map is loaded
from the storage collaborator on construction and written back in full
on every update.
"""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path
from typing import ClassVar, Optional, Union

from ..exceptions import NotInitializedError
from ..logging_config import get_logger
from .storage import KeyValueStorage

logger = get_logger(__name__)

STORAGE_KEY = "graphkeeper.fileSnapshots"

SnapshotMap = dict[str, str]


def compute_hash(content: Union[str, bytes]) -> str:
    """SHA-256 hex digest of ``content`` (text is hashed as UTF-8)."""
    if isinstance(content, str):
        content = content.encode("utf-8")
    return hashlib.sha256(content).hexdigest()


def _read_bytes(path: Path) -> bytes:
    return path.read_bytes()


class FingerprintStore:
    """Owns the path -> content hash map.

    Usage:
        store = FingerprintStore(DiskStorage(".graphkeeper/state"))
        digest = await store.compute_file_hash(path)
        if digest != store.get_stored_hash(path):
            ...  # file changed, re-analyze
            store.update_file_snapshot(path, digest)
    """

    _instance: ClassVar[Optional["FingerprintStore"]] = None

    def __init__(self, storage: KeyValueStorage):
        self._storage = storage
        self._snapshots: SnapshotMap = {}
        self._load_snapshots()

    @classmethod
    def get_instance(cls, storage: Optional[KeyValueStorage] = None) -> "FingerprintStore":
        """Return the process-wide store, creating it on first call.

        Raises:
            NotInitializedError: If no store exists yet and ``storage`` is None
        """
        if cls._instance is None:
            if storage is None:
                raise NotInitializedError("FingerprintStore", "storage")
            cls._instance = cls(storage)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    # ── Hashing ───────────────────────────────────────────────────

    compute_hash = staticmethod(compute_hash)

    async def compute_file_hash(self, path: Union[str, Path]) -> Optional[str]:
        """Hash the file's current content.

        The raw bytes are hashed, so line-ending edits and non-UTF-8 files
        are fingerprinted like any other content. Returns None only when
        the file cannot be read (missing, permissions, a directory).
        """
        try:
            content = await asyncio.to_thread(_read_bytes, Path(path))
        except OSError as e:
            logger.warning("Failed to compute hash for %s: %s", path, e)
            return None
        return compute_hash(content)

    # ── Snapshot map ──────────────────────────────────────────────

    def _load_snapshots(self) -> None:
        stored = self._storage.get(STORAGE_KEY, {})
        self._snapshots = dict(stored or {})
        logger.debug("Loaded %d file fingerprints", len(self._snapshots))

    def save_snapshots(self, snapshots: SnapshotMap) -> None:
        """Replace the whole map and persist it."""
        self._snapshots = dict(snapshots)
        self._storage.update(STORAGE_KEY, dict(self._snapshots))

    def update_file_snapshot(self, path: Union[str, Path], digest: str) -> None:
        """Record the hash of one file (e.g. on save) and persist the map."""
        self._snapshots[str(path)] = digest
        self.save_snapshots(self._snapshots)

    def remove_file_snapshot(self, path: Union[str, Path]) -> bool:
        """Forget a file (e.g. after deletion). Returns False if it was not tracked."""
        if self._snapshots.pop(str(path), None) is None:
            return False
        self.save_snapshots(self._snapshots)
        return True

    def get_stored_hash(self, path: Union[str, Path]) -> Optional[str]:
        return self._snapshots.get(str(path))

    def get_all_snapshots(self) -> SnapshotMap:
        return dict(self._snapshots)

    def tracked_paths(self) -> list[str]:
        return list(self._snapshots)

    def __len__(self) -> int:
        return len(self._snapshots)
