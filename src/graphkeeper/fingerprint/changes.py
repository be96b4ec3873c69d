"""Classify files as unchanged / modified / added / deleted.

Classification is derived on demand from the stored digest and a fresh
one; nothing here is persisted until :func:`refresh_fingerprints` runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Union

from ..logging_config import get_logger
from .store import FingerprintStore

logger = get_logger(__name__)


class ChangeKind(Enum):
    UNCHANGED = "unchanged"
    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"


@dataclass(frozen=True)
class FileChange:
    path: str
    kind: ChangeKind
    digest: Optional[str]  # fresh digest, None for deleted files

    @property
    def is_change(self) -> bool:
        return self.kind is not ChangeKind.UNCHANGED


def classify_change(stored: Optional[str], current: Optional[str]) -> ChangeKind:
    """Compare a stored digest with a freshly computed one.

    ``current`` is None when the file could not be read.
    """
    if stored is None:
        return ChangeKind.ADDED if current is not None else ChangeKind.UNCHANGED
    if current is None:
        return ChangeKind.DELETED
    if stored == current:
        return ChangeKind.UNCHANGED
    return ChangeKind.MODIFIED


async def detect_changes(
    store: FingerprintStore,
    paths: Iterable[Union[str, Path]],
    include_missing_tracked: bool = True,
) -> list[FileChange]:
    """Classify ``paths`` against the store.

    With ``include_missing_tracked``, tracked files that no longer exist on
    disk are reported as deleted even if they were not in ``paths``.
    """
    seen: set[str] = set()
    changes: list[FileChange] = []

    for raw in paths:
        path = str(raw)
        if path in seen:
            continue
        seen.add(path)
        current = await store.compute_file_hash(path)
        kind = classify_change(store.get_stored_hash(path), current)
        changes.append(FileChange(path, kind, current))

    if include_missing_tracked:
        for path in store.tracked_paths():
            if path not in seen and not Path(path).exists():
                changes.append(FileChange(path, ChangeKind.DELETED, None))

    changed = sum(1 for c in changes if c.is_change)
    logger.debug("Checked %d file(s), %d changed", len(changes), changed)
    return changes


def refresh_fingerprints(store: FingerprintStore, changes: Iterable[FileChange]) -> int:
    """Write the fresh digests of changed files back to the store.

    Returns the number of entries written or removed.
    """
    snapshots = store.get_all_snapshots()
    touched = 0
    for change in changes:
        if change.kind is ChangeKind.DELETED:
            if snapshots.pop(change.path, None) is not None:
                touched += 1
        elif change.kind in (ChangeKind.ADDED, ChangeKind.MODIFIED) and change.digest:
            snapshots[change.path] = change.digest
            touched += 1
    if touched:
        store.save_snapshots(snapshots)
    return touched
