"""Debounced file watcher that re-analyzes only on real content changes.

``watchfiles`` reports every write, including saves that leave the content
untouched. Each batch is checked against the fingerprint store first and
analysis runs only when some file was actually added, modified or deleted.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Iterable, Optional

from watchfiles import awatch

from .analysis.workspace import FILE_LANGUAGES, IGNORED_DIRECTORIES
from .context import WorkspaceContext
from .exceptions import AnalysisInProgressError
from .fingerprint.changes import detect_changes, refresh_fingerprints
from .graph.models import AnalysisSnapshot, NodeKind
from .logging_config import get_logger
from .performance import profile

logger = get_logger(__name__)

WATCHED_EXTENSIONS = frozenset(FILE_LANGUAGES)

ANALYSIS_METRIC = "analysis.duration_ms"
FINGERPRINT_METRIC = "fingerprint.duration_ms"


class ChangeWatcher:
    """Watches a workspace and keeps its snapshot and fingerprints current."""

    def __init__(self, context: WorkspaceContext) -> None:
        self.context = context
        self.root = str(context.root)
        self._stop_event = asyncio.Event()
        self._timed_analyze = profile(context.analysis.analyze, ANALYSIS_METRIC, context.monitor)
        self._timed_detect = profile(detect_changes, FINGERPRINT_METRIC, context.monitor)

    async def initial_run(self) -> AnalysisSnapshot:
        """Analyze once and fingerprint every file in the resulting graph."""
        snapshot = await self._timed_analyze(self.root)
        file_paths = [n.id for n in snapshot.nodes if n.kind == NodeKind.FILE]
        changes = await self._timed_detect(self.context.fingerprints, file_paths)
        refresh_fingerprints(self.context.fingerprints, changes)
        return snapshot

    async def handle_changes(self, paths: Iterable[str]) -> Optional[AnalysisSnapshot]:
        """Re-analyze if any of ``paths`` really changed.

        Returns the new snapshot, or None when nothing changed or another
        analysis is still running.
        """
        changes = await self._timed_detect(self.context.fingerprints, paths)
        changed = [c for c in changes if c.is_change]
        if not changed:
            logger.debug("No content changes in %d reported file(s)", len(changes))
            return None

        if self.context.analysis.is_analyzing:
            # Fingerprints stay stale so the next batch picks these files up again
            logger.debug("Skipping changes during active analysis")
            return None

        logger.info("Detected %d changed file(s), re-analyzing...", len(changed))
        try:
            snapshot = await self._timed_analyze(self.root)
        except AnalysisInProgressError:
            logger.debug("Skipping changes during active analysis")
            return None

        refresh_fingerprints(self.context.fingerprints, changed)
        self.context.cache.clear_all()
        return snapshot

    async def run(self) -> None:
        """Watch until :meth:`stop` is called."""
        logger.info("Watching %s for changes", self.root)
        debounce_ms = int(self.context.config.debounce_seconds * 1000)

        async for changes in awatch(
            self.root,
            stop_event=self._stop_event,
            debounce=debounce_ms,
            watch_filter=SourceFilter(self.root),
        ):
            if self._stop_event.is_set():
                break
            try:
                await self.handle_changes(path for _change, path in changes)
            except Exception:
                # The watcher outlives a failing analyzer; the next change retries
                logger.exception("Analysis failed")

    def stop(self) -> None:
        logger.debug("Stopping watcher...")
        self._stop_event.set()


class SourceFilter:
    """watchfiles filter: only watch source files, ignore common noise.

    Hidden and ignored directories are matched below ``root`` only.
    """

    def __init__(self, root: Optional[str] = None) -> None:
        self.root = Path(root) if root else None

    def __call__(self, change: object, path: str) -> bool:
        p = Path(path)
        parts = p.parts
        if self.root is not None:
            try:
                parts = p.relative_to(self.root).parts
            except ValueError:
                pass

        for part in parts:
            if part.startswith(".") or part in IGNORED_DIRECTORIES:
                return False

        return p.suffix in WATCHED_EXTENSIONS
