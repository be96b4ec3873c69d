"""The authoritative graph snapshot and call-graph queries.

Only :class:`AnalysisStore` replaces the current snapshot. Replacement is a
single assignment of a new frozen :class:`AnalysisSnapshot`, so readers
never see a partially updated graph.
"""

from __future__ import annotations

import inspect
import time
from typing import Any, Awaitable, Callable, ClassVar, Optional, Union

from ..exceptions import AnalysisInProgressError
from ..graph.models import AnalysisResult, AnalysisSnapshot, GraphEdge, symbol_id
from ..logging_config import get_logger
from .events import EventEmitter
from .workspace import analyze_workspace

logger = get_logger(__name__)

Analyzer = Callable[[str], Union[AnalysisResult, Awaitable[AnalysisResult]]]


class AnalysisStore:
    """Owns the current snapshot and serializes re-analysis.

    At most one analyzer call runs at a time. A caller arriving while one
    is in flight gets the previous snapshot, or
    :class:`AnalysisInProgressError` when there is none yet.
    """

    _instance: ClassVar[Optional["AnalysisStore"]] = None

    def __init__(
        self,
        analyzer: Analyzer = analyze_workspace,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._analyzer = analyzer
        self._clock = clock
        self._data: Optional[AnalysisSnapshot] = None
        self._analyzing = False
        self.on_did_analysis_change: EventEmitter[AnalysisSnapshot] = EventEmitter(
            "analysis-change"
        )

    @classmethod
    def get_instance(cls) -> "AnalysisStore":
        """Return the process-wide store, creating it on first use."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    @property
    def is_analyzing(self) -> bool:
        return self._analyzing

    async def analyze(self, root_path: str) -> AnalysisSnapshot:
        """Run the analyzer and publish a fresh snapshot.

        Raises:
            AnalysisInProgressError: If a run is in flight and no snapshot exists yet
        """
        if self._analyzing:
            if self._data is not None:
                logger.debug("Analysis in progress, serving snapshot from %d", self._data.timestamp)
                return self._data
            raise AnalysisInProgressError(root_path)

        self._analyzing = True
        try:
            logger.info("Analyzing %s", root_path)
            result = self._analyzer(root_path)
            if inspect.isawaitable(result):
                result = await result
            if not isinstance(result, AnalysisResult):
                result = _coerce_result(result)

            snapshot = AnalysisSnapshot.from_result(result, int(self._clock() * 1000))
            self._data = snapshot
            logger.info(
                "Analysis complete: %d nodes, %d edges",
                len(snapshot.nodes),
                len(snapshot.edges),
            )
            self.on_did_analysis_change.fire(snapshot)
        except Exception:
            logger.exception("Analysis of %s failed", root_path)
            raise
        finally:
            self._analyzing = False

        return snapshot

    def get_data(self) -> Optional[AnalysisSnapshot]:
        return self._data

    # ── Queries ───────────────────────────────────────────────────

    def get_callers(self, file_path: str, symbol_name: str) -> list[GraphEdge]:
        """Incoming ``calls`` edges of ``file_path#symbol_name``.

        ``symbol_name`` must be the qualifying name (``Class.method``).
        """
        snapshot = self._data
        if snapshot is None:
            return []
        expected_id = symbol_id(file_path, symbol_name)
        return [e for e in snapshot.edges if e.target == expected_id and e.is_call]

    def get_calls(self, file_path: str, symbol_name: str) -> list[GraphEdge]:
        """Outgoing ``calls`` edges of ``file_path#symbol_name``."""
        snapshot = self._data
        if snapshot is None:
            return []
        expected_id = symbol_id(file_path, symbol_name)
        return [e for e in snapshot.edges if e.source == expected_id and e.is_call]

    def has_symbol(self, file_path: str, symbol_name: str) -> bool:
        """Whether the current snapshot has a node for the symbol.

        Lets callers tell "no callers" apart from "unknown symbol", which
        get_callers/get_calls both report as an empty list.
        """
        snapshot = self._data
        if snapshot is None:
            return False
        return snapshot.find_node(symbol_id(file_path, symbol_name)) is not None


def _coerce_result(raw: Any) -> AnalysisResult:
    """Accept ``{"nodes", "edges", "stats"}`` dicts from external analyzers."""
    if isinstance(raw, dict):
        return AnalysisResult.build(raw.get("nodes", ()), raw.get("edges", ()), raw.get("stats"))
    nodes, edges, stats = raw
    return AnalysisResult.build(nodes, edges, stats)
