"""Progressive reveal of a large graph in fixed-size batches.

``loaded_count`` only grows: each step adds ``batch_size`` nodes until all
are loaded. An edge is loaded once both of its endpoints are, so partial
edges never flash in during the reveal.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping, Optional, Sequence

from ..logging_config import get_logger

logger = get_logger(__name__)


def _node_id(node: Any) -> str:
    return node["id"] if isinstance(node, Mapping) else node.id


def _edge_endpoints(edge: Any) -> tuple[str, str]:
    if isinstance(edge, Mapping):
        return edge["source"], edge["target"]
    return edge.source, edge.target


class ProgressiveLoader:
    """Batch scheduler over a fixed node/edge list.

    Drive it by hand with :meth:`advance`, or let :meth:`start` schedule a
    step every ``delay_ms`` on the running event loop. Call :meth:`cancel`
    on teardown so no timer outlives the loader.
    """

    def __init__(
        self,
        nodes: Sequence[Any],
        edges: Sequence[Any],
        batch_size: int = 50,
        delay_ms: int = 10,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        if delay_ms < 0:
            raise ValueError("delay_ms must be non-negative")
        self._nodes = list(nodes)
        self._edges = list(edges)
        self.batch_size = batch_size
        self.delay_ms = delay_ms
        self._loaded_count = 0
        self._loaded_ids: set[str] = set()
        self._handle: Optional[asyncio.TimerHandle] = None
        self._done: Optional[asyncio.Future] = None
        self._on_batch: Optional[Callable[["ProgressiveLoader"], Any]] = None

    @property
    def total(self) -> int:
        return len(self._nodes)

    @property
    def loaded_count(self) -> int:
        return self._loaded_count

    @property
    def is_loading(self) -> bool:
        return self._loaded_count < len(self._nodes)

    @property
    def progress(self) -> float:
        """Percent loaded; an empty graph is complete."""
        if not self._nodes:
            return 100.0
        return self._loaded_count / len(self._nodes) * 100.0

    @property
    def loaded_nodes(self) -> list:
        return self._nodes[: self._loaded_count]

    @property
    def loaded_edges(self) -> list:
        loaded = self._loaded_ids
        result = []
        for edge in self._edges:
            source, target = _edge_endpoints(edge)
            if source in loaded and target in loaded:
                result.append(edge)
        return result

    def advance(self) -> bool:
        """Reveal one more batch. Returns True while nodes remain."""
        if not self.is_loading:
            return False
        new_count = min(self._loaded_count + self.batch_size, len(self._nodes))
        for node in self._nodes[self._loaded_count : new_count]:
            self._loaded_ids.add(_node_id(node))
        self._loaded_count = new_count
        return self.is_loading

    # ── Timer-driven loading ──────────────────────────────────────

    def start(self, on_batch: Optional[Callable[["ProgressiveLoader"], Any]] = None) -> None:
        """Schedule batches on the running loop until everything is loaded."""
        self.cancel()
        loop = asyncio.get_running_loop()
        self._on_batch = on_batch
        self._done = loop.create_future()
        self._schedule(loop)

    def _schedule(self, loop: asyncio.AbstractEventLoop) -> None:
        if not self.is_loading:
            self._handle = None
            if self._done is not None and not self._done.done():
                self._done.set_result(self._loaded_count)
            logger.debug("Progressive load complete: %d nodes", self._loaded_count)
            return
        self._handle = loop.call_later(self.delay_ms / 1000.0, self._step, loop)

    def _step(self, loop: asyncio.AbstractEventLoop) -> None:
        self.advance()
        if self._on_batch is not None:
            try:
                self._on_batch(self)
            except Exception:
                logger.exception("Progressive load callback failed")
        self._schedule(loop)

    async def wait(self) -> int:
        """Wait until :meth:`start` has loaded every node."""
        if self._done is None:
            raise RuntimeError("ProgressiveLoader.start() was not called")
        return await self._done

    def cancel(self) -> None:
        """Release the pending timer, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self._done is not None and not self._done.done():
            self._done.cancel()
        self._done = None

    def reset(self) -> None:
        """Start over from zero loaded nodes."""
        self.cancel()
        self._loaded_count = 0
        self._loaded_ids.clear()
