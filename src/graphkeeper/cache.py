"""
In-memory caches for graph rendering.

Entries expire after a time-to-live and each cache holds a bounded number
of entries. When full, the oldest *inserted* entry is evicted (FIFO, not
LRU: reads do not refresh an entry's position).
"""

import json
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Generic, Hashable, Iterable, Optional, TypeVar

from .config import DEFAULT_CONFIG, GraphKeeperConfig
from .logging_config import get_logger

logger = get_logger(__name__)

V = TypeVar("V")

# Rough per-edge size used for the savings report, not a measurement
BYTES_PER_EDGE_ESTIMATE = 200


def canonical_key(key: Any) -> str:
    """Serialize a logical key so that structurally-equal keys collide."""
    return json.dumps(key, sort_keys=True, default=str)


@dataclass
class CacheEntry(Generic[V]):
    value: V
    inserted_at: float


class BoundedCache(Generic[V]):
    """
    Size-bounded cache with time-to-live expiry.

    Features:
    - Structural keys (dicts, lists, tuples) via canonical JSON
    - TTL checked on read; stale entries are dropped when touched
    - FIFO eviction once ``max_size`` entries are held
    """

    def __init__(
        self,
        max_size: int = 100,
        ttl: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        """
        Initialize cache.

        Args:
            max_size: Maximum number of entries
            ttl: Time-to-live in seconds
            clock: Monotonic time source (injectable for tests)
            name: Label used in log messages
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if ttl < 0:
            raise ValueError("ttl must be non-negative")
        self.max_size = max_size
        self.ttl = ttl
        self.name = name
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry[V]]" = OrderedDict()

    def _live_entry(self, key: Any) -> Optional[CacheEntry[V]]:
        string_key = canonical_key(key)
        entry = self._entries.get(string_key)
        if entry is None:
            return None
        if self._clock() - entry.inserted_at > self.ttl:
            del self._entries[string_key]
            logger.debug(f"{self.name}: expired {string_key[:32]}")
            return None
        return entry

    def get(self, key: Any) -> Optional[V]:
        """
        Get value from cache.

        Returns:
            Cached value or None if not found/expired
        """
        entry = self._live_entry(key)
        return entry.value if entry is not None else None

    def set(self, key: Any, value: V) -> None:
        """
        Set value in cache, evicting the oldest entry if full.

        Re-setting an existing key refreshes its value and timestamp but
        keeps its place in the eviction order.
        """
        string_key = canonical_key(key)
        if string_key not in self._entries and len(self._entries) >= self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"{self.name}: evicted {evicted[:32]}")
        self._entries[string_key] = CacheEntry(value, self._clock())

    def delete(self, key: Any) -> bool:
        return self._entries.pop(canonical_key(key), None) is not None

    def clear(self) -> None:
        """Clear all cache entries."""
        self._entries.clear()

    @property
    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Any) -> bool:
        return self._live_entry(key) is not None

    def memoize(self, key_func: Optional[Callable[..., Hashable]] = None) -> Callable:
        """
        Decorator for caching function results.

        Usage:
            layouts = BoundedCache(max_size=10, ttl=600)

            @layouts.memoize()
            def compute_layout(graph_key, direction):
                # Expensive operation
                return positions

        Args:
            key_func: Builds the cache key from the call arguments.
                      Defaults to the positional and keyword arguments.

        Returns:
            Decorator function
        """
        def decorator(func: Callable[..., V]) -> Callable[..., V]:
            @wraps(func)
            def wrapper(*args, **kwargs):
                if key_func is not None:
                    key = key_func(*args, **kwargs)
                else:
                    key = [func.__qualname__, list(args), kwargs]

                # None is a valid result, so look at the entry rather than the value
                entry = self._live_entry(key)
                if entry is not None:
                    return entry.value

                result = func(*args, **kwargs)
                self.set(key, result)
                return result

            wrapper.cache = self  # type: ignore[attr-defined]
            return wrapper
        return decorator


class GraphCache:
    """
    Node, edge and layout caches with independent capacity and lifetime.

    Layouts are few and expensive (small capacity, long TTL); nodes and
    edges are many and cheap (large capacity, medium TTL).
    """

    def __init__(
        self,
        config: GraphKeeperConfig = DEFAULT_CONFIG,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.node_cache: BoundedCache[Any] = BoundedCache(
            config.node_cache_size, config.node_cache_ttl, clock, name="nodes"
        )
        self.edge_cache: BoundedCache[Any] = BoundedCache(
            config.edge_cache_size, config.edge_cache_ttl, clock, name="edges"
        )
        self.layout_cache: BoundedCache[Any] = BoundedCache(
            config.layout_cache_size, config.layout_cache_ttl, clock, name="layouts"
        )

    def get_node(self, node_id: Any) -> Any:
        return self.node_cache.get(node_id)

    def set_node(self, node_id: Any, node: Any) -> None:
        self.node_cache.set(node_id, node)

    def get_edge(self, edge_id: Any) -> Any:
        return self.edge_cache.get(edge_id)

    def set_edge(self, edge_id: Any, edge: Any) -> None:
        self.edge_cache.set(edge_id, edge)

    def get_layout(self, layout_key: Any) -> Any:
        return self.layout_cache.get(layout_key)

    def set_layout(self, layout_key: Any, result: Any) -> None:
        self.layout_cache.set(layout_key, result)

    def clear_all(self) -> None:
        self.node_cache.clear()
        self.edge_cache.clear()
        self.layout_cache.clear()
        logger.info("Graph caches cleared")

    def get_stats(self) -> dict:
        """
        Get cache statistics.

        Returns:
            Entry count per category
        """
        return {
            "nodes": self.node_cache.size,
            "edges": self.edge_cache.size,
            "layouts": self.layout_cache.size,
        }


# ── Data reduction ────────────────────────────────────────────────


@dataclass
class OptimizedGraph:
    nodes: Any
    edges: list
    savings: dict = field(default_factory=dict)


def _edge_key(edge: Any) -> tuple:
    if isinstance(edge, dict):
        return (edge.get("source"), edge.get("target"), edge.get("type") or "default")
    return edge.key


def optimize_graph_data(nodes: Any, edges: Iterable[Any]) -> OptimizedGraph:
    """
    Drop duplicate edges, keeping the first edge seen per (source, target, type).

    Accepts GraphEdge objects or plain dicts. Nodes are passed through
    unchanged.

    Returns:
        OptimizedGraph with the deduplicated edges in first-seen order and
        a savings report
    """
    unique: dict[tuple, Any] = {}
    duplicates = 0
    for edge in edges:
        key = _edge_key(edge)
        if key not in unique:
            unique[key] = edge
        else:
            duplicates += 1

    if duplicates:
        logger.debug(f"Removed {duplicates} duplicate edge(s)")

    return OptimizedGraph(
        nodes=nodes,
        edges=list(unique.values()),
        savings={
            "duplicate_edges_removed": duplicates,
            "bytes_estimated_saved": duplicates * BYTES_PER_EDGE_ESTIMATE,
        },
    )


def format_bytes(num_bytes: int) -> str:
    """Human-readable size with 1024 steps: B, KB, MB."""
    if num_bytes < 1024:
        return f"{num_bytes} B"
    if num_bytes < 1024 * 1024:
        return f"{num_bytes / 1024:.2f} KB"
    return f"{num_bytes / (1024 * 1024):.2f} MB"


def _to_jsonable(item: Any) -> Any:
    to_dict = getattr(item, "to_dict", None)
    return to_dict() if callable(to_dict) else item


def _serialized_size(items: Iterable[Any]) -> int:
    payload = json.dumps([_to_jsonable(i) for i in items], separators=(",", ":"), default=str)
    return len(payload.encode("utf-8"))


def estimate_memory_usage(nodes: Iterable[Any], edges: Iterable[Any]) -> dict:
    """
    Estimate the serialized size of a graph.

    Returns:
        Formatted sizes for ``nodes``, ``edges`` and ``total``
    """
    node_bytes = _serialized_size(nodes)
    edge_bytes = _serialized_size(edges)
    return {
        "nodes": format_bytes(node_bytes),
        "edges": format_bytes(edge_bytes),
        "total": format_bytes(node_bytes + edge_bytes),
    }
