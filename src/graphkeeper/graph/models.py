"""Data models for the derived call/dependency graph.

  Nodes:     files, directories and symbols (functions, methods, classes)
  Edges:     directed relationships (calls, imports, contains, ...)
  Snapshot:  one immutable, timestamped graph produced by a single analysis run

Symbol identifiers follow ``<path>#<qualified name>``. Both the analyzer
that produces nodes and the query service that looks them up must build
ids through :func:`symbol_id`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Union

SYMBOL_SEPARATOR = "#"


class NodeKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"
    MODULE = "module"
    CLASS = "class"
    FUNCTION = "function"
    METHOD = "method"


class EdgeType(str, Enum):
    CALLS = "calls"
    IMPORTS = "imports"
    CONTAINS = "contains"
    EXTENDS = "extends"
    IMPLEMENTS = "implements"


def symbol_id(path: str, name: str) -> str:
    """Build the node id of a symbol defined in ``path``.

    ``name`` must be the qualifying name (``ClassName.method`` for methods),
    see :func:`qualified_name`.
    """
    return f"{path}{SYMBOL_SEPARATOR}{name}"


def qualified_name(name: str, parent: Optional[str] = None) -> str:
    """Qualify a member name with its enclosing class, if any."""
    if parent:
        return f"{parent}.{name}"
    return name


def split_symbol_id(node_id: str) -> tuple[str, Optional[str]]:
    """Inverse of :func:`symbol_id`: ``(path, name)``, name is None for files."""
    path, sep, name = node_id.partition(SYMBOL_SEPARATOR)
    if not sep:
        return node_id, None
    return path, name


# ── Nodes and edges ───────────────────────────────────────────────


@dataclass(frozen=True)
class Position:
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class GraphNode:
    """A node in the graph. Geometry is only consumed by rendering."""

    id: str
    kind: Union[NodeKind, str] = NodeKind.FILE
    label: Optional[str] = None
    position: Optional[Position] = None
    width: Optional[float] = None
    height: Optional[float] = None
    data: Mapping[str, Any] = field(default_factory=dict, compare=False, hash=False)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"id": self.id, "type": _enum_value(self.kind)}
        if self.label is not None:
            out["label"] = self.label
        if self.position is not None:
            out["position"] = {"x": self.position.x, "y": self.position.y}
        if self.width is not None:
            out["width"] = self.width
        if self.height is not None:
            out["height"] = self.height
        out.update(self.data)
        return out


@dataclass(frozen=True)
class GraphEdge:
    """A directed edge. Identity for deduplication is ``(source, target, type)``."""

    source: str
    target: str
    type: Union[EdgeType, str, None] = EdgeType.CALLS
    id: Optional[str] = field(default=None, compare=False)

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source, self.target, _enum_value(self.type) or "default")

    @property
    def is_call(self) -> bool:
        return _enum_value(self.type) == EdgeType.CALLS.value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"source": self.source, "target": self.target}
        if self.type is not None:
            out["type"] = _enum_value(self.type)
        if self.id is not None:
            out["id"] = self.id
        return out


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


_NODE_KEYS = frozenset({"id", "type", "kind", "label", "position", "width", "height"})


def node_from_dict(raw: Mapping[str, Any]) -> GraphNode:
    """Build a node from the dict shape analyzers and renderers exchange."""
    pos = raw.get("position")
    position = Position(float(pos.get("x", 0)), float(pos.get("y", 0))) if pos else None
    return GraphNode(
        id=str(raw["id"]),
        kind=raw.get("type", raw.get("kind", NodeKind.FILE.value)),
        label=raw.get("label"),
        position=position,
        width=raw.get("width"),
        height=raw.get("height"),
        data={k: v for k, v in raw.items() if k not in _NODE_KEYS},
    )


def edge_from_dict(raw: Mapping[str, Any]) -> GraphEdge:
    return GraphEdge(
        source=str(raw["source"]),
        target=str(raw["target"]),
        type=raw.get("type"),
        id=raw.get("id"),
    )


# ── Analysis results ──────────────────────────────────────────────


@dataclass(frozen=True)
class AnalysisResult:
    """What a workspace analyzer returns, before it is timestamped."""

    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    stats: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        nodes: Iterable[Union[GraphNode, Mapping[str, Any]]],
        edges: Iterable[Union[GraphEdge, Mapping[str, Any]]],
        stats: Optional[Mapping[str, Any]] = None,
    ) -> "AnalysisResult":
        """Accept either model objects or plain dicts."""
        return cls(
            nodes=tuple(n if isinstance(n, GraphNode) else node_from_dict(n) for n in nodes),
            edges=tuple(e if isinstance(e, GraphEdge) else edge_from_dict(e) for e in edges),
            stats=dict(stats or {}),
        )


@dataclass(frozen=True)
class AnalysisSnapshot:
    """One immutable, timestamped graph. Replaced, never mutated."""

    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]
    stats: Mapping[str, Any]
    timestamp: int  # ms since epoch

    def __post_init__(self) -> None:
        if not isinstance(self.stats, MappingProxyType):
            object.__setattr__(self, "stats", MappingProxyType(dict(self.stats)))

    @classmethod
    def from_result(cls, result: AnalysisResult, timestamp: int) -> "AnalysisSnapshot":
        return cls(
            nodes=tuple(result.nodes),
            edges=tuple(result.edges),
            stats=dict(result.stats),
            timestamp=timestamp,
        )

    def node_ids(self) -> frozenset[str]:
        return frozenset(n.id for n in self.nodes)

    def find_node(self, node_id: str) -> Optional[GraphNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "stats": dict(self.stats),
            "timestamp": self.timestamp,
        }
