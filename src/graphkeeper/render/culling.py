"""Viewport culling for large graphs.

Below ``node_threshold`` nodes everything is rendered and no geometry is
touched. Above it, only nodes whose box intersects the padded viewport are
kept, up to ``max_visible_nodes`` in input order, and only edges with at
least one visible endpoint.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from ..config import GraphKeeperConfig
from .viewport import (
    DEFAULT_SCREEN_HEIGHT,
    DEFAULT_SCREEN_WIDTH,
    Viewport,
    ViewportBounds,
    compute_viewport_bounds,
)

DEFAULT_NODE_WIDTH = 180.0
DEFAULT_NODE_HEIGHT = 40.0


@dataclass(frozen=True)
class VirtualizationOptions:
    enabled: bool = True
    node_threshold: int = 100
    viewport_padding: float = 500.0
    max_visible_nodes: int = 200  # 0 disables the cap

    @classmethod
    def from_config(cls, config: GraphKeeperConfig) -> "VirtualizationOptions":
        return cls(
            enabled=config.virtualization_enabled,
            node_threshold=config.node_threshold,
            viewport_padding=config.viewport_padding,
            max_visible_nodes=config.max_visible_nodes,
        )


DEFAULT_VIRTUALIZATION_OPTIONS = VirtualizationOptions()


@dataclass(frozen=True)
class RenderStats:
    rendered_nodes: int = 0
    culled_nodes: int = 0
    rendered_edges: int = 0
    culled_edges: int = 0


@dataclass(frozen=True)
class VirtualizationResult:
    visible_nodes: list
    visible_edges: list
    total_nodes: int
    total_edges: int
    is_virtualized: bool
    stats: RenderStats = field(default_factory=RenderStats)
    bounds: Optional[ViewportBounds] = None


def _node_id(node: Any) -> str:
    if isinstance(node, Mapping):
        return node["id"]
    return node.id


def _node_box(node: Any) -> tuple[float, float, float, float]:
    """(x, y, width, height); a missing position sits at the origin."""
    if isinstance(node, Mapping):
        pos = node.get("position") or {}
        x, y = pos.get("x", 0.0), pos.get("y", 0.0)
        width, height = node.get("width"), node.get("height")
    else:
        pos = node.position
        x, y = (pos.x, pos.y) if pos is not None else (0.0, 0.0)
        width, height = node.width, node.height
    return (
        float(x),
        float(y),
        float(width or DEFAULT_NODE_WIDTH),
        float(height or DEFAULT_NODE_HEIGHT),
    )


def _edge_endpoints(edge: Any) -> tuple[str, str]:
    if isinstance(edge, Mapping):
        return edge["source"], edge["target"]
    return edge.source, edge.target


def visible_node_indices(
    nodes: Sequence[Any], bounds: ViewportBounds, max_visible: int = 0
) -> np.ndarray:
    """Indices of nodes intersecting ``bounds``, truncated to ``max_visible``."""
    if not nodes:
        return np.empty(0, dtype=np.intp)
    boxes = np.array([_node_box(n) for n in nodes], dtype=float)
    x, y, w, h = boxes[:, 0], boxes[:, 1], boxes[:, 2], boxes[:, 3]
    mask = (
        (x + w >= bounds.min_x)
        & (x <= bounds.max_x)
        & (y + h >= bounds.min_y)
        & (y <= bounds.max_y)
    )
    indices = np.flatnonzero(mask)
    if max_visible:
        indices = indices[:max_visible]
    return indices


def virtualize(
    nodes: Sequence[Any],
    edges: Sequence[Any],
    viewport: Viewport,
    options: Optional[VirtualizationOptions] = None,
    screen_width: float = DEFAULT_SCREEN_WIDTH,
    screen_height: float = DEFAULT_SCREEN_HEIGHT,
) -> VirtualizationResult:
    """Compute the subset of the graph to render for ``viewport``.

    Nodes may be GraphNode objects or dicts with ``id``/``position``/
    ``width``/``height``; edges GraphEdge objects or dicts with
    ``source``/``target``.
    """
    opts = options or DEFAULT_VIRTUALIZATION_OPTIONS
    nodes = list(nodes)
    edges = list(edges)
    total_nodes, total_edges = len(nodes), len(edges)

    is_virtualized = opts.enabled and total_nodes >= opts.node_threshold
    if not is_virtualized:
        return VirtualizationResult(
            visible_nodes=nodes,
            visible_edges=edges,
            total_nodes=total_nodes,
            total_edges=total_edges,
            is_virtualized=False,
            stats=RenderStats(rendered_nodes=total_nodes, rendered_edges=total_edges),
        )

    bounds = compute_viewport_bounds(viewport, opts.viewport_padding, screen_width, screen_height)
    indices = visible_node_indices(nodes, bounds, opts.max_visible_nodes)
    visible_nodes = [nodes[i] for i in indices]
    visible_ids = {_node_id(n) for n in visible_nodes}

    visible_edges = []
    for edge in edges:
        source, target = _edge_endpoints(edge)
        if source in visible_ids or target in visible_ids:
            visible_edges.append(edge)

    return VirtualizationResult(
        visible_nodes=visible_nodes,
        visible_edges=visible_edges,
        total_nodes=total_nodes,
        total_edges=total_edges,
        is_virtualized=True,
        stats=RenderStats(
            rendered_nodes=len(visible_nodes),
            culled_nodes=total_nodes - len(visible_nodes),
            rendered_edges=len(visible_edges),
            culled_edges=total_edges - len(visible_edges),
        ),
        bounds=bounds,
    )
