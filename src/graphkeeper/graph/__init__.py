"""Graph data model shared by analyzers, the analysis store and renderers."""

from .models import (
    AnalysisResult,
    AnalysisSnapshot,
    EdgeType,
    GraphEdge,
    GraphNode,
    NodeKind,
    Position,
    edge_from_dict,
    node_from_dict,
    qualified_name,
    split_symbol_id,
    symbol_id,
)

__all__ = [
    "AnalysisResult",
    "AnalysisSnapshot",
    "EdgeType",
    "GraphEdge",
    "GraphNode",
    "NodeKind",
    "Position",
    "edge_from_dict",
    "node_from_dict",
    "qualified_name",
    "split_symbol_id",
    "symbol_id",
]
