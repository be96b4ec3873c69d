"""
graphkeeper - incremental call/dependency graph maintenance

Keeps a potentially huge, frequently-stale codebase graph queryable and
renderable: content fingerprints decide when to re-analyze, a single
analysis store serves call-graph queries, bounded caches hold derived
render data, and viewport virtualization keeps drawing cost flat.
"""

__version__ = "0.1.0"

from .analysis import AnalysisStore
from .cache import BoundedCache, GraphCache, estimate_memory_usage, optimize_graph_data
from .config import GraphKeeperConfig, load_config
from .context import WorkspaceContext
from .fingerprint import FingerprintStore, compute_hash
from .graph import AnalysisSnapshot, GraphEdge, GraphNode, symbol_id
from .performance import PerformanceMonitor, profile
from .render import ProgressiveLoader, Viewport, select_level_of_detail, virtualize

__all__ = [
    "AnalysisSnapshot",
    "AnalysisStore",
    "BoundedCache",
    "FingerprintStore",
    "GraphCache",
    "GraphEdge",
    "GraphKeeperConfig",
    "GraphNode",
    "PerformanceMonitor",
    "ProgressiveLoader",
    "Viewport",
    "WorkspaceContext",
    "compute_hash",
    "estimate_memory_usage",
    "load_config",
    "optimize_graph_data",
    "profile",
    "select_level_of_detail",
    "symbol_id",
    "virtualize",
]
