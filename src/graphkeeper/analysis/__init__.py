"""Analysis store, call-graph queries and the bundled workspace analyzer."""

from .events import EventEmitter, Subscription
from .store import AnalysisStore, Analyzer
from .workspace import analyze_workspace, graph_file_analyzer, scan_workspace

__all__ = [
    "AnalysisStore",
    "Analyzer",
    "EventEmitter",
    "Subscription",
    "analyze_workspace",
    "graph_file_analyzer",
    "scan_workspace",
]
