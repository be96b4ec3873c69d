"""Exception hierarchy for graphkeeper."""

from .analysis import AnalysisError, AnalysisInProgressError
from .base import GraphKeeperError
from .config import ConfigurationError, InvalidConfigError, NotInitializedError

__all__ = [
    "GraphKeeperError",
    "AnalysisError",
    "AnalysisInProgressError",
    "ConfigurationError",
    "InvalidConfigError",
    "NotInitializedError",
]
