"""Analysis-related exceptions: contention on the analysis gate."""

from .base import GraphKeeperError


class AnalysisError(GraphKeeperError):
    """Base class for analysis-related errors."""
    pass


class AnalysisInProgressError(AnalysisError):
    """Raised when analysis is requested while another run is in flight
    and there is no earlier snapshot to fall back on.

    Recoverable: the caller may retry once the running analysis finishes.
    """

    recoverable = True

    def __init__(self, root_path: str):
        super().__init__(
            "Analysis already in progress",
            details={"root_path": str(root_path)},
        )
        self.root_path = root_path

    @property
    def hint(self) -> str:
        return "Retry once the running analysis finishes."
