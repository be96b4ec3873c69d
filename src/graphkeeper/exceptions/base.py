"""Base exception for graphkeeper."""

from typing import Any, Mapping, Optional


class GraphKeeperError(Exception):
    """Base exception for all graphkeeper errors.

    ``details`` holds the structured context (paths, config keys, service
    names) as strings and is appended to the message. Errors the caller may
    simply retry set ``recoverable`` and can offer a ``hint``.
    """

    recoverable = False

    def __init__(self, message: str, details: Optional[Mapping[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = {key: str(value) for key, value in (details or {}).items()}

    @property
    def hint(self) -> Optional[str]:
        return None

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
