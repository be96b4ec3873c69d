"""Configuration exceptions: settings and service wiring."""

from typing import Any

from .base import GraphKeeperError


class ConfigurationError(GraphKeeperError):
    """Base class for configuration-related errors."""

    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class NotInitializedError(ConfigurationError):
    """Raised when a shared service is requested before it was given
    the collaborator it needs for first construction."""

    def __init__(self, service: str, missing: str):
        super().__init__(
            f"{service} not initialized. Pass {missing} for first initialization.",
            details={"service": service, "missing": missing},
        )
        self.service = service
        self.missing = missing
