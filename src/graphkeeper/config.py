"""Configuration loading and management for graphkeeper.

Configuration sources are merged in priority order:
    1. Defaults (defined in GraphKeeperConfig)
    2. Global config (~/.graphkeeper.toml)
    3. Project config (./graphkeeper.toml)
    4. Explicit config file
    5. Environment variables (GRAPHKEEPER_* prefix)
    6. Overrides (passed as kwargs)

Example:
    >>> config = load_config(layout_cache_size=20)
    >>> config.layout_cache_size
    20
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "GRAPHKEEPER_"


@dataclass(frozen=True)
class GraphKeeperConfig:
    """Tuning for caches, instrumentation and rendering.

    Attributes:
        Graph caches (sizes are entry counts, TTLs are seconds):
            node_cache_size / node_cache_ttl: many cheap entries, medium lifetime
            edge_cache_size / edge_cache_ttl: many cheap entries, medium lifetime
            layout_cache_size / layout_cache_ttl: few expensive entries, long lifetime

        Instrumentation:
            monitor_max_samples: Ring capacity per metric

        Virtualization:
            virtualization_enabled: Bypass culling entirely when False
            node_threshold: Node count at which culling starts
            viewport_padding: World-space margin around the visible rectangle
            max_visible_nodes: Hard cap on simultaneously visible nodes
            screen_width / screen_height: Screen size used to project the viewport

        Progressive loading:
            batch_size: Nodes revealed per step
            batch_delay_ms: Delay between steps

        Level of detail (minimum zoom per tier):
            lod_full, lod_simplified, lod_minimal

        Change watching:
            state_dir: Directory (relative to the workspace root) for persisted state
            debounce_seconds: Quiet period before reacting to file changes
    """

    # Graph caches
    node_cache_size: int = 500
    node_cache_ttl: float = 300.0
    edge_cache_size: int = 1000
    edge_cache_ttl: float = 300.0
    layout_cache_size: int = 10
    layout_cache_ttl: float = 600.0

    # Instrumentation
    monitor_max_samples: int = 100

    # Virtualization
    virtualization_enabled: bool = True
    node_threshold: int = 100
    viewport_padding: float = 500.0
    max_visible_nodes: int = 200
    screen_width: float = 1920.0
    screen_height: float = 1080.0

    # Progressive loading
    batch_size: int = 50
    batch_delay_ms: int = 10

    # Level of detail
    lod_full: float = 0.75
    lod_simplified: float = 0.5
    lod_minimal: float = 0.25

    # Change watching
    state_dir: str = ".graphkeeper"
    debounce_seconds: float = 2.0

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for name in ("node_cache_size", "edge_cache_size", "layout_cache_size"):
            if getattr(self, name) < 1:
                raise InvalidConfigError(name, getattr(self, name), "must be at least 1")
        for name in ("node_cache_ttl", "edge_cache_ttl", "layout_cache_ttl"):
            if getattr(self, name) < 0:
                raise InvalidConfigError(name, getattr(self, name), "must be non-negative")

        if self.monitor_max_samples < 1:
            raise InvalidConfigError(
                "monitor_max_samples", self.monitor_max_samples, "must be at least 1"
            )

        if self.node_threshold < 0:
            raise InvalidConfigError("node_threshold", self.node_threshold, "must be non-negative")
        if self.viewport_padding < 0:
            raise InvalidConfigError(
                "viewport_padding", self.viewport_padding, "must be non-negative"
            )
        if self.max_visible_nodes < 0:
            raise InvalidConfigError(
                "max_visible_nodes", self.max_visible_nodes, "must be non-negative"
            )
        if self.screen_width <= 0 or self.screen_height <= 0:
            raise InvalidConfigError(
                "screen_size", (self.screen_width, self.screen_height), "must be positive"
            )

        if self.batch_size < 1:
            raise InvalidConfigError("batch_size", self.batch_size, "must be at least 1")
        if self.batch_delay_ms < 0:
            raise InvalidConfigError("batch_delay_ms", self.batch_delay_ms, "must be non-negative")

        if not self.lod_full > self.lod_simplified > self.lod_minimal:
            raise InvalidConfigError(
                "lod",
                (self.lod_full, self.lod_simplified, self.lod_minimal),
                "thresholds must satisfy full > simplified > minimal",
            )

        if self.debounce_seconds < 0:
            raise InvalidConfigError(
                "debounce_seconds", self.debounce_seconds, "must be non-negative"
            )


DEFAULT_CONFIG = GraphKeeperConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> GraphKeeperConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags)

    Returns:
        Validated GraphKeeperConfig instance

    Raises:
        ConfigurationError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".graphkeeper.toml"
    if global_config.exists():
        merged.update(_load_config_file(global_config, "global config"))

    project_config = Path.cwd() / "graphkeeper.toml"
    if project_config.exists():
        merged.update(_load_config_file(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_config_file(config_file, "config file"))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    try:
        return GraphKeeperConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_config_file(path: Path, label: str) -> dict:
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")
    # Settings may live at the top level or under a [graphkeeper] table
    section = data.get("graphkeeper", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid {label} '{path}': [graphkeeper] must be a table")
    return dict(section)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from GRAPHKEEPER_* environment variables.

    Every field of GraphKeeperConfig can be set, e.g.
    GRAPHKEEPER_MAX_VISIBLE_NODES=400 or GRAPHKEEPER_VIRTUALIZATION_ENABLED=false.

    Returns:
        Dict of field_name -> parsed_value for any GRAPHKEEPER_* vars found.
    """
    type_hints = get_type_hints(GraphKeeperConfig)

    result: dict[str, Any] = {}

    for field_name in GraphKeeperConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict."""
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    with open(path, "rb") as f:
        return tomllib.load(f)
