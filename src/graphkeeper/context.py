"""Host-owned bundle of graphkeeper services.

The host application builds one :class:`WorkspaceContext` per workspace and
hands it to every consumer. Tests build a fresh context per case instead of
resetting process-wide singletons.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Sequence

from .analysis.store import AnalysisStore, Analyzer
from .analysis.workspace import analyze_workspace
from .cache import GraphCache
from .config import GraphKeeperConfig, load_config
from .fingerprint.storage import DiskStorage, KeyValueStorage
from .fingerprint.store import FingerprintStore
from .lenses import LensProvider
from .logging_config import get_logger
from .performance import PerformanceMonitor
from .render.culling import VirtualizationOptions
from .render.lod import LodThresholds
from .render.progressive import ProgressiveLoader

logger = get_logger(__name__)


@dataclass
class WorkspaceContext:
    root: Path
    config: GraphKeeperConfig
    storage: KeyValueStorage
    fingerprints: FingerprintStore
    analysis: AnalysisStore
    cache: GraphCache
    monitor: PerformanceMonitor
    lenses: LensProvider = field(init=False)

    def __post_init__(self) -> None:
        self.lenses = LensProvider(self.analysis)

    @classmethod
    def create(
        cls,
        root: str | Path,
        config: Optional[GraphKeeperConfig] = None,
        storage: Optional[KeyValueStorage] = None,
        analyzer: Optional[Analyzer] = None,
    ) -> "WorkspaceContext":
        """Wire up every service for ``root``.

        Without ``storage``, fingerprints persist in
        ``<root>/<state_dir>/state`` through diskcache.
        """
        root = Path(root).resolve()
        config = config or load_config()
        if storage is None:
            storage = DiskStorage(root / config.state_dir / "state")
        logger.debug("Creating workspace context for %s", root)
        return cls(
            root=root,
            config=config,
            storage=storage,
            fingerprints=FingerprintStore(storage),
            analysis=AnalysisStore(analyzer or analyze_workspace),
            cache=GraphCache(config),
            monitor=PerformanceMonitor(config.monitor_max_samples),
        )

    @property
    def virtualization_options(self) -> VirtualizationOptions:
        return VirtualizationOptions.from_config(self.config)

    @property
    def lod_thresholds(self) -> LodThresholds:
        return LodThresholds(
            full=self.config.lod_full,
            simplified=self.config.lod_simplified,
            minimal=self.config.lod_minimal,
        )

    def progressive_loader(self, nodes: Sequence[Any], edges: Sequence[Any]) -> ProgressiveLoader:
        """Loader with the configured batch size and inter-batch delay."""
        return ProgressiveLoader(
            nodes,
            edges,
            batch_size=self.config.batch_size,
            delay_ms=self.config.batch_delay_ms,
        )

    def close(self) -> None:
        self.lenses.dispose()
        self.cache.clear_all()
        close = getattr(self.storage, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "WorkspaceContext":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
