"""Tests for the workspace context."""

import asyncio

from graphkeeper.config import GraphKeeperConfig
from graphkeeper.context import WorkspaceContext
from graphkeeper.fingerprint import DiskStorage, MemoryStorage
from graphkeeper.render import LodThresholds, VirtualizationOptions


class TestCreate:
    def test_defaults_to_disk_storage(self, tmp_path):
        with WorkspaceContext.create(tmp_path, GraphKeeperConfig()) as ctx:
            assert isinstance(ctx.storage, DiskStorage)
            assert (tmp_path / ".graphkeeper" / "state").is_dir()

    def test_fingerprints_persist_between_contexts(self, tmp_path):
        with WorkspaceContext.create(tmp_path, GraphKeeperConfig()) as ctx:
            ctx.fingerprints.update_file_snapshot("/a.py", "h1")

        with WorkspaceContext.create(tmp_path, GraphKeeperConfig()) as ctx:
            assert ctx.fingerprints.get_stored_hash("/a.py") == "h1"

    def test_services_follow_config(self, tmp_path):
        config = GraphKeeperConfig(
            layout_cache_size=3,
            monitor_max_samples=7,
            max_visible_nodes=50,
            lod_full=0.9,
        )
        with WorkspaceContext.create(tmp_path, config, storage=MemoryStorage()) as ctx:
            assert ctx.cache.layout_cache.max_size == 3
            assert ctx.monitor.max_samples == 7
            assert ctx.virtualization_options == VirtualizationOptions(max_visible_nodes=50)
            assert ctx.lod_thresholds == LodThresholds(full=0.9)

    def test_contexts_are_isolated(self, tmp_path):
        first = WorkspaceContext.create(tmp_path, GraphKeeperConfig(), storage=MemoryStorage())
        second = WorkspaceContext.create(tmp_path, GraphKeeperConfig(), storage=MemoryStorage())

        asyncio.run(first.analysis.analyze(str(tmp_path)))

        assert first.analysis.get_data() is not None
        assert second.analysis.get_data() is None

    def test_custom_analyzer(self, tmp_path):
        calls = []

        def analyzer(root):
            calls.append(root)
            return {"nodes": [], "edges": []}

        with WorkspaceContext.create(
            tmp_path, GraphKeeperConfig(), storage=MemoryStorage(), analyzer=analyzer
        ) as ctx:
            asyncio.run(ctx.analysis.analyze(str(ctx.root)))

        assert calls == [str(tmp_path.resolve())]

    def test_lenses_wired_to_analysis(self, tmp_path):
        with WorkspaceContext.create(tmp_path, GraphKeeperConfig(), storage=MemoryStorage()) as ctx:
            fired = []
            ctx.lenses.on_did_change_code_lenses.subscribe(fired.append)
            asyncio.run(ctx.analysis.analyze(str(ctx.root)))

        assert fired == [None]

    def test_progressive_loader_follows_config(self, tmp_path):
        config = GraphKeeperConfig(batch_size=4, batch_delay_ms=25)
        with WorkspaceContext.create(tmp_path, config, storage=MemoryStorage()) as ctx:
            loader = ctx.progressive_loader(list(range(10)), [])

        assert loader.batch_size == 4
        assert loader.delay_ms == 25
