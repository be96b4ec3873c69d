"""Tests for performance.py: monitor, profiling and rate limiting."""

import asyncio

import pytest

from graphkeeper.performance import (
    MetricStats,
    PerformanceMonitor,
    debounce,
    performance_optimizer,
    profile,
    profiled,
    throttle,
)


class TestPerformanceMonitor:
    """Rolling per-metric samples."""

    def test_ring_keeps_latest_samples(self):
        monitor = PerformanceMonitor(max_samples=3)
        for value in (1, 2, 3, 4, 5):
            monitor.mark("fps", value)

        assert monitor.get_samples("fps") == [3, 4, 5]
        assert monitor.get_average("fps") == 4.0

    def test_stats(self):
        monitor = PerformanceMonitor()
        for value in (10.0, 20.0, 30.0):
            monitor.mark("render", value)

        assert monitor.get_stats("render") == MetricStats(
            average=20.0, max=30.0, min=10.0, samples=3
        )

    def test_unknown_metric_is_zero(self):
        monitor = PerformanceMonitor()
        assert monitor.get_average("nothing") == 0.0
        assert monitor.get_stats("nothing") == MetricStats(0.0, 0.0, 0.0, 0)

    def test_metrics_are_independent(self):
        monitor = PerformanceMonitor()
        monitor.mark("a", 1)
        monitor.mark("b", 100)

        assert monitor.get_average("a") == 1
        assert monitor.metric_names() == ["a", "b"]

    def test_clear(self):
        monitor = PerformanceMonitor()
        monitor.mark("a", 1)
        monitor.clear()
        assert monitor.metric_names() == []

    def test_rejects_empty_ring(self):
        with pytest.raises(ValueError):
            PerformanceMonitor(max_samples=0)

    def test_shared_optimizer_ring_size(self):
        assert performance_optimizer.monitor.max_samples == 100


class TestProfile:
    """Duration recording around wrapped calls."""

    def test_records_one_sample_per_call(self):
        monitor = PerformanceMonitor()
        timed = profile(lambda x: x * 2, "double", monitor)

        assert timed(21) == 42
        timed(1)

        samples = monitor.get_samples("double")
        assert len(samples) == 2
        assert all(s >= 0 for s in samples)

    def test_records_even_when_function_raises(self):
        monitor = PerformanceMonitor()

        def boom():
            raise KeyError("x")

        timed = profile(boom, "boom", monitor)
        with pytest.raises(KeyError):
            timed()

        assert monitor.get_stats("boom").samples == 1

    def test_async_function_is_awaited_inside_window(self):
        monitor = PerformanceMonitor()

        async def slow():
            await asyncio.sleep(0.01)
            return "done"

        timed = profile(slow, "slow", monitor)

        assert asyncio.run(timed()) == "done"
        assert monitor.get_samples("slow")[0] >= 5.0

    def test_keeps_function_metadata(self):
        def named():
            """Docs."""

        timed = profile(named, "m", PerformanceMonitor())
        assert timed.__name__ == "named"
        assert timed.__doc__ == "Docs."

    def test_decorator_form(self):
        monitor = PerformanceMonitor()

        @profiled("work", monitor)
        def work():
            return 1

        work()
        assert monitor.get_stats("work").samples == 1


class TestDebounce:
    """Only the last call in a burst runs."""

    def test_runs_once_with_last_arguments(self):
        seen = []

        async def scenario():
            @debounce(0.02)
            def handler(value):
                seen.append(value)

            handler(1)
            handler(2)
            handler(3)
            assert handler.pending
            await asyncio.sleep(0.06)
            assert not handler.pending

        asyncio.run(scenario())
        assert seen == [3]

    def test_cancel_drops_pending_call(self):
        seen = []

        async def scenario():
            handler = debounce(0.02)(seen.append)
            handler("x")
            handler.cancel()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert seen == []


class TestThrottle:
    """At most one call per window; extra calls are dropped."""

    def test_drops_calls_inside_window(self):
        seen = []

        async def scenario():
            handler = throttle(0.05)(seen.append)
            assert handler(1) is True
            assert handler(2) is False
            assert handler.in_throttle
            await asyncio.sleep(0.1)
            assert not handler.in_throttle
            assert handler(3) is True
            handler.cancel()

        asyncio.run(scenario())
        assert seen == [1, 3]
