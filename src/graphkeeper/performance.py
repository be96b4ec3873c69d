"""Rolling-window cost tracking and call-rate limiting.

``PerformanceMonitor`` keeps the last ``max_samples`` values per metric.
``profile`` wraps any function so every call records its wall-clock
duration (milliseconds). ``debounce`` and ``throttle`` schedule work on
the running asyncio loop and hand back wrappers whose pending timer can
be cancelled on teardown.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypeVar

from .cache import GraphCache
from .logging_config import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


@dataclass(frozen=True)
class MetricStats:
    average: float = 0.0
    max: float = 0.0
    min: float = 0.0
    samples: int = 0


class PerformanceMonitor:
    """Per-metric ring buffers of numeric samples."""

    def __init__(self, max_samples: int = 60) -> None:
        if max_samples < 1:
            raise ValueError("max_samples must be at least 1")
        self.max_samples = max_samples
        self._metrics: dict[str, deque[float]] = {}

    def mark(self, metric_name: str, value: float) -> None:
        """Append a sample, dropping the oldest once the ring is full."""
        samples = self._metrics.get(metric_name)
        if samples is None:
            samples = self._metrics[metric_name] = deque(maxlen=self.max_samples)
        samples.append(value)

    def get_samples(self, metric_name: str) -> list[float]:
        return list(self._metrics.get(metric_name, ()))

    def get_average(self, metric_name: str) -> float:
        samples = self._metrics.get(metric_name)
        if not samples:
            return 0.0
        return sum(samples) / len(samples)

    def get_stats(self, metric_name: str) -> MetricStats:
        samples = self._metrics.get(metric_name)
        if not samples:
            return MetricStats()
        return MetricStats(
            average=self.get_average(metric_name),
            max=max(samples),
            min=min(samples),
            samples=len(samples),
        )

    def metric_names(self) -> list[str]:
        return sorted(self._metrics)

    def clear(self) -> None:
        self._metrics.clear()


@dataclass
class PerformanceOptimizer:
    """Shared instrumentation surface: one graph cache, one monitor."""

    cache: GraphCache
    monitor: PerformanceMonitor


performance_optimizer = PerformanceOptimizer(
    cache=GraphCache(),
    monitor=PerformanceMonitor(100),
)


def profile(func: F, metric_name: str, monitor: Optional[PerformanceMonitor] = None) -> F:
    """Wrap ``func`` so each call records its duration under ``metric_name``.

    The wrapped function's arguments, return value and exceptions are
    untouched. Coroutine functions are awaited inside the timing window.
    Without an explicit ``monitor`` the shared one is used.
    """

    def _record(start: float) -> None:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        (monitor or performance_optimizer.monitor).mark(metric_name, elapsed_ms)

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            start = time.perf_counter()
            try:
                return await func(*args, **kwargs)
            finally:
                _record(start)

        return async_wrapper  # type: ignore[return-value]

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            _record(start)

    return wrapper  # type: ignore[return-value]


def profiled(metric_name: str, monitor: Optional[PerformanceMonitor] = None) -> Callable[[F], F]:
    """Decorator form of :func:`profile`.

    Usage::

        @profiled("render.cull")
        def cull(...):
            ...
    """

    def decorator(func: F) -> F:
        return profile(func, metric_name, monitor)

    return decorator


# ── Rate limiting ─────────────────────────────────────────────────


class Debounced:
    """Runs the wrapped function ``wait`` seconds after the last call.

    Each call replaces the pending timer, so only the most recent
    arguments are used. Must be called from within a running event loop.
    """

    def __init__(self, func: Callable[..., Any], wait: float) -> None:
        self._func = func
        self.wait = wait
        self._handle: Optional[asyncio.TimerHandle] = None
        functools.update_wrapper(self, func)

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.wait, self._fire, args, kwargs)

    def _fire(self, args: tuple, kwargs: dict) -> None:
        self._handle = None
        self._func(*args, **kwargs)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class Throttled:
    """Runs the wrapped function at most once per ``limit`` seconds.

    Calls made while the window is closed are dropped, not queued.
    """

    def __init__(self, func: Callable[..., Any], limit: float) -> None:
        self._func = func
        self.limit = limit
        self._handle: Optional[asyncio.TimerHandle] = None
        functools.update_wrapper(self, func)

    def __call__(self, *args: Any, **kwargs: Any) -> bool:
        if self._handle is not None:
            return False
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.limit, self._reopen)
        self._func(*args, **kwargs)
        return True

    def _reopen(self) -> None:
        self._handle = None

    @property
    def in_throttle(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


def debounce(wait: float) -> Callable[[Callable[..., Any]], Debounced]:
    def decorator(func: Callable[..., Any]) -> Debounced:
        return Debounced(func, wait)

    return decorator


def throttle(limit: float) -> Callable[[Callable[..., Any]], Throttled]:
    def decorator(func: Callable[..., Any]) -> Throttled:
        return Throttled(func, limit)

    return decorator
