"""Minimal publish/subscribe events for analysis consumers."""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

from ..logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Listener = Callable[[T], Any]


class Subscription:
    """Handle returned by :meth:`EventEmitter.subscribe`."""

    def __init__(self, emitter: "EventEmitter[Any]", listener: Listener) -> None:
        self._emitter: Optional[EventEmitter[Any]] = emitter
        self._listener = listener

    def dispose(self) -> None:
        if self._emitter is not None:
            self._emitter._remove(self._listener)
            self._emitter = None

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc: object) -> None:
        self.dispose()


class EventEmitter(Generic[T]):
    """Fan a payload out to every subscribed listener.

    A listener that raises is logged and skipped; the remaining listeners
    still run.
    """

    def __init__(self, name: str = "event") -> None:
        self.name = name
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    __call__ = subscribe

    def _remove(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def fire(self, payload: T = None) -> None:  # type: ignore[assignment]
        # Copy listeners list to allow dispose() during dispatch
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener for %s failed", self.name)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
