"""Key-value persistence collaborators for the fingerprint store.

Any object with ``get(key, default)`` and ``update(key, value)`` works.
``DiskStorage`` keeps state in a diskcache directory so it survives
across sessions; ``MemoryStorage`` is for tests and throwaway runs.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from diskcache import Cache

from ..logging_config import get_logger

logger = get_logger(__name__)


@runtime_checkable
class KeyValueStorage(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def update(self, key: str, value: Any) -> None: ...


class MemoryStorage:
    """In-process storage. Values are deep-copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return copy.deepcopy(self._data[key])

    def update(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)


class DiskStorage:
    """SQLite-backed storage using diskcache.

    ``update`` returns only after diskcache has committed the write.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self._cache = Cache(str(self.directory))
        logger.debug("State storage opened at %s", self.directory)

    def get(self, key: str, default: Any = None) -> Any:
        return self._cache.get(key, default=default)

    def update(self, key: str, value: Any) -> None:
        self._cache.set(key, value)

    def delete(self, key: str) -> bool:
        return bool(self._cache.delete(key))

    def close(self) -> None:
        self._cache.close()

    def __enter__(self) -> "DiskStorage":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
