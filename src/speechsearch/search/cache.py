"""In-memory LRU cache for expensive search results."""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, TypeVar
import logging

from cachetools import LRUCache

from ..core.types import SearchOptions

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def cache_key(name: str, options: SearchOptions) -> str:
    return f"{name}:{options.cache_key()}"


class ResultCache:
    """Memoizes shaped results keyed by operation name and options.

    Concurrent misses on the same key share one fetch: the first caller starts
    it and later callers await the same task. A failed fetch is handed to every
    waiter and never stored.
    """

    def __init__(self, max_entries: int = 500) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._entries: LRUCache = LRUCache(maxsize=max_entries)
        self._inflight: Dict[str, asyncio.Task] = {}

    async def cached(self, name: str, options: SearchOptions, fetch: Callable[[], Awaitable[T]]) -> T:
        key = cache_key(name, options)
        try:
            value = self._entries[key]
        except KeyError:
            pass
        else:
            LOGGER.debug("cache hit for %s", key)
            return value

        task = self._inflight.get(key)
        if task is None:
            LOGGER.debug("cache miss for %s", key)
            task = asyncio.ensure_future(fetch())
            self._inflight[key] = task
            task.add_done_callback(lambda done: self._store(key, done))
        else:
            LOGGER.debug("joining in-flight fetch for %s", key)
        return await asyncio.shield(task)

    def _store(self, key: str, task: asyncio.Task) -> None:
        self._inflight.pop(key, None)
        if task.cancelled() or task.exception() is not None:
            return
        self._entries[key] = task.result()

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def max_entries(self) -> int:
        return int(self._entries.maxsize)


__all__ = ["ResultCache", "cache_key"]
