"""In-memory TTL cache shared by all concurrent search requests."""

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    """Cached value with the clock reading taken when it was stored."""

    value: V
    fetched_at: float


class TTLCache(Generic[V]):
    """Process-wide cache whose entries expire purely by elapsed time.

    Constructed once in the application lifespan and cleared at
    shutdown. There is no per-caller isolation: every request sees the
    same entries.

    By default concurrent misses for one key each run their own loader.
    With ``single_flight=True`` later callers join the loader already in
    flight for that key instead.

    Attributes:
        ttl: Seconds an entry stays fresh.
        single_flight: Whether concurrent misses share one load.
    """

    def __init__(
        self,
        ttl: float,
        single_flight: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            ttl: Seconds an entry stays fresh.
            single_flight: Share one in-flight load between concurrent misses.
            clock: Monotonic time source (injected in tests).
        """
        self.ttl = ttl
        self.single_flight = single_flight
        self._clock = clock
        self._entries: dict[str, CacheEntry[V]] = {}
        self._in_flight: dict[str, asyncio.Task[V]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def _is_fresh(self, entry: CacheEntry[V]) -> bool:
        return self._clock() - entry.fetched_at < self.ttl

    def get(self, key: str) -> V | None:
        """Return the fresh value for ``key``, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self._is_fresh(entry):
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: V) -> None:
        self._entries[key] = CacheEntry(value=value, fetched_at=self._clock())

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Drop all entries and forget in-flight loads."""
        self._entries.clear()
        self._in_flight.clear()

    async def get_or_populate(
        self,
        key: str,
        loader: Callable[[], Awaitable[V]],
    ) -> V:
        """Return the fresh value for ``key``, loading and storing it on a miss.

        Loader failures propagate to every caller waiting on that load
        and nothing is stored.

        Args:
            key: Cache key.
            loader: Coroutine factory producing the value.

        Returns:
            Cached or freshly loaded value.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("cache_hit", key=key)
            return cached

        if not self.single_flight:
            logger.debug("cache_miss", key=key)
            value = await loader()
            self.set(key, value)
            return value

        task = self._in_flight.get(key)
        if task is None:
            logger.debug("cache_miss", key=key)
            task = asyncio.ensure_future(self._load(key, loader))
            self._in_flight[key] = task
            task.add_done_callback(lambda t: self._forget(key, t))
        else:
            logger.debug("cache_join_in_flight", key=key)

        # A cancelled waiter must not cancel the load other waiters share.
        return await asyncio.shield(task)

    async def _load(self, key: str, loader: Callable[[], Awaitable[V]]) -> V:
        value = await loader()
        self.set(key, value)
        return value

    def _forget(self, key: str, task: "asyncio.Task[V]") -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]
        if not task.cancelled() and task.exception() is not None:
            logger.debug("cache_load_failed", key=key)
