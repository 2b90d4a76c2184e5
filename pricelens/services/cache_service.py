"""
In-process TTL cache for resolved price histories.

One instance is created per application (see ``create_app``) and injected
into the resolution service; tests construct their own.

Policy:
- Entries expire ``ttl_seconds`` after insertion, checked lazily on read.
  An expired entry reads as a miss and is superseded by the next ``set``.
- Once the entry count exceeds ``sweep_threshold``, ``set`` performs a
  full scan removing every expired entry.
- ``max_entries`` (0 disables) is a hard LRU capacity, so memory stays
  bounded even when many distinct keys arrive within one TTL window.
- ``get_or_load`` coalesces concurrent misses on the same key into a
  single load (no cache stampede).

Entry bookkeeping is guarded by a ``threading.Lock`` so the cache is
safe to share with threadpool-run code; in-flight loads are tracked on
the event loop that started them.
"""

import asyncio
import logging
import threading
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300
DEFAULT_SWEEP_THRESHOLD = 1000
DEFAULT_MAX_ENTRIES = 5000

V = TypeVar("V")


@dataclass(slots=True)
class CacheEntry(Generic[V]):
    key: str
    value: V
    stored_at: float


class TTLCache(Generic[V]):
    """Lazy-expiry TTL cache with size-triggered sweeps and LRU capacity."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        sweep_threshold: int = DEFAULT_SWEEP_THRESHOLD,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.sweep_threshold = sweep_threshold
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, CacheEntry[V]] = OrderedDict()
        self._lock = threading.Lock()
        self._inflight: dict[str, asyncio.Future[V | None]] = {}
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def __len__(self) -> int:
        return len(self._entries)

    def _is_expired(self, entry: CacheEntry[V], now: float) -> bool:
        return now - entry.stored_at >= self.ttl_seconds

    def get(self, key: str) -> V | None:
        """Return the cached value, or None on a miss or an expired entry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or self._is_expired(entry, self._clock()):
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return entry.value

    def set(self, key: str, value: V) -> None:
        """Store ``value`` under ``key``, sweeping and trimming as needed."""
        with self._lock:
            now = self._clock()
            self._entries[key] = CacheEntry(key=key, value=value, stored_at=now)
            self._entries.move_to_end(key)

            if len(self._entries) > self.sweep_threshold:
                self._sweep_locked(now)

            if self.max_entries:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)
                    self.evictions += 1

    def delete(self, key: str) -> bool:
        """Remove one entry. Returns True if it existed."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        """Drop every entry. Returns the number removed."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def sweep(self) -> int:
        """Remove every expired entry now. Returns the number removed."""
        with self._lock:
            return self._sweep_locked(self._clock())

    def _sweep_locked(self, now: float) -> int:
        expired = [k for k, e in self._entries.items() if self._is_expired(e, now)]
        for key in expired:
            del self._entries[key]
        if expired:
            self.evictions += len(expired)
            logger.info(
                "cache_sweep",
                extra={"removed": len(expired), "remaining": len(self._entries)},
            )
        return len(expired)

    async def get_or_load(
        self,
        key: str,
        loader: Callable[[], Awaitable[V | None]],
    ) -> V | None:
        """
        Return the cached value for ``key`` or compute it with ``loader``.

        Concurrent callers missing the same key await one shared load.
        The load runs in its own task, so cancelling any caller (the one
        that started it included) leaves the others waiting on it.
        A None result is returned to every waiter but not cached.
        Loader exceptions propagate to every waiter and are not cached.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("cache_hit", extra={"key": key})
            return cached

        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._load(key, loader))
            self._inflight[key] = task
        else:
            logger.debug("cache_coalesced", extra={"key": key})
        return await asyncio.shield(task)

    async def _load(
        self,
        key: str,
        loader: Callable[[], Awaitable[V | None]],
    ) -> V | None:
        try:
            value = await loader()
            if value is not None:
                self.set(key, value)
            return value
        finally:
            self._inflight.pop(key, None)

    def stats(self) -> dict[str, int | float]:
        return {
            "entries": len(self._entries),
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "inflight": len(self._inflight),
            "ttl_seconds": self.ttl_seconds,
        }
