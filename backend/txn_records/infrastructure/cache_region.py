"""Cache Region: one bounded, time-limited, in-memory key/value map.

Invariants:
    - An entry never survives past ttl_seconds from the moment it was written
      (absolute TTL: reads do not extend it)
    - len(region) <= max_entries after every put
    - Eviction order when over capacity: expired entries first, then the
      least-recently-used entry (a get hit or a put refreshes recency)
    - get() returns MISSING for an absent or expired key; a stored None is a
      real value (negative caching relies on this)
    - Every operation holds the region lock; none performs IO
    - put_if_current() never stores a value read before the latest invalidate
      or clear: every invalidation bumps the region generation

Design Decisions:
    - OrderedDict gives a strict recency order, so LRU eviction has no ties
    - Injected clock (time.monotonic by default): TTL tests advance a fake clock
"""

import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable

logger = logging.getLogger(__name__)

MISSING: Any = object()


@dataclass
class CacheEntry:
    """Stored value with its absolute expiry time."""
    value: Any
    expires_at: float


@dataclass(frozen=True)
class CacheStats:
    """Point-in-time counters for one region."""
    name: str
    size: int
    max_entries: int
    ttl_seconds: float
    hits: int
    misses: int
    evictions: int
    expirations: int


class CacheRegion:
    """Size- and TTL-bounded LRU map, safe for concurrent use."""

    def __init__(
        self,
        name: str,
        max_entries: int,
        ttl_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.name = name
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[Hashable, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0
        self._generation = 0

    def get(self, key: Hashable) -> Any:
        """Return the cached value, or MISSING."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return MISSING
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                self._expirations += 1
                self._misses += 1
                return MISSING
            self._entries.move_to_end(key)
            self._hits += 1
            return entry.value

    def put(self, key: Hashable, value: Any) -> None:
        with self._lock:
            self._store(key, value)

    @property
    def generation(self) -> int:
        """Counter bumped by every invalidate() and clear()."""
        with self._lock:
            return self._generation

    def put_if_current(self, key: Hashable, value: Any, generation: int) -> bool:
        """Store value only if nothing was invalidated since generation was read.

        Read-through fills snapshot the generation before the store read, so a
        value loaded before a concurrent mutation cannot outlive its invalidation.
        """
        with self._lock:
            if generation != self._generation:
                return False
            self._store(key, value)
            return True

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._generation += 1
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        """True if key holds an unexpired entry. Does not touch recency or counters."""
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and self._clock() < entry.expires_at

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                name=self.name,
                size=len(self._entries),
                max_entries=self.max_entries,
                ttl_seconds=self.ttl_seconds,
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                expirations=self._expirations,
            )

    def _store(self, key: Hashable, value: Any) -> None:
        """Write with a fresh TTL and shrink if over capacity. Caller holds the lock."""
        self._entries[key] = CacheEntry(value, self._clock() + self.ttl_seconds)
        self._entries.move_to_end(key)
        if len(self._entries) > self.max_entries:
            self._shrink()

    def _shrink(self) -> None:
        """Purge expired entries, then evict LRU until within capacity. Caller holds the lock."""
        now = self._clock()
        expired = [k for k, e in self._entries.items() if now >= e.expires_at]
        for k in expired:
            del self._entries[k]
        self._expirations += len(expired)

        while len(self._entries) > self.max_entries:
            evicted_key, _ = self._entries.popitem(last=False)
            self._evictions += 1
            logger.debug(
                f"Evicted LRU entry {evicted_key!r}",
                extra={"cache_region": self.name},
            )
