"""
Time-boxed cache holding the single shared record stream.

Exactly one entry exists at a time. An entry is valid while
``now - created_at < ttl``; an expired entry is discarded on access and never
returned. Writes invalidate the entry so the next read re-subscribes.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Generic, Optional, TypeVar

from client_records.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    created_at: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now - self.created_at < self.ttl


@dataclass
class CacheStats:
    hits: int = field(default=0)
    misses: int = field(default=0)
    invalidations: int = field(default=0)

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0

    def as_dict(self) -> dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "invalidations": self.invalidations,
            "hit_rate": round(self.hit_rate, 4),
        }


class RecordCache(Generic[T]):
    """
    Thread-safe single-entry cache with a fixed TTL.

    Parameters
    ----------
    ttl : float
        Lifetime of an entry in seconds.
    clock : Callable[[], float]
        Monotonic time source; injectable for tests.
    on_evict : Callable[[T], None] | None
        Called with the old value whenever an entry is dropped (expiry,
        replacement or invalidation).
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        on_evict: Optional[Callable[[T], None]] = None,
    ) -> None:
        self.ttl = ttl
        self._clock = clock
        self._on_evict = on_evict
        self._entry: Optional[CacheEntry[T]] = None
        self._lock = threading.Lock()
        self.stats = CacheStats()

    def _valid_value(self) -> Optional[T]:
        entry = self._entry
        if entry is None:
            return None
        if not entry.is_valid(self._clock()):
            log.debug("Cache entry expired", extra={"age": self._clock() - entry.created_at})
            self._drop()
            return None
        return entry.value

    def _drop(self) -> None:
        entry, self._entry = self._entry, None
        if entry is not None and self._on_evict is not None:
            self._on_evict(entry.value)

    def get(self) -> Optional[T]:
        """The cached value if still valid, else None."""
        with self._lock:
            value = self._valid_value()
            if value is None:
                self.stats.misses += 1
            else:
                self.stats.hits += 1
            return value

    def put(self, value: T) -> None:
        """Store ``value`` stamped with the current time, replacing any entry."""
        with self._lock:
            if self._entry is not None and self._entry.value is not value:
                self._drop()
            self._entry = CacheEntry(value=value, created_at=self._clock(), ttl=self.ttl)

    def get_or_create(self, factory: Callable[[], T]) -> T:
        """
        Return the valid cached value, or build one with ``factory`` and store it.

        Check and insert happen under one lock acquisition, so concurrent
        callers never both observe a miss.
        """
        with self._lock:
            value = self._valid_value()
            if value is not None:
                self.stats.hits += 1
                return value
            self.stats.misses += 1
            value = factory()
            self._entry = CacheEntry(value=value, created_at=self._clock(), ttl=self.ttl)
            return value

    def invalidate(self) -> None:
        with self._lock:
            if self._entry is not None:
                self.stats.invalidations += 1
            self._drop()

    def peek(self) -> Optional[CacheEntry[T]]:
        """Current entry without validity check or stats accounting."""
        return self._entry


__all__ = ["CacheEntry", "CacheStats", "DEFAULT_TTL_SECONDS", "RecordCache"]
