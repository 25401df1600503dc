"""
Bounded TTL Cache

In-memory cache with a fixed capacity and time-based expiration.
Uses cachetools.TTLCache for LRU eviction and TTL expiration.

Features:
- Time-based expiration: an entry is valid only while ``now - stored_at < ttl``
- LRU eviction when max size reached
- Injectable timer so tests can move time forward

get/set never await, so callers running on the event loop are single
writers: a lookup and the store that follows it cannot interleave with
another coroutine.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from cachetools import TTLCache

from transcript_search.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class CacheStats:
    """Cache statistics."""

    hits: int = 0
    misses: int = 0
    expirations: int = 0

    @property
    def total_requests(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Cache hit rate (0-1)."""
        total = self.total_requests
        return self.hits / total if total > 0 else 0.0


class BoundedTTLCache(Generic[V]):
    """
    Bounded LRU + TTL cache shared by the suggestion, enhancement and
    insight caches.

    Example:
        cache = BoundedTTLCache(max_size=100, ttl=3600, name="suggestions")
        cache.set("clim", suggestions)
        cache.get("clim")
    """

    def __init__(
        self,
        max_size: int,
        ttl: float,
        *,
        name: str = "cache",
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize cache.

        Args:
            max_size: Maximum number of entries (LRU eviction beyond it)
            ttl: Time-to-live in seconds
            name: Label used in log messages
            timer: Clock returning seconds; defaults to time.monotonic

        Raises:
            ConfigurationError: If max_size or ttl is not positive.
        """
        if max_size <= 0:
            msg = f"{name}: max_size must be positive, got {max_size}"
            raise ConfigurationError(msg, setting="max_size")
        if ttl <= 0:
            msg = f"{name}: ttl must be positive, got {ttl}"
            raise ConfigurationError(msg, setting="ttl")
        self._name = name
        self._cache: TTLCache[str, V] = TTLCache(maxsize=max_size, ttl=ttl, timer=timer)
        self._stats = CacheStats()

    @property
    def stats(self) -> CacheStats:
        return self._stats

    @property
    def max_size(self) -> int:
        return int(self._cache.maxsize)

    @property
    def ttl(self) -> float:
        return float(self._cache.ttl)

    def get(self, key: str) -> V | None:
        """Cached value, or None if missing or expired."""
        try:
            value = self._cache[key]
        except KeyError:
            self._stats.misses += 1
            return None
        self._stats.hits += 1
        logger.debug(f"{self._name}: cache hit for {key!r}")
        return value

    def set(self, key: str, value: V) -> None:
        self._cache[key] = value

    def invalidate(self, key: str) -> bool:
        try:
            del self._cache[key]
            return True
        except KeyError:
            return False

    def clear(self) -> int:
        count = len(self._cache)
        self._cache.clear()
        return count

    def cleanup_expired(self) -> int:
        """Drop expired entries eagerly; TTLCache otherwise expires lazily."""
        expired = self._cache.expire()
        removed = len(expired) if expired is not None else 0
        self._stats.expirations += removed
        return removed

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache
