"""Cache Infrastructure - bounded LRU + TTL caches."""

from .ttl_cache import BoundedTTLCache, CacheStats

__all__ = ["BoundedTTLCache", "CacheStats"]
