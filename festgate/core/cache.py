"""
Simple in-memory cache with TTL (Time To Live) support.

Dashboards poll the per-event statistics every few seconds from every
organizer screen, and each snapshot costs several aggregate queries. The
cache keeps one snapshot per event for a few seconds and is invalidated
explicitly whenever a scan changes the numbers.

Design decisions:
- OrderedDict storage for LRU eviction (single-process deployment)
- TTL-based expiration checked on read
- Reentrant lock so get_or_fetch can double-check under the same lock
- Hit/miss counters exposed through /health
"""

import time
import threading
from typing import Any, Callable, Dict, Optional, Tuple
from datetime import datetime
from collections import OrderedDict


class TTLCache:
    """
    Time-To-Live cache with thread-safe synchronous operations and LRU eviction.

    Storage format: OrderedDict[cache_key: (data, timestamp)]
    """

    def __init__(self, max_size: int = 100):
        self._cache: OrderedDict[str, Tuple[Any, float]] = OrderedDict()
        self._lock = threading.RLock()
        self._max_size = max_size
        self._hits = 0
        self._misses = 0

    def get(self, key: str) -> Optional[Any]:
        """Get cached value if it exists (no TTL check, no metrics)."""
        with self._lock:
            if key in self._cache:
                data, _ = self._cache[key]
                self._cache.move_to_end(key)
                return data
            return None

    def set(self, key: str, value: Any) -> None:
        """Store value with the current timestamp, evicting the LRU entry if full."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]

            self._cache[key] = (value, time.time())

            while len(self._cache) > self._max_size:
                self._cache.popitem(last=False)

    def is_expired(self, key: str, ttl_seconds: float) -> bool:
        """Check if cached value is expired based on TTL."""
        with self._lock:
            if key not in self._cache:
                return True
            _, timestamp = self._cache[key]
            age = time.time() - timestamp
            return age > ttl_seconds

    def invalidate(self, key: str) -> None:
        """Remove key from cache."""
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        """Clear entire cache and reset metrics."""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> Dict[str, Any]:
        """Cache size, capacity, hit/miss counters and per-entry age."""
        with self._lock:
            total = self._hits + self._misses
            hit_rate = (self._hits / total * 100) if total > 0 else 0

            entries = {}
            for key, (_, timestamp) in self._cache.items():
                age = time.time() - timestamp
                entries[key] = {
                    "age_seconds": round(age, 2),
                    "cached_at": datetime.fromtimestamp(timestamp).isoformat()
                }

            return {
                "size": len(self._cache),
                "max_size": self._max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate_percent": round(hit_rate, 2),
                "entries": entries
            }


def get_or_fetch(
    cache: TTLCache,
    cache_key: str,
    fetch_func: Callable[[], Any],
    ttl_seconds: float = 3.0
) -> Any:
    """
    Get data from cache or fetch fresh data if expired.

    Uses double-check locking: a fresh entry is returned without taking the
    lock; otherwise the lock is held while one caller fetches, and callers
    queued behind it reuse that result.
    """
    if not cache.is_expired(cache_key, ttl_seconds):
        cached_data = cache.get(cache_key)
        if cached_data is not None:
            with cache._lock:
                cache._hits += 1
            return cached_data

    with cache._lock:
        if not cache.is_expired(cache_key, ttl_seconds):
            cached_data = cache.get(cache_key)
            if cached_data is not None:
                cache._hits += 1
                return cached_data

        cache._misses += 1
        fresh_data = fetch_func()
        cache.set(cache_key, fresh_data)
        return fresh_data


def stats_cache_key(event_id: Optional[int]) -> str:
    """Cache key for a dashboard statistics snapshot."""
    return f"dashboard_stats:{event_id if event_id is not None else 'all'}"


def invalidate_event_stats(event_id: Optional[int]) -> None:
    """Drop the cached snapshots that include this event."""
    if event_id is not None:
        global_cache.invalidate(stats_cache_key(event_id))
    global_cache.invalidate(stats_cache_key(None))


# Global cache instance shared across requests
global_cache = TTLCache()
