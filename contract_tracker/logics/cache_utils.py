"""
In-memory TTL Cache Implementation
Thread-safe caching with configurable TTL and oldest-first eviction.
"""

import time
import logging
from threading import Lock
from typing import Dict, Optional, Any

logger = logging.getLogger(__name__)


class TTLCache:
    """Thread-safe in-memory TTL cache with oldest-first eviction."""

    def __init__(self, max_size: int, ttl_seconds: int):
        """
        Initialize TTL cache.

        Args:
            max_size: Maximum number of entries to store
            ttl_seconds: Time-to-live in seconds for each entry
        """
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self.cache: Dict[str, tuple] = {}  # key -> (value, timestamp, ttl)
        self.lock = Lock()

    def _is_expired(self, key: str, now: float) -> bool:
        _, timestamp, ttl = self.cache[key]
        return now - timestamp > ttl

    def pop(self, key: str) -> Optional[Any]:
        """Remove and return a live entry (None if missing or expired)."""
        with self.lock:
            if key not in self.cache:
                return None

            expired = self._is_expired(key, time.time())
            value = self.cache.pop(key)[0]
            if expired:
                logger.debug(f"[Cache] Key expired: {key}")
                return None

            logger.debug(f"[Cache] Popped: {key}")
            return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        """
        Set value in cache, evicting expired entries and then the oldest one
        when the cache is full.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Optional TTL in seconds for this specific entry
        """
        with self.lock:
            current_time = time.time()
            expired_keys = [k for k in self.cache if self._is_expired(k, current_time)]
            for k in expired_keys:
                del self.cache[k]
                logger.debug(f"[Cache] Evicted expired key: {k}")

            if len(self.cache) >= self.max_size and key not in self.cache:
                oldest_key = min(self.cache.keys(), key=lambda k: self.cache[k][1])
                del self.cache[oldest_key]
                logger.debug(f"[Cache] Evicted oldest key: {oldest_key}")

            entry_ttl = ttl if ttl is not None else self.ttl_seconds
            self.cache[key] = (value, current_time, entry_ttl)
            logger.debug(f"[Cache] Set: {key} with TTL {entry_ttl}s")

    def clear(self) -> None:
        """Clear all cache entries."""
        with self.lock:
            self.cache.clear()
            logger.info("[Cache] Cleared all entries")

    def size(self) -> int:
        """Get current cache size."""
        with self.lock:
            return len(self.cache)
