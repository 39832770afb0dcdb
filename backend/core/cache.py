"""
Caching Utilities

In-memory LRU cache with TTL support, used to keep recent analytics
sessions available to the API.
"""

import time
from collections import OrderedDict
from threading import Lock
from typing import Any, Optional

from config import get_settings
from core.logging_config import cache_logger as logger
from core.models import AnalyticsSession


class TTLCache:
    """Thread-safe LRU cache with TTL support."""

    def __init__(self, maxsize: int = 128, ttl_seconds: int = 3600):
        self.maxsize = maxsize
        self.ttl_seconds = ttl_seconds
        self._cache: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self._lock = Lock()

    def _expired(self, timestamp: float, now: float) -> bool:
        return now - timestamp > self.ttl_seconds

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired."""
        with self._lock:
            if key not in self._cache:
                return None

            value, timestamp = self._cache[key]
            if self._expired(timestamp, time.time()):
                del self._cache[key]
                return None

            # Move to end (most recently accessed)
            self._cache.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        """Set value in cache."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]
            # Remove oldest if at capacity
            while len(self._cache) >= self.maxsize:
                evicted, _ = self._cache.popitem(last=False)
                logger.debug(f"Evicted {evicted}")

            self._cache[key] = (value, time.time())

    def delete(self, key: str) -> bool:
        """Delete key from cache."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    def keys(self) -> list[str]:
        """Active keys, oldest first. Expired entries are purged."""
        with self._lock:
            now = time.time()
            expired = [k for k, (_, ts) in self._cache.items() if self._expired(ts, now)]
            for key in expired:
                del self._cache[key]
            return list(self._cache.keys())

    def clear(self) -> None:
        """Clear all cache entries."""
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        return len(self.keys())


class SessionStore:
    """Recent analytics sessions, bounded in size and age."""

    def __init__(self, maxsize: Optional[int] = None, ttl_seconds: Optional[int] = None):
        settings = get_settings()
        self.enabled = settings.cache.enabled
        self._cache = TTLCache(
            maxsize=maxsize or settings.cache.max_size,
            ttl_seconds=ttl_seconds or settings.session_ttl_hours * 3600,
        )

    def save(self, session: AnalyticsSession) -> None:
        if not self.enabled:
            return
        self._cache.set(session.id, session)
        logger.debug(f"Stored session {session.id}")

    def get(self, session_id: str) -> Optional[AnalyticsSession]:
        return self._cache.get(session_id)

    def delete(self, session_id: str) -> bool:
        return self._cache.delete(session_id)

    def list_sessions(self) -> list[str]:
        """Active session IDs, most recently used first."""
        return list(reversed(self._cache.keys()))

    def clear(self) -> None:
        self._cache.clear()


# Global instance
session_store = SessionStore()
