"""
Redis caching for dashboard aggregates
Every operation fails open: a cache problem never fails the request
"""
import json
import logging
import time
from typing import Any, Optional

from . import config
from .redis_client import get_redis_client

logger = logging.getLogger(__name__)

DASHBOARD_PREFIX = "dashboard"
RECONNECT_INTERVAL = 30  # seconds between connection attempts after a failure


class Cache:
    """Redis cache wrapper with JSON serialization"""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.redis_client = None
        self._retry_after = 0.0

    def _get_client(self):
        """Lazy load Redis client"""
        if not self.enabled:
            return None
        if self.redis_client is None:
            if time.time() < self._retry_after:
                return None
            try:
                self.redis_client = get_redis_client()
            except Exception as e:
                logger.warning(f"Redis cache unavailable: {e}")
                self._retry_after = time.time() + RECONNECT_INTERVAL
                return None
        return self.redis_client

    def get(self, key: str) -> Optional[Any]:
        client = self._get_client()
        if not client:
            return None

        try:
            value = client.get(key)
            if value:
                logger.debug(f"Cache HIT: {key}")
                return json.loads(value)
            logger.debug(f"Cache MISS: {key}")
            return None
        except Exception as e:
            logger.error(f"Cache get error for {key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int = 60) -> bool:
        client = self._get_client()
        if not client:
            return False

        try:
            client.setex(key, ttl, json.dumps(value, default=str))
            logger.debug(f"Cache SET: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"Cache set error for {key}: {e}")
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern (e.g., 'dashboard:*')"""
        client = self._get_client()
        if not client:
            return 0

        try:
            keys = list(client.scan_iter(match=pattern))
            if keys:
                deleted = client.delete(*keys)
                logger.debug(f"Cache DELETE pattern: {pattern} ({deleted} keys)")
                return deleted
            return 0
        except Exception as e:
            logger.error(f"Cache delete pattern error for {pattern}: {e}")
            return 0


# Global cache instance
cache = Cache(enabled=config.CACHE_ENABLED)


def dashboard_key(name: str, *parts: Any) -> str:
    return ":".join([DASHBOARD_PREFIX, name, *(str(p) for p in parts)])


def get_or_compute(key: str, compute, ttl: Optional[int] = None):
    """Return the cached value for key, computing and storing it on a miss"""
    cached_value = cache.get(key)
    if cached_value is not None:
        return cached_value

    result = compute()
    if result is not None:
        cache.set(key, result, ttl or config.DASHBOARD_CACHE_TTL)
    return result


def invalidate_dashboard_cache() -> int:
    return cache.delete_pattern(f"{DASHBOARD_PREFIX}:*")
