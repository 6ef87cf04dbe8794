"""Cache store backed by Upstash Redis."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol

from upstash_redis import Redis

from calorie_tracker.services.cache import TTL_MISSING, CacheStore

_logger = logging.getLogger(__name__)


class RedisClient(Protocol):
    """Subset of the Upstash Redis client used by the cache store."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str, ex: int | None = None) -> object: ...

    def delete(self, *keys: str) -> int: ...

    def incr(self, key: str) -> int: ...

    def expire(self, key: str, seconds: int) -> bool: ...

    def ttl(self, key: str) -> int: ...


@dataclass
class UpstashCacheStore(CacheStore):
    """JSON-encoding cache store that absorbs Redis failures."""

    client: RedisClient

    @classmethod
    def create(
        cls,
        url: str,
        token: str,
        retries: int = 0,
        retry_interval_seconds: float = 0.1,
    ) -> "UpstashCacheStore":
        """Create a cache store with an Upstash REST client.

        Retries are kept small so a failing cache call returns quickly.
        """
        client = Redis(
            url=url,
            token=token,
            rest_retries=retries,
            rest_retry_interval=retry_interval_seconds,
        )
        return cls(client=client)

    def get(self, key: str) -> object | None:
        """Return the decoded value, or None on miss or failure."""
        try:
            raw = self.client.get(key)
        except Exception as exc:
            _logger.warning("Cache get failed: key=%s error=%s", key, exc)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            _logger.warning("Cache value is not valid JSON: key=%s", key)
            return None

    def set(self, key: str, value: object, ttl_seconds: int) -> bool:
        """Store a JSON-encoded value with a TTL."""
        try:
            self.client.set(key, json.dumps(value), ex=ttl_seconds)
        except Exception as exc:
            _logger.warning("Cache set failed: key=%s error=%s", key, exc)
            return False
        return True

    def delete(self, key: str) -> bool:
        """Delete a key."""
        try:
            self.client.delete(key)
        except Exception as exc:
            _logger.warning("Cache delete failed: key=%s error=%s", key, exc)
            return False
        return True

    def incr(self, key: str) -> int | None:
        """Increment a counter."""
        try:
            return int(self.client.incr(key))
        except Exception as exc:
            _logger.warning("Cache incr failed: key=%s error=%s", key, exc)
            return None

    def expire(self, key: str, ttl_seconds: int) -> bool:
        """Set a key's expiry."""
        try:
            return bool(self.client.expire(key, ttl_seconds))
        except Exception as exc:
            _logger.warning("Cache expire failed: key=%s error=%s", key, exc)
            return False

    def ttl(self, key: str) -> int:
        """Return the key's remaining TTL."""
        try:
            return int(self.client.ttl(key))
        except Exception as exc:
            _logger.warning("Cache ttl failed: key=%s error=%s", key, exc)
            return TTL_MISSING
