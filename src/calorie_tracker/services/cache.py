"""Cache store abstractions.

Every operation is best-effort: implementations log and absorb their own
failures, so callers can treat the cache as an optimization only.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

TTL_MISSING = -2
TTL_PERSISTENT = -1


class CacheStore(Protocol):
    """Key-value store with per-key TTL and atomic counters."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> bool:
        """Store a value with a TTL in seconds; return False on failure."""

    def delete(self, key: str) -> bool:
        """Remove a key; return False on failure."""

    def incr(self, key: str) -> int | None:
        """Atomically increment a counter; return None on failure."""

    def expire(self, key: str, ttl_seconds: int) -> bool:
        """Set a key's TTL; return False on failure or when the key is absent."""

    def ttl(self, key: str) -> int:
        """Return remaining seconds, -1 without expiry, -2 when absent."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime | None


@dataclass
class InMemoryCache(CacheStore):
    """Process-local cache store for tests and single-instance runs."""

    _entries: dict[str, _CacheEntry]
    _clock: Callable[[], datetime]

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._entries = {}
        self._clock = clock or (lambda: datetime.now(tz=UTC))

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        entry = self._live_entry(key)
        return entry.value if entry else None

    def set(self, key: str, value: object, ttl_seconds: int) -> bool:
        """Store a cached value with a TTL."""
        expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)
        return True

    def delete(self, key: str) -> bool:
        """Drop a key if present."""
        self._entries.pop(key, None)
        return True

    def incr(self, key: str) -> int:
        """Increment an integer counter, creating it without expiry."""
        entry = self._live_entry(key)
        if entry is None:
            self._entries[key] = _CacheEntry(value=1, expires_at=None)
            return 1
        current = entry.value if isinstance(entry.value, int) else 0
        entry.value = current + 1
        return entry.value

    def expire(self, key: str, ttl_seconds: int) -> bool:
        """Reset the expiry of an existing key."""
        entry = self._live_entry(key)
        if entry is None:
            return False
        entry.expires_at = self._clock() + timedelta(seconds=ttl_seconds)
        return True

    def ttl(self, key: str) -> int:
        """Return whole seconds until expiry."""
        entry = self._live_entry(key)
        if entry is None:
            return TTL_MISSING
        if entry.expires_at is None:
            return TTL_PERSISTENT
        remaining = (entry.expires_at - self._clock()).total_seconds()
        return max(int(remaining), 0)

    def _live_entry(self, key: str) -> _CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at is not None and self._clock() >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry
