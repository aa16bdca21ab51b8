"""Short-lived in-process result cache."""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass
class _CacheEntry(Generic[V]):
    value: V
    expires_at: float


class TTLCache(Generic[V]):
    """Key/value store with per-entry expiry.

    Expired entries are treated as absent and purged lazily on access.
    Concurrent `remember` calls for the same key are not deduplicated:
    each runs its own factory and the last one to finish wins.

    Attributes:
        default_ttl: Lifetime in seconds applied when `set` gets no ttl.
    """

    def __init__(self, default_ttl: float, clock: Callable[[], float] = time.monotonic):
        """Initialize an empty cache.

        Args:
            default_ttl: Default entry lifetime in seconds.
            clock: Monotonic time source, in seconds.
        """
        self.default_ttl = default_ttl
        self._clock = clock
        self._store: dict[str, _CacheEntry[V]] = {}

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> V | None:
        """Return the live value for key, or None if absent or expired."""
        entry = self._store.get(key)
        if entry is None:
            return None

        if entry.expires_at < self._clock():
            del self._store[key]
            return None

        return entry.value

    def set(self, key: str, value: V, ttl: float | None = None) -> None:
        """Store value under key, expiring after ttl seconds."""
        expires_at = self._clock() + (self.default_ttl if ttl is None else ttl)
        self._store[key] = _CacheEntry(value=value, expires_at=expires_at)

    async def remember(
        self,
        key: str,
        factory: Callable[[], Awaitable[V]],
        ttl: float | None = None,
    ) -> V:
        """Return the cached value for key, computing and storing it on a miss.

        Args:
            key: Cache key.
            factory: Coroutine function producing the value.
            ttl: Optional lifetime override in seconds.

        Returns:
            The cached or freshly computed value.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        logger.debug("Cache miss for %s", key)
        value = await factory()
        self.set(key, value, ttl)
        return value

    def clear(self, key: str | None = None) -> None:
        """Evict one entry, or every entry when key is None."""
        if key is None:
            self._store.clear()
            return

        self._store.pop(key, None)
