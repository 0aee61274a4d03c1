"""Time-to-live cache for remote read results."""

import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30.0

_MISSING = object()


class ResultCache:
    """Keyed cache whose entries expire a fixed time after being stored.

    Expired entries are evicted lazily on lookup.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize cache.

        Args:
            ttl_seconds: Maximum age of an entry before it must be refetched
            clock: Monotonic time source in seconds
        """
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be non-negative: {ttl_seconds}")
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def get(self, key: str, default: Any = None) -> Any:
        """Return a fresh cached value, or ``default`` if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug(f"Cache miss: {key}")
            return default

        stored_at, value = entry
        if self._clock() - stored_at >= self._ttl:
            del self._entries[key]
            logger.debug(f"Cache expired: {key}")
            return default

        logger.debug(f"Cache hit: {key}")
        return value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = (self._clock(), value)

    def invalidate(self, *keys: str) -> None:
        """Drop the given keys; unknown keys are ignored."""
        for key in keys:
            self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


__all__ = ["DEFAULT_TTL_SECONDS", "ResultCache"]
