"""
TTL cache for resolved support data.

The clock is injectable so expiry can be tested without sleeping.  There is
no locking: concurrent writers for the same key simply overwrite each other.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, Generic, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=1)

V = TypeVar("V")


class SupportCache(Generic[V]):
    """Keyed store whose entries expire ``ttl`` after they were written."""

    def __init__(
        self,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[datetime, V]] = {}

    def get(self, key: str) -> Optional[V]:
        """Return the cached value, or None if missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("cache miss: %s", key)
            return None
        stored_at, value = entry
        if self._clock() - stored_at >= self.ttl:
            logger.debug("cache expired: %s", key)
            return None
        logger.debug("cache hit: %s", key)
        return value

    def put(self, key: str, value: V) -> None:
        self._entries[key] = (self._clock(), value)

    def is_expired(self, key: str) -> bool:
        """True when there is no entry for ``key`` or it has outlived the TTL."""
        entry = self._entries.get(key)
        if entry is None:
            return True
        return self._clock() - entry[0] >= self.ttl

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
