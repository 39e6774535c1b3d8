"""Short-lived cache for prices and balance reads."""

import logging
import time
from typing import Any, Callable, Hashable, Optional

logger = logging.getLogger(__name__)

_MISSING = object()


class TTLCache:
    """Key/value cache whose entries expire after ``ttl_seconds``.

    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(self, ttl_seconds: float, clock: Optional[Callable[[], float]] = None):
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._entries: dict[Hashable, tuple[float, Any]] = {}

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default

        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return default
        return value

    def set(self, key: Hashable, value: Any) -> None:
        self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def contains(self, key: Hashable) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def invalidate(self, key: Optional[Hashable] = None) -> None:
        """Drop one entry, or every entry when no key is given."""
        if key is None:
            if self._entries:
                logger.debug(f"Invalidating {len(self._entries)} cached entries")
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
