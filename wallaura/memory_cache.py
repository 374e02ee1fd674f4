"""
In-process response cache with TTL support.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass
class CacheEntry:
    stored_at: float
    payload: Dict[str, Any]


class ResponseCache:
    """
    Key-value cache with lazy expiration.

    Stores normalized response bodies with timestamps. Expired entries are
    dropped when looked up; there is no background sweep. The number of
    entries is capped at ``max_entries``, evicting the least recently used.
    """

    def __init__(self, ttl: float, max_entries: int = 5000, clock: Callable[[], float] = time.time):
        """
        Initialize cache.

        Args:
            ttl: Time-to-live in seconds
            max_entries: Maximum number of stored entries
            clock: Time source returning seconds
        """
        self.ttl = ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str, now: Optional[float] = None) -> Optional[Dict[str, Any]]:
        """
        Get cached value if not expired.

        Args:
            key: Cache key
            now: Current time in seconds, defaults to the cache clock

        Returns:
            Cached payload or None if not found/expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if now is None:
            now = self._clock()

        if now - entry.stored_at > self.ttl:
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return entry.payload

    def set(self, key: str, payload: Dict[str, Any], now: Optional[float] = None):
        """
        Store a payload, overwriting any existing entry for the key.

        Args:
            key: Cache key
            payload: Response body; treated as immutable once stored
            now: Current time in seconds, defaults to the cache clock
        """
        if now is None:
            now = self._clock()

        self._entries[key] = CacheEntry(stored_at=now, payload=payload)
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def delete(self, key: str):
        self._entries.pop(key, None)

    def clear_expired(self, now: Optional[float] = None) -> int:
        """Drop all expired entries. Returns how many were removed."""
        if now is None:
            now = self._clock()

        expired = [k for k, e in self._entries.items() if now - e.stored_at > self.ttl]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear_all(self):
        """Clear all cache entries."""
        self._entries.clear()
