# ABOUTME: Bounded in-memory read-through cache for upstream data sources
# ABOUTME: Entries expire after a TTL (default 5 min); oldest entry is evicted when full

import logging
import threading
from datetime import datetime, timezone, timedelta
from typing import Any, Callable, Optional

from surfability.debug import debug_log

log = logging.getLogger(__name__)


class CacheManager:
    """
    Short-lived cache keyed by data source name.

    Created once per process and handed to whoever fetches upstream data.
    Shared by request threads, so every access to the entries goes through
    a lock. Never returns an entry older than the TTL.
    """

    def __init__(self, ttl_seconds: int = 300, max_entries: int = 16):
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self.ttl = timedelta(seconds=ttl_seconds)
        self.max_entries = max_entries
        # key -> {"value": ..., "fetched_at": datetime}
        self._entries: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def _is_expired(self, entry: dict[str, Any]) -> bool:
        age = datetime.now(timezone.utc) - entry["fetched_at"]
        return age >= self.ttl

    def get(self, key: str) -> Optional[Any]:
        """Return a fresh cached value, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            if self._is_expired(entry):
                debug_log(f"Cache entry {key} expired", "CACHE")
                self._entries.pop(key, None)
                return None

            return entry["value"]

    def set(self, key: str, value: Any, fetched_at: Optional[datetime] = None) -> None:
        """
        Store a value, evicting the oldest entry when at capacity.

        Args:
            key: Data source name
            value: Value to cache
            fetched_at: When the value was fetched (defaults to now)
        """
        with self._lock:
            self._entries.pop(key, None)

            while len(self._entries) >= self.max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k]["fetched_at"])
                debug_log(f"Cache full, evicting {oldest}", "CACHE")
                del self._entries[oldest]

            self._entries[key] = {
                "value": value,
                "fetched_at": fetched_at or datetime.now(timezone.utc),
            }

    def get_or_fetch(self, key: str, fetch: Callable[[], Optional[Any]]) -> Optional[Any]:
        """
        Read-through lookup: return the cached value or fetch and cache it.

        The fetch runs outside the lock, so two threads missing at once may
        both fetch; the later result wins. None results (failed fetches) are
        not cached so the next request tries the upstream again.
        """
        cached = self.get(key)
        if cached is not None:
            debug_log(f"Cache hit for {key}", "CACHE")
            return cached

        value = fetch()
        if value is not None:
            self.set(key, value)
        return value

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._entries.clear()
