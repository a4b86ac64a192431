"""
Activity Cache - Per-user in-memory activity lists with expiry.

Lives in the host application layer; the aggregation functions never touch
it.
"""
import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Dict, List, Optional

from doubledash.core.logging import get_logger
from doubledash.services.analytics.adapter import Activity

logger = get_logger(__name__)


@dataclass
class CacheEntry:
    """Activities cached for one user."""
    activities: List[Activity]
    stored_at: float = field(default_factory=time.monotonic)

    def is_expired(self, ttl_seconds: float, now: Optional[float] = None) -> bool:
        now = time.monotonic() if now is None else now
        return now - self.stored_at >= ttl_seconds


class ActivityCache:
    """
    Thread-safe TTL cache of activity lists keyed by user.

    Expired entries are dropped on read, and all expired entries are swept
    on every write.
    """

    def __init__(self, ttl_seconds: float = 300):
        """
        Initialize the cache.

        Args:
            ttl_seconds: How long an entry stays fresh
        """
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = Lock()
        self._ttl_seconds = ttl_seconds

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_seconds

    def put(self, user_id: str, activities: List[Activity]) -> None:
        """Store a copy of a user's activities and drop any expired entries."""
        with self._lock:
            expired = self._sweep_expired()
            self._entries[user_id] = CacheEntry(activities=list(activities))

        logger.debug("Cached activities", user_id=user_id, count=len(activities), expired=expired)

    def get(self, user_id: str) -> Optional[List[Activity]]:
        """
        Get a user's cached activities.

        Returns:
            A copy of the list, or None if missing or expired
        """
        with self._lock:
            entry = self._entries.get(user_id)

            if entry is None:
                return None

            if entry.is_expired(self._ttl_seconds):
                del self._entries[user_id]
                logger.debug("Activity cache entry expired", user_id=user_id)
                return None

            return list(entry.activities)

    def is_fresh(self, user_id: str) -> bool:
        return self.get(user_id) is not None

    def invalidate(self, user_id: str) -> bool:
        """
        Drop a user's entry.

        Returns:
            True if an entry was removed
        """
        with self._lock:
            removed = self._entries.pop(user_id, None) is not None

        if removed:
            logger.debug("Invalidated activity cache", user_id=user_id)
        return removed

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _sweep_expired(self) -> int:
        """Remove expired entries. Caller must hold the lock."""
        now = time.monotonic()
        expired = [
            user_id for user_id, entry in self._entries.items()
            if entry.is_expired(self._ttl_seconds, now)
        ]
        for user_id in expired:
            del self._entries[user_id]
        return len(expired)
