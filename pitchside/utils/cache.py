"""In-memory cache for the hot-read resources served by the API."""
import time
from enum import Enum
from typing import Any, Dict
import logging

logger = logging.getLogger(__name__)

_MISSING = object()


class CacheTag(str, Enum):
    """Resource tags under which whole resource snapshots are cached."""
    RANKINGS = "rankings"
    PROFILES = "profiles"
    ROOM_LINK = "room_link"
    VIP_STATUS = "vip_status"


class CacheStore:
    """
    Tag -> value map sharing one process-wide TTL.

    Entries are expired lazily on read. Values are returned by reference, so a
    caller that mutates a cached map patches the entry without touching its
    expiry; only ``set`` starts a new lifetime.

    One instance is built at application startup, handed to the services that
    need it and cleared at shutdown.
    """

    def __init__(self, ttl: float = 420.0):
        self.ttl = ttl
        self._cache: Dict[str, tuple[Any, float]] = {}
        self._last_cleanup = time.time()
        self._cleanup_interval = 60.0

    @staticmethod
    def _key(tag) -> str:
        return tag.value if isinstance(tag, CacheTag) else str(tag)

    def _cleanup_expired(self):
        """Remove expired entries from cache."""
        current_time = time.time()
        if current_time - self._last_cleanup < self._cleanup_interval:
            return

        expired_keys = [
            key for key, (_, expires_at) in self._cache.items()
            if current_time >= expires_at
        ]
        for key in expired_keys:
            self._cache.pop(key, None)

        self._last_cleanup = current_time

        if expired_keys:
            logger.debug(f"Cleaned up {len(expired_keys)} expired cache entries")

    def get(self, tag, default: Any = None) -> Any:
        """Get value from cache if not expired, else ``default``."""
        self._cleanup_expired()

        key = self._key(tag)
        entry = self._cache.get(key)
        if entry is None:
            return default

        value, expires_at = entry
        if time.time() >= expires_at:
            self._cache.pop(key, None)
            return default

        return value

    def has(self, tag) -> bool:
        return self.get(tag, _MISSING) is not _MISSING

    def set(self, tag, value: Any) -> None:
        """Store value with a fresh expiry."""
        self._cache[self._key(tag)] = (value, time.time() + self.ttl)

    def get_item(self, tag, key, default: Any = None) -> Any:
        """Look up one item inside a cached map."""
        entries = self.get(tag)
        if not entries:
            return default
        return entries.get(key, default)

    def put_item(self, tag, key, value: Any) -> None:
        """Insert one item into a cached map.

        An existing map is patched in place and keeps its expiry; when the
        tag is absent a new single-item map is stored.
        """
        entries = self.get(tag)
        if entries is None:
            self.set(tag, {key: value})
        else:
            entries[key] = value

    def is_fresh(self, captured_at: float | None) -> bool:
        """Whether a value captured at ``captured_at`` is still within one TTL."""
        if captured_at is None:
            return True
        return time.time() - captured_at < self.ttl

    def clear(self) -> None:
        """Clear all cache entries."""
        self._cache.clear()

    def stats(self) -> dict:
        """Remaining lifetime in seconds for each live entry."""
        now = time.time()
        return {
            key: round(expires_at - now, 1)
            for key, (_, expires_at) in self._cache.items()
            if now < expires_at
        }
