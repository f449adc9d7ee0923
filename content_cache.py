"""
In-memory card image cache for MtgProxySheet.

A keyed store of raw image bytes with per-entry expiry. Eviction is purely
time based: nothing is removed until prune() runs, and prune() is left to
the host's scheduler.
"""

import threading
import time
from typing import Callable, Dict, Hashable, NamedTuple, Optional

from config import CACHE_TTL_SECONDS
from logging_config import get_logger

logger = get_logger(__name__)


class CachedImage(NamedTuple):
    data: bytes
    expires: float


class ContentCache:
    """
    Thread-safe TTL cache of image bytes.

    A single lock guards the whole store. Entries are whole byte blobs, so
    every operation holds the lock only for a dict access, never across a
    download.

    Usage:
        cache = ContentCache()
        cache.put(key, png_bytes)
        data = cache.get(key)   # None on miss or after expiry
        removed = cache.prune()
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[Hashable, CachedImage] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: Hashable) -> Optional[bytes]:
        """Returns the cached bytes, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry.expires <= self._clock():
                return None
            return entry.data

    def put(self, key: Hashable, data: bytes, ttl: float = CACHE_TTL_SECONDS) -> None:
        """Stores `data` under `key`, replacing any existing entry."""
        with self._lock:
            if key in self._entries:
                logger.info(f"Cache: Dropping key entry {key}")
            self._entries[key] = CachedImage(data=bytes(data), expires=self._clock() + ttl)

    def prune(self) -> int:
        """Removes every entry whose expiry has passed. Returns the number removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if entry.expires <= now]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.info(f"Cache: Pruned {len(expired)} cache entries")
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries
