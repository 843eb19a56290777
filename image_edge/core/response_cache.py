"""
Response cache keyed by request identity.

The pipeline talks to the cache only through `lookup` and `store`, so the
in-memory store below can be replaced by any shared backend.
"""

from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from typing import Any, Dict, Optional, Tuple

from .http_messages import CachedResponse, RequestKey

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 512
DEFAULT_TTL_SECONDS = 3600


class ResponseCache:
    """Interface of the cache the resize pipeline reads and writes."""

    async def lookup(self, key: RequestKey) -> Optional[CachedResponse]:
        raise NotImplementedError

    async def store(self, key: RequestKey, response: CachedResponse) -> None:
        raise NotImplementedError


class MemoryResponseCache(ResponseCache):
    """In-process LRU cache with a per-entry TTL."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES, ttl_seconds: int = DEFAULT_TTL_SECONDS):
        self.max_entries = max(1, max_entries)
        self.ttl_seconds = ttl_seconds
        # {key: (expires_at, response)}
        self._entries: "OrderedDict[RequestKey, Tuple[float, CachedResponse]]" = OrderedDict()
        self._lock = threading.Lock()

    async def lookup(self, key: RequestKey) -> Optional[CachedResponse]:
        now = time.time()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, response = entry
            if now >= expires_at:
                del self._entries[key]
                logger.debug("[response_cache] expired %s %s", key.method, key.url)
                return None
            self._entries.move_to_end(key)
            return response

    async def store(self, key: RequestKey, response: CachedResponse) -> None:
        expires_at = time.time() + self.ttl_seconds
        with self._lock:
            self._entries[key] = (expires_at, response)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("[response_cache] evicted %s %s", evicted.method, evicted.url)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> Dict[str, Any]:
        """Get current cache status for monitoring."""
        now = time.time()
        with self._lock:
            live = sum(1 for expires_at, _ in self._entries.values() if expires_at > now)
            size_bytes = sum(len(response.body) for _, response in self._entries.values())
            return {
                "entries": len(self._entries),
                "live_entries": live,
                "max_entries": self.max_entries,
                "ttl_seconds": self.ttl_seconds,
                "body_bytes": size_bytes,
            }
