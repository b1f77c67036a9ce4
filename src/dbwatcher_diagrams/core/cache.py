"""In-process TTL cache for generated diagram responses."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from typing import Any

from loguru import logger

DEFAULT_NAMESPACE = "dbwatcher:diagrams"
DEFAULT_TTL = 3600
MAX_CACHE_SIZE = 1000


class DiagramCache:
    """Thread-safe namespaced cache with per-entry expiry.

    Cache failures are logged and reported as misses so they never break
    diagram generation.
    """

    def __init__(
        self,
        namespace: str = DEFAULT_NAMESPACE,
        default_ttl: int = DEFAULT_TTL,
        max_size: int = MAX_CACHE_SIZE,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.namespace = namespace
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Any | None:
        full_key = self._key(key)
        try:
            with self._lock:
                entry = self._entries.get(full_key)
                if entry is None:
                    return None
                expires_at, value = entry
                if expires_at <= self._clock():
                    del self._entries[full_key]
                    return None
            logger.debug(f"Cache hit: {full_key}")
            return value
        except Exception as e:
            logger.warning(f"Cache read failed for {full_key}: {e}")
            return None

    def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        full_key = self._key(key)
        try:
            expires_at = self._clock() + (ttl if ttl is not None else self.default_ttl)
            with self._lock:
                self._entries[full_key] = (expires_at, value)
                self._evict()
            logger.debug(f"Cache write: {full_key}")
            return True
        except Exception as e:
            logger.warning(f"Cache write failed for {full_key}: {e}")
            return False

    def delete(self, key: str) -> bool:
        full_key = self._key(key)
        with self._lock:
            removed = self._entries.pop(full_key, None) is not None
        if removed:
            logger.debug(f"Cache delete: {full_key}")
        return removed

    def fetch(self, key: str, compute: Callable[[], Any], ttl: int | None = None) -> Any:
        """Read-through lookup computing at most once per key at a time.

        Args:
            key: Cache key without namespace
            compute: Called on a miss; its result is stored unless it is None.
                Exceptions propagate and nothing is stored
            ttl: Entry lifetime in seconds

        Returns:
            Cached or freshly computed value
        """
        cached = self.get(key)
        if cached is not None:
            return cached

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())
        try:
            with key_lock:
                cached = self.get(key)
                if cached is not None:
                    return cached
                value = compute()
                if value is not None:
                    self.set(key, value, ttl)
                return value
        finally:
            with self._lock:
                self._key_locks.pop(key, None)

    def clear_session_cache(self, session_id: str) -> int:
        """Drop every entry whose key mentions the session."""
        marker = f"_{session_id}_"
        with self._lock:
            doomed = [k for k in self._entries if marker in k or k.endswith(f":{session_id}")]
            for full_key in doomed:
                del self._entries[full_key]
        logger.info(f"Cleared {len(doomed)} cached diagrams for session {session_id}")
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        now = self._clock()
        with self._lock:
            return sum(1 for expires_at, _ in self._entries.values() if expires_at > now)

    def _evict(self) -> None:
        """Keep within max_size: expired entries first, then those expiring soonest."""
        if len(self._entries) <= self.max_size:
            return
        now = self._clock()
        for full_key in [k for k, (exp, _) in self._entries.items() if exp <= now]:
            del self._entries[full_key]
        overflow = len(self._entries) - self.max_size
        if overflow > 0:
            for full_key, _ in sorted(self._entries.items(), key=lambda item: item[1][0])[:overflow]:
                del self._entries[full_key]
