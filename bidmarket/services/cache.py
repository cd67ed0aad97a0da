"""Time-bounded memoization for read-heavy bid queries.

Entries expire ``ttl_seconds`` after insertion. When the cache is full the
oldest inserted key is evicted (FIFO, not LRU). Writers never rely on expiry:
every mutating service operation invalidates the keys it can affect, built
through ``CacheKeys`` so the key layout lives in one place.

Every ``invalidate``/``invalidate_prefix`` call bumps a write counter for the
key or prefix it names. A reader takes a ``WriteGuard`` over those scopes before
it queries the database and hands it to ``set``; the store is skipped when a
writer touched any of the scopes in between, so a slow read can never put a
pre-write snapshot back after the writer invalidated it.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable

from bidmarket.core.config import get_config

logger = logging.getLogger(__name__)

_MISSING = object()


@dataclass
class CacheEntry:
    value: Any
    expires_at: float


@dataclass(frozen=True)
class WriteGuard:
    epoch: int
    counters: tuple[tuple[str, int], ...]


class CacheKeys:
    """Key builders for every cached query."""

    @staticmethod
    def bid(bid_id: int) -> str:
        return f"bid:{bid_id}"

    @staticmethod
    def project_bids(project_id: int, status: str | None, page: int, limit: int) -> str:
        return f"project_bids:{project_id}:{status or 'all'}:{page}:{limit}"

    @staticmethod
    def project_bids_prefix(project_id: int) -> str:
        return f"project_bids:{project_id}:"

    @staticmethod
    def analysis(project_id: int, bid_id: int) -> str:
        return f"analysis:{project_id}:{bid_id}"

    @staticmethod
    def analysis_prefix(project_id: int) -> str:
        return f"analysis:{project_id}:"


class TTLCache:
    """Thread-safe TTL cache with a hard entry cap."""

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be > 0")
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        # Write counters per invalidated key or prefix. Resetting them bumps the
        # epoch, which voids every outstanding guard.
        self._generations: dict[str, int] = {}
        self._epoch = 0
        self._max_generations = max_entries * 4
        self._lock = threading.Lock()
        self._sweeper: threading.Thread | None = None
        self._stop_event = threading.Event()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return default
            return entry.value

    def guard(self, *scopes: str) -> WriteGuard:
        """Snapshot the write counters of ``scopes`` ahead of a database read."""
        with self._lock:
            return WriteGuard(
                epoch=self._epoch,
                counters=tuple((scope, self._generations.get(scope, 0)) for scope in scopes),
            )

    def _guard_is_current(self, guard: WriteGuard) -> bool:
        if guard.epoch != self._epoch:
            return False
        return all(self._generations.get(scope, 0) == seen for scope, seen in guard.counters)

    def _bump(self, scope: str) -> None:
        if len(self._generations) >= self._max_generations:
            self._generations.clear()
            self._epoch += 1
        self._generations[scope] = self._generations.get(scope, 0) + 1

    def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: float | None = None,
        guard: WriteGuard | None = None,
    ) -> bool:
        """Store ``value``; returns False when ``guard`` saw a write since it was taken."""
        expires_at = self._clock() + (ttl_seconds or self.ttl_seconds)
        with self._lock:
            if guard is not None and not self._guard_is_current(guard):
                logger.debug("cache.stale_store_skipped", extra={"event": "cache.stale_store_skipped", "key": key})
                return False
            if key not in self._entries and len(self._entries) >= self.max_entries:
                oldest_key = next(iter(self._entries))
                del self._entries[oldest_key]
                logger.debug("cache.evicted", extra={"event": "cache.evicted", "key": oldest_key})
            self._entries[key] = CacheEntry(value=value, expires_at=expires_at)
        return True

    def get_or_set(self, key: str, loader: Callable[[], Any]) -> Any:
        """Return the cached value or load, store and return a fresh one."""
        guard = self.guard(key)
        cached = self.get(key, _MISSING)
        if cached is not _MISSING:
            return cached
        value = loader()
        self.set(key, value, guard=guard)
        return value

    def invalidate(self, *keys: str) -> int:
        removed = 0
        with self._lock:
            for key in keys:
                self._bump(key)
                if self._entries.pop(key, None) is not None:
                    removed += 1
        return removed

    def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            self._bump(prefix)
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
        return len(doomed)

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            doomed = [key for key, entry in self._entries.items() if now >= entry.expires_at]
            for key in doomed:
                del self._entries[key]
        if doomed:
            logger.debug("cache.purged", extra={"event": "cache.purged", "count": len(doomed)})
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._generations.clear()
            self._epoch += 1

    def start_sweeper(self, interval_seconds: float) -> None:
        """Purge expired entries every ``interval_seconds`` on a daemon thread."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop_event.clear()

        def _run() -> None:
            while not self._stop_event.wait(interval_seconds):
                self.purge_expired()

        self._sweeper = threading.Thread(target=_run, name="ttl-cache-sweeper", daemon=True)
        self._sweeper.start()

    def stop_sweeper(self, timeout: float | None = 1.0) -> None:
        self._stop_event.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=timeout)
            self._sweeper = None


@lru_cache(maxsize=1)
def get_cache() -> TTLCache:
    """Process-wide cache shared by every service instance."""
    config = get_config()
    return TTLCache(ttl_seconds=config.CACHE_TTL_SECONDS, max_entries=config.CACHE_MAX_ENTRIES)
