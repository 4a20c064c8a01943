"""
Cached Data Store

Wraps any DataStore and keeps the last successful fetch of each collection.

- Single-flight: concurrent misses for one collection wait on one fetch
- Entries expire after ttl_seconds (0 disables expiry)
- Failed fetches are never cached; the error reaches the caller
- invalidate()/refresh() are explicit; nothing is tied to module state

USAGE:
    store = CachedDataStore(JsonDataStore(...), ttl_seconds=300)
    store.list_officials()        # fetch
    store.list_officials()        # served from cache
    store.invalidate("officials") # next call refetches
"""

import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Optional

from ..observability import get_logger, get_metrics
from ..schemas import Official, Resource
from .store import DataStore

logger = get_logger(__name__)

OFFICIALS = "officials"
RESOURCES = "resources"
CACHE_KEYS = (OFFICIALS, RESOURCES)


@dataclass
class _CacheEntry:
    value: list
    fetched_at: float


class CachedDataStore(DataStore):
    """Memoizing, single-flight wrapper around another DataStore."""

    def __init__(
        self,
        inner: DataStore,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._inner = inner
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        # One lock per collection so officials and resources fetch independently
        self._locks: dict[str, Lock] = {key: Lock() for key in CACHE_KEYS}

    @property
    def inner(self) -> DataStore:
        return self._inner

    def _fresh(self, entry: Optional[_CacheEntry]) -> bool:
        if entry is None:
            return False
        if self._ttl <= 0:
            return True
        return (self._clock() - entry.fetched_at) < self._ttl

    def _get(self, key: str, loader: Callable[[], list]) -> list:
        metrics = get_metrics()

        entry = self._entries.get(key)
        if self._fresh(entry):
            metrics.record_cache(hit=True)
            return list(entry.value)

        with self._locks[key]:
            # Another thread may have filled it while we waited
            entry = self._entries.get(key)
            if self._fresh(entry):
                metrics.record_cache(hit=True)
                return list(entry.value)

            metrics.record_cache(hit=False)
            start = time.perf_counter()
            value = loader()
            latency_ms = (time.perf_counter() - start) * 1000
            metrics.record_fetch(latency_ms)

            self._entries[key] = _CacheEntry(value=list(value), fetched_at=self._clock())
            logger.info(
                "Cached collection",
                collection=key,
                count=len(value),
                duration_ms=round(latency_ms, 2),
            )
            return list(value)

    def list_officials(self) -> list[Official]:
        return self._get(OFFICIALS, self._inner.list_officials)

    def list_resources(self) -> list[Resource]:
        return self._get(RESOURCES, self._inner.list_resources)

    def invalidate(self, key: Optional[str] = None) -> None:
        """
        Drop cached collections.

        Args:
            key: "officials" or "resources"; None drops both.
        """
        if key is not None and key not in CACHE_KEYS:
            raise ValueError(f"Unknown cache key: {key}. Valid keys: {', '.join(CACHE_KEYS)}")

        for k in (key,) if key else CACHE_KEYS:
            with self._locks[k]:
                self._entries.pop(k, None)
        logger.info("Cache invalidated", collection=key or "all")

    def refresh(self) -> None:
        """Invalidate and refetch both collections. Fetch errors propagate."""
        self.invalidate()
        self.list_officials()
        self.list_resources()

    def is_cached(self, key: str) -> bool:
        return self._fresh(self._entries.get(key))

    def describe(self) -> dict[str, Any]:
        info = self._inner.describe()
        info["cache"] = {
            "ttl_seconds": self._ttl,
            "cached": [k for k in CACHE_KEYS if self.is_cached(k)],
        }
        return info
