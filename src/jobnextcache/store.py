"""Bounded in-memory key/value store with TTL expiry and oldest-first eviction.

Entries are kept in insertion order (re-setting a key moves it to the newest
position). Expiry is checked lazily on every read, and a cleanup pass runs
whenever a write pushes the store over ``max_size`` and on every janitor tick:

1. every expired entry is removed;
2. if the store is still over capacity, the oldest entries (by ``inserted_at``)
   are removed until ``size == max_size``.

The janitor sweeps from a background thread, so the entry mapping is guarded by
a re-entrant lock.
"""

import copy
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from logzero import logger as default_logger

from .janitor import PeriodicJanitor
from .models import CacheConfig, CacheEntry, CacheEntryStats, CacheStats
from .utils import now_ms


@dataclass
class BoundedCacheStore:
    """Key -> payload mapping with a maximum entry count and a time-to-live.

    Payloads are copied on both write and read (``copy.copy`` by default) so
    callers cannot mutate cached state; pass ``copy_fn`` for richer objects.

    Example:
        store = BoundedCacheStore({"max_size": 20, "ttl_ms": 60_000})
        store.set("k", {"title": "Backend engineer"})
        store.get("k")  # a copy of the payload, or None once expired
        store.close()   # stops the background janitor
    """

    config: Union[CacheConfig, dict] = field(default_factory=CacheConfig)
    logger: Any = None
    clock: Optional[Callable[[], Union[int, float]]] = None
    copy_fn: Optional[Callable[[Any], Any]] = None
    start_janitor: bool = True
    _entries: "OrderedDict[str, CacheEntry]" = field(default_factory=OrderedDict, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)
    _janitor: Optional[PeriodicJanitor] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.config, CacheConfig):
            self.config = CacheConfig.model_validate(self.config)
        self.logger = self.logger or default_logger
        self.clock = self.clock or now_ms
        self.copy_fn = self.copy_fn or copy.copy

        self._janitor = PeriodicJanitor(
            cleanup=self.cleanup, interval_ms=self.config.cleanup_interval_ms, logger=self.logger
        )
        if self.start_janitor:
            self._janitor.start()

    @property
    def max_size(self) -> int:
        return self.config.max_size

    @property
    def ttl_ms(self) -> int:
        return self.config.ttl_ms

    @property
    def janitor(self) -> PeriodicJanitor:
        return self._janitor

    def _now(self) -> int:
        # injected clocks may report fractional milliseconds
        return int(self.clock())

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Return the live entry for ``key``, dropping it if it has expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if not entry.is_live(self._now(), self.ttl_ms):
                del self._entries[key]
                self.logger.debug(f"Cache entry expired on read: {key}")
                return None
            return entry

    def get(self, key: str) -> Optional[Any]:
        """Get a copy of the payload for ``key``. Returns None if missing or expired."""
        entry = self.get_entry(key)
        if entry is None:
            return None
        return self.copy_fn(entry.payload)

    def has(self, key: str) -> bool:
        return self.get_entry(key) is not None

    def set(self, key: str, payload: Any) -> None:
        """Insert or replace ``key``; replacing refreshes its ``inserted_at``."""
        with self._lock:
            entry = CacheEntry(key=key, payload=self.copy_fn(payload), inserted_at=self._now())
            self._entries.pop(key, None)
            self._entries[key] = entry
            if len(self._entries) > self.max_size:
                self.cleanup()

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate(self, predicate: Callable[[str], bool]) -> int:
        """Remove every entry whose key satisfies ``predicate``; returns how many were removed."""
        with self._lock:
            doomed = [key for key in self._entries if predicate(key)]
            for key in doomed:
                del self._entries[key]
        if doomed:
            self.logger.debug(f"Invalidated {len(doomed)} cache entries")
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup(self) -> int:
        """Run the two-phase eviction pass; returns the number of entries removed."""
        with self._lock:
            now = self._now()
            expired = [key for key, entry in self._entries.items() if not entry.is_live(now, self.ttl_ms)]
            for key in expired:
                del self._entries[key]

            evicted = []
            overflow = len(self._entries) - self.max_size
            if overflow > 0:
                # sorted() is stable, so entries written in the same millisecond leave in insertion order
                oldest_first = sorted(self._entries.values(), key=lambda e: e.inserted_at)
                evicted = [entry.key for entry in oldest_first[:overflow]]
                for key in evicted:
                    del self._entries[key]

        if expired or evicted:
            self.logger.debug(f"Cache cleanup removed {len(expired)} expired and {len(evicted)} oldest entries")
        return len(expired) + len(evicted)

    def stats(self) -> CacheStats:
        with self._lock:
            now = self._now()
            entries = [CacheEntryStats(key=entry.key, age_ms=entry.age_ms(now)) for entry in self._entries.values()]
            return CacheStats(size=len(self._entries), max_size=self.max_size, entries=entries)

    def close(self) -> None:
        """Stop the background janitor. The store stays usable; only periodic sweeps stop."""
        self._janitor.stop()

    def __enter__(self) -> "BoundedCacheStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.has(key)
