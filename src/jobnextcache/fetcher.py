"""Cache-backed fetching: check the store, fall back to the network, write back.

Example:
    fetcher = CachedFetcher.from_config({"max_size": 50, "ttl_ms": 300_000})

    async def fetch_saved_jobs(params: UserListParams):
        return await api.get_saved_jobs(params.user_id, params.page, params.per_page)

    params = UserListParams(namespace=ListNamespace.SAVED_JOBS, user_id=uid, page=1)
    jobs = await fetcher.get_or_fetch(params, fetch_saved_jobs)

    # after the user saves/unsaves a job or edits their profile
    fetcher.invalidate_user(uid)

    # on shutdown
    fetcher.close()
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Union

from logzero import logger as default_logger

from .keys import KeyParams, build_cache_key, key_belongs_to_user
from .models import CacheConfig, CacheStats
from .store import BoundedCacheStore

FetchFn = Callable[[KeyParams], Awaitable[Any]]


def _retrieve_exception(task: asyncio.Future) -> None:
    # marks a failure as seen even when every caller stopped waiting on the fetch
    if not task.cancelled():
        task.exception()


class CachedFetcher:
    """Get-or-fetch wrapper around a :class:`BoundedCacheStore`.

    Failed fetches are never cached: the exception reaches the caller unchanged
    and the store is left untouched for that key. Concurrent misses for the same
    key each call the network unless ``single_flight`` is enabled, in which case
    later callers await the fetch already in progress.
    """

    def __init__(self, store: BoundedCacheStore, logger: Any = None, single_flight: Optional[bool] = None):
        self.store = store
        self.logger = logger or store.logger or default_logger
        self.single_flight = store.config.single_flight if single_flight is None else single_flight
        self._in_flight: dict[str, asyncio.Future] = {}

    @classmethod
    def from_config(
        cls,
        config: Union[CacheConfig, dict, None] = None,
        logger: Any = None,
        clock: Optional[Callable[[], int]] = None,
        start_janitor: bool = True,
    ) -> "CachedFetcher":
        store = BoundedCacheStore(
            config=config if config is not None else CacheConfig(),
            logger=logger,
            clock=clock,
            start_janitor=start_janitor,
        )
        return cls(store, logger=logger)

    async def get_or_fetch(self, key_params: KeyParams, fetch_fn: FetchFn, force_refresh: bool = False) -> Any:
        """Return the cached payload for ``key_params``, fetching and storing it on a miss.

        Args:
            key_params: Request parameters (or a prebuilt key) identifying the data.
            fetch_fn: Coroutine function performing the network call; it is given ``key_params``.
            force_refresh: Skip the cache lookup and always fetch; the result is still stored.
        """
        key = build_cache_key(key_params)
        if not force_refresh:
            entry = self.store.get_entry(key)
            if entry is not None:
                self.logger.debug(f"Cache hit: {key}")
                return self.store.copy_fn(entry.payload)

        if self.single_flight:
            return await self._join_or_fetch(key, key_params, fetch_fn)
        # a caller giving up must not cancel the fetch; the late result is still stored
        return await asyncio.shield(self._start_fetch(key, key_params, fetch_fn))

    def _start_fetch(self, key: str, key_params: KeyParams, fetch_fn: FetchFn) -> asyncio.Future:
        task = asyncio.ensure_future(self._fetch_and_store(key, key_params, fetch_fn))
        task.add_done_callback(_retrieve_exception)
        return task

    async def _fetch_and_store(self, key: str, key_params: KeyParams, fetch_fn: FetchFn) -> Any:
        self.logger.debug(f"Cache miss, fetching: {key}")
        result = await fetch_fn(key_params)
        self.store.set(key, result)
        return result

    async def _join_or_fetch(self, key: str, key_params: KeyParams, fetch_fn: FetchFn) -> Any:
        task = self._in_flight.get(key)
        if task is None:
            task = self._start_fetch(key, key_params, fetch_fn)
            self._in_flight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget_in_flight(key, done))
        else:
            self.logger.debug(f"Joining in-flight fetch: {key}")
        # one caller giving up must not cancel the fetch the others are waiting on
        return await asyncio.shield(task)

    def _forget_in_flight(self, key: str, task: asyncio.Future) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    def invalidate_user(self, user_id: str) -> int:
        """Drop every cached list page belonging to ``user_id``. Safe to call repeatedly."""
        removed = self.store.invalidate(lambda key: key_belongs_to_user(key, user_id))
        self.logger.info(f"Invalidated {removed} cached entries for user {user_id}")
        return removed

    def clear(self) -> None:
        self.store.clear()
        self.logger.info("Cache cleared")

    def get_stats(self) -> CacheStats:
        return self.store.stats()

    def close(self) -> None:
        self.store.close()
