"""Typed helpers for the per-user list endpoints the client caches.

Screens showing saved jobs and interview history read paginated, user-scoped
pages; the profile screen only needs their totals. Anything that mutates those
lists (profile update, saving/unsaving a job, creating or deleting an interview)
should call :meth:`ListsCache.clear_user_cache` afterwards.

Example:
    lists = ListsCache(fetcher)
    page = await lists.get_saved_jobs(uid, fetch_saved_jobs, page=2)
    total = await lists.get_interviews_count(uid, fetch_interviews)
    lists.clear_user_cache(uid)
"""

from typing import Any, Optional

from ..fetcher import CachedFetcher, FetchFn
from ..keys import JobDetailParams, ListNamespace, UserListParams

COUNT_PAGE_SIZE = 1000


def count_items(payload: Any) -> int:
    """Count the items in a list page; the page is a list or a mapping carrying the list under ``data``."""
    if isinstance(payload, dict):
        payload = payload.get("data") or []
    if not isinstance(payload, (list, tuple)):
        raise TypeError(f"Cannot count items in a {type(payload).__name__} payload")
    return len(payload)


class ListsCache:
    def __init__(self, fetcher: CachedFetcher, default_per_page: int = 10):
        self.fetcher = fetcher
        self.default_per_page = default_per_page

    async def get_saved_jobs(
        self,
        user_id: str,
        fetch_fn: FetchFn,
        page: int = 1,
        per_page: Optional[int] = None,
        force_refresh: bool = False,
    ) -> Any:
        return await self._get_page(ListNamespace.SAVED_JOBS, user_id, fetch_fn, page, per_page, force_refresh)

    async def get_interviews(
        self,
        user_id: str,
        fetch_fn: FetchFn,
        page: int = 1,
        per_page: Optional[int] = None,
        force_refresh: bool = False,
    ) -> Any:
        return await self._get_page(ListNamespace.INTERVIEWS, user_id, fetch_fn, page, per_page, force_refresh)

    async def get_saved_jobs_count(self, user_id: str, fetch_fn: FetchFn, force_refresh: bool = False) -> int:
        page = await self._get_page(
            ListNamespace.SAVED_JOBS, user_id, fetch_fn, 1, COUNT_PAGE_SIZE, force_refresh
        )
        return count_items(page)

    async def get_interviews_count(self, user_id: str, fetch_fn: FetchFn, force_refresh: bool = False) -> int:
        page = await self._get_page(
            ListNamespace.INTERVIEWS, user_id, fetch_fn, 1, COUNT_PAGE_SIZE, force_refresh
        )
        return count_items(page)

    async def get_job_detail(self, url: str, fetch_fn: FetchFn) -> Any:
        # job descriptions don't change once published, so there is no per-job invalidation
        return await self.fetcher.get_or_fetch(JobDetailParams(url=url), fetch_fn)

    def clear_user_cache(self, user_id: str) -> int:
        return self.fetcher.invalidate_user(user_id)

    async def _get_page(
        self,
        namespace: ListNamespace,
        user_id: str,
        fetch_fn: FetchFn,
        page: int,
        per_page: Optional[int],
        force_refresh: bool,
    ) -> Any:
        params = UserListParams(
            namespace=namespace, user_id=user_id, page=page, per_page=per_page or self.default_per_page
        )
        return await self.fetcher.get_or_fetch(params, fetch_fn, force_refresh=force_refresh)
