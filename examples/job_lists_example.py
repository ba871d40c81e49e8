"""Example demonstrating the cache in front of a slow job-search backend.

The fake API below sleeps to stand in for network latency; the second read of
each page comes straight from the cache, and saving a job invalidates the
user's cached lists so the next read sees fresh data.
"""
import asyncio
import time

from logzero import logger

from jobnextcache import CachedFetcher, UserListParams
from jobnextcache.extras import ListsCache


class FakeJobApi:
    """Pretend remote API with a per-user list of saved jobs."""

    def __init__(self):
        self.saved = {"alice": ["Backend engineer", "Data analyst"]}

    async def get_saved_jobs(self, params: UserListParams) -> dict:
        await asyncio.sleep(0.3)
        jobs = self.saved.get(params.user_id, [])
        start = (params.page - 1) * params.per_page
        return {"success": True, "data": jobs[start : start + params.per_page]}

    async def save_job(self, user_id: str, title: str) -> None:
        await asyncio.sleep(0.1)
        self.saved.setdefault(user_id, []).append(title)


async def timed(label: str, coro):
    started = time.perf_counter()
    result = await coro
    print(f"   {label}: {result} ({(time.perf_counter() - started) * 1000:.0f}ms)")
    return result


async def main():
    api = FakeJobApi()
    fetcher = CachedFetcher.from_config({"max_size": 20, "ttl_ms": 5 * 60 * 1000}, logger=logger)
    lists = ListsCache(fetcher)

    try:
        print("📥 Reading saved jobs twice...")
        await timed("first read", lists.get_saved_jobs("alice", api.get_saved_jobs))
        await timed("second read", lists.get_saved_jobs("alice", api.get_saved_jobs))

        print("\n💾 Saving a job and invalidating alice's lists...")
        await api.save_job("alice", "Mobile developer")
        lists.clear_user_cache("alice")
        await timed("after save", lists.get_saved_jobs("alice", api.get_saved_jobs))

        print("\n📊 Cache stats:")
        print(fetcher.get_stats().summary())
    finally:
        fetcher.close()


if __name__ == "__main__":
    asyncio.run(main())
