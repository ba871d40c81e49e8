import pytest
from logzero import logger

from jobnextcache import BoundedCacheStore, CachedFetcher, CacheConfig


class FakeClock:
    """Millisecond clock the tests move by hand."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> BoundedCacheStore:
    memory = BoundedCacheStore(
        config=CacheConfig(max_size=3, ttl_ms=1000, cleanup_interval_ms=60_000),
        logger=logger,
        clock=clock,
        start_janitor=False,
    )
    yield memory
    memory.close()


@pytest.fixture
def fetcher(store) -> CachedFetcher:
    return CachedFetcher(store, logger=logger)


class RecordingFetch:
    """Async fetch function that records calls and returns a payload derived from the params."""

    def __init__(self, payload=None, error: Exception | None = None):
        self.calls = []
        self.payload = payload
        self.error = error

    async def __call__(self, params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        if self.payload is not None:
            return self.payload
        return {"params": str(params), "call": len(self.calls)}


@pytest.fixture
def recording_fetch() -> RecordingFetch:
    return RecordingFetch()
