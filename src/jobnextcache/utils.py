import time
from datetime import timedelta


def now_ms() -> int:
    # this function exists only to make it easy to mock the clock in the tests
    return int(time.time() * 1000)


def age_ms(inserted_at: int, now: int) -> int:
    """How long ago (in ms) an entry was written; never negative."""
    return max(0, now - inserted_at)


def is_live(inserted_at: int, now: int, ttl_ms: int) -> bool:
    """An entry is live strictly before ``inserted_at + ttl_ms``."""
    return now - inserted_at < ttl_ms


def ms_to_timedelta(value_ms: int) -> timedelta:
    return timedelta(milliseconds=value_ms)
