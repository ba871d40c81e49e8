from typing import Any

from humanize import precisedelta
from pydantic import BaseModel, ConfigDict, Field

from .utils import age_ms, is_live, ms_to_timedelta


class CacheConfig(BaseModel):
    """Construction-time settings for a cache store.

    All sizes and intervals must be positive; a misconfigured cache fails at
    construction instead of silently caching nothing.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_size: int = Field(default=50, gt=0)
    """Maximum entries kept after a cleanup pass; keep this small (tens, not millions)."""

    ttl_ms: int = Field(default=5 * 60 * 1000, gt=0)
    """How long an entry stays live after it is written."""

    cleanup_interval_ms: int = Field(default=60 * 1000, gt=0)
    """How often the background janitor sweeps the store."""

    single_flight: bool = False
    """Coalesce concurrent misses for the same key into a single fetch."""


class CacheEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    payload: Any
    inserted_at: int

    def is_live(self, now: int, ttl_ms: int) -> bool:
        return is_live(self.inserted_at, now, ttl_ms)

    def age_ms(self, now: int) -> int:
        return age_ms(self.inserted_at, now)


class CacheEntryStats(BaseModel):
    key: str
    age_ms: int

    @property
    def age_humanized(self) -> str:
        return precisedelta(ms_to_timedelta(self.age_ms), minimum_unit="milliseconds")


class CacheStats(BaseModel):
    """Diagnostic snapshot of a store; nothing should rely on it for correctness."""

    size: int
    max_size: int
    entries: list[CacheEntryStats] = Field(default_factory=list)

    def summary(self) -> str:
        lines = [f"{self.size}/{self.max_size} entries"]
        for entry in self.entries:
            lines.append(f"  {entry.key} (written {entry.age_humanized} ago)")
        return "\n".join(lines)
