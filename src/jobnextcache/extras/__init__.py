"""Extra helpers built on top of jobnextcache."""

from .lists import ListsCache

__all__ = ["ListsCache"]
