from .fetcher import CachedFetcher
from .keys import JobDetailParams, ListNamespace, UserListParams, build_cache_key
from .models import CacheConfig, CacheEntry, CacheStats
from .store import BoundedCacheStore

package_version = "1.0.0"

_ = CachedFetcher
_ = JobDetailParams
_ = ListNamespace
_ = UserListParams
_ = build_cache_key
_ = CacheConfig
_ = CacheEntry
_ = CacheStats
_ = BoundedCacheStore
