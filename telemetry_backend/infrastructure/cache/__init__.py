from .local_storage import LocalKeyValueStore
from .fallback_cache import LocalFallbackCache, EVENTS_CACHE_KEY, MAX_CACHED_EVENTS

__all__ = [
    "LocalKeyValueStore",
    "LocalFallbackCache",
    "EVENTS_CACHE_KEY",
    "MAX_CACHED_EVENTS",
]
