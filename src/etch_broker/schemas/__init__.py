from .events import CACHE_UPDATE, CacheUpdateEvent, SyncEvent, UnknownEvent, decode_event

__all__ = [
    "CACHE_UPDATE",
    "CacheUpdateEvent",
    "UnknownEvent",
    "SyncEvent",
    "decode_event",
]
