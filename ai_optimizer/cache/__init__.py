"""
AI Optimizer — Cache Module

In-memory, per-instance cache store used to memoize AI call results.

Usage:
    from ai_optimizer.cache import CacheStore

    store = CacheStore()
    store.set("ai", "prompt-hash", {"text": "..."}, ttl_seconds=3600)
    value = store.get("ai", "prompt-hash")
"""

from .codec import decode_value, encode_value
from .keys import make_cache_key, serialize_payload
from .models import CacheEntry
from .store import CacheStore

__all__ = [
    "CacheStore",
    "CacheEntry",
    "make_cache_key",
    "serialize_payload",
    "encode_value",
    "decode_value",
]
