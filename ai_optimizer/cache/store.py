"""
AI Optimizer — In-Memory Cache Store

Namespaced key/value store with per-entry TTL and bounded size.

Features:
- SHA-256 content-hash keys (namespace + logical key + version)
- Per-entry TTL; expired entries are purged on the next access
- Batch eviction of the least-recently-accessed 20% when full
- Large values stored gzip+base64 encoded
- Hit/miss accounting with a computed hit rate

Values are copied on the way in and out; mutating a returned value never
changes the cached entry.

State lives on the instance only. Nothing is persisted or shared between
processes; each host constructs and owns its store.
"""

import copy
import logging
import math
import time
from collections.abc import Callable
from typing import Any

from ..config import CacheConfig
from .codec import decode_value, encode_value, serialized_size
from .keys import make_cache_key
from .models import CacheEntry

logger = logging.getLogger(__name__)

EVICTION_FRACTION = 0.2


class CacheStore:
    """
    Bounded in-memory cache with TTL and least-recently-accessed eviction.

    All operations are synchronous and do not raise under normal conditions.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the cache store.

        Args:
            config: Cache configuration (defaults apply when omitted)
            clock: Time source in seconds; injectable for tests
        """
        self.config = config or CacheConfig()
        self.max_size = self.config.max_size
        self._clock = clock

        self._entries: dict[str, CacheEntry] = {}
        self._access_times: dict[str, float] = {}

        # Stats
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0
        self._evictions = 0
        self._expirations = 0
        self._decode_failures = 0

    def _key(self, namespace: str, key: str, version: str | None) -> str:
        return make_cache_key(namespace, key, version if version is not None else self.config.version)

    def _drop(self, cache_key: str) -> None:
        self._entries.pop(cache_key, None)
        self._access_times.pop(cache_key, None)

    def _decode(self, entry: CacheEntry) -> Any:
        if not entry.compressed:
            return copy.deepcopy(entry.value)

        try:
            return decode_value(entry.value)
        except ValueError as e:
            self._decode_failures += 1
            logger.warning(
                f"Failed to decode cached value, returning stored form: {e}",
                extra={"event": "cache.decode_failure", "cache_key": entry.key[:16], "error": str(e)},
            )
            return entry.value

    def get_entry(self, namespace: str, key: str, version: str | None = None) -> CacheEntry | None:
        """
        Look up a live entry, counting a hit or a miss.

        The returned entry carries the decoded value.
        """
        cache_key = self._key(namespace, key, version)
        entry = self._entries.get(cache_key)

        if entry is None:
            self._misses += 1
            return None

        now = self._clock()
        if entry.is_expired(now):
            self._drop(cache_key)
            self._expirations += 1
            self._misses += 1
            logger.debug("Expired cache entry purged", extra={"namespace": namespace, "cache_key": cache_key[:16]})
            return None

        self._access_times[cache_key] = now
        self._hits += 1

        return CacheEntry(
            key=entry.key,
            value=self._decode(entry),
            created_at=entry.created_at,
            ttl_ms=entry.ttl_ms,
            compressed=False,
            metadata=dict(entry.metadata),
        )

    def get(self, namespace: str, key: str, version: str | None = None) -> Any | None:
        """Retrieve a value, or None if absent or expired."""
        entry = self.get_entry(namespace, key, version)
        return entry.value if entry is not None else None

    def set(
        self,
        namespace: str,
        key: str,
        value: Any,
        ttl_seconds: int | None = None,
        version: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """
        Store a value.

        Args:
            namespace: Logical partition
            key: Logical key
            value: Value to store (JSON-serializable if it may exceed the compression threshold)
            ttl_seconds: Time-to-live (None = configured medium TTL)
            version: Key version (None = configured version)
            metadata: Tags stored alongside the value

        Returns:
            True
        """
        cache_key = self._key(namespace, key, version)

        if len(self._entries) >= self.max_size:
            self.cleanup()

        if ttl_seconds is None:
            ttl_seconds = self.config.ttl_medium_seconds

        threshold = self.config.compression_threshold
        if threshold and not isinstance(value, bytes) and serialized_size(value) > threshold:
            stored = encode_value(value)
            compressed = True
        else:
            stored = copy.deepcopy(value)
            compressed = False

        now = self._clock()
        self._entries[cache_key] = CacheEntry(
            key=cache_key,
            value=stored,
            created_at=now,
            ttl_ms=ttl_seconds * 1000,
            compressed=compressed,
            metadata=dict(metadata or {}),
        )
        self._access_times[cache_key] = now
        self._sets += 1

        return True

    def exists(self, namespace: str, key: str, version: str | None = None) -> bool:
        """Check if a live entry exists without touching hit/miss counters."""
        cache_key = self._key(namespace, key, version)
        entry = self._entries.get(cache_key)
        if entry is None:
            return False
        if entry.is_expired(self._clock()):
            self._drop(cache_key)
            self._expirations += 1
            return False
        return True

    def delete(self, namespace: str, key: str, version: str | None = None) -> bool:
        """Delete an entry. Returns False if it did not exist."""
        cache_key = self._key(namespace, key, version)
        if cache_key not in self._entries:
            return False
        self._drop(cache_key)
        self._deletes += 1
        return True

    def clear(self) -> int:
        """Remove every entry; counters are kept."""
        size = len(self._entries)
        self._entries.clear()
        self._access_times.clear()
        logger.info(f"Cleared {size} entries from cache store")
        return size

    def cleanup(self) -> int:
        """
        Evict the least-recently-accessed 20% of entries.

        Returns:
            Number of entries removed
        """
        by_access = sorted(self._access_times.items(), key=lambda item: item[1])
        to_remove = math.ceil(len(by_access) * EVICTION_FRACTION)

        for cache_key, _ in by_access[:to_remove]:
            self._drop(cache_key)

        self._evictions += to_remove
        if to_remove:
            logger.debug(
                f"Evicted {to_remove} cache entries",
                extra={"evicted": to_remove, "remaining": len(self._entries)},
            )
        return to_remove

    def purge_expired(self) -> int:
        """Remove every expired entry. Intended for a host-driven maintenance tick."""
        now = self._clock()
        expired = [cache_key for cache_key, entry in self._entries.items() if entry.is_expired(now)]
        for cache_key in expired:
            self._drop(cache_key)
        self._expirations += len(expired)
        return len(expired)

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def estimate_memory_usage(self) -> int:
        """Rough size in bytes: key length plus serialized stored value."""
        return sum(len(cache_key) + serialized_size(entry.value) for cache_key, entry in self._entries.items())

    def stats(self) -> dict[str, Any]:
        """Get cache statistics. Hit rate is a percentage of lookups."""
        total_requests = self._hits + self._misses
        hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0
        access_times = self._access_times.values()

        return {
            "backend": "memory",
            "size": len(self._entries),
            "max_size": self.max_size,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round(hit_rate, 2),
            "sets": self._sets,
            "deletes": self._deletes,
            "evictions": self._evictions,
            "expirations": self._expirations,
            "decode_failures": self._decode_failures,
            "compressed_entries": sum(1 for entry in self._entries.values() if entry.compressed),
            "memory_usage": self.estimate_memory_usage(),
            "oldest_access": min(access_times) if access_times else None,
            "newest_access": max(access_times) if access_times else None,
        }
