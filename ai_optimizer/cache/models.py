"""
AI Optimizer — Cache Entry Model
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CacheEntry:
    """
    One stored value.

    ``created_at`` is in seconds (the store's clock); ``ttl_ms`` is in
    milliseconds. When ``compressed`` is set, ``value`` holds the encoded
    form and must be decoded before use.
    """

    key: str
    value: Any
    created_at: float
    ttl_ms: int
    compressed: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def age_ms(self, now: float) -> float:
        return (now - self.created_at) * 1000

    def is_expired(self, now: float) -> bool:
        """Valid only while ``now - created_at < ttl``."""
        return self.age_ms(now) >= self.ttl_ms
