"""
AI Optimizer — Cache Keys

Deterministic content-hash keys. The namespace, logical key and version are
joined with ``:`` and hashed with SHA-256, so bumping the version invalidates
every entry of that shape without a flush.
"""

import hashlib
import json
from typing import Any


def make_cache_key(namespace: str, key: str, version: str = "1") -> str:
    """
    Build the storage key for a namespaced logical key.

    Args:
        namespace: Logical partition (e.g. "ai")
        key: Logical key within the namespace
        version: Key version

    Returns:
        64-character hex digest
    """
    combined = f"{namespace}:{key}:{version}"
    return hashlib.sha256(combined.encode("utf-8")).hexdigest()


def serialize_payload(payload: Any) -> str:
    """Render a prompt or context as text; strings pass through unchanged."""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
