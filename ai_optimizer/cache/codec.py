"""
AI Optimizer — Cache Value Codec

Large values are stored as base64 text of gzip-compressed JSON.
"""

import base64
import gzip
import json
import zlib
from typing import Any


def serialized_size(value: Any) -> int:
    """Size in bytes of the value's compact JSON form."""
    return len(json.dumps(value, separators=(",", ":"), default=str).encode("utf-8"))


def encode_value(value: Any) -> str:
    """Encode a JSON-serializable value into its compact stored form."""
    raw = json.dumps(value, separators=(",", ":"), default=str).encode("utf-8")
    return base64.b64encode(gzip.compress(raw)).decode("ascii")


def decode_value(encoded: str) -> Any:
    """
    Reverse ``encode_value``.

    Raises:
        ValueError: If the payload is not valid base64/gzip/JSON
    """
    try:
        raw = gzip.decompress(base64.b64decode(encoded, validate=True))
        return json.loads(raw.decode("utf-8"))
    except (OSError, EOFError, zlib.error, UnicodeDecodeError, TypeError) as e:
        raise ValueError(f"Cannot decode cached value: {e}") from e
