"""
AI Optimizer — Cache Key and Codec Tests
"""

import base64
import gzip
import hashlib

import pytest

from ai_optimizer.cache import decode_value, encode_value, make_cache_key, serialize_payload


class TestMakeCacheKey:
    """Tests for make_cache_key."""

    def test_deterministic(self) -> None:
        """Test identical inputs always give the same key."""
        assert make_cache_key("ai", "prompt", "1") == make_cache_key("ai", "prompt", "1")

    def test_sha256_hex_of_joined_fields(self) -> None:
        """Test the key is the SHA-256 hex digest of namespace:key:version."""
        expected = hashlib.sha256(b"ai:prompt:1").hexdigest()
        assert make_cache_key("ai", "prompt", "1") == expected
        assert len(expected) == 64

    def test_version_changes_key(self) -> None:
        """Test different versions give different keys."""
        assert make_cache_key("ai", "prompt", "1") != make_cache_key("ai", "prompt", "2")

    def test_namespace_changes_key(self) -> None:
        """Test different namespaces give different keys."""
        assert make_cache_key("ai", "prompt") != make_cache_key("briefs", "prompt")


class TestSerializePayload:
    """Tests for serialize_payload."""

    def test_string_passthrough(self) -> None:
        assert serialize_payload("hello") == "hello"

    def test_dict_key_order_ignored(self) -> None:
        """Test dicts with the same items serialize identically."""
        assert serialize_payload({"b": 1, "a": 2}) == serialize_payload({"a": 2, "b": 1})


class TestCodec:
    """Tests for encode_value/decode_value."""

    def test_encoded_form_is_text(self) -> None:
        encoded = encode_value({"brief": "a" * 2000})
        assert isinstance(encoded, str)
        assert len(encoded) < 2000

    def test_decode_reverses_encode(self) -> None:
        value = {"epics": [{"title": "Reporting", "stories": 4}], "notes": "b" * 3000}
        assert decode_value(encode_value(value)) == value

    @pytest.mark.parametrize("garbage", ["not-base64!!", "aGVsbG8=", ""])
    def test_decode_garbage_raises_value_error(self, garbage: str) -> None:
        """Test invalid payloads raise ValueError."""
        with pytest.raises(ValueError):
            decode_value(garbage)

    def test_decode_damaged_deflate_stream_raises_value_error(self) -> None:
        """Test a gzip member whose compressed body is damaged raises ValueError, not zlib.error."""
        body = bytearray(gzip.compress(b'{"brief":"' + b"q" * 4000 + b'"}'))
        body[12] ^= 0xFF
        body[20] ^= 0xFF

        with pytest.raises(ValueError):
            decode_value(base64.b64encode(bytes(body)).decode("ascii"))
