"""
Context Compressor Module

Shrinks oversized prompts to a target size while keeping the most
keyword-dense content.

Text compression ranks sentences by how many of the document's top keywords
they contain and keeps the best ones that fit. The output is in relevance
order, not narrative order.

Object compression is shallow: low-value fields are dropped first, then long
string fields are cut. Nested objects are left alone.
"""

import json
import logging
import re
from collections import Counter
from typing import Any

from ..config import CompressionConfig

logger = logging.getLogger(__name__)

_PUNCTUATION = re.compile(r"[^\w\s]")
_SENTENCE_BOUNDARY = re.compile(r"[.!?]+")


def payload_length(payload: Any) -> int:
    """Length of a prompt: characters for text, compact JSON length otherwise."""
    if isinstance(payload, str):
        return len(payload)
    return len(json.dumps(payload, separators=(",", ":"), default=str))


class ContextCompressor:
    """
    Keyword-driven context compressor.

    Guarantees ``len(compress_text(t, n)) <= n`` and returns input that
    already fits unchanged.
    """

    def __init__(self, config: CompressionConfig | None = None) -> None:
        """
        Initialize context compressor.

        Args:
            config: Compression configuration (defaults apply when omitted)
        """
        self.config = config or CompressionConfig()

    def _target(self, target_length: int | None) -> int:
        return self.config.max_context_length if target_length is None else target_length

    def compress(self, payload: Any, target_length: int | None = None) -> Any:
        """
        Compress a prompt of any supported shape.

        Strings go through ``compress_text``, dicts through
        ``compress_object``; anything else is returned unchanged.
        """
        if isinstance(payload, str):
            return self.compress_text(payload, target_length)
        if isinstance(payload, dict):
            return self.compress_object(payload, target_length)

        logger.debug(f"Compression skipped for unsupported payload type {type(payload).__name__}")
        return payload

    def compress_text(self, text: str, target_length: int | None = None) -> str:
        """
        Compress text to at most ``target_length`` characters.

        Args:
            text: Text to compress
            target_length: Size budget (None = configured max_context_length)

        Returns:
            The input if it already fits, otherwise the highest-scoring
            sentences joined by single spaces
        """
        target = self._target(target_length)
        if len(text) <= target:
            return text

        keywords = self.extract_keywords(text)
        sentences = self.split_sentences(text)
        ranked = self.prioritize_sentences(sentences, keywords)

        compressed = ""
        for sentence in ranked:
            if len(compressed) + len(sentence) <= target:
                compressed += sentence + " "
            else:
                break

        result = compressed.strip()

        if not result and ranked:
            # Not even the best sentence fits: cut it down to the budget
            top = ranked[0]
            marker = self.config.ellipsis
            if target > len(marker):
                result = top[: target - len(marker)] + marker
            else:
                result = top[:target]

        logger.debug(
            "Compressed text context",
            extra={
                "original_length": len(text),
                "compressed_length": len(result),
                "target_length": target,
                "sentences_total": len(sentences),
            },
        )
        return result

    def extract_keywords(self, text: str) -> list[str]:
        """
        Most frequent words of the text.

        Words are lowercased with punctuation stripped; short words are
        ignored. Equal counts keep first-encounter order.
        """
        words = _PUNCTUATION.sub("", text.lower()).split()
        counts = Counter(word for word in words if len(word) >= self.config.min_keyword_length)
        return [word for word, _ in counts.most_common(self.config.keyword_count)]

    def split_sentences(self, text: str) -> list[str]:
        """Split on runs of ``.``, ``!`` and ``?``; trim and drop empty fragments."""
        return [sentence.strip() for sentence in _SENTENCE_BOUNDARY.split(text) if sentence.strip()]

    def score_sentence(self, sentence: str, keywords: list[str]) -> int:
        """Number of distinct keywords contained in the sentence (case-insensitive)."""
        lower_sentence = sentence.lower()
        return sum(1 for keyword in set(keywords) if keyword in lower_sentence)

    def prioritize_sentences(self, sentences: list[str], keywords: list[str]) -> list[str]:
        """Sort by score, highest first; ties keep their original order."""
        return sorted(sentences, key=lambda sentence: self.score_sentence(sentence, keywords), reverse=True)

    def compress_object(self, obj: dict[str, Any], target_length: int | None = None) -> dict[str, Any]:
        """
        Shrink a structured payload.

        Args:
            obj: Payload to compress
            target_length: Budget for the compact JSON form

        Returns:
            The input if it fits, otherwise a shallow copy without low-value
            fields and, if still too large, with long strings truncated
        """
        target = self._target(target_length)
        if payload_length(obj) <= target:
            return obj

        compressed = {key: value for key, value in obj.items() if key not in self.config.low_value_fields}
        if payload_length(compressed) <= target:
            return compressed

        limit = self.config.max_field_length
        for key, value in compressed.items():
            if isinstance(value, str) and len(value) > limit:
                compressed[key] = value[:limit] + self.config.ellipsis

        return compressed
