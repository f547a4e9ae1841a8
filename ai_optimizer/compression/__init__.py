"""
AI Optimizer — Context Compression
"""

from .compressor import ContextCompressor, payload_length

__all__ = [
    "ContextCompressor",
    "payload_length",
]
