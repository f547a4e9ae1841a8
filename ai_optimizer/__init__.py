"""
AI Optimizer — AI Call Caching, Routing and Compression

Reuses cached AI results, routes each call to a cost-appropriate model tier
and shrinks oversized prompts before invoking a caller-supplied generation
function.
"""

__version__ = "1.0.0"

from .cache import CacheStore
from .compression import ContextCompressor
from .config import ComplexityTier, OptimizerConfig
from .errors import ConfigurationError, OptimizerError, UnknownModelError
from .observability import configure_logging
from .optimizer import AICallOptimizer, CallOptions, CallPlan
from .routing import ModelRouter, ModelSelection

__all__ = [
    "AICallOptimizer",
    "CallOptions",
    "CallPlan",
    "CacheStore",
    "ModelRouter",
    "ModelSelection",
    "ContextCompressor",
    "ComplexityTier",
    "OptimizerConfig",
    "OptimizerError",
    "ConfigurationError",
    "UnknownModelError",
    "configure_logging",
]
