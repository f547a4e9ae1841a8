"""
AI Optimizer — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config
from .schemas import (
    TIER_ORDER,
    AuditConfig,
    CacheConfig,
    ComplexityTier,
    CompressionConfig,
    Environment,
    LogLevel,
    ModelPricing,
    OptimizerConfig,
    RoutingConfig,
    TierConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    # Main config
    "OptimizerConfig",
    # Enums
    "Environment",
    "LogLevel",
    "ComplexityTier",
    "TIER_ORDER",
    # Config sections
    "CacheConfig",
    "RoutingConfig",
    "TierConfig",
    "ModelPricing",
    "CompressionConfig",
    "AuditConfig",
]
