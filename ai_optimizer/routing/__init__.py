"""
AI Optimizer — Model Routing

Complexity-based model selection with cost and latency estimates.
"""

from ..config import ComplexityTier
from .models import ModelSelection, UsageStat
from .router import ModelRouter

__all__ = [
    "ComplexityTier",
    "ModelRouter",
    "ModelSelection",
    "UsageStat",
]
