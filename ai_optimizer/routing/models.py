"""
AI Optimizer — Routing Data Models
"""

from dataclasses import dataclass
from typing import Any

from ..config import ComplexityTier


@dataclass(frozen=True)
class ModelSelection:
    """Outcome of routing one call: the model plus its cost and latency estimates."""

    model: str
    complexity_tier: ComplexityTier
    estimated_cost_cents: int
    estimated_latency_ms: int
    task_type: str = "general"
    input_length: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "model": self.model,
            "complexity_tier": self.complexity_tier.value,
            "estimated_cost_cents": self.estimated_cost_cents,
            "estimated_latency_ms": self.estimated_latency_ms,
            "task_type": self.task_type,
            "input_length": self.input_length,
        }


@dataclass
class UsageStat:
    """How many times a (model, task type, tier) combination was selected."""

    model: str
    task_type: str
    complexity_tier: ComplexityTier
    count: int = 0

    @property
    def key(self) -> str:
        return f"{self.model}:{self.task_type}:{self.complexity_tier.value}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "model": self.model,
            "task_type": self.task_type,
            "complexity_tier": self.complexity_tier.value,
            "count": self.count,
        }
