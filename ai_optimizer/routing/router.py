"""
Model Router Module

Maps a task's type, input size and complexity hint to a model identifier,
with cost and latency estimates taken from static configuration tables.

Selection is deterministic: the first candidate of the resolved tier is
always chosen. There is no load balancing across candidates.
"""

import logging
import math
from typing import Any

from ..config import TIER_ORDER, ComplexityTier, ModelPricing, RoutingConfig
from ..errors import EmptyTierError, UnknownModelError, ValidationError
from .models import ModelSelection, UsageStat

logger = logging.getLogger(__name__)

# Inputs at or below this size add no latency penalty
LATENCY_BASELINE_LENGTH = 100


class ModelRouter:
    """
    Complexity-based model router.

    Owns the per-instance usage statistics; construct one router per
    optimizer (or per test) rather than sharing a global.
    """

    def __init__(self, config: RoutingConfig | None = None) -> None:
        """
        Initialize model router.

        Args:
            config: Routing tables (defaults apply when omitted)
        """
        self.config = config or RoutingConfig()
        self._usage: dict[tuple[str, str, ComplexityTier], UsageStat] = {}

    def resolve_tier(
        self,
        task_type: str,
        input_length: int,
        complexity: ComplexityTier | str | None = None,
    ) -> ComplexityTier:
        """
        Decide the complexity tier for a call.

        Args:
            task_type: Declared task type (e.g. "classification")
            input_length: Size of the (possibly compressed) prompt
            complexity: Caller's hint (None = configured default)

        Returns:
            Resolved tier

        Raises:
            ValidationError: If the hint is not a known tier name
        """
        if complexity is None:
            tier = ComplexityTier(self.config.default_complexity)
        else:
            try:
                tier = ComplexityTier(complexity)
            except ValueError as e:
                raise ValidationError(
                    f"Unknown complexity hint: {complexity}",
                    details={"complexity": str(complexity), "allowed": [t.value for t in ComplexityTier]},
                ) from e

        if input_length < self.config.small_input_threshold and task_type in self.config.simple_tasks:
            tier = ComplexityTier.SIMPLE
        elif input_length > self.config.large_input_threshold or task_type in self.config.complex_tasks:
            tier = ComplexityTier.COMPLEX

        return tier

    def select_model(
        self,
        task_type: str,
        input_length: int,
        complexity: ComplexityTier | str | None = None,
    ) -> ModelSelection:
        """
        Select a model for a call and record the usage.

        Args:
            task_type: Declared task type
            input_length: Size of the prompt
            complexity: Optional complexity hint

        Returns:
            ModelSelection with cost and latency estimates

        Raises:
            ValidationError: If the complexity hint is unknown
            EmptyTierError: If the tier has no candidate models
            UnknownModelError: If the chosen model is missing from the price or latency table
        """
        tier = self.resolve_tier(task_type, input_length, complexity)

        tier_config = self.config.tiers.get(tier.value)
        if tier_config is None or not tier_config.models:
            raise EmptyTierError(tier.value)

        model = tier_config.models[0]

        if input_length > tier_config.max_tokens:
            logger.warning(
                f"Input of {input_length} exceeds the {tier.value} tier limit of {tier_config.max_tokens}",
                extra={
                    "event": "routing.tier_limit_exceeded",
                    "task_type": task_type,
                    "complexity_tier": tier.value,
                    "input_length": input_length,
                    "max_tokens": tier_config.max_tokens,
                },
            )

        selection = ModelSelection(
            model=model,
            complexity_tier=tier,
            estimated_cost_cents=self.estimate_cost(model, input_length),
            estimated_latency_ms=self.estimate_latency(model, input_length),
            task_type=task_type,
            input_length=input_length,
        )

        self._track_usage(model, task_type, tier)

        logger.debug(
            f"Selected {model} for {task_type}",
            extra={
                "model": model,
                "task_type": task_type,
                "complexity_tier": tier.value,
                "input_length": input_length,
                "estimated_cost_cents": selection.estimated_cost_cents,
            },
        )
        return selection

    def _pricing(self, model: str) -> ModelPricing:
        pricing = self.config.pricing.get(model)
        if pricing is None:
            raise UnknownModelError(model, table="pricing")
        return pricing

    def estimate_cost(
        self,
        model: str,
        input_tokens: int,
        output_tokens: int | None = None,
    ) -> int:
        """
        Estimate the cost of a call in whole cents (rounded up).

        Args:
            model: Model identifier
            input_tokens: Input size in units
            output_tokens: Output size (None = configured assumption)

        Returns:
            Estimated cost in cents

        Raises:
            UnknownModelError: If the model has no pricing entry
        """
        pricing = self._pricing(model)
        if output_tokens is None:
            output_tokens = self.config.assumed_output_tokens

        input_cost = (input_tokens / 1000) * pricing.input
        output_cost = (output_tokens / 1000) * pricing.output

        return math.ceil(input_cost + output_cost)

    def estimate_latency(self, model: str, input_length: int) -> int:
        """
        Estimate call latency in milliseconds.

        Base latency of the model plus ``log(input_length / 100) * 100``
        for inputs longer than 100 units.

        Raises:
            UnknownModelError: If the model has no latency entry
        """
        base = self.config.base_latency_ms.get(model)
        if base is None:
            raise UnknownModelError(model, table="latency")

        length_factor = 0.0
        if input_length > LATENCY_BASELINE_LENGTH:
            length_factor = math.log(input_length / LATENCY_BASELINE_LENGTH) * 100

        return math.ceil(base + length_factor)

    def compare_costs(
        self,
        input_length: int,
        models: list[str] | None = None,
        output_tokens: int | None = None,
    ) -> dict[str, Any]:
        """
        Compare estimated costs across models.

        Args:
            input_length: Input size in units
            models: Models to compare (None = every priced model)
            output_tokens: Expected output size

        Returns:
            Estimates sorted by cost with cheapest, most expensive and savings
        """
        if models is None:
            models = list(self.config.pricing)

        estimates = [
            {
                "model": model,
                "estimated_cost_cents": self.estimate_cost(model, input_length, output_tokens),
                "estimated_latency_ms": self.estimate_latency(model, input_length),
            }
            for model in models
        ]
        estimates.sort(key=lambda x: x["estimated_cost_cents"])

        cheapest = estimates[0] if estimates else None
        most_expensive = estimates[-1] if estimates else None

        savings = None
        if cheapest and most_expensive:
            absolute = most_expensive["estimated_cost_cents"] - cheapest["estimated_cost_cents"]
            savings = {
                "absolute_cents": absolute,
                "percentage": round(
                    absolute / most_expensive["estimated_cost_cents"] * 100
                    if most_expensive["estimated_cost_cents"] > 0
                    else 0,
                    2,
                ),
            }

        return {
            "estimates": estimates,
            "cheapest": cheapest,
            "most_expensive": most_expensive,
            "potential_savings": savings,
        }

    def _track_usage(self, model: str, task_type: str, tier: ComplexityTier) -> None:
        key = (model, task_type, tier)
        stat = self._usage.get(key)
        if stat is None:
            stat = UsageStat(model=model, task_type=task_type, complexity_tier=tier)
            self._usage[key] = stat
        stat.count += 1

    def get_usage_stats(self) -> dict[str, dict[str, Any]]:
        """Usage counts keyed by ``model:task_type:tier``."""
        return {stat.key: stat.to_dict() for stat in self._usage.values()}

    def reset_usage_stats(self) -> None:
        self._usage.clear()

    def describe_tiers(self) -> dict[str, dict[str, Any]]:
        """Routing table per tier, smallest first: candidates, limit and intended task types."""
        return {
            tier.value: {
                "models": list(self.config.tiers[tier.value].models),
                "max_tokens": self.config.tiers[tier.value].max_tokens,
                "use_cases": list(self.config.tiers[tier.value].use_cases),
            }
            for tier in TIER_ORDER
            if tier.value in self.config.tiers
        }
