"""
AI Optimizer — Configuration Schema Tests

Routing tables are validated once, at construction.
"""

import pydantic
import pytest

from ai_optimizer.config import (
    CacheConfig,
    CompressionConfig,
    ComplexityTier,
    ModelPricing,
    OptimizerConfig,
    RoutingConfig,
    TierConfig,
)
from ai_optimizer.errors import ConfigurationError, EmptyTierError, UnknownModelError


def _tiers(simple: list[str], medium: list[str], complex_: list[str]) -> dict[str, TierConfig]:
    return {
        "simple": TierConfig(models=simple),
        "medium": TierConfig(models=medium),
        "complex": TierConfig(models=complex_),
    }


class TestRoutingConfig:
    """Tests for routing table validation."""

    def test_defaults_are_consistent(self) -> None:
        config = RoutingConfig()

        assert config.tiers["simple"].models[0] == "gpt-3.5-turbo"
        assert config.default_complexity == ComplexityTier.MEDIUM
        for tier in config.tiers.values():
            for model in tier.models:
                assert model in config.pricing
                assert model in config.base_latency_ms

    def test_empty_tier_rejected(self) -> None:
        """Test a tier without candidates fails at construction."""
        with pytest.raises(EmptyTierError) as exc_info:
            RoutingConfig(tiers=_tiers([], ["gpt-4o"], ["gpt-4"]))

        assert exc_info.value.tier == "simple"

    def test_missing_tier_rejected(self) -> None:
        with pytest.raises(EmptyTierError) as exc_info:
            RoutingConfig(tiers={"simple": TierConfig(models=["gpt-4o"])})

        assert exc_info.value.tier == "medium"

    def test_unpriced_model_rejected(self) -> None:
        """Test a tier model missing from the price table fails at construction."""
        with pytest.raises(UnknownModelError) as exc_info:
            RoutingConfig(tiers=_tiers(["mystery-model"], ["gpt-4o"], ["gpt-4"]))

        assert exc_info.value.model == "mystery-model"
        assert exc_info.value.table == "pricing"
        assert exc_info.value.details["tier"] == "simple"

    def test_model_without_latency_rejected(self) -> None:
        with pytest.raises(UnknownModelError) as exc_info:
            RoutingConfig(
                tiers=_tiers(["local"], ["gpt-4o"], ["gpt-4"]),
                pricing={
                    "local": ModelPricing(input=0.0, output=0.0),
                    "gpt-4o": ModelPricing(input=0.5, output=1.5),
                    "gpt-4": ModelPricing(input=3.0, output=6.0),
                },
            )

        assert exc_info.value.table == "latency"

    def test_errors_are_configuration_errors(self) -> None:
        with pytest.raises(ConfigurationError):
            RoutingConfig(tiers=_tiers(["gpt-4o"], [], ["gpt-4"]))

    def test_negative_price_rejected(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ModelPricing(input=-1.0, output=0.0)


class TestCacheConfig:
    """Tests for cache configuration."""

    def test_defaults(self) -> None:
        config = CacheConfig()

        assert config.namespace == "ai"
        assert config.max_size == 10000
        assert config.ttl_medium_seconds == 3600
        assert config.compression_threshold == 1024

    @pytest.mark.parametrize("field", ["namespace", "version"])
    def test_blank_key_parts_rejected(self, field: str) -> None:
        with pytest.raises(pydantic.ValidationError):
            CacheConfig(**{field: "   "})

    def test_max_size_must_be_positive(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            CacheConfig(max_size=0)


class TestOptimizerConfig:
    """Tests for the root configuration."""

    def test_defaults(self) -> None:
        config = OptimizerConfig()

        assert config.single_flight is False
        assert config.audit.enabled is False
        assert config.compression.max_context_length == 4000

    def test_assignment_is_validated(self) -> None:
        config = OptimizerConfig()

        with pytest.raises(pydantic.ValidationError):
            config.compression = "not a config"  # type: ignore[assignment]

    def test_keyword_count_must_be_positive(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            CompressionConfig(keyword_count=0)
