"""
AI Optimizer — Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.
Routing, pricing and latency tables are data, validated once at construction:
a tier without candidates or a tier model missing from the price/latency
tables is rejected immediately with a ConfigurationError.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import EmptyTierError, UnknownModelError


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ComplexityTier(str, Enum):
    """Named complexity buckets used to pick a candidate model list."""

    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


# Smallest to largest; every routing table must define all three
TIER_ORDER: tuple[ComplexityTier, ...] = (
    ComplexityTier.SIMPLE,
    ComplexityTier.MEDIUM,
    ComplexityTier.COMPLEX,
)


class TierConfig(BaseModel):
    """Candidate models and limits for one complexity tier."""

    models: list[str] = Field(default_factory=list, description="Candidate models, first one wins")
    max_tokens: int = Field(default=4000, ge=1, description="Largest input this tier should receive")
    use_cases: list[str] = Field(default_factory=list, description="Task types this tier is meant for")


class ModelPricing(BaseModel):
    """Price of a model in cents per 1000 units."""

    input: float = Field(ge=0.0, description="Input price (cents per 1K units)")
    output: float = Field(ge=0.0, description="Output price (cents per 1K units)")


def _default_tiers() -> dict[str, TierConfig]:
    return {
        "simple": TierConfig(
            models=["gpt-3.5-turbo", "gpt-4o-mini"],
            max_tokens=1000,
            use_cases=["classification", "simple_extraction", "formatting"],
        ),
        "medium": TierConfig(
            models=["gpt-4o-mini", "gpt-4o"],
            max_tokens=4000,
            use_cases=["analysis", "summarization", "translation"],
        ),
        "complex": TierConfig(
            models=["gpt-4o", "gpt-4"],
            max_tokens=8000,
            use_cases=["creative_writing", "complex_analysis", "reasoning"],
        ),
    }


def _default_pricing() -> dict[str, ModelPricing]:
    return {
        "gpt-3.5-turbo": ModelPricing(input=0.1, output=0.2),
        "gpt-4o-mini": ModelPricing(input=0.15, output=0.6),
        "gpt-4o": ModelPricing(input=0.5, output=1.5),
        "gpt-4": ModelPricing(input=3.0, output=6.0),
    }


def _default_latency() -> dict[str, int]:
    return {
        "gpt-3.5-turbo": 500,
        "gpt-4o-mini": 800,
        "gpt-4o": 1500,
        "gpt-4": 3000,
    }


class CacheConfig(BaseModel):
    """Cache store configuration."""

    enabled: bool = Field(default=True, description="Enable result caching")
    namespace: str = Field(default="ai", description="Namespace for optimizer cache keys")
    max_size: int = Field(default=10000, ge=1, description="Max cache entries")
    ttl_medium_seconds: int = Field(default=3600, ge=1, description="Default TTL (1 hour)")
    compression_threshold: int = Field(
        default=1024,
        ge=0,
        description="Encode values whose serialized size exceeds this many bytes (0 = never)",
    )
    version: str = Field(default="1", description="Key version; bump to invalidate all entries")

    @field_validator("namespace", "version")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Namespace and version take part in every key and may not be blank."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class RoutingConfig(BaseModel):
    """Model routing tables: tiers, prices and base latencies."""

    tiers: dict[str, TierConfig] = Field(default_factory=_default_tiers)
    pricing: dict[str, ModelPricing] = Field(default_factory=_default_pricing)
    base_latency_ms: dict[str, int] = Field(default_factory=_default_latency)

    simple_tasks: list[str] = Field(
        default_factory=lambda: ["classification", "extraction", "formatting", "validation"],
        description="Task types routed to the simple tier when the input is small",
    )
    complex_tasks: list[str] = Field(
        default_factory=lambda: ["creative_writing", "complex_analysis", "reasoning", "code_generation"],
        description="Task types always routed to the complex tier",
    )

    small_input_threshold: int = Field(default=500, ge=0, description="Below this, simple tasks go simple")
    large_input_threshold: int = Field(default=2000, ge=0, description="Above this, every task goes complex")
    assumed_output_tokens: int = Field(default=500, ge=0, description="Output size assumed for estimates")
    default_complexity: ComplexityTier = Field(default=ComplexityTier.MEDIUM)

    @model_validator(mode="after")
    def validate_tables(self) -> "RoutingConfig":
        """Every tier must exist, have candidates, and only name priced models."""
        for tier in TIER_ORDER:
            tier_config = self.tiers.get(tier.value)
            if tier_config is None or not tier_config.models:
                raise EmptyTierError(tier.value, details={"configured_tiers": sorted(self.tiers)})

        for tier_name, tier_config in self.tiers.items():
            for model in tier_config.models:
                if model not in self.pricing:
                    raise UnknownModelError(model, table="pricing", details={"tier": tier_name})
                if model not in self.base_latency_ms:
                    raise UnknownModelError(model, table="latency", details={"tier": tier_name})
        return self


class CompressionConfig(BaseModel):
    """Context compression configuration."""

    enabled: bool = Field(default=True, description="Enable prompt compression")
    max_context_length: int = Field(default=4000, ge=0, description="Default target size in characters")
    keyword_count: int = Field(default=20, ge=1, description="Number of keywords used for scoring")
    min_keyword_length: int = Field(default=4, ge=1, description="Shorter words are never keywords")
    low_value_fields: list[str] = Field(
        default_factory=lambda: ["metadata", "timestamp", "debug"],
        description="Fields dropped first from oversized objects",
    )
    max_field_length: int = Field(default=100, ge=0, description="String fields are cut to this length")
    ellipsis: str = Field(default="...", description="Marker appended to truncated text")


class AuditConfig(BaseModel):
    """Optional cost_optimization_logs sink."""

    enabled: bool = Field(default=False, description="Persist one audit row per optimized call")
    db_path: str = Field(default="./data/optimization.db", description="SQLite database path")


class OptimizerConfig(BaseModel):
    """Root configuration for the AI call optimizer."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    cache: CacheConfig = Field(default_factory=CacheConfig)
    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    compression: CompressionConfig = Field(default_factory=CompressionConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)

    single_flight: bool = Field(
        default=False,
        description="Share one in-flight generation between concurrent identical cache misses",
    )

    model_config = ConfigDict(validate_assignment=True)
