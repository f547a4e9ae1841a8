"""
AI Optimizer — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from typing import Any
from unittest.mock import AsyncMock

import pytest

from ai_optimizer.cache import CacheStore
from ai_optimizer.compression import ContextCompressor
from ai_optimizer.config import CacheConfig, OptimizerConfig
from ai_optimizer.routing import ModelRouter

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


class FakeClock:
    """Manually advanced time source in seconds."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock for TTL tests."""
    return FakeClock()


@pytest.fixture
def cache_config() -> CacheConfig:
    """Small cache configuration for unit tests."""
    return CacheConfig(max_size=10, ttl_medium_seconds=60, compression_threshold=1024)


@pytest.fixture
def store(cache_config: CacheConfig, clock: FakeClock) -> CacheStore:
    """Fresh cache store driven by the fake clock."""
    return CacheStore(cache_config, clock=clock)


@pytest.fixture
def router() -> ModelRouter:
    """Router with default tables."""
    return ModelRouter()


@pytest.fixture
def compressor() -> ContextCompressor:
    """Compressor with default configuration."""
    return ContextCompressor()


@pytest.fixture
def optimizer_config() -> OptimizerConfig:
    """Default optimizer configuration with auditing off."""
    return OptimizerConfig()


@pytest.fixture
def mock_generate() -> AsyncMock:
    """Generation function that counts its calls."""
    return AsyncMock(return_value={"brief": "Generated project brief"})


@pytest.fixture
def sample_text_short() -> str:
    """Short survey answer."""
    return "The onboarding survey asks stakeholders about their current reporting workflow."


@pytest.fixture
def sample_text_long() -> str:
    """Long survey transcript, well over a few thousand characters."""
    return (
        """
    Stakeholders described the reporting workflow as slow and manual. Finance exports data
    from three systems every Monday. The exports are merged in spreadsheets by hand!
    Reporting errors appear when spreadsheets drift out of sync. Leadership wants a single
    dashboard for reporting. Could the dashboard refresh automatically? The team estimates
    that manual reporting costs ten hours per week. Security requires audit trails for every
    export. Nobody owns the spreadsheet templates today.
    """
        * 12
    )


@pytest.fixture
def sample_payload() -> dict[str, Any]:
    """Structured prompt payload with low-value fields."""
    return {
        "title": "Quarterly reporting automation",
        "summary": "Automate the weekly finance reporting workflow. " * 10,
        "metadata": {"source": "survey", "version": 3},
        "timestamp": "2024-05-01T12:00:00Z",
        "debug": {"trace": ["step"] * 50},
    }
