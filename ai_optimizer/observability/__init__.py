"""
AI Optimizer — Observability Module

Structured JSON logging and trace-id propagation.

Usage:
    from ai_optimizer.observability import configure_logging

    configure_logging("DEBUG")
"""

from .log_format import (
    JSONFormatter,
    configure_logging,
    generate_trace_id,
    get_trace_id,
    set_trace_id,
)

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "generate_trace_id",
    "get_trace_id",
    "set_trace_id",
]
