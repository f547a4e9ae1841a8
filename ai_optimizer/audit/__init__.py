"""
AI Optimizer — Audit Module

Optional persistence of per-call optimization records
(cost_optimization_logs). Independent of the in-memory cache, which is
never persisted.
"""

from .database import AuditDatabase
from .db_models import Base, CostOptimizationLog
from .log import AuditEntry, AuditLog

__all__ = [
    "AuditDatabase",
    "AuditEntry",
    "AuditLog",
    "Base",
    "CostOptimizationLog",
]
