"""
AI Optimizer — Audit Database Models

SQLAlchemy model for the cost_optimization_logs table: one row per optimized call.
"""

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import Boolean, Float, Index, Integer, String
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(AsyncAttrs, DeclarativeBase):
    """Base class for all database models."""

    pass


class CostOptimizationLog(Base):
    """Audit record of a single optimized AI call."""

    __tablename__ = "cost_optimization_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    org_id: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    session_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    model_used: Mapped[str | None] = mapped_column(String(100), nullable=True)
    task_type: Mapped[str] = mapped_column(String(100), nullable=False, default="general")
    tokens_saved: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cache_hit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    compression_ratio: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)
    estimated_savings: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_at: Mapped[datetime] = mapped_column(nullable=False, index=True, default=lambda: datetime.now(UTC))

    __table_args__ = (Index("idx_cost_opt_org_created", "org_id", "created_at"),)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "org_id": self.org_id,
            "session_id": self.session_id,
            "model_used": self.model_used,
            "task_type": self.task_type,
            "tokens_saved": self.tokens_saved,
            "cache_hit": self.cache_hit,
            "compression_ratio": self.compression_ratio,
            "estimated_savings": self.estimated_savings,
            "created_at": self.created_at.isoformat(),
        }
