"""
AI Optimizer — Audit Database

Owns the SQLite engine for cost_optimization_logs and the queries run
against it. The schema is created lazily on first use.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .db_models import Base, CostOptimizationLog


class AuditDatabase:
    """Async repository for audit rows stored in a single SQLite file."""

    def __init__(self, db_path: str = "./data/optimization.db"):
        """
        Args:
            db_path: SQLite file; parent directories are created on first use
        """
        self.db_path = Path(db_path).resolve()
        self.engine = create_async_engine(
            f"sqlite+aiosqlite:///{self.db_path}",
            connect_args={"check_same_thread": False},
        )
        self._sessions: async_sessionmaker[AsyncSession] = async_sessionmaker(self.engine, expire_on_commit=False)
        self._ready = False
        self._schema_lock = asyncio.Lock()

    async def ensure_schema(self) -> None:
        """Create the parent directory and tables once."""
        if self._ready:
            return

        async with self._schema_lock:
            if self._ready:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            self._ready = True

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session bound to an initialized schema."""
        await self.ensure_schema()
        async with self._sessions() as session:
            yield session

    async def insert_log(self, **fields: Any) -> int:
        """Insert one cost_optimization_logs row and return its id."""
        async with self.session() as session:
            row = CostOptimizationLog(**fields)
            session.add(row)
            await session.commit()
            return row.id

    async def fetch_logs(self, limit: int = 100, org_id: str | None = None) -> list[CostOptimizationLog]:
        """Rows ordered newest first, optionally for one organization."""
        query = select(CostOptimizationLog)
        if org_id is not None:
            query = query.where(CostOptimizationLog.org_id == org_id)
        query = query.order_by(CostOptimizationLog.id.desc()).limit(limit)

        async with self.session() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def count_logs(self, org_id: str | None = None) -> int:
        query = select(func.count(CostOptimizationLog.id))
        if org_id is not None:
            query = query.where(CostOptimizationLog.org_id == org_id)

        async with self.session() as session:
            return (await session.execute(query)).scalar_one()

    async def close(self) -> None:
        """Dispose of pooled connections; the next query reconnects."""
        await self.engine.dispose()
        self._ready = False
