"""
AI Optimizer — Audit Log

Optional sink that records one cost_optimization_logs row per optimized call.
Writes are fire-and-forget: failures are logged and never reach the caller.
"""

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import Any

from .database import AuditDatabase

logger = logging.getLogger(__name__)


@dataclass
class AuditEntry:
    """Data for one audit row."""

    model: str | None
    task_type: str = "general"
    org_id: str | None = None
    session_id: str | None = None
    tokens_saved: int = 0
    cache_hit: bool = False
    compression_ratio: float = 1.0
    estimated_savings: float = 0.0


class AuditLog:
    """Fire-and-forget writer for cost optimization audit records."""

    def __init__(self, database: AuditDatabase) -> None:
        self.database = database
        self._pending: set[asyncio.Task[bool]] = set()
        self._failures = 0

    @classmethod
    def from_path(cls, db_path: str) -> "AuditLog":
        return cls(AuditDatabase(db_path=db_path))

    @property
    def failures(self) -> int:
        return self._failures

    def record(self, entry: AuditEntry) -> None:
        """Schedule a write on the running event loop without waiting for it."""
        task = asyncio.create_task(self.save(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def save(self, entry: AuditEntry) -> bool:
        """
        Persist one audit record.

        Returns:
            True if stored, False if the write failed (the failure is logged)
        """
        try:
            await self.database.insert_log(
                org_id=entry.org_id,
                session_id=entry.session_id,
                model_used=entry.model,
                task_type=entry.task_type,
                tokens_saved=entry.tokens_saved,
                cache_hit=entry.cache_hit,
                compression_ratio=entry.compression_ratio,
                estimated_savings=entry.estimated_savings,
            )
            return True
        except Exception as e:
            self._failures += 1
            logger.error(
                f"Failed to save optimization data: {e}",
                extra={"audit_entry": asdict(entry), "error": str(e)},
                exc_info=True,
            )
            return False

    async def flush(self) -> None:
        """Wait for every scheduled write to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending))

    async def recent(self, limit: int = 100, org_id: str | None = None) -> list[dict[str, Any]]:
        """Most recent audit records, newest first."""
        return [record.to_dict() for record in await self.database.fetch_logs(limit=limit, org_id=org_id)]

    async def count(self, org_id: str | None = None) -> int:
        return await self.database.count_logs(org_id=org_id)

    async def close(self) -> None:
        """Flush pending writes and release the database engine."""
        await self.flush()
        await self.database.close()
