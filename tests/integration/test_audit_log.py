"""
AI Optimizer — Audit Log Integration Tests

Exercises the SQLite-backed cost_optimization_logs sink end to end.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from ai_optimizer.audit import AuditEntry, AuditLog


@pytest.fixture
async def audit_log(tmp_path: Path) -> AsyncGenerator[AuditLog, None]:
    log = AuditLog.from_path(str(tmp_path / "audit" / "optimization.db"))
    yield log
    await log.close()


class TestAuditLog:
    """Tests for AuditLog persistence."""

    async def test_save_and_read_back(self, audit_log: AuditLog) -> None:
        stored = await audit_log.save(
            AuditEntry(
                model="gpt-4o-mini",
                task_type="summarization",
                org_id="acme",
                session_id="session-1",
                tokens_saved=420,
                compression_ratio=0.4,
            )
        )

        assert stored is True
        records = await audit_log.recent()
        assert len(records) == 1
        record = records[0]
        assert record["model_used"] == "gpt-4o-mini"
        assert record["task_type"] == "summarization"
        assert record["tokens_saved"] == 420
        assert record["cache_hit"] is False
        assert record["compression_ratio"] == pytest.approx(0.4)
        assert record["created_at"]

    async def test_recent_is_newest_first_and_filtered(self, audit_log: AuditLog) -> None:
        for i in range(5):
            await audit_log.save(AuditEntry(model=f"model-{i}", org_id="acme" if i % 2 == 0 else "globex"))

        newest = await audit_log.recent(limit=2)
        assert [record["model_used"] for record in newest] == ["model-4", "model-3"]

        acme = await audit_log.recent(org_id="acme")
        assert [record["model_used"] for record in acme] == ["model-4", "model-2", "model-0"]
        assert await audit_log.count(org_id="globex") == 2

    async def test_record_is_fire_and_forget(self, audit_log: AuditLog) -> None:
        audit_log.record(AuditEntry(model="gpt-4o", cache_hit=True, estimated_savings=3))
        audit_log.record(AuditEntry(model="gpt-4o"))

        await audit_log.flush()

        assert len(await audit_log.recent()) == 2
        assert await audit_log.count() == 2

    async def test_write_failure_is_absorbed(self, tmp_path: Path) -> None:
        """Test an unwritable database path returns False instead of raising."""
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("")
        log = AuditLog.from_path(str(blocker / "optimization.db"))

        assert await log.save(AuditEntry(model="gpt-4o")) is False
        assert log.failures == 1

        await log.database.close()
