"""
AI Optimizer — End-to-End Optimizer Flow

Runs the optimizer with every component real, including the audit sink.
"""

from pathlib import Path
from typing import Any

from ai_optimizer import AICallOptimizer, CallOptions
from ai_optimizer.config import AuditConfig, OptimizerConfig


async def test_brief_generation_flow(tmp_path: Path, sample_text_long: str) -> None:
    """Generate, hit the cache, then inspect stats and the audit trail."""
    config = OptimizerConfig(audit=AuditConfig(enabled=True, db_path=str(tmp_path / "optimization.db")))
    optimizer = AICallOptimizer(config)
    assert optimizer.audit_log is not None

    seen: list[tuple[Any, dict[str, Any]]] = []

    async def generate(prompt: Any, context: dict[str, Any]) -> dict[str, Any]:
        seen.append((prompt, context))
        return {"brief": f"Brief written by {context['model']}"}

    options = CallOptions(
        task_type="summarization",
        max_context_length=1000,
        org_id="acme",
        session_id="onboarding-1",
    )

    first = await optimizer.optimize_call(sample_text_long, {"project": "reporting"}, options, generate)
    second = await optimizer.optimize_call(sample_text_long, {"project": "reporting"}, options, generate)

    assert first == second == {"brief": "Brief written by gpt-4o-mini"}
    assert len(seen) == 1
    assert len(seen[0][0]) <= 1000
    assert seen[0][1] == {"model": "gpt-4o-mini", "project": "reporting"}

    stats = optimizer.get_optimization_stats()
    assert stats["calls"]["hits"] == 1
    assert stats["calls"]["generations"] == 1
    assert stats["cache"]["size"] == 1
    assert stats["total_savings_cents"] > 0

    await optimizer.audit_log.flush()
    records = await optimizer.audit_log.recent(org_id="acme")

    assert sorted(record["cache_hit"] for record in records) == [False, True]
    miss = next(record for record in records if not record["cache_hit"])
    hit = next(record for record in records if record["cache_hit"])
    assert miss["model_used"] == "gpt-4o-mini"
    assert miss["session_id"] == "onboarding-1"
    assert miss["tokens_saved"] > 0
    assert miss["compression_ratio"] < 1.0
    assert hit["model_used"] == "gpt-4o-mini"
    assert hit["estimated_savings"] == stats["total_savings_cents"]

    await optimizer.close()


async def test_dry_run_then_execute(mock_generate) -> None:
    """A dry run plans the same model the real call then uses."""
    optimizer = AICallOptimizer()

    plan = await optimizer.optimize_call("Extract the due dates", None, CallOptions(task_type="extraction"))
    result = await optimizer.optimize_call(
        "Extract the due dates", None, CallOptions(task_type="extraction"), mock_generate
    )

    assert result == {"brief": "Generated project brief"}
    assert mock_generate.await_args.args[1]["model"] == plan.model == "gpt-3.5-turbo"
    assert optimizer.cache.size() == 1
