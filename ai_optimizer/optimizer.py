"""
AI Call Optimizer

Single entry point for one logical AI call:

    cache lookup → (miss) compress prompt → select model → generate → cache result

On a cache hit nothing else runs: no routing, no compression, no generation.
Without a generation function the optimizer returns a CallPlan describing the
call it would make (dry run / cost estimation).

Errors raised by the generation function propagate unchanged; there is no
retry, backoff or timeout. A failure to cache a successful result is logged
and the result is still returned.

Concurrent identical misses each invoke the generation function unless
``single_flight`` is enabled, in which case later callers await the first
caller's in-flight result.
"""

import asyncio
import hashlib
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from .audit import AuditEntry, AuditLog
from .cache import CacheStore, serialize_payload
from .compression import ContextCompressor, payload_length
from .config import ComplexityTier, OptimizerConfig
from .observability import generate_trace_id, get_trace_id
from .routing import ModelRouter, ModelSelection

logger = logging.getLogger(__name__)

GenerateFn = Callable[[Any, dict[str, Any]], Awaitable[Any]]


class CallOptions(BaseModel):
    """Per-call options for ``AICallOptimizer.optimize_call``."""

    task_type: str = Field(default="general", description="Declared task type used for routing")
    complexity: str | None = Field(default=None, description="Complexity hint: simple, medium or complex")
    use_cache: bool = Field(default=True, description="Look up and store results in the cache")
    compress_context: bool = Field(default=True, description="Compress oversized prompts before routing")
    max_context_length: int | None = Field(default=None, ge=0, description="Compression budget override")
    ttl_seconds: int | None = Field(default=None, ge=1, description="Cache TTL override")
    org_id: str | None = Field(default=None, description="Organization recorded in the audit log")
    session_id: str | None = Field(default=None, description="Session recorded in the audit log")


@dataclass(frozen=True)
class CallPlan:
    """Description of a call that was planned but not executed."""

    prompt: Any
    model: str
    complexity_tier: ComplexityTier
    estimated_cost_cents: int
    estimated_latency_ms: int
    cache_key: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompt": self.prompt,
            "model": self.model,
            "complexity_tier": self.complexity_tier.value,
            "estimated_cost_cents": self.estimated_cost_cents,
            "estimated_latency_ms": self.estimated_latency_ms,
            "cache_key": self.cache_key,
        }


class AICallOptimizer:
    """
    Cache, route and compress AI calls.

    Every collaborator is injectable; by default each optimizer builds its own
    cache store, router and compressor from ``config`` so that independent
    instances never share state. The host owns the lifecycle: it may call
    ``run_maintenance()`` periodically and should ``await close()`` on shutdown.
    """

    def __init__(
        self,
        config: OptimizerConfig | None = None,
        *,
        cache: CacheStore | None = None,
        router: ModelRouter | None = None,
        compressor: ContextCompressor | None = None,
        audit_log: AuditLog | None = None,
    ) -> None:
        """
        Initialize the optimizer.

        Args:
            config: Root configuration (defaults apply when omitted)
            cache: Cache store (built from config.cache when omitted)
            router: Model router (built from config.routing when omitted)
            compressor: Context compressor (built from config.compression when omitted)
            audit_log: Audit sink (built from config.audit when enabled and omitted)
        """
        self.config = config or OptimizerConfig()
        self.cache = cache if cache is not None else CacheStore(self.config.cache)
        self.router = router if router is not None else ModelRouter(self.config.routing)
        self.compressor = compressor if compressor is not None else ContextCompressor(self.config.compression)

        if audit_log is None and self.config.audit.enabled:
            audit_log = AuditLog.from_path(self.config.audit.db_path)
        self.audit_log = audit_log

        self._in_flight: dict[str, asyncio.Future[Any]] = {}

        # Stats
        self._cache_hits = 0
        self._cache_misses = 0
        self._generations = 0
        self._dry_runs = 0
        self._deduplicated = 0
        self._cache_write_failures = 0
        self._compressions = 0
        self._chars_in = 0
        self._chars_out = 0
        self._total_savings_cents = 0

    @property
    def namespace(self) -> str:
        return self.config.cache.namespace

    def make_call_key(self, prompt: Any, context: dict[str, Any] | None, task_type: str) -> str:
        """Content hash of task type, prompt and context."""
        combined = f"{task_type}:{serialize_payload(prompt)}:{serialize_payload(context or {})}"
        return hashlib.sha256(combined.encode("utf-8")).hexdigest()

    async def optimize_call(
        self,
        prompt: Any,
        context: dict[str, Any] | None = None,
        options: CallOptions | None = None,
        generate: GenerateFn | None = None,
    ) -> Any:
        """
        Run one AI call through the cache, compressor and router.

        Args:
            prompt: Prompt text or structured payload
            context: Caller context, forwarded to ``generate`` with the selected model
            options: Per-call options
            generate: ``async (prompt, context) -> result``; omit for a dry run

        Returns:
            The cached or freshly generated result, or a CallPlan when
            ``generate`` is omitted

        Raises:
            ValidationError: If the complexity hint is unknown
            ConfigurationError: If routing tables are inconsistent
            Exception: Anything raised by ``generate``, unchanged
        """
        options = options or CallOptions()
        context = context or {}
        if get_trace_id() is None:
            generate_trace_id()

        call_key = self.make_call_key(prompt, context, options.task_type)
        caching = options.use_cache and self.config.cache.enabled

        if caching:
            entry = self.cache.get_entry(self.namespace, call_key)
            if entry is not None:
                self._cache_hits += 1
                saved = entry.metadata.get("estimated_cost_cents", 0)
                self._total_savings_cents += saved
                logger.info(
                    f"Cache hit for {options.task_type}",
                    extra={"task_type": options.task_type, "cache_key": call_key[:16]},
                )
                self._audit(
                    options,
                    model=entry.metadata.get("model"),
                    cache_hit=True,
                    estimated_savings=saved,
                )
                return entry.value
            self._cache_misses += 1

        if caching and generate is not None and self.config.single_flight:
            return await self._execute_single_flight(call_key, prompt, context, options, generate)

        return await self._execute(call_key, prompt, context, options, generate, caching)

    async def _execute_single_flight(
        self,
        call_key: str,
        prompt: Any,
        context: dict[str, Any],
        options: CallOptions,
        generate: GenerateFn,
    ) -> Any:
        pending = self._in_flight.get(call_key)
        if pending is not None:
            self._deduplicated += 1
            logger.debug("Joining in-flight generation", extra={"cache_key": call_key[:16]})
            return await asyncio.shield(pending)

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._in_flight[call_key] = future
        try:
            result = await self._execute(call_key, prompt, context, options, generate, caching=True)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as e:
            future.set_exception(e)
            # Mark retrieved so an unjoined future does not log a warning
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            self._in_flight.pop(call_key, None)

    async def _execute(
        self,
        call_key: str,
        prompt: Any,
        context: dict[str, Any],
        options: CallOptions,
        generate: GenerateFn | None,
        caching: bool,
    ) -> Any:
        processed = prompt
        original_length = payload_length(prompt)

        if options.compress_context and self.config.compression.enabled:
            target = options.max_context_length
            if target is None:
                target = self.config.compression.max_context_length
            processed = self.compressor.compress(prompt, target)

        processed_length = payload_length(processed)
        if processed_length < original_length:
            self._compressions += 1
            self._chars_in += original_length
            self._chars_out += processed_length

        selection = self.router.select_model(options.task_type, processed_length, options.complexity)

        if generate is None:
            self._dry_runs += 1
            self._audit(
                options,
                model=selection.model,
                original_length=original_length,
                processed_length=processed_length,
            )
            return CallPlan(
                prompt=processed,
                model=selection.model,
                complexity_tier=selection.complexity_tier,
                estimated_cost_cents=selection.estimated_cost_cents,
                estimated_latency_ms=selection.estimated_latency_ms,
                cache_key=call_key,
            )

        result = await generate(processed, {"model": selection.model, **context})
        self._generations += 1

        if caching:
            self._store_result(call_key, result, options, selection)

        self._audit(
            options,
            model=selection.model,
            original_length=original_length,
            processed_length=processed_length,
        )
        return result

    def _store_result(self, call_key: str, result: Any, options: CallOptions, selection: ModelSelection) -> None:
        ttl = options.ttl_seconds or self.config.cache.ttl_medium_seconds
        try:
            self.cache.set(
                self.namespace,
                call_key,
                result,
                ttl_seconds=ttl,
                metadata={
                    "model": selection.model,
                    "task_type": options.task_type,
                    "complexity_tier": selection.complexity_tier.value,
                    "estimated_cost_cents": selection.estimated_cost_cents,
                },
            )
        except Exception as e:
            self._cache_write_failures += 1
            logger.error(
                f"Failed to cache AI result: {e}",
                extra={"event": "cache.write_failure", "cache_key": call_key[:16], "error": str(e)},
                exc_info=True,
            )

    def _audit(
        self,
        options: CallOptions,
        model: str | None,
        cache_hit: bool = False,
        estimated_savings: float = 0.0,
        original_length: int = 0,
        processed_length: int = 0,
    ) -> None:
        if self.audit_log is None:
            return

        self.audit_log.record(
            AuditEntry(
                model=model,
                task_type=options.task_type,
                org_id=options.org_id,
                session_id=options.session_id,
                tokens_saved=max(0, original_length - processed_length),
                cache_hit=cache_hit,
                compression_ratio=processed_length / original_length if original_length else 1.0,
                estimated_savings=estimated_savings,
            )
        )

    def get_optimization_stats(self) -> dict[str, Any]:
        """Cache, routing, compression and savings statistics."""
        lookups = self._cache_hits + self._cache_misses
        hit_rate = (self._cache_hits / lookups * 100) if lookups > 0 else 0.0

        return {
            "cache": self.cache.stats(),
            "calls": {
                "hits": self._cache_hits,
                "misses": self._cache_misses,
                "hit_rate": round(hit_rate, 2),
                "generations": self._generations,
                "dry_runs": self._dry_runs,
                "deduplicated": self._deduplicated,
                "cache_write_failures": self._cache_write_failures,
                "in_flight": len(self._in_flight),
            },
            "models": self.router.get_usage_stats(),
            "routing": self.router.describe_tiers(),
            "compression": {
                "compressions": self._compressions,
                "chars_saved": self._chars_in - self._chars_out,
                "compression_ratio": round(self._chars_out / self._chars_in, 4) if self._chars_in else 1.0,
            },
            "total_savings_cents": self._total_savings_cents,
        }

    def run_maintenance(self, evict: bool = False) -> dict[str, int]:
        """
        Host-driven maintenance tick.

        Args:
            evict: Also evict the least-recently-accessed 20% of entries

        Returns:
            Counts of removed entries and the resulting cache size
        """
        expired = self.cache.purge_expired()
        evicted = self.cache.cleanup() if evict else 0

        logger.info(
            "Optimizer maintenance completed",
            extra={"expired_removed": expired, "evicted": evicted, "cache_size": self.cache.size()},
        )
        return {"expired_removed": expired, "evicted": evicted, "cache_size": self.cache.size()}

    async def close(self) -> None:
        """Flush and close the audit sink, if any."""
        if self.audit_log is not None:
            await self.audit_log.close()
