"""
Lightweight operation profiling for the MCP tools.

Toggle via environment variable: TRANSCRIPT_SEARCH_PROFILING=1

Each tool maps onto one SearchIntelligence operation, so per-tool timings
are per-operation timings. Time spent waiting on remote collaborators
(backend, trending feed, embeddings) is tracked separately through a
context variable fed by BaseAPIClient.

Usage:
    # In server.py after create_server():
    from transcript_search.shared.profiling import install_profiling
    install_profiling(mcp)

    # Query metrics (when profiling enabled, auto-registers MCP tool):
    get_performance_metrics()
"""

from __future__ import annotations

import contextvars
import json
import logging
import os
import time
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from mcp.server.fastmcp import FastMCP

logger = logging.getLogger(__name__)

PROFILING_ENV = "TRANSCRIPT_SEARCH_PROFILING"


def profiling_enabled(environ: Mapping[str, str] | None = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get(PROFILING_ENV, "").lower() in ("1", "true", "yes")


# ── Context var for collaborator time within one operation ──────────────────
_remote_time_accumulator: contextvars.ContextVar[list[float]] = contextvars.ContextVar(
    "remote_time_accumulator",
)


def record_remote_time(elapsed_ms: float) -> None:
    """Add collaborator wait time to the operation currently being profiled."""
    try:
        _remote_time_accumulator.get().append(elapsed_ms)
    except LookupError:
        pass


# ── Data structures ─────────────────────────────────────────────────────────

MAX_HISTORY_PER_OPERATION = 200


@dataclass
class CallRecord:
    timestamp: float
    total_ms: float
    remote_ms: float
    local_ms: float  # total_ms - remote_ms


@dataclass
class OperationStats:
    """Rolling timing window for one operation."""

    calls: list[CallRecord] = field(default_factory=list)

    def record(self, total_ms: float, remote_ms: float = 0.0) -> None:
        self.calls.append(
            CallRecord(
                timestamp=time.time(),
                total_ms=total_ms,
                remote_ms=remote_ms,
                local_ms=max(0.0, total_ms - remote_ms),
            )
        )
        if len(self.calls) > MAX_HISTORY_PER_OPERATION:
            self.calls = self.calls[-MAX_HISTORY_PER_OPERATION:]

    @property
    def count(self) -> int:
        return len(self.calls)

    def _avg(self, attr: str) -> float:
        return sum(getattr(c, attr) for c in self.calls) / len(self.calls) if self.calls else 0.0

    @property
    def total_avg(self) -> float:
        return self._avg("total_ms")

    @property
    def remote_avg(self) -> float:
        return self._avg("remote_ms")

    @property
    def local_avg(self) -> float:
        return self._avg("local_ms")

    @property
    def total_max(self) -> float:
        return max((c.total_ms for c in self.calls), default=0.0)

    @property
    def total_p95(self) -> float:
        if not self.calls:
            return 0.0
        ordered = sorted(c.total_ms for c in self.calls)
        return ordered[min(int(len(ordered) * 0.95), len(ordered) - 1)]

    def summary_dict(self) -> dict[str, Any]:
        return {
            "calls": self.count,
            "total_ms": {
                "avg": round(self.total_avg, 1),
                "max": round(self.total_max, 1),
                "p95": round(self.total_p95, 1),
            },
            "remote_ms_avg": round(self.remote_avg, 1),
            "local_ms_avg": round(self.local_avg, 1),
        }


_metrics: dict[str, OperationStats] = defaultdict(OperationStats)


def get_metrics() -> dict[str, OperationStats]:
    return dict(_metrics)


def reset_metrics() -> None:
    _metrics.clear()


def format_metrics_report() -> str:
    if not _metrics:
        return f"No performance data recorded yet. Ensure {PROFILING_ENV}=1 is set."

    lines = ["Operation performance report", ""]
    lines.append(f"{'Operation':<28} {'Calls':>5} {'Avg':>8} {'P95':>8} {'Max':>8} {'Remote%':>8}")
    lines.append("-" * 70)
    for name, stats in sorted(_metrics.items(), key=lambda x: x[1].total_avg, reverse=True):
        remote_pct = (stats.remote_avg / stats.total_avg * 100) if stats.total_avg > 0 else 0
        lines.append(
            f"{name:<28} {stats.count:>5} "
            f"{stats.total_avg:>6.0f}ms "
            f"{stats.total_p95:>6.0f}ms "
            f"{stats.total_max:>6.0f}ms "
            f"{remote_pct:>7.0f}%"
        )
    lines.append("-" * 70)
    lines.append(f"Total calls: {sum(s.count for s in _metrics.values())}")
    return "\n".join(lines)


# ── Installation ────────────────────────────────────────────────────────────


def install_profiling(mcp: FastMCP, enabled: bool | None = None) -> bool:
    """
    Wrap every tool invocation with timing and register `get_performance_metrics`.

    Returns True if profiling was installed, False if disabled.
    """
    if not (profiling_enabled() if enabled is None else enabled):
        logger.debug(f"Profiling disabled (set {PROFILING_ENV}=1 to enable)")
        return False

    logger.info("Operation profiling ENABLED")
    original_call_tool = mcp.call_tool

    async def profiled_call_tool(name: str, arguments: dict[str, Any]) -> Sequence[Any] | dict[str, Any]:
        remote_times: list[float] = []
        token = _remote_time_accumulator.set(remote_times)
        start = time.perf_counter()
        try:
            return await original_call_tool(name, arguments)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            remote_ms = sum(remote_times)
            _metrics[name].record(elapsed_ms, remote_ms)
            logger.info(f"[PERF] {name}: {elapsed_ms:.0f}ms total (remote={remote_ms:.0f}ms)")
            _remote_time_accumulator.reset(token)

    mcp.call_tool = profiled_call_tool  # type: ignore[method-assign]

    @mcp.tool()
    async def get_performance_metrics(operation: str = "", reset: bool = False) -> str:
        """
        [DEV] Timing metrics per tool. Only available when profiling is enabled.

        Args:
            operation: Restrict to one tool name (empty = all)
            reset: Clear metrics after reporting
        """
        if operation:
            stats = _metrics.get(operation)
            if not stats:
                return f"No metrics for '{operation}'"
            return json.dumps({operation: stats.summary_dict()}, indent=2)

        report = format_metrics_report()
        if reset:
            count = sum(s.count for s in _metrics.values())
            reset_metrics()
            report += f"\n\nMetrics reset ({count} records cleared)"
        return report

    return True


def install_remote_profiling(enabled: bool | None = None) -> bool:
    """Instrument BaseAPIClient._make_request so collaborator time is attributed."""
    if not (profiling_enabled() if enabled is None else enabled):
        return False

    from transcript_search.infrastructure.sources.base_client import BaseAPIClient

    original_make_request = BaseAPIClient._make_request  # noqa: SLF001

    async def profiled_make_request(self: Any, url: str = "", **kwargs: Any) -> Any:
        start = time.perf_counter()
        try:
            return await original_make_request(self, url, **kwargs)
        finally:
            record_remote_time((time.perf_counter() - start) * 1000)

    BaseAPIClient._make_request = profiled_make_request  # type: ignore[method-assign]  # noqa: SLF001
    logger.info("Remote profiling installed on BaseAPIClient")
    return True
