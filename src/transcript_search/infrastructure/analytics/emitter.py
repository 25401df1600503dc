"""
Analytics Emitter - fire-and-forget event delivery.

Callers hand events to ``emit()``, which only enqueues and returns. A
background task drains the bounded queue into the configured AnalyticsSink.
When the queue is full the event is dropped and counted; the caller is
never blocked and never sees a delivery error.

Event names emitted by this package:
- suggestions_generated
- query_enhanced
- context_analyzed
- query_recorded
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from typing import Any

from transcript_search.domain.entities.common import utcnow
from transcript_search.domain.ports import AnalyticsSink

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 256


@dataclass(frozen=True)
class AnalyticsEvent:
    name: str
    params: dict[str, Any] = field(default_factory=dict)
    timestamp: str = field(default_factory=lambda: utcnow().isoformat())


class LoggingAnalyticsSink:
    """Sink that writes events to the log. Default when no sink is configured."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    async def emit(self, name: str, params: dict[str, Any]) -> None:
        logger.log(self._level, f"[analytics] {name} {params}")


class AnalyticsEmitter:
    """
    Bounded, non-blocking analytics queue.

    Example:
        emitter = AnalyticsEmitter(LoggingAnalyticsSink())
        emitter.emit("query_enhanced", {"techniques": 2})
        ...
        await emitter.aclose()  # drains remaining events
    """

    def __init__(self, sink: AnalyticsSink | None = None, max_queue: int = DEFAULT_QUEUE_SIZE) -> None:
        self._sink: AnalyticsSink = sink or LoggingAnalyticsSink()
        self._queue: asyncio.Queue[AnalyticsEvent] = asyncio.Queue(maxsize=max_queue)
        self._drain_task: asyncio.Task[None] | None = None
        self._dropped = 0
        self._delivered = 0

    @property
    def dropped(self) -> int:
        return self._dropped

    @property
    def delivered(self) -> int:
        return self._delivered

    def emit(self, name: str, params: dict[str, Any] | None = None) -> None:
        """Enqueue an event. Never blocks and never raises."""
        event = AnalyticsEvent(name=name, params=dict(params or {}))
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._dropped += 1
            logger.debug(f"Analytics queue full, dropped {name}")
            return
        self._ensure_drain_task()

    def _ensure_drain_task(self) -> None:
        if self._drain_task is not None and not self._drain_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet: events wait in the queue until the next emit/flush inside one
            return
        self._drain_task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._sink.emit(event.name, {**event.params, "timestamp": event.timestamp})
                self._delivered += 1
            except Exception as e:
                logger.warning(f"Analytics sink failed for {event.name}: {e}")
            finally:
                self._queue.task_done()

    async def flush(self) -> None:
        """Wait until every queued event has been handed to the sink."""
        if self._queue.empty():
            return
        self._ensure_drain_task()
        await self._queue.join()

    async def aclose(self) -> None:
        await self.flush()
        if self._drain_task is not None:
            self._drain_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._drain_task
            self._drain_task = None
