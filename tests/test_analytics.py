"""Tests for the fire-and-forget analytics emitter."""

from __future__ import annotations

import asyncio
import logging

from transcript_search.infrastructure.analytics import AnalyticsEmitter, LoggingAnalyticsSink


class FailingSink:
    def __init__(self):
        self.attempts = 0

    async def emit(self, name, params):
        self.attempts += 1
        raise ConnectionError("collector down")


class BlockingSink:
    def __init__(self):
        self.release = asyncio.Event()
        self.events = []

    async def emit(self, name, params):
        await self.release.wait()
        self.events.append(name)


class TestAnalyticsEmitter:
    async def test_events_are_delivered_with_timestamp(self, recording_sink):
        emitter = AnalyticsEmitter(recording_sink)
        emitter.emit("query_enhanced", {"techniques": ["normalization"]})
        emitter.emit("query_recorded")
        await emitter.flush()

        assert recording_sink.names() == ["query_enhanced", "query_recorded"]
        assert recording_sink.events[0][1]["techniques"] == ["normalization"]
        assert "timestamp" in recording_sink.events[1][1]
        assert emitter.delivered == 2

    async def test_emit_copies_params(self, recording_sink):
        emitter = AnalyticsEmitter(recording_sink)
        params = {"count": 1}
        emitter.emit("x", params)
        params["count"] = 2
        await emitter.flush()
        assert recording_sink.events[0][1]["count"] == 1

    async def test_sink_failure_is_swallowed(self):
        sink = FailingSink()
        emitter = AnalyticsEmitter(sink)
        emitter.emit("a")
        emitter.emit("b")
        await emitter.flush()
        assert sink.attempts == 2
        assert emitter.delivered == 0

    async def test_full_queue_drops_without_blocking(self):
        sink = BlockingSink()
        emitter = AnalyticsEmitter(sink, max_queue=2)
        for i in range(5):
            emitter.emit(f"event-{i}")
        assert emitter.dropped == 3

        sink.release.set()
        await emitter.flush()
        assert sink.events == ["event-0", "event-1"]

    async def test_aclose_drains_and_stops(self, recording_sink):
        emitter = AnalyticsEmitter(recording_sink)
        emitter.emit("last")
        await emitter.aclose()
        assert recording_sink.names() == ["last"]

    async def test_flush_with_nothing_queued(self, recording_sink):
        await AnalyticsEmitter(recording_sink).flush()
        assert recording_sink.events == []

    def test_emit_outside_event_loop_queues(self, recording_sink):
        emitter = AnalyticsEmitter(recording_sink)
        emitter.emit("early")
        assert emitter.dropped == 0

        asyncio.run(emitter.flush())

        assert recording_sink.names() == ["early"]


async def test_logging_sink(caplog):
    with caplog.at_level(logging.INFO):
        await LoggingAnalyticsSink().emit("query_recorded", {"query_length": 7})
    assert "query_recorded" in caplog.text
