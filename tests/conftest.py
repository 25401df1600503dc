"""
Pytest configuration and shared fixtures.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from transcript_search.domain.entities import TranscriptResult
from transcript_search.infrastructure.persistence import InMemoryKeyValueStore

# ============================================================
# Time Fixtures
# ============================================================


class FakeClock:
    """Mutable wall clock; call it to read, advance() to move forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


class FakeTimer:
    """Monotonic timer in seconds for cachetools."""

    def __init__(self) -> None:
        self.value = 0.0

    def __call__(self) -> float:
        return self.value

    def advance(self, seconds: float) -> None:
        self.value += seconds


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 6, 12, 15, 30, tzinfo=timezone.utc))


@pytest.fixture
def timer():
    return FakeTimer()


# ============================================================
# Collaborator Fixtures
# ============================================================


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


class RecordingSink:
    """AnalyticsSink that keeps every delivered event."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    async def emit(self, name: str, params: dict) -> None:
        self.events.append((name, params))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def recording_sink():
    return RecordingSink()


# ============================================================
# Result Fixtures
# ============================================================


@pytest.fixture
def johnson_results():
    """12 results over two days; Senator Johnson speaks in 9 of them."""
    start = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
    results = []
    for i in range(12):
        results.append(
            TranscriptResult(
                id=f"r{i}",
                title=f"Hearing segment {i}",
                date=start + timedelta(hours=4 * i + (4 if i == 11 else 0)),
                speaker="Senator Johnson" if i < 9 else "Senator Warren",
                category="healthcare" if i % 3 else "economy",
                content="We made great progress on this bill" if i < 7 else "This is a crisis",
                source="C-SPAN" if i % 2 else "PBS NewsHour",
            )
        )
    return results


@pytest.fixture
def backend_payload():
    """Search response as served by the transcript backend."""
    return {
        "results": [
            {
                "id": "hit-1",
                "video": {
                    "id": "vid-1",
                    "title": "Senate Floor Debate on Healthcare",
                    "publishedDate": "2024-03-01T14:00:00Z",
                    "speaker": {"name": "Senator Johnson"},
                    "category": "healthcare",
                    "source": "C-SPAN",
                },
                "relevanceScore": 0.92,
                "highlightedText": "the healthcare bill will protect families",
            },
            {
                "id": "vid-2",
                "title": "Press Briefing",
                "date": "2024-03-02T10:00:00",
                "speaker": "Press Secretary",
                "content": "We oppose the amendment",
                "source": "White House",
            },
            {"title": "no id and no video"},
            "not an object",
        ],
        "totalResults": 57,
        "hasMoreResults": True,
        "suggestions": ["healthcare reform", 42],
    }
