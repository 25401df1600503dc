"""
Domain Entities: Transcript Results and Backend Paging

These mirror what the backend search API returns. Every field except `id`
may be missing; malformed items are skipped by the analyzers, never rejected.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from transcript_search.core.exceptions import InvalidParameterError

from .common import parse_timestamp


@dataclass
class TranscriptResult:
    """A single search hit: one transcript segment of a political video."""

    id: str
    title: str = ""
    date: datetime | None = None
    speaker: str | None = None
    category: str | None = None
    content: str | None = None
    source: str | None = None
    relevance_score: float | None = None

    def __post_init__(self) -> None:
        # Naive dates are taken as UTC so mixed inputs stay comparable
        self.date = parse_timestamp(self.date)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TranscriptResult:
        """Build from a backend JSON item, tolerating missing or bad fields."""
        score = data.get("relevance_score", data.get("score"))
        try:
            score = float(score) if score is not None else None
        except (TypeError, ValueError):
            score = None
        return cls(
            id=str(data.get("id", "")),
            title=data.get("title") or "",
            date=parse_timestamp(data.get("date")),
            speaker=data.get("speaker") or None,
            category=data.get("category") or None,
            content=data.get("content") or data.get("transcript") or None,
            source=data.get("source") or None,
            relevance_score=score,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date.isoformat() if self.date else None,
            "speaker": self.speaker,
            "category": self.category,
            "content": self.content,
            "source": self.source,
            "relevance_score": self.relevance_score,
        }


class SortOption(str, Enum):
    RELEVANCE = "relevance"
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    DURATION = "duration"


@dataclass
class SearchFilters:
    """Optional backend filters. Empty lists mean "no constraint"."""

    speakers: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    date_from: datetime | None = None
    date_to: datetime | None = None
    min_duration: int | None = None  # seconds
    max_duration: int | None = None
    sort: SortOption = SortOption.RELEVANCE

    def to_params(self) -> dict[str, Any]:
        """Query parameters for the backend API, omitting unset filters."""
        params: dict[str, Any] = {"sort": self.sort.value}
        for name in ("speakers", "sources", "categories", "tags"):
            values = getattr(self, name)
            if values:
                params[name] = ",".join(values)
        if self.date_from:
            params["date_from"] = self.date_from.date().isoformat()
        if self.date_to:
            params["date_to"] = self.date_to.date().isoformat()
        if self.min_duration is not None:
            params["min_duration"] = self.min_duration
        if self.max_duration is not None:
            params["max_duration"] = self.max_duration
        return params


@dataclass
class PageRequest:
    page: int = 1
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.page < 1:
            raise InvalidParameterError("page", self.page, "an integer >= 1")
        if self.page_size < 1:
            raise InvalidParameterError("page_size", self.page_size, "an integer >= 1")

    def to_params(self) -> dict[str, Any]:
        return {"page": self.page, "page_size": self.page_size}


@dataclass
class ResultPage:
    """One page of backend results."""

    items: list[TranscriptResult] = field(default_factory=list)
    total_count: int = 0
    has_more: bool = False
    suggestions: list[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> ResultPage:
        return cls()

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "total_count": self.total_count,
            "has_more": self.has_more,
            "suggestions": list(self.suggestions),
        }
