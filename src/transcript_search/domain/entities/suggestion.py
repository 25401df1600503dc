"""
Domain Entities: Search Suggestions

A Suggestion is a candidate completion offered for a partially typed query.
Identity is the (text, category) pair; display ranking deduplicates on
case-insensitive text alone.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .common import clamp_score


class SuggestionCategory(str, Enum):
    """Display grouping for suggestions."""

    SPEAKER = "speaker"
    TOPIC = "topic"
    HISTORICAL = "historical"
    TRENDING = "trending"
    SEMANTIC = "semantic"
    DATE = "date"
    SOURCE = "source"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    SuggestionCategory.SPEAKER: "Speaker",
    SuggestionCategory.TOPIC: "Topic",
    SuggestionCategory.HISTORICAL: "Recent",
    SuggestionCategory.TRENDING: "Trending",
    SuggestionCategory.SEMANTIC: "Related",
    SuggestionCategory.DATE: "Date",
    SuggestionCategory.SOURCE: "Source",
}


class SuggestionSignal(str, Enum):
    """The suggestion source a candidate came from."""

    HISTORICAL = "historical"
    TRENDING = "trending"
    SEMANTIC = "semantic"
    PERSONALIZED = "personalized"

    @property
    def priority(self) -> int:
        """Ranking priority; personalized suggestions always rank first."""
        return _SIGNAL_PRIORITY[self]


_SIGNAL_PRIORITY = {
    SuggestionSignal.PERSONALIZED: 4,
    SuggestionSignal.TRENDING: 3,
    SuggestionSignal.SEMANTIC: 2,
    SuggestionSignal.HISTORICAL: 1,
}


@dataclass(frozen=True)
class SuggestionMetadata:
    """Extra presentation data attached to a suggestion."""

    estimated_results: int | None = None
    last_used: datetime | None = None
    popularity_score: float | None = None
    semantic_similarity: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "estimated_results": self.estimated_results,
            "last_used": self.last_used.isoformat() if self.last_used else None,
            "popularity_score": self.popularity_score,
            "semantic_similarity": self.semantic_similarity,
        }


@dataclass(eq=False)
class Suggestion:
    """A ranked completion candidate."""

    text: str
    category: SuggestionCategory
    confidence: float
    signal: SuggestionSignal
    preview_count: int | None = None
    context: str = ""
    metadata: SuggestionMetadata | None = None

    def __post_init__(self) -> None:
        self.confidence = clamp_score(self.confidence)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Suggestion):
            return NotImplemented
        return self.text == other.text and self.category == other.category

    def __hash__(self) -> int:
        return hash((self.text, self.category))

    @property
    def dedup_key(self) -> str:
        return self.text.lower()

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "category": self.category.value,
            "confidence": round(self.confidence, 4),
            "signal": self.signal.value,
            "preview_count": self.preview_count,
            "context": self.context,
            "metadata": self.metadata.to_dict() if self.metadata else None,
        }


@dataclass
class SuggestionContext:
    """Per-session context passed to every suggestion source."""

    interests: list[str] = field(default_factory=list)
    recent_queries: list[str] = field(default_factory=list)
    session_id: str | None = None


@dataclass
class SuggestionBatch:
    """
    Suggestions produced for one keystroke.

    `stale` is set when a newer request for the same input field superseded
    this one; stale batches always carry an empty suggestion list.
    """

    partial: str
    suggestions: list[Suggestion] = field(default_factory=list)
    generation: int = 0
    stale: bool = False
    timed_out_sources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "partial": self.partial,
            "suggestions": [s.to_dict() for s in self.suggestions],
            "generation": self.generation,
            "stale": self.stale,
            "timed_out_sources": list(self.timed_out_sources),
        }
