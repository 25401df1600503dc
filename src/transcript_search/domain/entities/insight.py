"""
Domain Entities: Contextual Insights and Trends

Insights are observations about a result set (not suggestions).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .common import clamp_score


class InsightType(str, Enum):
    TEMPORAL = "temporal"
    SPEAKER = "speaker"
    TOPIC = "topic"
    SENTIMENT = "sentiment"
    CROSS_REFERENCE = "cross_reference"


@dataclass(frozen=True)
class ContextualInsight:
    """A derived observation about search results."""

    type: InsightType
    title: str
    description: str
    confidence: float
    actionable: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "confidence", clamp_score(self.confidence))

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
            "actionable": self.actionable,
        }


class TrendDirection(str, Enum):
    RISING = "rising"
    STABLE = "stable"


@dataclass(frozen=True)
class SearchTrend:
    """A query that has been searched repeatedly within a time window."""

    query: str
    frequency: int
    direction: TrendDirection
    timeframe: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "frequency": self.frequency,
            "direction": self.direction.value,
            "timeframe": self.timeframe,
        }
