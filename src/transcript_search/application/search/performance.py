"""
Query performance tracking.

Records response time and a term-overlap relevance estimate for each
submitted search, keeps 30 days of history, and summarises it as
performance insights.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from transcript_search.domain.entities import TranscriptResult
from transcript_search.domain.entities.common import utcnow

logger = logging.getLogger(__name__)

SLOW_QUERY_SECONDS = 2.0
LOW_RELEVANCE = 0.5
RETENTION = timedelta(days=30)


class PerformanceInsightType(str, Enum):
    PERFORMANCE = "performance"
    OPTIMIZATION = "optimization"
    RELEVANCE = "relevance"
    PATTERNS = "patterns"


@dataclass(frozen=True)
class QueryMetrics:
    query: str
    results_count: int
    response_time: float  # seconds
    relevance_score: float
    timestamp: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class PerformanceInsight:
    type: PerformanceInsightType
    title: str
    description: str
    actionable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "actionable": self.actionable,
        }


def relevance_score(query: str, results: Sequence[TranscriptResult]) -> float:
    """Mean fraction of query terms found in each result's text fields."""
    terms = set(query.lower().split())
    if not results or not terms:
        return 0.0
    total = 0.0
    for result in results:
        text = " ".join(
            part for part in (result.title, result.content, result.speaker, result.category) if part
        ).lower()
        total += len(terms & set(text.split())) / len(terms)
    return total / len(results)


class QueryPerformanceTracker:
    """
    Usage:
        tracker = QueryPerformanceTracker()
        tracker.record("healthcare policy", results, response_time=0.42)
        for insight in tracker.insights():
            print(insight.title, insight.description)
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._clock = clock
        self._metrics: list[QueryMetrics] = []

    @property
    def metrics(self) -> list[QueryMetrics]:
        return list(self._metrics)

    def record(
        self,
        query: str,
        results: Sequence[TranscriptResult],
        response_time: float,
    ) -> QueryMetrics:
        now = self._clock()
        metrics = QueryMetrics(
            query=query,
            results_count=len(results),
            response_time=response_time,
            relevance_score=relevance_score(query, results),
            timestamp=now,
        )
        self._metrics.append(metrics)
        self._metrics = [m for m in self._metrics if now - m.timestamp < RETENTION]
        return metrics

    def insights(self) -> list[PerformanceInsight]:
        if not self._metrics:
            return []

        count = len(self._metrics)
        avg_time = sum(m.response_time for m in self._metrics) / count
        avg_relevance = sum(m.relevance_score for m in self._metrics) / count
        insights = [
            PerformanceInsight(
                type=PerformanceInsightType.PERFORMANCE,
                title="Average Performance",
                description=f"Average response time: {avg_time:.2f}s, Relevance: {avg_relevance * 100:.1f}%",
            )
        ]

        slow = sum(1 for m in self._metrics if m.response_time > SLOW_QUERY_SECONDS)
        if slow:
            insights.append(
                PerformanceInsight(
                    type=PerformanceInsightType.OPTIMIZATION,
                    title="Slow Queries Detected",
                    description=f"{slow} queries took longer than 2 seconds to process",
                    actionable=True,
                )
            )

        low = sum(1 for m in self._metrics if m.relevance_score < LOW_RELEVANCE)
        if low:
            insights.append(
                PerformanceInsight(
                    type=PerformanceInsightType.RELEVANCE,
                    title="Low Relevance Results",
                    description=f"{low} queries returned low-relevance results",
                    actionable=True,
                )
            )

        patterns = self.popular_terms()
        if patterns:
            insights.append(
                PerformanceInsight(
                    type=PerformanceInsightType.PATTERNS,
                    title="Popular Query Patterns",
                    description=f"Most common: {', '.join(patterns[:3])}",
                )
            )
        return insights

    def popular_terms(self, limit: int = 5) -> list[str]:
        words = Counter(word.lower() for m in self._metrics for word in m.query.split())
        return [word for word, _ in words.most_common(limit)]
