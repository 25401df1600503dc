"""
ResultContextAnalyzer - derives insights from an already-fetched result set.

Each insight is independently optional:

    TEMPORAL         >= 1 dated result
    SPEAKER          >= 1 result with a speaker
    TOPIC            >= 1 result with a category
    SENTIMENT        >= 1 result with content (first 10 sampled)
    CROSS_REFERENCE  >= 2 distinct sources

Items missing a field are simply left out of that insight. Output is cached
per exact query string for 30 minutes; a hit returns the stored list without
recomputation.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any

from transcript_search.core.exceptions import MalformedResultError
from transcript_search.domain.entities import ContextualInsight, InsightType, TranscriptResult
from transcript_search.domain.ports import SentimentAnalyzer
from transcript_search.infrastructure.cache import BoundedTTLCache

logger = logging.getLogger(__name__)

DAY_SECONDS = 86400
WEEK_SECONDS = 604800
MONTH_SECONDS = 2592000
SENTIMENT_SAMPLE_SIZE = 10
DEFAULT_MAX_INSIGHTS = 5


def _format_date(value: datetime) -> str:
    return f"{value:%b} {value.day}, {value.year}"


def _span_description(seconds: float) -> str:
    if seconds < DAY_SECONDS:
        return "single day"
    if seconds < WEEK_SECONDS:
        return "single week"
    if seconds < MONTH_SECONDS:
        return "single month"
    return "extended period"


def _ranked(values: Iterable[str]) -> list[tuple[str, int]]:
    # Counter.most_common keeps first-seen order for equal counts
    return Counter(values).most_common()


class ResultContextAnalyzer:
    """
    Usage:
        analyzer = ResultContextAnalyzer(sentiment=LexiconSentimentAnalyzer())
        insights = analyzer.analyze("healthcare", results)
        analyzer.analysis_count  # recomputations so far
    """

    def __init__(
        self,
        sentiment: SentimentAnalyzer | None = None,
        cache: BoundedTTLCache[list[ContextualInsight]] | None = None,
        max_insights: int = DEFAULT_MAX_INSIGHTS,
    ) -> None:
        self._sentiment = sentiment
        self._cache = cache if cache is not None else BoundedTTLCache(200, 30 * 60, name="insights")
        self._max_insights = max_insights
        self._analysis_count = 0

    @property
    def analysis_count(self) -> int:
        """Number of times insights were actually computed (cache misses)."""
        return self._analysis_count

    def analyze(
        self,
        query: str,
        results: Sequence[TranscriptResult | dict[str, Any]],
    ) -> list[ContextualInsight]:
        cached = self._cache.get(query)
        if cached is not None:
            return list(cached)

        insights = self._compute(self._coerce(results))
        self._analysis_count += 1
        self._cache.set(query, insights)
        return list(insights)

    @staticmethod
    def _coerce(results: Sequence[TranscriptResult | dict[str, Any]]) -> list[TranscriptResult]:
        items: list[TranscriptResult] = []
        for index, raw in enumerate(results):
            try:
                if isinstance(raw, TranscriptResult):
                    items.append(raw)
                elif isinstance(raw, dict):
                    items.append(TranscriptResult.from_dict(raw))
                else:
                    raise MalformedResultError(f"unsupported item type {type(raw).__name__}")
            except (MalformedResultError, TypeError, ValueError, AttributeError) as e:
                logger.warning(f"Skipping result #{index}: {e}")
        return items

    def _compute(self, results: list[TranscriptResult]) -> list[ContextualInsight]:
        builders = (
            self.temporal_insight,
            self.speaker_insight,
            self.topic_insight,
            self.sentiment_insight,
            self.cross_reference_insight,
        )
        insights: list[ContextualInsight] = []
        for build in builders:
            insight = build(results)
            if insight is not None:
                insights.append(insight)
        return insights[: self._max_insights]

    # =========================================================================
    # Individual insights
    # =========================================================================

    @staticmethod
    def temporal_insight(results: list[TranscriptResult]) -> ContextualInsight | None:
        dates = sorted(r.date for r in results if r.date is not None)
        if not dates:
            return None
        earliest, latest = dates[0], dates[-1]
        span = (latest - earliest).total_seconds()
        return ContextualInsight(
            type=InsightType.TEMPORAL,
            title="Timeline Analysis",
            description=(
                f"Results span a {_span_description(span)} from "
                f"{_format_date(earliest)} to {_format_date(latest)}"
            ),
            confidence=0.9,
        )

    @staticmethod
    def speaker_insight(results: list[TranscriptResult]) -> ContextualInsight | None:
        speakers = [r.speaker for r in results if r.speaker]
        if not speakers:
            return None
        top, count = _ranked(speakers)[0]
        total = len(results)
        return ContextualInsight(
            type=InsightType.SPEAKER,
            title="Speaker Analysis",
            description=f"{top} appears in {count * 100 // total}% of results ({count} out of {total})",
            confidence=0.8,
            actionable=True,
        )

    @staticmethod
    def topic_insight(results: list[TranscriptResult]) -> ContextualInsight | None:
        categories = [r.category for r in results if r.category]
        if not categories:
            return None
        ranked = _ranked(categories)
        related = ", ".join(name for name, _ in ranked[:3])
        return ContextualInsight(
            type=InsightType.TOPIC,
            title="Topic Distribution",
            description=f"Primary focus on {ranked[0][0]}. Related topics: {related}",
            confidence=0.85,
            actionable=True,
        )

    def sentiment_insight(self, results: list[TranscriptResult]) -> ContextualInsight | None:
        if self._sentiment is None:
            return None
        contents = [r.content for r in results if r.content]
        if not contents:
            return None

        labels: list[str] = []
        for content in contents[:SENTIMENT_SAMPLE_SIZE]:
            try:
                labels.append(self._sentiment.classify(content))
            except Exception as e:
                logger.warning(f"Sentiment analyzer failed, skipping sentiment insight: {e}")
                return None

        label, count = _ranked(labels)[0]
        return ContextualInsight(
            type=InsightType.SENTIMENT,
            title="Sentiment Analysis",
            description=f"Overall tone is {label} ({count * 100 // len(labels)}% of analyzed content)",
            confidence=0.7,
        )

    @staticmethod
    def cross_reference_insight(results: list[TranscriptResult]) -> ContextualInsight | None:
        sources = {r.source for r in results if r.source}
        if len(sources) < 2:
            return None
        return ContextualInsight(
            type=InsightType.CROSS_REFERENCE,
            title="Source Diversity",
            description=f"Information from {len(sources)} different sources, providing multiple perspectives",
            confidence=0.8,
            actionable=True,
        )

    @property
    def cache(self) -> BoundedTTLCache[list[ContextualInsight]]:
        return self._cache
