"""
Suggestion sources.

Four independent signal generators share one async interface::

    async def suggest(partial: str, context: SuggestionContext) -> list[Suggestion]

A source never raises: collaborator failures are logged and the source
contributes nothing (or its static fallback, for trending topics).
"""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Sequence

from transcript_search.application.search.lexicon import DEFAULT_SEMANTIC_CANDIDATES, DEFAULT_TRENDING
from transcript_search.application.session.history_store import QueryHistoryStore
from transcript_search.domain.entities import (
    Suggestion,
    SuggestionCategory,
    SuggestionContext,
    SuggestionMetadata,
    SuggestionSignal,
)
from transcript_search.domain.ports import EmbeddingProvider, TrendingProvider

logger = logging.getLogger(__name__)


def matches_bidirectionally(candidate: str, partial: str) -> bool:
    """True when either string contains the other, ignoring case."""
    a, b = candidate.lower(), partial.lower()
    return a in b or b in a


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    if len(a) != len(b) or not a:
        return 0.0
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (norm_a * norm_b)


class SuggestionSource(ABC):
    """Base class for suggestion sources."""

    name: str = "source"
    signal: SuggestionSignal

    async def suggest(self, partial: str, context: SuggestionContext) -> list[Suggestion]:
        """Candidates for *partial*; empty on any failure."""
        try:
            return await self._suggest(partial, context)
        except Exception as e:
            logger.warning(f"{self.name} suggestions unavailable for {partial!r}: {e}")
            return []

    @abstractmethod
    async def _suggest(self, partial: str, context: SuggestionContext) -> list[Suggestion]: ...


class HistoricalSuggestionSource(SuggestionSource):
    """Past searches matching the partial query, most frequent first (top 3)."""

    name = "historical"
    signal = SuggestionSignal.HISTORICAL

    def __init__(self, history: QueryHistoryStore, limit: int = 3) -> None:
        self._history = history
        self._limit = limit

    async def _suggest(self, partial: str, context: SuggestionContext) -> list[Suggestion]:
        return [
            Suggestion(
                text=record.query,
                category=SuggestionCategory.HISTORICAL,
                confidence=min(record.frequency / 10, 1.0),
                signal=self.signal,
                preview_count=record.last_result_count,
                context="From your search history",
                metadata=SuggestionMetadata(
                    estimated_results=record.last_result_count,
                    last_used=record.last_seen,
                    popularity_score=float(record.frequency),
                ),
            )
            for record in self._history.search(partial)[: self._limit]
        ]


class TrendingSuggestionSource(SuggestionSource):
    """
    Trending topics matching the partial query, fixed confidence 0.8.

    Topics come from the trending collaborator when one is configured;
    if it fails or returns nothing, the static list is used instead.
    """

    name = "trending"
    signal = SuggestionSignal.TRENDING
    CONFIDENCE = 0.8

    def __init__(
        self,
        provider: TrendingProvider | None = None,
        fallback_topics: Sequence[str] = DEFAULT_TRENDING,
    ) -> None:
        self._provider = provider
        self._fallback = list(fallback_topics)

    async def topics(self) -> list[str]:
        if self._provider is None:
            return self._fallback
        try:
            fetched = await self._provider.fetch_trending()
        except Exception as e:
            logger.warning(f"Trending provider failed, using static topics: {e}")
            return self._fallback
        return fetched or self._fallback

    async def _suggest(self, partial: str, context: SuggestionContext) -> list[Suggestion]:
        return [
            Suggestion(
                text=topic,
                category=SuggestionCategory.TRENDING,
                confidence=self.CONFIDENCE,
                signal=self.signal,
                context="Currently trending",
            )
            for topic in await self.topics()
            if matches_bidirectionally(topic, partial)
        ]


class SemanticSuggestionSource(SuggestionSource):
    """
    Domain queries whose embedding is close to the partial query.

    Confidence is the cosine similarity; only candidates above the threshold
    (default 0.7) are returned, most similar first. Without an embedding
    provider this source returns nothing.
    """

    name = "semantic"
    signal = SuggestionSignal.SEMANTIC

    def __init__(
        self,
        embeddings: EmbeddingProvider | None = None,
        candidates: Sequence[str] = DEFAULT_SEMANTIC_CANDIDATES,
        threshold: float = 0.7,
    ) -> None:
        self._embeddings = embeddings
        self._candidates = list(candidates)
        self._threshold = threshold
        self._candidate_vectors: list[list[float]] | None = None

    async def _vectors_for_candidates(self, embeddings: EmbeddingProvider) -> list[list[float]]:
        if self._candidate_vectors is None:
            vectors = await embeddings.embed(self._candidates)
            if len(vectors) != len(self._candidates):
                logger.warning("Embedding provider returned a mismatched number of vectors")
                return []
            self._candidate_vectors = vectors
        return self._candidate_vectors

    async def _suggest(self, partial: str, context: SuggestionContext) -> list[Suggestion]:
        if self._embeddings is None or not self._candidates:
            return []
        candidate_vectors = await self._vectors_for_candidates(self._embeddings)
        if not candidate_vectors:
            return []
        query_vectors = await self._embeddings.embed([partial])
        if not query_vectors:
            return []
        query_vector = query_vectors[0]

        scored = [
            (text, cosine_similarity(query_vector, vector))
            for text, vector in zip(self._candidates, candidate_vectors)
        ]
        matches = sorted(((t, s) for t, s in scored if s > self._threshold), key=lambda m: m[1], reverse=True)
        return [
            Suggestion(
                text=text,
                category=SuggestionCategory.SEMANTIC,
                confidence=similarity,
                signal=self.signal,
                context="Based on semantic similarity",
                metadata=SuggestionMetadata(semantic_similarity=similarity),
            )
            for text, similarity in matches
        ]


class PersonalizedSuggestionSource(SuggestionSource):
    """Caller interests matching the partial query, fixed confidence 0.9."""

    name = "personalized"
    signal = SuggestionSignal.PERSONALIZED
    CONFIDENCE = 0.9

    async def _suggest(self, partial: str, context: SuggestionContext) -> list[Suggestion]:
        return [
            Suggestion(
                text=interest,
                category=SuggestionCategory.TOPIC,
                confidence=self.CONFIDENCE,
                signal=self.signal,
                context="Based on your interests",
            )
            for interest in context.interests
            if interest.strip() and matches_bidirectionally(interest, partial)
        ]
