"""Tests for the four suggestion sources."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from transcript_search.application.session.history_store import QueryHistoryStore
from transcript_search.application.suggestions.sources import (
    HistoricalSuggestionSource,
    PersonalizedSuggestionSource,
    SemanticSuggestionSource,
    TrendingSuggestionSource,
    cosine_similarity,
    matches_bidirectionally,
)
from transcript_search.domain.entities import SuggestionCategory, SuggestionContext, SuggestionSignal


class FakeEmbeddings:
    """Looks vectors up in a table; counts embed() calls."""

    def __init__(self, table):
        self.table = table
        self.calls = 0

    async def embed(self, texts):
        self.calls += 1
        return [self.table[t] for t in texts]


@pytest.fixture
def context():
    return SuggestionContext()


def test_matches_bidirectionally():
    assert matches_bidirectionally("climate policy", "CLIM")
    assert matches_bidirectionally("tax", "tax reform bill")
    assert not matches_bidirectionally("tax", "climate")


def test_cosine_similarity():
    assert cosine_similarity([1.0, 0.0], [1.0, 0.0]) == pytest.approx(1.0)
    assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 0.0]) == 0.0
    assert cosine_similarity([1.0], [1.0, 0.0]) == 0.0


class TestTrendingSource:
    async def test_static_topics(self, context):
        suggestions = await TrendingSuggestionSource().suggest("clim", context)
        assert [(s.text, s.confidence) for s in suggestions] == [("climate policy", 0.8)]
        assert suggestions[0].category is SuggestionCategory.TRENDING
        assert suggestions[0].signal is SuggestionSignal.TRENDING

    async def test_provider_topics_replace_static_list(self, context):
        provider = AsyncMock()
        provider.fetch_trending.return_value = ["climate summit"]
        suggestions = await TrendingSuggestionSource(provider).suggest("clim", context)
        assert [s.text for s in suggestions] == ["climate summit"]

    @pytest.mark.parametrize("outcome", [[], RuntimeError("feed down")])
    async def test_provider_failure_falls_back_to_static(self, context, outcome):
        provider = AsyncMock()
        if isinstance(outcome, Exception):
            provider.fetch_trending.side_effect = outcome
        else:
            provider.fetch_trending.return_value = outcome
        suggestions = await TrendingSuggestionSource(provider).suggest("clim", context)
        assert [s.text for s in suggestions] == ["climate policy"]


class TestHistoricalSource:
    async def test_frequency_drives_confidence(self, memory_store, clock, context):
        history = QueryHistoryStore(memory_store, clock=clock)
        for _ in range(3):
            await history.record("climate policy", 12)
        await history.record("climate summit")

        suggestions = await HistoricalSuggestionSource(history).suggest("clim", context)

        assert [(s.text, s.confidence) for s in suggestions] == [
            ("climate policy", pytest.approx(0.3)),
            ("climate summit", pytest.approx(0.1)),
        ]
        assert suggestions[0].preview_count == 12
        assert suggestions[0].metadata.last_used == clock.now

    async def test_top_three_only(self, memory_store, clock, context):
        history = QueryHistoryStore(memory_store, clock=clock)
        for query in ("tax a", "tax b", "tax c", "tax d"):
            await history.record(query)
        assert len(await HistoricalSuggestionSource(history).suggest("tax", context)) == 3

    async def test_confidence_is_capped(self, memory_store, clock, context):
        history = QueryHistoryStore(memory_store, clock=clock)
        for _ in range(15):
            await history.record("tax")
        (suggestion,) = await HistoricalSuggestionSource(history).suggest("tax", context)
        assert suggestion.confidence == 1.0

    async def test_queries_past_retention_are_not_offered(self, memory_store, clock, context):
        history = QueryHistoryStore(memory_store, clock=clock)
        await history.record("climate policy")
        clock.advance(days=31)
        assert await HistoricalSuggestionSource(history).suggest("clim", context) == []


class TestSemanticSource:
    @pytest.fixture
    def embeddings(self):
        return FakeEmbeddings(
            {
                "climate change legislation": [0.9, 0.1],
                "tax policy changes": [0.0, 1.0],
                "clim": [1.0, 0.0],
                "budget": [0.5, 0.5],
            }
        )

    async def test_similar_candidates_above_threshold(self, embeddings, context):
        source = SemanticSuggestionSource(embeddings, ["climate change legislation", "tax policy changes"])
        suggestions = await source.suggest("clim", context)
        assert [s.text for s in suggestions] == ["climate change legislation"]
        assert suggestions[0].confidence == pytest.approx(0.9 / (0.82**0.5))
        assert suggestions[0].metadata.semantic_similarity == suggestions[0].confidence

    async def test_candidate_vectors_are_computed_once(self, embeddings, context):
        source = SemanticSuggestionSource(embeddings, ["climate change legislation", "tax policy changes"])
        await source.suggest("clim", context)
        await source.suggest("budget", context)
        assert embeddings.calls == 3

    async def test_threshold_is_exclusive(self, context):
        embeddings = FakeEmbeddings({"a": [1.0, 0.0], "q": [1.0, 0.0]})
        source = SemanticSuggestionSource(embeddings, ["a"], threshold=1.0)
        assert await source.suggest("q", context) == []

    async def test_no_provider(self, context):
        assert await SemanticSuggestionSource().suggest("clim", context) == []

    async def test_provider_failure_contributes_nothing(self, context):
        embeddings = AsyncMock()
        embeddings.embed.side_effect = ConnectionError("unreachable")
        assert await SemanticSuggestionSource(embeddings).suggest("clim", context) == []

    async def test_mismatched_vector_count(self, context):
        embeddings = AsyncMock()
        embeddings.embed.return_value = [[1.0, 0.0]]
        source = SemanticSuggestionSource(embeddings, ["a", "b"])
        assert await source.suggest("clim", context) == []


class TestPersonalizedSource:
    async def test_matching_interests(self):
        context = SuggestionContext(interests=["Climate", "healthcare", "  "])
        suggestions = await PersonalizedSuggestionSource().suggest("clim", context)
        assert [(s.text, s.confidence) for s in suggestions] == [("Climate", 0.9)]
        assert suggestions[0].category is SuggestionCategory.TOPIC
        assert suggestions[0].signal is SuggestionSignal.PERSONALIZED

    async def test_no_interests(self, context):
        assert await PersonalizedSuggestionSource().suggest("clim", context) == []
