"""Tests for domain entities."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from transcript_search.core.exceptions import InvalidParameterError
from transcript_search.domain.entities import (
    ContextualInsight,
    EnhancedQuery,
    HistoricalSearchRecord,
    InsightType,
    PageRequest,
    ResultPage,
    SearchFilters,
    SortOption,
    Suggestion,
    SuggestionCategory,
    SuggestionSignal,
    TranscriptResult,
)
from transcript_search.domain.entities.common import clamp_score, parse_timestamp


class TestCommon:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(-0.5, 0.0), (0.25, 0.25), (1.7, 1.0), (float("nan"), 0.0)],
    )
    def test_clamp_score(self, value, expected):
        assert clamp_score(value) == expected

    def test_parse_timestamp(self):
        assert parse_timestamp("2024-03-01T14:00:00Z") == datetime(2024, 3, 1, 14, tzinfo=timezone.utc)
        assert parse_timestamp("2024-03-01") == datetime(2024, 3, 1, tzinfo=timezone.utc)
        assert parse_timestamp("last tuesday") is None
        assert parse_timestamp("") is None


class TestTranscriptResult:
    def test_from_dict_aliases(self):
        result = TranscriptResult.from_dict(
            {"id": 7, "score": "0.8", "transcript": "floor remarks", "speaker": ""}
        )
        assert result.id == "7"
        assert result.relevance_score == 0.8
        assert result.content == "floor remarks"
        assert result.speaker is None

    def test_bad_score_is_dropped(self):
        assert TranscriptResult.from_dict({"id": "1", "relevance_score": "high"}).relevance_score is None

    def test_naive_date_is_utc(self):
        result = TranscriptResult(id="1", date=datetime(2024, 3, 1, 9))
        assert result.date.tzinfo is timezone.utc

    def test_to_dict(self):
        result = TranscriptResult(id="1", title="Floor speech", date=datetime(2024, 3, 1, tzinfo=timezone.utc))
        data = result.to_dict()
        assert data["date"] == "2024-03-01T00:00:00+00:00"
        assert data["speaker"] is None


class TestSearchFilters:
    def test_defaults_only_sort(self):
        assert SearchFilters().to_params() == {"sort": "relevance"}

    def test_all_fields(self):
        filters = SearchFilters(
            speakers=["Biden", "Trump"],
            categories=["economy"],
            date_from=datetime(2024, 1, 1, 12, tzinfo=timezone.utc),
            date_to=datetime(2024, 6, 30, tzinfo=timezone.utc),
            min_duration=60,
            sort=SortOption.DATE_DESC,
        )
        assert filters.to_params() == {
            "sort": "date_desc",
            "speakers": "Biden,Trump",
            "categories": "economy",
            "date_from": "2024-01-01",
            "date_to": "2024-06-30",
            "min_duration": 60,
        }


class TestPaging:
    @pytest.mark.parametrize("kwargs", [{"page": 0}, {"page_size": 0}])
    def test_invalid_page_request(self, kwargs):
        with pytest.raises(InvalidParameterError):
            PageRequest(**kwargs)

    def test_empty_page(self):
        page = ResultPage.empty()
        assert page.to_dict() == {"items": [], "total_count": 0, "has_more": False, "suggestions": []}


class TestSuggestion:
    def test_identity_is_text_and_category(self):
        a = Suggestion("climate policy", SuggestionCategory.TRENDING, 0.8, SuggestionSignal.TRENDING)
        b = Suggestion("climate policy", SuggestionCategory.TRENDING, 0.3, SuggestionSignal.HISTORICAL)
        c = Suggestion("climate policy", SuggestionCategory.TOPIC, 0.8, SuggestionSignal.TRENDING)
        assert a == b
        assert a != c
        assert len({a, b, c}) == 2

    def test_confidence_is_clamped(self):
        assert Suggestion("x", SuggestionCategory.TOPIC, 3.0, SuggestionSignal.SEMANTIC).confidence == 1.0

    def test_signal_priority(self):
        ordered = sorted(SuggestionSignal, key=lambda s: s.priority, reverse=True)
        assert ordered == [
            SuggestionSignal.PERSONALIZED,
            SuggestionSignal.TRENDING,
            SuggestionSignal.SEMANTIC,
            SuggestionSignal.HISTORICAL,
        ]

    def test_display_name(self):
        assert SuggestionCategory.HISTORICAL.display_name == "Recent"


class TestHistoricalSearchRecord:
    def test_make_key(self):
        assert HistoricalSearchRecord.make_key("  Climate   POLICY ") == "climate policy"

    def test_touch(self):
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        record = HistoricalSearchRecord(key="tax", query="tax", last_seen=now)
        record.touch("Tax", 12, now + timedelta(hours=1))
        assert record.frequency == 2
        assert record.query == "Tax"
        assert record.last_result_count == 12

    def test_expiry(self):
        now = datetime(2024, 6, 30, tzinfo=timezone.utc)
        record = HistoricalSearchRecord(key="tax", query="tax", last_seen=now - timedelta(days=31))
        assert record.is_expired(timedelta(days=30), now)
        assert not record.is_expired(timedelta(days=60), now)

    def test_from_dict_repairs_fields(self):
        record = HistoricalSearchRecord.from_dict(
            {"query": "Tax Reform", "last_seen": "2024-06-01T00:00:00Z", "frequency": 0}
        )
        assert record.key == "tax reform"
        assert record.frequency == 1


class TestQueryEntities:
    def test_enhanced_fallback(self):
        enhanced = EnhancedQuery.fallback("economy", "boom")
        assert enhanced.enhanced_text == "economy"
        assert enhanced.explanation == "Optimization failed: boom"
        assert enhanced.techniques == []

    def test_insight_confidence_clamped(self):
        insight = ContextualInsight(InsightType.TOPIC, "t", "d", confidence=1.2)
        assert insight.confidence == 1.0
