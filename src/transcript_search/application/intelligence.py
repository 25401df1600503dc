"""
SearchIntelligence - caller-facing facade over the query-intelligence core.

Two paths:

    keystroke:  suggest(partial)            -> SuggestionService
    submit:     search(query)               -> enhance -> backend -> analyze -> record

Every operation degrades instead of raising: an unavailable backend yields an
empty page, a failing collaborator an empty contribution. Analytics events
(query_enhanced, context_analyzed, query_recorded; suggestions_generated is
emitted by SuggestionService) are fire-and-forget.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from transcript_search.application.search.lexicon import DEFAULT_COMPLETIONS
from transcript_search.domain.entities import (
    AnalyzedQuery,
    ContextualInsight,
    EnhancedQuery,
    HistoricalSearchRecord,
    PageRequest,
    QueryRefinement,
    ResultPage,
    SearchFilters,
    SearchTrend,
    SuggestionBatch,
    SuggestionContext,
    TranscriptResult,
)

if TYPE_CHECKING:
    from transcript_search.application.search.context_analyzer import ResultContextAnalyzer
    from transcript_search.application.search.entity_extractor import EntityAndIntentExtractor
    from transcript_search.application.search.normalizer import QueryNormalizer
    from transcript_search.application.search.performance import PerformanceInsight, QueryPerformanceTracker
    from transcript_search.application.search.query_enhancer import QueryEnhancer
    from transcript_search.application.session.history_store import QueryHistoryStore
    from transcript_search.application.suggestions.service import SuggestionService
    from transcript_search.domain.ports import SearchExecutor
    from transcript_search.infrastructure.analytics import AnalyticsEmitter

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_TIMEOUT = 10.0


@dataclass
class SearchOutcome:
    """Everything the submit path produces for one query."""

    query: str
    enhanced: EnhancedQuery
    page: ResultPage
    insights: list[ContextualInsight] = field(default_factory=list)
    degraded: bool = False
    response_time: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query,
            "enhanced": self.enhanced.to_dict(),
            "page": self.page.to_dict(),
            "insights": [i.to_dict() for i in self.insights],
            "degraded": self.degraded,
            "response_time": round(self.response_time, 3),
        }


class SearchIntelligence:
    """
    Usage:
        intelligence = container.intelligence()
        await intelligence.start()

        batch = await intelligence.suggest("clim")
        outcome = await intelligence.search("economy")
        outcome.enhanced.enhanced_text  # "economy policy"
    """

    def __init__(
        self,
        normalizer: QueryNormalizer,
        extractor: EntityAndIntentExtractor,
        enhancer: QueryEnhancer,
        analyzer: ResultContextAnalyzer,
        suggestions: SuggestionService,
        history: QueryHistoryStore,
        executor: SearchExecutor | None = None,
        analytics: AnalyticsEmitter | None = None,
        tracker: QueryPerformanceTracker | None = None,
        common_terms: Sequence[str] = DEFAULT_COMPLETIONS,
        search_timeout: float = DEFAULT_SEARCH_TIMEOUT,
    ) -> None:
        self._normalizer = normalizer
        self._extractor = extractor
        self._enhancer = enhancer
        self._analyzer = analyzer
        self._suggestions = suggestions
        self._history = history
        self._executor = executor
        self._analytics = analytics
        self._tracker = tracker
        self._common_terms = list(common_terms)
        self._search_timeout = search_timeout
        self._started = False

    @property
    def history(self) -> QueryHistoryStore:
        return self._history

    @property
    def suggestions(self) -> SuggestionService:
        return self._suggestions

    async def start(self) -> None:
        """Load persisted history. Safe to call more than once."""
        if self._started:
            return
        loaded = await self._history.load()
        self._started = True
        logger.info(f"Search intelligence ready ({loaded} history records)")

    async def aclose(self) -> None:
        if self._analytics is not None:
            await self._analytics.aclose()

    # =========================================================================
    # Keystroke path
    # =========================================================================

    def normalize(self, raw: str) -> str:
        return self._normalizer.normalize(raw)

    def extract(self, query: str) -> AnalyzedQuery:
        """Entities, intent and suggested filters for *query*."""
        try:
            return self._extractor.analyze(query)
        except Exception as e:
            logger.warning(f"Entity extraction failed for {query!r}: {e}")
            return AnalyzedQuery.fallback(query)

    async def suggest(
        self,
        partial: str,
        context: SuggestionContext | None = None,
        field: str = "default",
    ) -> SuggestionBatch:
        return await self._suggestions.suggest(partial, context, field)

    def completions(self, prefix: str, limit: int = 8) -> list[str]:
        return self._history.completions(prefix, self._common_terms, limit)

    # =========================================================================
    # Submit path
    # =========================================================================

    def enhance(self, query: str) -> EnhancedQuery:
        enhanced = self._enhancer.enhance(query)
        self._emit(
            "query_enhanced",
            {
                "original_length": len(query),
                "enhanced_length": len(enhanced.enhanced_text),
                "improvement_score": round(enhanced.improvement_score, 4),
                "techniques": [t.value for t in enhanced.techniques],
            },
        )
        return enhanced

    def refinements(self, query: str) -> list[QueryRefinement]:
        return self._enhancer.suggest_refinements(query)

    def analyze(
        self,
        query: str,
        results: Sequence[TranscriptResult | dict[str, Any]],
    ) -> list[ContextualInsight]:
        insights = self._analyzer.analyze(query, results)
        self._emit(
            "context_analyzed",
            {
                "query": query[:50],
                "results_count": len(results),
                "insights_count": len(insights),
            },
        )
        return insights

    async def record_query(self, query: str, result_count: int = 0) -> HistoricalSearchRecord | None:
        record = await self._history.record(query, result_count)
        if record is None:
            return None
        # New history changes what the historical source would return
        self._suggestions.invalidate()
        self._emit(
            "query_recorded",
            {"query_length": len(query), "result_count": result_count, "frequency": record.frequency},
        )
        return record

    async def search(
        self,
        query: str,
        filters: SearchFilters | None = None,
        page: PageRequest | None = None,
        timeout: float | None = None,
    ) -> SearchOutcome:
        """
        Run the full submit pipeline.

        The backend call is bounded by *timeout* (default: configured
        search timeout); on timeout or failure an empty page is used and
        the outcome is marked ``degraded``.
        """
        start = time.perf_counter()
        enhanced = self.enhance(query)
        result_page, degraded = await self._execute(
            enhanced,
            filters or SearchFilters(),
            page or PageRequest(),
            self._search_timeout if timeout is None else timeout,
        )
        insights = self.analyze(query, result_page.items)
        await self.record_query(query, result_page.total_count)

        elapsed = time.perf_counter() - start
        if self._tracker is not None:
            self._tracker.record(query, result_page.items, elapsed)
        return SearchOutcome(
            query=query,
            enhanced=enhanced,
            page=result_page,
            insights=insights,
            degraded=degraded,
            response_time=elapsed,
        )

    async def _execute(
        self,
        enhanced: EnhancedQuery,
        filters: SearchFilters,
        page: PageRequest,
        timeout: float,
    ) -> tuple[ResultPage, bool]:
        if self._executor is None:
            logger.warning("No search backend configured, returning an empty page")
            return ResultPage.empty(), True
        try:
            async with asyncio.timeout(timeout):
                return await self._executor.execute_search(enhanced, filters, page), False
        except TimeoutError:
            logger.warning(f"Backend search timed out after {timeout}s for {enhanced.enhanced_text!r}")
        except Exception as e:
            logger.error(f"Backend search failed for {enhanced.enhanced_text!r}: {e}")
        return ResultPage.empty(), True

    # =========================================================================
    # Reporting
    # =========================================================================

    def trends(self, limit: int = 10) -> list[SearchTrend]:
        return self._history.trends(limit=limit)

    def performance_insights(self) -> list[PerformanceInsight]:
        return self._tracker.insights() if self._tracker is not None else []

    def _emit(self, name: str, params: dict[str, Any]) -> None:
        if self._analytics is not None:
            self._analytics.emit(name, params)
