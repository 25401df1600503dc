"""
SuggestionService - per-keystroke suggestion pipeline.

    partial -> normalize -> [historical | trending | semantic | personalized] -> rank

The four sources run concurrently, each bounded by its own
timeout; a slow or failing source contributes nothing. Requests are tracked
per input field: a newer request cancels the older in-flight one, and the
older caller receives an empty batch marked ``stale``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from transcript_search.application.search.entity_extractor import EntityAndIntentExtractor
from transcript_search.application.search.normalizer import QueryNormalizer
from transcript_search.core.async_utils import gather_with_errors
from transcript_search.domain.entities import Suggestion, SuggestionBatch, SuggestionContext
from transcript_search.infrastructure.analytics import AnalyticsEmitter
from transcript_search.infrastructure.cache import BoundedTTLCache

from .ranker import SuggestionRanker
from .sources import SuggestionSource

logger = logging.getLogger(__name__)

DEFAULT_FIELD = "default"


class SuggestionService:
    """
    Usage:
        service = SuggestionService(sources=[...])
        batch = await service.suggest("clim", SuggestionContext(interests=["climate"]))
        batch.suggestions  # ranked, deduplicated, at most max_suggestions
    """

    def __init__(
        self,
        sources: Sequence[SuggestionSource],
        ranker: SuggestionRanker | None = None,
        normalizer: QueryNormalizer | None = None,
        extractor: EntityAndIntentExtractor | None = None,
        cache: BoundedTTLCache[list[Suggestion]] | None = None,
        analytics: AnalyticsEmitter | None = None,
        min_prefix_length: int = 2,
        source_timeout: float = 0.5,
    ) -> None:
        self._sources = list(sources)
        self._ranker = ranker or SuggestionRanker()
        self._normalizer = normalizer or QueryNormalizer()
        self._extractor = extractor
        self._cache = cache if cache is not None else BoundedTTLCache(100, 3600, name="suggestions")
        self._analytics = analytics
        self._min_prefix_length = min_prefix_length
        self._source_timeout = source_timeout
        self._generations: dict[str, int] = {}
        self._inflight: dict[str, asyncio.Task[tuple[list[Suggestion], list[str]]]] = {}

    @property
    def cache(self) -> BoundedTTLCache[list[Suggestion]]:
        return self._cache

    def generation(self, field: str = DEFAULT_FIELD) -> int:
        return self._generations.get(field, 0)

    async def suggest(
        self,
        partial: str,
        context: SuggestionContext | None = None,
        field: str = DEFAULT_FIELD,
    ) -> SuggestionBatch:
        """Ranked suggestions for *partial*; never raises for degraded input."""
        context = context or SuggestionContext()
        generation = self._generations.get(field, 0) + 1
        self._generations[field] = generation

        previous = self._inflight.pop(field, None)
        if previous is not None and not previous.done():
            previous.cancel()

        normalized = self._normalizer.normalize(partial)
        if len(normalized) < self._min_prefix_length:
            return SuggestionBatch(partial=partial, generation=generation)

        cache_key = self._cache_key(normalized, context)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return SuggestionBatch(partial=partial, suggestions=list(cached), generation=generation)

        task = asyncio.create_task(self._collect(normalized, context))
        self._inflight[field] = task
        try:
            candidates, timed_out = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if task.cancelled() and (current is None or not current.cancelling()):
                logger.debug(f"Suggestion request for {partial!r} superseded on field {field!r}")
                return SuggestionBatch(partial=partial, generation=generation, stale=True)
            raise
        finally:
            if self._inflight.get(field) is task:
                del self._inflight[field]

        if self._generations.get(field) != generation:
            return SuggestionBatch(partial=partial, generation=generation, stale=True)

        ranked = self._ranker.rank(candidates, normalized)
        # Partial results from timed-out sources are not worth caching
        if not timed_out:
            self._cache.set(cache_key, ranked)

        self._emit(normalized, ranked)
        return SuggestionBatch(
            partial=partial,
            suggestions=ranked,
            generation=generation,
            timed_out_sources=timed_out,
        )

    async def _collect(
        self,
        partial: str,
        context: SuggestionContext,
    ) -> tuple[list[Suggestion], list[str]]:
        timed_out: list[str] = []
        results = await gather_with_errors(
            *(self._run_source(source, partial, context, timed_out) for source in self._sources),
            return_exceptions=True,
        )
        candidates: list[Suggestion] = []
        for source, result in zip(self._sources, results):
            if isinstance(result, Exception):
                logger.warning(f"{source.name} source failed: {result}")
                continue
            candidates.extend(result)
        return candidates, timed_out

    async def _run_source(
        self,
        source: SuggestionSource,
        partial: str,
        context: SuggestionContext,
        timed_out: list[str],
    ) -> list[Suggestion]:
        try:
            async with asyncio.timeout(self._source_timeout):
                return await source.suggest(partial, context)
        except TimeoutError:
            logger.warning(f"{source.name} source timed out after {self._source_timeout}s")
            timed_out.append(source.name)
            return []

    @staticmethod
    def _cache_key(partial: str, context: SuggestionContext) -> str:
        interests = ",".join(sorted(i.lower() for i in context.interests))
        return f"{partial.casefold()}|{interests}"

    def invalidate(self) -> None:
        """Drop cached suggestions, e.g. after history changed."""
        self._cache.clear()

    def _emit(self, partial: str, ranked: list[Suggestion]) -> None:
        if self._analytics is None:
            return
        params: dict[str, object] = {
            "query_length": len(partial),
            "suggestions_count": len(ranked),
            "partial_query": partial[:50],
        }
        if self._extractor is not None:
            intent, _ = self._extractor.classify_intent(partial)
            params["intent"] = intent.value
        self._analytics.emit("suggestions_generated", params)
