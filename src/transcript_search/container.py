"""
Application DI Container (dependency-injector).

Centralizes service creation and lifecycle management.

Usage::

    from transcript_search.config import SearchSettings
    from transcript_search.container import ApplicationContainer

    container = ApplicationContainer()
    container.config.from_dict(SearchSettings.from_env().to_dict())

    intelligence = container.intelligence()
    await intelligence.start()

    # In tests - override any provider:
    container.backend.override(providers.Object(fake_backend))
"""

from __future__ import annotations

import logging

from dependency_injector import containers, providers

logger = logging.getLogger(__name__)

IN_MEMORY = ":memory:"


# =============================================================================
# Lazy factories (keep heavy imports out of module import time)
# =============================================================================


def _create_lexicon(path: str | None) -> object:
    from transcript_search.application.search.lexicon import load_lexicon

    return load_lexicon(path)


def _create_normalizer(lexicon: object) -> object:
    from transcript_search.application.search.normalizer import QueryNormalizer

    return QueryNormalizer(lexicon.abbreviations)  # type: ignore[attr-defined]


def _create_extractor(lexicon: object, normalizer: object) -> object:
    from transcript_search.application.search.entity_extractor import EntityAndIntentExtractor

    return EntityAndIntentExtractor(lexicon, normalizer)  # type: ignore[arg-type]


def _create_storage(data_dir: str) -> object:
    """JSON files under data_dir, or a process-local store for ":memory:"."""
    if data_dir == IN_MEMORY:
        from transcript_search.infrastructure.persistence import InMemoryKeyValueStore

        return InMemoryKeyValueStore()

    from transcript_search.infrastructure.persistence import JsonFileKeyValueStore

    return JsonFileKeyValueStore(data_dir)


def _create_history(storage: object, capacity: int, retention_days: int) -> object:
    from transcript_search.application.session.history_store import QueryHistoryStore

    return QueryHistoryStore(storage, capacity=capacity, retention_days=retention_days)  # type: ignore[arg-type]


def _create_cache(max_size: int, ttl: int, name: str) -> object:
    from transcript_search.infrastructure.cache import BoundedTTLCache

    return BoundedTTLCache(max_size, ttl, name=name)


def _create_analytics() -> object:
    from transcript_search.infrastructure.analytics import AnalyticsEmitter, LoggingAnalyticsSink

    return AnalyticsEmitter(LoggingAnalyticsSink())


def _create_sentiment() -> object:
    from transcript_search.infrastructure.sentiment import LexiconSentimentAnalyzer

    return LexiconSentimentAnalyzer()


def _create_backend(base_url: str | None, api_key: str | None, timeout: float) -> object | None:
    if not base_url:
        logger.info("No backend URL configured; search returns empty pages")
        return None
    from transcript_search.infrastructure.sources import BackendSearchClient

    return BackendSearchClient(base_url, api_key=api_key or None, timeout=timeout)


def _create_trending_provider(url: str | None) -> object | None:
    if not url:
        return None
    from transcript_search.infrastructure.sources import TrendingTopicsClient

    return TrendingTopicsClient(url)


def _create_embedding_provider(url: str | None) -> object | None:
    if not url:
        return None
    from transcript_search.infrastructure.sources import HttpEmbeddingClient

    return HttpEmbeddingClient(url)


def _create_suggestion_sources(
    lexicon: object,
    history: object,
    trending: object | None,
    embeddings: object | None,
    semantic_threshold: float,
) -> list[object]:
    from transcript_search.application.suggestions.sources import (
        HistoricalSuggestionSource,
        PersonalizedSuggestionSource,
        SemanticSuggestionSource,
        TrendingSuggestionSource,
    )

    return [
        HistoricalSuggestionSource(history),  # type: ignore[arg-type]
        TrendingSuggestionSource(trending, lexicon.trending),  # type: ignore[arg-type, attr-defined]
        SemanticSuggestionSource(
            embeddings,  # type: ignore[arg-type]
            lexicon.semantic_candidates,  # type: ignore[attr-defined]
            threshold=semantic_threshold,
        ),
        PersonalizedSuggestionSource(),
    ]


def _create_suggestion_service(
    sources: list[object],
    normalizer: object,
    extractor: object,
    cache: object,
    analytics: object,
    max_suggestions: int,
    min_prefix_length: int,
    source_timeout: float,
) -> object:
    from transcript_search.application.suggestions import SuggestionRanker, SuggestionService

    return SuggestionService(
        sources,  # type: ignore[arg-type]
        ranker=SuggestionRanker(max_suggestions),
        normalizer=normalizer,  # type: ignore[arg-type]
        extractor=extractor,  # type: ignore[arg-type]
        cache=cache,  # type: ignore[arg-type]
        analytics=analytics,  # type: ignore[arg-type]
        min_prefix_length=min_prefix_length,
        source_timeout=source_timeout,
    )


def _create_enhancer(normalizer: object, extractor: object, lexicon: object, cache: object) -> object:
    from transcript_search.application.search.query_enhancer import QueryEnhancer

    return QueryEnhancer(normalizer, extractor, lexicon, cache)  # type: ignore[arg-type]


def _create_analyzer(sentiment: object, cache: object, max_insights: int) -> object:
    from transcript_search.application.search.context_analyzer import ResultContextAnalyzer

    return ResultContextAnalyzer(sentiment, cache, max_insights)  # type: ignore[arg-type]


def _create_tracker() -> object:
    from transcript_search.application.search.performance import QueryPerformanceTracker

    return QueryPerformanceTracker()


def _create_intelligence(
    normalizer: object,
    extractor: object,
    enhancer: object,
    analyzer: object,
    suggestions: object,
    history: object,
    backend: object | None,
    analytics: object,
    tracker: object,
    lexicon: object,
    search_timeout: float,
) -> object:
    from transcript_search.application.intelligence import SearchIntelligence

    return SearchIntelligence(
        normalizer,  # type: ignore[arg-type]
        extractor,  # type: ignore[arg-type]
        enhancer,  # type: ignore[arg-type]
        analyzer,  # type: ignore[arg-type]
        suggestions,  # type: ignore[arg-type]
        history,  # type: ignore[arg-type]
        executor=backend,  # type: ignore[arg-type]
        analytics=analytics,  # type: ignore[arg-type]
        tracker=tracker,  # type: ignore[arg-type]
        common_terms=lexicon.completions,  # type: ignore[attr-defined]
        search_timeout=search_timeout,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for the transcript search intelligence layer.

    Collaborators (``storage``, ``backend``, ``trending_provider``,
    ``embedding_provider``, ``sentiment``, ``analytics``) are the seams to
    override in tests or embedding applications.
    """

    config = providers.Configuration()

    lexicon = providers.Singleton(_create_lexicon, path=config.lexicon_path)
    normalizer = providers.Singleton(_create_normalizer, lexicon=lexicon)
    extractor = providers.Singleton(_create_extractor, lexicon=lexicon, normalizer=normalizer)

    # ── Collaborators ───────────────────────────────────────────────────
    storage = providers.Singleton(_create_storage, data_dir=config.data_dir)
    analytics = providers.Singleton(_create_analytics)
    sentiment = providers.Singleton(_create_sentiment)
    backend = providers.Singleton(
        _create_backend,
        base_url=config.backend_url,
        api_key=config.backend_api_key,
        timeout=config.search_timeout,
    )
    trending_provider = providers.Singleton(_create_trending_provider, url=config.trending_url)
    embedding_provider = providers.Singleton(_create_embedding_provider, url=config.embedding_url)

    # ── Caches ──────────────────────────────────────────────────────────
    suggestion_cache = providers.Singleton(
        _create_cache,
        max_size=config.suggestion_cache_size,
        ttl=config.suggestion_cache_ttl_seconds,
        name="suggestions",
    )
    enhancement_cache = providers.Singleton(
        _create_cache,
        max_size=config.enhancement_cache_size,
        ttl=config.enhancement_cache_ttl_seconds,
        name="enhancement",
    )
    insight_cache = providers.Singleton(
        _create_cache,
        max_size=config.insight_cache_size,
        ttl=config.insight_ttl_seconds,
        name="insights",
    )

    # ── Services ────────────────────────────────────────────────────────
    history = providers.Singleton(
        _create_history,
        storage=storage,
        capacity=config.history_capacity,
        retention_days=config.history_retention_days,
    )
    suggestion_sources = providers.Singleton(
        _create_suggestion_sources,
        lexicon=lexicon,
        history=history,
        trending=trending_provider,
        embeddings=embedding_provider,
        semantic_threshold=config.semantic_threshold,
    )
    suggestion_service = providers.Singleton(
        _create_suggestion_service,
        sources=suggestion_sources,
        normalizer=normalizer,
        extractor=extractor,
        cache=suggestion_cache,
        analytics=analytics,
        max_suggestions=config.max_suggestions,
        min_prefix_length=config.min_prefix_length,
        source_timeout=config.source_timeout,
    )
    enhancer = providers.Singleton(
        _create_enhancer,
        normalizer=normalizer,
        extractor=extractor,
        lexicon=lexicon,
        cache=enhancement_cache,
    )
    analyzer = providers.Singleton(
        _create_analyzer,
        sentiment=sentiment,
        cache=insight_cache,
        max_insights=config.max_insights,
    )
    tracker = providers.Singleton(_create_tracker)

    intelligence = providers.Singleton(
        _create_intelligence,
        normalizer=normalizer,
        extractor=extractor,
        enhancer=enhancer,
        analyzer=analyzer,
        suggestions=suggestion_service,
        history=history,
        backend=backend,
        analytics=analytics,
        tracker=tracker,
        lexicon=lexicon,
        search_timeout=config.search_timeout,
    )


async def shutdown(container: ApplicationContainer) -> None:
    """Flush analytics and close the HTTP clients."""
    from transcript_search.infrastructure.sources import BaseAPIClient

    await container.analytics().aclose()
    for provider in (container.backend, container.trending_provider, container.embedding_provider):
        client = provider()
        if isinstance(client, BaseAPIClient):
            await client.close()


__all__ = ["ApplicationContainer", "IN_MEMORY", "shutdown"]
