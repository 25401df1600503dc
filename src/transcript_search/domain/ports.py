"""
Collaborator ports.

The query-intelligence core never talks to the network or disk directly;
it depends on these protocols and receives concrete adapters through the
DI container (see ``transcript_search.container``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .entities import EnhancedQuery, PageRequest, ResultPage, SearchFilters


@runtime_checkable
class SearchExecutor(Protocol):
    """The backend search API."""

    async def execute_search(
        self,
        query: EnhancedQuery,
        filters: SearchFilters,
        page: PageRequest,
    ) -> ResultPage: ...


@runtime_checkable
class KeyValueStore(Protocol):
    """Local persistence with get/set/delete/enumerate-by-prefix semantics."""

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def keys(self, prefix: str = "") -> list[str]: ...


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Sentence-embedding service. Returns one vector per input text."""

    async def embed(self, texts: Sequence[str]) -> list[list[float]]: ...


@runtime_checkable
class TrendingProvider(Protocol):
    async def fetch_trending(self) -> list[str]: ...


@runtime_checkable
class SentimentAnalyzer(Protocol):
    """Classifies text as "positive", "negative" or "neutral"."""

    def classify(self, text: str) -> str: ...


@runtime_checkable
class AnalyticsSink(Protocol):
    """Consumer of analytics events. Delivery is never acknowledged."""

    async def emit(self, name: str, params: dict[str, Any]) -> None: ...


__all__ = [
    "AnalyticsSink",
    "EmbeddingProvider",
    "KeyValueStore",
    "SearchExecutor",
    "SentimentAnalyzer",
    "TrendingProvider",
]
