"""
Backend Search API Integration

Implements the SearchExecutor port against the transcript backend:

    GET {base_url}/videos/search?q=...&page=...&limit=...&speakers=...

Response shape (camelCase, as served by the backend):
    {
        "results": [{"id", "video": {...}, "relevanceScore", ...}, ...],
        "totalResults": 120,
        "hasMoreResults": true,
        "suggestions": ["..."]
    }

Result items are either flat transcript records or search hits wrapping a
``video`` object; both are flattened into TranscriptResult. Items that
cannot be read are dropped with a warning.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from transcript_search.domain.entities import PageRequest, ResultPage, SearchFilters, TranscriptResult
from transcript_search.infrastructure.sources.base_client import _CONTINUE, BaseAPIClient

if TYPE_CHECKING:
    import httpx

    from transcript_search.domain.entities import EnhancedQuery

logger = logging.getLogger(__name__)

SEARCH_PATH = "/videos/search"

# camelCase backend field -> TranscriptResult field
_FIELD_ALIASES = {
    "relevanceScore": "relevance_score",
    "publishedDate": "date",
    "transcriptText": "content",
    "highlightedText": "content",
}


def flatten_result_item(item: dict[str, Any]) -> dict[str, Any]:
    """Merge a wrapped ``video`` object with its hit-level fields."""
    flat: dict[str, Any] = {}
    video = item.get("video")
    if isinstance(video, dict):
        flat.update(video)
    for key, value in item.items():
        if key != "video" and value is not None:
            flat.setdefault(key, value)
    for alias, name in _FIELD_ALIASES.items():
        if alias in flat and name not in flat:
            flat[name] = flat[alias]
    speaker = flat.get("speaker")
    if isinstance(speaker, dict):
        flat["speaker"] = speaker.get("name")
    return flat


class BackendSearchClient(BaseAPIClient):
    """
    Client for the transcript backend search endpoint.

    Usage:
        async with BackendSearchClient("https://api.example.org/v1") as client:
            page = await client.execute_search(enhanced, SearchFilters(), PageRequest())
    """

    _service_name = "Backend"

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else None
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            min_interval=0.0,
            headers=headers,
            transport=transport,
        )

    def _handle_expected_status(self, response: httpx.Response, url: str) -> Any:
        """404 means no results for this query."""
        if response.status_code == 404:
            logger.debug(f"Backend: no results - {url}")
            return {"results": [], "totalResults": 0, "hasMoreResults": False}
        return _CONTINUE

    @staticmethod
    def build_params(query: EnhancedQuery, filters: SearchFilters, page: PageRequest) -> dict[str, Any]:
        params: dict[str, Any] = {"q": query.enhanced_text, "page": page.page, "limit": page.page_size}
        params.update(filters.to_params())
        return params

    @staticmethod
    def parse_page(data: Any) -> ResultPage:
        if not isinstance(data, dict):
            logger.warning(f"Backend: unexpected response type {type(data).__name__}")
            return ResultPage.empty()

        items: list[TranscriptResult] = []
        for raw in data.get("results") or data.get("items") or []:
            if not isinstance(raw, dict) or (raw.get("id") is None and not isinstance(raw.get("video"), dict)):
                logger.warning("Backend: skipping result item without an id")
                continue
            items.append(TranscriptResult.from_dict(flatten_result_item(raw)))

        total = data.get("totalResults", data.get("total_count", len(items)))
        try:
            total = int(total)
        except (TypeError, ValueError):
            total = len(items)
        has_more = bool(data.get("hasMoreResults", data.get("has_more", False)))
        suggestions = [s for s in data.get("suggestions") or [] if isinstance(s, str)]
        return ResultPage(items=items, total_count=total, has_more=has_more, suggestions=suggestions)

    async def execute_search(
        self,
        query: EnhancedQuery,
        filters: SearchFilters,
        page: PageRequest,
    ) -> ResultPage:
        data = await self._make_request(SEARCH_PATH, params=self.build_params(query, filters, page))
        if data is None:
            return ResultPage.empty()
        return self.parse_page(data)
