"""Trending topics feed (TrendingProvider port)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from transcript_search.infrastructure.sources.base_client import BaseAPIClient

if TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)


class TrendingTopicsClient(BaseAPIClient):
    """
    Fetches the current trending topic list.

    Accepts either a bare JSON list of strings or ``{"topics": [...]}``,
    where topics may be strings or objects with a ``name`` field.
    """

    _service_name = "Trending"

    def __init__(
        self,
        url: str,
        timeout: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=url, timeout=timeout, max_retries=0, transport=transport)

    @staticmethod
    def parse_topics(data: Any) -> list[str]:
        if isinstance(data, dict):
            data = data.get("topics") or data.get("trending") or []
        if not isinstance(data, list):
            return []
        topics: list[str] = []
        for entry in data:
            if isinstance(entry, dict):
                entry = entry.get("name") or entry.get("topic")
            if isinstance(entry, str) and entry.strip():
                topics.append(entry.strip().lower())
        return topics

    async def fetch_trending(self) -> list[str]:
        data = await self._make_request()
        return self.parse_topics(data) if data is not None else []
