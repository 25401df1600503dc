"""
Search MCP Tools - submit-path query intelligence

- enhance_query: rewrite a query for the backend, with refinement hints
- analyze_results: contextual insights for a result list
- search_transcripts: full pipeline (enhance -> backend -> insights -> history)
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from transcript_search.domain.entities import PageRequest, SearchFilters

from .suggestions import split_csv

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from transcript_search.application.intelligence import SearchIntelligence

logger = logging.getLogger(__name__)


def register_search_tools(mcp: FastMCP, intelligence: SearchIntelligence) -> None:
    """Register search tools (3 tools)."""

    @mcp.tool()
    async def enhance_query(query: str, include_refinements: bool = True) -> str:
        """
        Enhance a search query for political transcripts.

        Applies normalization, abbreviation expansion (POTUS, SCOTUS, ...),
        contextual and semantic terms, and a political-domain suffix when
        the query has no political keyword.

        Args:
            query: The query as submitted
            include_refinements: Also return refinement hints (add time
                context, speaker focus, specificity, simplification)

        Returns:
            JSON with enhanced_text, techniques, improvement_score,
            confidence, explanation and suggested_filters
        """
        enhanced = intelligence.enhance(query)
        result: dict[str, Any] = enhanced.to_dict()
        result["analysis"] = intelligence.extract(query).to_dict()
        if include_refinements:
            result["refinements"] = [r.to_dict() for r in intelligence.refinements(query)]
        return json.dumps(result, indent=2, ensure_ascii=False)

    @mcp.tool()
    async def analyze_results(query: str, results: list[dict[str, Any]]) -> str:
        """
        Derive contextual insights from a list of transcript results.

        Each result may carry id, title, date (ISO 8601), speaker, category,
        content and source; missing fields are fine, malformed items are
        skipped.

        Args:
            query: The query the results belong to (cache key)
            results: Result objects as returned by the backend

        Returns:
            JSON list of insights (temporal, speaker, topic, sentiment,
            cross-reference), at most 5
        """
        insights = intelligence.analyze(query, results)
        return json.dumps(
            {"query": query, "insights": [i.to_dict() for i in insights]},
            indent=2,
            ensure_ascii=False,
        )

    @mcp.tool()
    async def search_transcripts(
        query: str,
        speakers: str | None = None,
        sources: str | None = None,
        categories: str | None = None,
        page: int = 1,
        page_size: int = 20,
        timeout: float | None = None,
    ) -> str:
        """
        Run the full search pipeline against the transcript backend.

        Args:
            query: Search query
            speakers: Comma-separated speaker filter
            sources: Comma-separated source filter
            categories: Comma-separated category filter
            page: 1-based page number
            page_size: Results per page
            timeout: Backend timeout in seconds (default: configured)

        Returns:
            JSON with the enhanced query, the result page, insights and a
            "degraded" flag set when the backend was unavailable
        """
        filters = SearchFilters(
            speakers=split_csv(speakers),
            sources=split_csv(sources),
            categories=split_csv(categories),
        )
        outcome = await intelligence.search(
            query,
            filters=filters,
            page=PageRequest(page=max(1, page), page_size=max(1, page_size)),
            timeout=timeout,
        )
        return json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False)
