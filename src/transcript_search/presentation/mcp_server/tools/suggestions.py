"""
Suggestion MCP Tools - per-keystroke assistance

- suggest_queries: ranked suggestions for a partial query
- get_query_completions: prefix completions from history and common terms
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from transcript_search.domain.entities import SuggestionContext

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from transcript_search.application.intelligence import SearchIntelligence

logger = logging.getLogger(__name__)


def split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def register_suggestion_tools(mcp: FastMCP, intelligence: SearchIntelligence) -> None:
    """Register suggestion tools (2 tools)."""

    @mcp.tool()
    async def suggest_queries(
        partial: str,
        interests: str | None = None,
        recent_queries: str | None = None,
        field: str = "default",
    ) -> str:
        """
        Suggest completions for a partially typed query.

        Suggestions are merged from search history, trending topics,
        semantic similarity and the caller's interests, then ranked
        (personalized > trending > semantic > historical) and deduplicated.

        Args:
            partial: What the user has typed so far (min 2 characters)
            interests: Comma-separated user interests, e.g. "climate,healthcare"
            recent_queries: Comma-separated recent queries
            field: Input field id; a newer call on the same field supersedes older ones

        Returns:
            JSON with "suggestions" (text, category, confidence, signal, context)
        """
        context = SuggestionContext(interests=split_csv(interests), recent_queries=split_csv(recent_queries))
        batch = await intelligence.suggest(partial, context, field)
        return json.dumps(batch.to_dict(), indent=2, ensure_ascii=False)

    @mcp.tool()
    async def get_query_completions(prefix: str, limit: int = 8) -> str:
        """
        Prefix completions: recent history first, then common political terms.

        Args:
            prefix: Start of the query
            limit: Maximum completions (default 8)
        """
        completions = intelligence.completions(prefix, limit=max(1, limit))
        return json.dumps({"prefix": prefix, "completions": completions}, ensure_ascii=False)
