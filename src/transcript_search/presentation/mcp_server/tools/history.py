"""
History MCP Tools

- record_search: add a submitted query to the local history
- get_search_trends: recent query trends plus query performance insights
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from transcript_search.application.intelligence import SearchIntelligence

logger = logging.getLogger(__name__)


def register_history_tools(mcp: FastMCP, intelligence: SearchIntelligence) -> None:
    """Register history tools (2 tools)."""

    @mcp.tool()
    async def record_search(query: str, result_count: int = 0) -> str:
        """
        Record a submitted query in the search history.

        Args:
            query: The submitted query
            result_count: Number of results the backend returned

        Returns:
            JSON with the stored record, or recorded=false for a blank query
        """
        record = await intelligence.record_query(query, max(0, result_count))
        if record is None:
            return json.dumps({"recorded": False, "reason": "empty query"})
        return json.dumps({"recorded": True, "record": record.to_dict()}, ensure_ascii=False)

    @mcp.tool()
    async def get_search_trends(limit: int = 10, include_performance: bool = True) -> str:
        """
        Most frequent queries of the last 7 days.

        Args:
            limit: Maximum trends (default 10)
            include_performance: Add response-time and relevance insights

        Returns:
            JSON with "trends" (query, frequency, direction, timeframe)
        """
        result: dict[str, Any] = {"trends": [t.to_dict() for t in intelligence.trends(limit=max(1, limit))]}
        if include_performance:
            result["performance"] = [p.to_dict() for p in intelligence.performance_insights()]
        return json.dumps(result, indent=2, ensure_ascii=False)
