"""
Transcript Search MCP Tools

Suggestions (2):
- suggest_queries, get_query_completions

Search (3):
- enhance_query, analyze_results, search_transcripts

History (2):
- record_search, get_search_trends
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .history import register_history_tools
from .search import register_search_tools
from .suggestions import register_suggestion_tools

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

    from transcript_search.application.intelligence import SearchIntelligence

logger = logging.getLogger(__name__)

TOOL_NAMES = (
    "suggest_queries",
    "get_query_completions",
    "enhance_query",
    "analyze_results",
    "search_transcripts",
    "record_search",
    "get_search_trends",
)


def register_all_tools(mcp: FastMCP, intelligence: SearchIntelligence) -> int:
    """Register every tool on *mcp*; returns the number registered."""
    register_suggestion_tools(mcp, intelligence)
    register_search_tools(mcp, intelligence)
    register_history_tools(mcp, intelligence)
    logger.info(f"Registered {len(TOOL_NAMES)} tools")
    return len(TOOL_NAMES)


__all__ = ["TOOL_NAMES", "register_all_tools"]
