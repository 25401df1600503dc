"""Agent-facing usage notes for the MCP server."""

from __future__ import annotations

SERVER_INSTRUCTIONS = """
Transcript Search Intelligence - query assistance for political video transcripts

═══════════════════════════════════════════════════════════════════════════════
TYPICAL FLOW
═══════════════════════════════════════════════════════════════════════════════

1. While the user types:   suggest_queries(partial="clim")
2. Before submitting:      enhance_query(query="POTUS healthcare")
3. Submit:                 search_transcripts(query="POTUS healthcare")
                           (enhance -> backend -> insights -> history, in one call)
4. Results from elsewhere: analyze_results(query=..., results=[...])
                           record_search(query=..., result_count=...)
5. Reporting:              get_search_trends()

NOTES
- Suggestions need at least 2 characters; shorter input returns an empty list.
- enhance_query never fails: on any problem the original query is returned
  unchanged with an explanation.
- Insights are cached per query for 30 minutes.
"""
