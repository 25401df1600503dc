"""
Transcript Search MCP Server

Usage as standalone server:
    python -m transcript_search.presentation.mcp_server

Or in mcp.json:
    {
        "servers": {
            "transcript-search": {
                "type": "stdio",
                "command": "python",
                "args": ["-m", "transcript_search.presentation.mcp_server"],
                "env": {"TRANSCRIPT_SEARCH_BACKEND_URL": "https://api.example.org/v1"}
            }
        }
    }

Usage for integration:
    from transcript_search.presentation.mcp_server import create_server, register_all_tools

    server = create_server()
    server.run()
"""

from __future__ import annotations

from .server import create_server, get_container, main
from .tools import register_all_tools

__all__ = ["create_server", "get_container", "main", "register_all_tools"]
