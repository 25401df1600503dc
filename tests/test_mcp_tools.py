"""Tests for the MCP tool layer (JSON in, JSON out)."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from transcript_search.config import SearchSettings
from transcript_search.container import IN_MEMORY, ApplicationContainer
from transcript_search.presentation.mcp_server.tools import TOOL_NAMES, register_all_tools
from transcript_search.presentation.mcp_server.tools.history import register_history_tools
from transcript_search.presentation.mcp_server.tools.search import register_search_tools
from transcript_search.presentation.mcp_server.tools.suggestions import register_suggestion_tools, split_csv


def _capture_tools(register, intelligence):
    mcp = MagicMock()
    tools = {}
    mcp.tool = lambda: lambda func: (tools.__setitem__(func.__name__, func), func)[1]
    register(mcp, intelligence)
    return tools


@pytest.fixture
def intelligence():
    container = ApplicationContainer()
    container.config.from_dict(SearchSettings(data_dir=IN_MEMORY).to_dict())
    return container.intelligence()


class TestRegistration:
    def test_register_all_tools(self, intelligence):
        mcp = MagicMock()
        names = []
        mcp.tool = lambda: lambda func: (names.append(func.__name__), func)[1]
        assert register_all_tools(mcp, intelligence) == 7
        assert tuple(names) == TOOL_NAMES


class TestSplitCsv:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, []),
            ("", []),
            ("climate", ["climate"]),
            (" climate , healthcare ,, ", ["climate", "healthcare"]),
        ],
    )
    def test_split(self, value, expected):
        assert split_csv(value) == expected


class TestSuggestionTools:
    async def test_suggest_queries(self, intelligence):
        tools = _capture_tools(register_suggestion_tools, intelligence)
        data = json.loads(await tools["suggest_queries"](partial="clim", interests="climate, tax"))

        assert data["partial"] == "clim"
        assert data["stale"] is False
        first = data["suggestions"][0]
        assert first["text"] == "climate"
        assert first["signal"] == "personalized"
        assert first["context"] == "Based on your interests"

    async def test_suggest_queries_short_input(self, intelligence):
        tools = _capture_tools(register_suggestion_tools, intelligence)
        data = json.loads(await tools["suggest_queries"](partial="c"))
        assert data["suggestions"] == []

    async def test_get_query_completions(self, intelligence):
        tools = _capture_tools(register_suggestion_tools, intelligence)
        data = json.loads(await tools["get_query_completions"](prefix="tax", limit=0))
        assert data == {"prefix": "tax", "completions": ["tax reform"]}


class TestSearchTools:
    async def test_enhance_query(self, intelligence):
        tools = _capture_tools(register_search_tools, intelligence)
        data = json.loads(await tools["enhance_query"](query="economy"))

        assert data["original_text"] == "economy"
        assert data["enhanced_text"] == "economy policy"
        assert "analysis" in data
        assert [r["confidence"] for r in data["refinements"]] == [0.8, 0.7, 0.6]

    async def test_enhance_query_without_refinements(self, intelligence):
        tools = _capture_tools(register_search_tools, intelligence)
        data = json.loads(await tools["enhance_query"](query="economy", include_refinements=False))
        assert "refinements" not in data

    async def test_analyze_results(self, intelligence, johnson_results):
        tools = _capture_tools(register_search_tools, intelligence)
        payload = [r.to_dict() for r in johnson_results]
        data = json.loads(await tools["analyze_results"](query="healthcare", results=payload))

        assert data["query"] == "healthcare"
        types = [i["type"] for i in data["insights"]]
        assert "speaker" in types
        assert "temporal" in types
        assert len(types) <= 5

    async def test_analyze_results_empty(self, intelligence):
        tools = _capture_tools(register_search_tools, intelligence)
        data = json.loads(await tools["analyze_results"](query="anything", results=[]))
        assert data["insights"] == []

    async def test_search_transcripts_without_backend(self, intelligence):
        tools = _capture_tools(register_search_tools, intelligence)
        data = json.loads(
            await tools["search_transcripts"](query="economy", speakers="Senator Johnson", page=0)
        )
        assert data["degraded"] is True
        assert data["page"]["items"] == []
        assert data["enhanced"]["enhanced_text"] == "economy policy"
        assert intelligence.history.get("economy") is not None


class TestHistoryTools:
    async def test_record_search(self, intelligence):
        tools = _capture_tools(register_history_tools, intelligence)
        data = json.loads(await tools["record_search"](query="Climate   Policy", result_count=-3))

        assert data["recorded"] is True
        assert data["record"]["key"] == "climate policy"
        assert data["record"]["query"] == "Climate Policy"
        assert data["record"]["last_result_count"] == 0

    async def test_record_blank_search(self, intelligence):
        tools = _capture_tools(register_history_tools, intelligence)
        data = json.loads(await tools["record_search"](query="   "))
        assert data == {"recorded": False, "reason": "empty query"}

    async def test_get_search_trends(self, intelligence):
        tools = _capture_tools(register_history_tools, intelligence)
        await tools["record_search"](query="tax reform")
        await tools["record_search"](query="tax reform")
        await tools["record_search"](query="climate policy")

        data = json.loads(await tools["get_search_trends"](limit=5))

        assert [t["query"] for t in data["trends"]] == ["tax reform", "climate policy"]
        assert data["trends"][0]["direction"] == "rising"
        assert data["trends"][1]["direction"] == "stable"
        assert data["performance"] == []

    async def test_get_search_trends_without_performance(self, intelligence):
        tools = _capture_tools(register_history_tools, intelligence)
        data = json.loads(await tools["get_search_trends"](include_performance=False))
        assert data == {"trends": []}
