"""Tests for the HTTP collaborator clients (httpx.MockTransport)."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import httpx
import pytest

from transcript_search.core.async_utils import CircuitBreaker
from transcript_search.core.exceptions import (
    CollaboratorUnavailableError,
    MalformedResultError,
    NetworkError,
)
from transcript_search.domain.entities import EnhancedQuery, PageRequest, SearchFilters
from transcript_search.infrastructure.sources import (
    BackendSearchClient,
    BaseAPIClient,
    HttpEmbeddingClient,
    TrendingTopicsClient,
)
from transcript_search.infrastructure.sources.backend import flatten_result_item


class Recorder:
    """MockTransport handler that replays canned responses and keeps requests."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return httpx.Response(response.status_code, headers=response.headers, content=response.content)


def _query(text="economy policy"):
    return EnhancedQuery(original_text="economy", enhanced_text=text)


# ============================================================
# Backend search
# ============================================================


class TestBackendSearchClient:
    async def test_request_parameters_and_auth(self, backend_payload):
        handler = Recorder(httpx.Response(200, json=backend_payload))
        filters = SearchFilters(speakers=["Senator Johnson", "Biden"])
        async with BackendSearchClient(
            "https://api.test/v1/", api_key="secret", transport=httpx.MockTransport(handler)
        ) as client:
            await client.execute_search(_query(), filters, PageRequest(page=2, page_size=10))

        (request,) = handler.requests
        assert request.url.path == "/v1/videos/search"
        assert request.url.params["q"] == "economy policy"
        assert request.url.params["page"] == "2"
        assert request.url.params["limit"] == "10"
        assert request.url.params["speakers"] == "Senator Johnson,Biden"
        assert request.url.params["sort"] == "relevance"
        assert request.headers["Authorization"] == "Bearer secret"

    async def test_parses_page(self, backend_payload):
        handler = Recorder(httpx.Response(200, json=backend_payload))
        async with BackendSearchClient("https://api.test", transport=httpx.MockTransport(handler)) as client:
            page = await client.execute_search(_query(), SearchFilters(), PageRequest())

        assert [item.id for item in page.items] == ["vid-1", "vid-2"]
        first, second = page.items
        assert first.speaker == "Senator Johnson"
        assert first.relevance_score == 0.92
        assert first.content == "the healthcare bill will protect families"
        assert first.date == datetime(2024, 3, 1, 14, tzinfo=timezone.utc)
        assert second.date == datetime(2024, 3, 2, 10, tzinfo=timezone.utc)
        assert page.total_count == 57
        assert page.has_more
        assert page.suggestions == ["healthcare reform"]

    async def test_not_found_is_an_empty_page(self):
        handler = Recorder(httpx.Response(404))
        async with BackendSearchClient("https://api.test", transport=httpx.MockTransport(handler)) as client:
            page = await client.execute_search(_query(), SearchFilters(), PageRequest())
        assert page.items == []
        assert page.total_count == 0

    async def test_server_error_is_an_empty_page(self):
        handler = Recorder(httpx.Response(500))
        async with BackendSearchClient("https://api.test", transport=httpx.MockTransport(handler)) as client:
            page = await client.execute_search(_query(), SearchFilters(), PageRequest())
        assert page.items == []
        assert len(handler.requests) == 1

    async def test_retries_after_rate_limit(self, backend_payload):
        handler = Recorder(
            httpx.Response(429, headers={"Retry-After": "0"}),
            httpx.Response(200, json=backend_payload),
        )
        async with BackendSearchClient("https://api.test", transport=httpx.MockTransport(handler)) as client:
            page = await client.execute_search(_query(), SearchFilters(), PageRequest())
        assert len(handler.requests) == 2
        assert len(page.items) == 2


class TestParsing:
    def test_flatten_wrapped_video(self):
        flat = flatten_result_item({"id": "hit", "video": {"id": "v", "title": "T"}, "relevanceScore": 0.5})
        assert flat == {"id": "v", "title": "T", "relevanceScore": 0.5, "relevance_score": 0.5}

    def test_non_mapping_response(self):
        assert BackendSearchClient.parse_page(["unexpected"]).items == []

    def test_bad_total_falls_back_to_item_count(self):
        page = BackendSearchClient.parse_page({"results": [{"id": "1"}], "totalResults": "many"})
        assert page.total_count == 1
        assert not page.has_more

    def test_snake_case_payload(self):
        page = BackendSearchClient.parse_page({"items": [{"id": "1"}], "total_count": 9, "has_more": True})
        assert page.total_count == 9
        assert page.has_more

    def test_build_params_omits_unset_filters(self):
        params = BackendSearchClient.build_params(_query(), SearchFilters(), PageRequest())
        assert params == {"q": "economy policy", "page": 1, "limit": 20, "sort": "relevance"}


# ============================================================
# Base client behaviour
# ============================================================


class TestBaseAPIClient:
    async def test_connection_errors_are_retried_then_give_up(self):
        handler = Recorder(httpx.ConnectError("refused"))
        async with BaseAPIClient(
            "https://api.test", max_retries=2, backoff_base=0, transport=httpx.MockTransport(handler)
        ) as client:
            assert await client._make_request("/x") is None
        assert len(handler.requests) == 3

    async def test_invalid_json_body(self):
        handler = Recorder(httpx.Response(200, text="<html>"))
        async with BaseAPIClient("https://api.test", transport=httpx.MockTransport(handler)) as client:
            assert await client._make_request("/x") is None

    async def test_text_response(self):
        handler = Recorder(httpx.Response(200, text="plain"))
        async with BaseAPIClient("https://api.test", transport=httpx.MockTransport(handler)) as client:
            assert await client._make_request("/x", expect_json=False) == "plain"

    async def test_open_circuit_skips_requests(self):
        handler = Recorder(httpx.Response(500))
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=60)
        async with BaseAPIClient(
            "https://api.test", circuit_breaker=breaker, transport=httpx.MockTransport(handler)
        ) as client:
            await client._make_request("/x")
            assert breaker.is_open
            assert await client._make_request("/x") is None
        assert len(handler.requests) == 1

    async def test_rate_limit_exhausted(self):
        handler = Recorder(httpx.Response(429, headers={"Retry-After": "0"}))
        async with BaseAPIClient(
            "https://api.test", max_retries=1, transport=httpx.MockTransport(handler)
        ) as client:
            assert await client._make_request("/x") is None
        assert len(handler.requests) == 2

    def test_build_url(self):
        client = BaseAPIClient("https://api.test/v1/")
        assert client._build_url("/videos") == "https://api.test/v1/videos"
        assert client._build_url("") == "https://api.test/v1"
        assert client._build_url("https://other.test/x") == "https://other.test/x"


# ============================================================
# Trending feed and embeddings
# ============================================================


class TestTrendingTopicsClient:
    async def test_fetch(self):
        handler = Recorder(httpx.Response(200, json={"topics": [{"name": "Climate Summit"}, "Tax Reform ", ""]}))
        async with TrendingTopicsClient("https://trends.test/now", transport=httpx.MockTransport(handler)) as client:
            assert await client.fetch_trending() == ["climate summit", "tax reform"]
        assert str(handler.requests[0].url) == "https://trends.test/now"

    async def test_failure_is_empty(self):
        handler = Recorder(httpx.Response(503))
        async with TrendingTopicsClient("https://trends.test/now", transport=httpx.MockTransport(handler)) as client:
            assert await client.fetch_trending() == []

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (["a", "b"], ["a", "b"]),
            ({"trending": [{"topic": "C"}]}, ["c"]),
            ({"topics": "oops"}, []),
            (None, []),
        ],
    )
    def test_parse_topics(self, data, expected):
        assert TrendingTopicsClient.parse_topics(data) == expected


class TestHttpEmbeddingClient:
    async def test_embed(self):
        handler = Recorder(httpx.Response(200, json={"embeddings": [[1, 0], [0.5, 0.5]]}))
        async with HttpEmbeddingClient(
            "https://embed.test/v1/embed", model="mini", transport=httpx.MockTransport(handler)
        ) as client:
            vectors = await client.embed(["clim", "tax"])

        assert vectors == [[1.0, 0.0], [0.5, 0.5]]
        (request,) = handler.requests
        assert request.method == "POST"
        assert json.loads(request.content) == {"texts": ["clim", "tax"], "model": "mini"}

    async def test_empty_input_makes_no_request(self):
        handler = Recorder(httpx.Response(200, json={"embeddings": []}))
        async with HttpEmbeddingClient("https://embed.test", transport=httpx.MockTransport(handler)) as client:
            assert await client.embed([]) == []
        assert handler.requests == []

    async def test_failure_raises(self):
        handler = Recorder(httpx.Response(500))
        async with HttpEmbeddingClient("https://embed.test", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(NetworkError):
                await client.embed(["clim"])

    async def test_wrong_vector_count(self):
        handler = Recorder(httpx.Response(200, json={"embeddings": [[1.0]]}))
        async with HttpEmbeddingClient("https://embed.test", transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(MalformedResultError):
                await client.embed(["a", "b"])

    async def test_open_circuit(self):
        breaker = CircuitBreaker(failure_threshold=1)
        async with HttpEmbeddingClient("https://embed.test") as client:
            client._circuit_breaker = breaker
            breaker._state = "open"
            breaker._last_failure_time = None
            with pytest.raises(CollaboratorUnavailableError):
                await client.embed(["clim"])

    def test_parse_vectors_rejects_non_numbers(self):
        with pytest.raises(MalformedResultError):
            HttpEmbeddingClient.parse_vectors({"embeddings": [["x"]]}, 1)
