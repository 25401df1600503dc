"""
Sentence-embedding service client (EmbeddingProvider port).

    POST {url}  {"texts": ["...", ...]}
    ->          {"embeddings": [[0.1, ...], ...]}

Unlike the other clients, a failed call raises (NetworkError, or
CollaboratorUnavailableError while the circuit breaker is open):
an empty vector list would be indistinguishable from "no similar candidates",
and the semantic source needs to know to contribute nothing.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from transcript_search.core.exceptions import (
    CollaboratorUnavailableError,
    ErrorContext,
    MalformedResultError,
    NetworkError,
)
from transcript_search.infrastructure.sources.base_client import BaseAPIClient

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx

logger = logging.getLogger(__name__)


class HttpEmbeddingClient(BaseAPIClient):
    _service_name = "Embeddings"

    def __init__(
        self,
        url: str,
        model: str | None = None,
        timeout: float = 2.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(base_url=url, timeout=timeout, max_retries=1, transport=transport)
        self._model = model

    @staticmethod
    def parse_vectors(data: Any, expected: int) -> list[list[float]]:
        vectors = data.get("embeddings") if isinstance(data, dict) else data
        if not isinstance(vectors, list) or len(vectors) != expected:
            raise MalformedResultError(f"expected {expected} embeddings", source="embeddings")
        try:
            return [[float(x) for x in vector] for vector in vectors]
        except (TypeError, ValueError) as e:
            raise MalformedResultError(str(e), source="embeddings") from e

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        if not texts:
            return []
        if self.circuit_breaker.is_open:
            raise CollaboratorUnavailableError("embeddings", "circuit breaker open")
        body: dict[str, Any] = {"texts": list(texts)}
        if self._model:
            body["model"] = self._model
        data = await self._make_request(method="POST", data=body)
        if data is None:
            raise NetworkError(
                "Embedding request failed",
                context=ErrorContext(operation="embed", collaborator="embeddings"),
            )
        return self.parse_vectors(data, len(texts))
