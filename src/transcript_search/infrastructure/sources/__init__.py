"""
HTTP collaborator clients.

All clients share BaseAPIClient (httpx, retry on 429, circuit breaker):
- BackendSearchClient: SearchExecutor
- TrendingTopicsClient: TrendingProvider
- HttpEmbeddingClient: EmbeddingProvider
"""

from .backend import BackendSearchClient
from .base_client import BaseAPIClient
from .embeddings import HttpEmbeddingClient
from .trending import TrendingTopicsClient

__all__ = [
    "BackendSearchClient",
    "BaseAPIClient",
    "HttpEmbeddingClient",
    "TrendingTopicsClient",
]
