"""
Infrastructure Layer - concrete collaborator adapters.

- cache: bounded TTL cache (cachetools)
- persistence: KeyValueStore implementations
- sources: httpx clients for backend, trending and embeddings
- sentiment: lexical sentiment analyzer
- analytics: fire-and-forget event emitter
"""
