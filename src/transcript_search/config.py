"""
Runtime settings.

All knobs can be set through environment variables named
``TRANSCRIPT_SEARCH_<FIELD>`` (upper case), e.g.::

    TRANSCRIPT_SEARCH_MAX_SUGGESTIONS=8
    TRANSCRIPT_SEARCH_BACKEND_URL=https://api.example.org/v1
    TRANSCRIPT_SEARCH_DATA_DIR=~/.transcript-search

Invalid values raise ConfigurationError at construction time.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from transcript_search.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "TRANSCRIPT_SEARCH_"
DEFAULT_DATA_DIR = "~/.transcript-search"

_POSITIVE_INTS = (
    "max_suggestions",
    "max_insights",
    "history_capacity",
    "history_retention_days",
    "insight_ttl_seconds",
    "suggestion_cache_ttl_seconds",
    "enhancement_cache_ttl_seconds",
    "suggestion_cache_size",
    "enhancement_cache_size",
    "insight_cache_size",
)


@dataclass
class SearchSettings:
    max_suggestions: int = 10
    max_insights: int = 5
    min_prefix_length: int = 2
    source_timeout: float = 0.5
    search_timeout: float = 10.0
    history_capacity: int = 1000
    history_retention_days: int = 30
    insight_ttl_seconds: int = 1800
    suggestion_cache_ttl_seconds: int = 3600
    enhancement_cache_ttl_seconds: int = 86400
    suggestion_cache_size: int = 100
    enhancement_cache_size: int = 500
    insight_cache_size: int = 200
    semantic_threshold: float = 0.7
    data_dir: str | None = None
    backend_url: str | None = None
    backend_api_key: str | None = None
    trending_url: str | None = None
    embedding_url: str | None = None
    lexicon_path: str | None = None

    def __post_init__(self) -> None:
        for name in _POSITIVE_INTS:
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}", setting=name)
        if self.min_prefix_length < 0:
            raise ConfigurationError("min_prefix_length must not be negative", setting="min_prefix_length")
        for name in ("source_timeout", "search_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigurationError(f"{name} must be positive", setting=name)
        if not 0.0 <= self.semantic_threshold <= 1.0:
            raise ConfigurationError("semantic_threshold must be within [0, 1]", setting="semantic_threshold")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SearchSettings:
        """Build settings from ``TRANSCRIPT_SEARCH_*`` variables; unset ones keep defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            raw = env.get(f"{ENV_PREFIX}{f.name.upper()}", "").strip()
            if not raw:
                continue
            values[f.name] = _coerce(f.name, raw, f.default)
        settings = cls(**values)
        if values:
            logger.info(f"Loaded settings from environment: {sorted(values)}")
        return settings

    def to_dict(self) -> dict[str, Any]:
        """Plain dict for ``container.config.from_dict()``."""
        data = dataclasses.asdict(self)
        data["data_dir"] = self.data_dir or DEFAULT_DATA_DIR
        return data


def _coerce(name: str, raw: str, default: Any) -> Any:
    try:
        if isinstance(default, bool):
            return raw.lower() in ("1", "true", "yes")
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"{ENV_PREFIX}{name.upper()}={raw!r} is not a valid {type(default).__name__}",
            setting=name,
        ) from e
    return raw
