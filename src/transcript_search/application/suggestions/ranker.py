"""
SuggestionRanker - merges candidates from all sources into one display list.

Ordering is signal priority first (PERSONALIZED > TRENDING > SEMANTIC >
HISTORICAL), then confidence, both descending. A low-confidence personalized
suggestion therefore outranks a high-confidence historical one.
"""

from __future__ import annotations

from collections.abc import Iterable

from transcript_search.core.exceptions import ConfigurationError
from transcript_search.domain.entities import Suggestion

DEFAULT_MAX_SUGGESTIONS = 10


class SuggestionRanker:
    def __init__(self, max_suggestions: int = DEFAULT_MAX_SUGGESTIONS) -> None:
        if max_suggestions <= 0:
            msg = f"max_suggestions must be positive, got {max_suggestions}"
            raise ConfigurationError(msg, setting="max_suggestions")
        self._max = max_suggestions

    @property
    def max_suggestions(self) -> int:
        return self._max

    def rank(self, candidates: Iterable[Suggestion], query: str = "") -> list[Suggestion]:
        """
        Sort (stable), drop case-insensitive duplicate texts keeping the
        first occurrence, and truncate to the configured maximum.
        """
        ordered = sorted(candidates, key=lambda s: (s.signal.priority, s.confidence), reverse=True)
        seen: set[str] = set()
        ranked: list[Suggestion] = []
        for suggestion in ordered:
            if suggestion.dedup_key in seen:
                continue
            seen.add(suggestion.dedup_key)
            ranked.append(suggestion)
            if len(ranked) >= self._max:
                break
        return ranked
