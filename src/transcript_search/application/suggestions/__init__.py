"""Suggestion pipeline: sources -> ranker -> service."""

from .ranker import SuggestionRanker
from .service import SuggestionService
from .sources import (
    HistoricalSuggestionSource,
    PersonalizedSuggestionSource,
    SemanticSuggestionSource,
    SuggestionSource,
    TrendingSuggestionSource,
)

__all__ = [
    "HistoricalSuggestionSource",
    "PersonalizedSuggestionSource",
    "SemanticSuggestionSource",
    "SuggestionRanker",
    "SuggestionService",
    "SuggestionSource",
    "TrendingSuggestionSource",
]
