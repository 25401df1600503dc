"""Domain Entities - Core business objects."""

from .history import HistoricalSearchRecord
from .insight import ContextualInsight, InsightType, SearchTrend, TrendDirection
from .query import (
    AnalyzedQuery,
    DateRange,
    EnhancedQuery,
    EnhancementTechnique,
    ExtractedEntities,
    QueryRefinement,
    RefinementType,
    SearchIntent,
    SuggestedFilter,
)
from .suggestion import (
    Suggestion,
    SuggestionBatch,
    SuggestionCategory,
    SuggestionContext,
    SuggestionMetadata,
    SuggestionSignal,
)
from .transcript import (
    PageRequest,
    ResultPage,
    SearchFilters,
    SortOption,
    TranscriptResult,
)

__all__ = [
    # Query
    "AnalyzedQuery",
    "DateRange",
    "EnhancedQuery",
    "EnhancementTechnique",
    "ExtractedEntities",
    "QueryRefinement",
    "RefinementType",
    "SearchIntent",
    "SuggestedFilter",
    # Suggestions
    "Suggestion",
    "SuggestionBatch",
    "SuggestionCategory",
    "SuggestionContext",
    "SuggestionMetadata",
    "SuggestionSignal",
    # Insights
    "ContextualInsight",
    "InsightType",
    "SearchTrend",
    "TrendDirection",
    # History
    "HistoricalSearchRecord",
    # Results
    "PageRequest",
    "ResultPage",
    "SearchFilters",
    "SortOption",
    "TranscriptResult",
]
