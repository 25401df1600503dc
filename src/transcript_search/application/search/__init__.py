"""Search use cases: normalize, extract, enhance, analyze results."""

from .context_analyzer import ResultContextAnalyzer
from .entity_extractor import EntityAndIntentExtractor
from .lexicon import PoliticalLexicon, load_lexicon
from .normalizer import QueryNormalizer
from .performance import PerformanceInsight, PerformanceInsightType, QueryMetrics, QueryPerformanceTracker
from .query_enhancer import QueryEnhancer

__all__ = [
    "EntityAndIntentExtractor",
    "PerformanceInsight",
    "PerformanceInsightType",
    "PoliticalLexicon",
    "QueryEnhancer",
    "QueryMetrics",
    "QueryNormalizer",
    "QueryPerformanceTracker",
    "ResultContextAnalyzer",
    "load_lexicon",
]
