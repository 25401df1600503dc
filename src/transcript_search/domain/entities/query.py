"""
Domain Entities: Analyzed and Enhanced Queries

Value objects produced by the query pipeline:
- AnalyzedQuery: cleaned text + detected entities + intent
- EnhancedQuery: the rewritten query that is sent to the backend
- QueryRefinement: optional hints for the user to tighten a query
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .common import clamp_score, utcnow


class SearchIntent(str, Enum):
    """
    Coarse classification of what the user is searching for.

    Classification priority (highest first):
    DATE_RANGE_QUERY > COMPARATIVE > SPEAKER_SPECIFIC > TOPIC_RESEARCH
    > FACT_FINDING > SENTIMENT > GENERAL
    """

    GENERAL = "general"
    SPEAKER_SPECIFIC = "speaker_specific"
    TOPIC_RESEARCH = "topic_research"
    DATE_RANGE_QUERY = "date_range"
    COMPARATIVE = "comparative"
    FACT_FINDING = "fact_finding"
    SENTIMENT = "sentiment"

    @property
    def processing_strategy(self) -> str:
        return _PROCESSING_STRATEGIES[self]


_PROCESSING_STRATEGIES = {
    SearchIntent.GENERAL: "broad_search",
    SearchIntent.SPEAKER_SPECIFIC: "speaker_focused",
    SearchIntent.TOPIC_RESEARCH: "topic_deep_dive",
    SearchIntent.DATE_RANGE_QUERY: "temporal_analysis",
    SearchIntent.COMPARATIVE: "comparative_analysis",
    SearchIntent.FACT_FINDING: "fact_verification",
    SearchIntent.SENTIMENT: "sentiment_analysis",
}


@dataclass
class DateRange:
    """A date window detected in a query. Either bound may be open."""

    label: str
    start: datetime | None = None
    end: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }


@dataclass
class ExtractedEntities:
    """Speakers, topics and date ranges recognised in a query."""

    speakers: list[str] = field(default_factory=list)
    topics: list[str] = field(default_factory=list)
    date_ranges: list[DateRange] = field(default_factory=list)
    organizations: list[str] = field(default_factory=list)
    confidence: float = 0.0

    def __post_init__(self) -> None:
        self.confidence = clamp_score(self.confidence)

    @property
    def is_empty(self) -> bool:
        return not (self.speakers or self.topics or self.date_ranges or self.organizations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "speakers": list(self.speakers),
            "topics": list(self.topics),
            "date_ranges": [d.to_dict() for d in self.date_ranges],
            "organizations": list(self.organizations),
            "confidence": self.confidence,
        }


@dataclass
class SuggestedFilter:
    """A backend filter the caller may want to apply, derived from entities."""

    category: str  # "speakers", "categories", "date_range"
    values: list[str]
    confidence: float
    reasoning: str

    def __post_init__(self) -> None:
        self.confidence = clamp_score(self.confidence)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "values": list(self.values),
            "confidence": self.confidence,
            "reasoning": self.reasoning,
        }


@dataclass
class AnalyzedQuery:
    """
    Result of query analysis.

    Contains everything the enhancer and the suggestion sources need
    to know about a raw query.
    """

    original_query: str
    normalized_query: str
    entities: ExtractedEntities
    intent: SearchIntent = SearchIntent.GENERAL
    intent_confidence: float = 0.0
    confidence: float = 0.0
    suggested_filters: list[SuggestedFilter] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.intent_confidence = clamp_score(self.intent_confidence)
        self.confidence = clamp_score(self.confidence)

    @classmethod
    def fallback(cls, query: str) -> AnalyzedQuery:
        """Analysis used when the extractor could not run."""
        return cls(
            original_query=query,
            normalized_query=query,
            entities=ExtractedEntities(),
            intent=SearchIntent.GENERAL,
            intent_confidence=0.5,
            confidence=0.5,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_query": self.original_query,
            "normalized_query": self.normalized_query,
            "entities": self.entities.to_dict(),
            "intent": self.intent.value,
            "intent_confidence": self.intent_confidence,
            "confidence": self.confidence,
            "suggested_filters": [f.to_dict() for f in self.suggested_filters],
        }


class EnhancementTechnique(str, Enum):
    """Rewrite stages applied by the query enhancer."""

    NORMALIZATION = "normalization"
    ABBREVIATION_EXPANSION = "abbreviation_expansion"
    CONTEXTUAL_ENHANCEMENT = "contextual_enhancement"
    SEMANTIC_ENHANCEMENT = "semantic_enhancement"
    DOMAIN_SPECIFIC = "domain_specific"

    @property
    def description(self) -> str:
        return _TECHNIQUE_DESCRIPTIONS[self]


_TECHNIQUE_DESCRIPTIONS = {
    EnhancementTechnique.NORMALIZATION: "text normalization",
    EnhancementTechnique.ABBREVIATION_EXPANSION: "abbreviation expansion",
    EnhancementTechnique.CONTEXTUAL_ENHANCEMENT: "contextual enhancement",
    EnhancementTechnique.SEMANTIC_ENHANCEMENT: "semantic enhancement",
    EnhancementTechnique.DOMAIN_SPECIFIC: "political domain optimization",
}


@dataclass
class EnhancedQuery:
    """
    Result of query enhancement.

    `enhanced_text` is what gets sent to the backend search API.
    """

    original_text: str
    enhanced_text: str
    techniques: list[EnhancementTechnique] = field(default_factory=list)
    improvement_score: float = 0.0
    confidence: float = 0.0
    explanation: str = ""
    suggested_filters: list[SuggestedFilter] = field(default_factory=list)
    timestamp: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        self.improvement_score = clamp_score(self.improvement_score)
        self.confidence = clamp_score(self.confidence)

    @property
    def changed(self) -> bool:
        return self.enhanced_text != self.original_text

    @classmethod
    def fallback(cls, query: str, reason: str) -> EnhancedQuery:
        """Unchanged query returned when enhancement fails."""
        return cls(
            original_text=query,
            enhanced_text=query,
            explanation=f"Optimization failed: {reason}",
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "original_text": self.original_text,
            "enhanced_text": self.enhanced_text,
            "techniques": [t.value for t in self.techniques],
            "improvement_score": round(self.improvement_score, 4),
            "confidence": round(self.confidence, 4),
            "explanation": self.explanation,
            "suggested_filters": [f.to_dict() for f in self.suggested_filters],
            "timestamp": self.timestamp.isoformat(),
        }


class RefinementType(str, Enum):
    ADD_CONTEXT = "add_context"
    SPECIFICITY = "specificity"
    SIMPLIFICATION = "simplification"


@dataclass
class QueryRefinement:
    """A human-facing hint for rewriting a query."""

    type: RefinementType
    original: str
    suggested: str
    improvement: str
    confidence: float

    def __post_init__(self) -> None:
        self.confidence = clamp_score(self.confidence)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "original": self.original,
            "suggested": self.suggested,
            "improvement": self.improvement,
            "confidence": self.confidence,
        }
