"""
QueryEnhancer - rewrites a submitted query before it hits the backend.

Pipeline, applied in fixed order (each stage tagged only if it changed
the text, except normalization which is always tagged):

    1. NORMALIZATION           whitespace / punctuation cleanup
    2. ABBREVIATION_EXPANSION  POTUS -> President of the United States
    3. CONTEXTUAL_ENHANCEMENT  economy -> + "policy", law -> + "legislation", ...
    4. SEMANTIC_ENHANCEMENT    named person -> + "politician", organisation -> + "institution"
    5. DOMAIN_SPECIFIC         no political keyword -> topic suffix

Scoring:
    improvement = min(Δlen / len_before, 0.5)
                  + 0.1 * (political terms after - before)
                  + 0.2 if an abbreviation was expanded
    confidence  = 0.15 * len(techniques) + 0.6 * improvement + 0.25
Both are clamped to [0, 1].

Enhancement never raises: any failure yields an unchanged fallback query.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from transcript_search.core.exceptions import InvalidQueryError
from transcript_search.domain.entities import (
    EnhancedQuery,
    EnhancementTechnique,
    QueryRefinement,
    RefinementType,
)
from transcript_search.domain.entities.common import utcnow
from transcript_search.infrastructure.cache import BoundedTTLCache

from .entity_extractor import EntityAndIntentExtractor
from .lexicon import POLITICAL_KEYWORDS, POLITICAL_TERMS, PoliticalLexicon
from .normalizer import QueryNormalizer

logger = logging.getLogger(__name__)

EXPLANATION_PREFIX = "Applied optimizations: "

_CONTROVERSIAL_TERMS = ("abortion", "gun", "immigration", "climate")
_ROLE_WORDS = ("senator", "representative")
_INSTITUTION_WORDS = ("government", "administration")

_DOMAIN_SUFFIXES = (
    ("healthcare", " healthcare policy"),
    ("climate", " climate legislation"),
    ("tax", " tax policy"),
)
_DEFAULT_SUFFIX = " political statement"

_TIME_PATTERNS = ("2024", "2023", "2022", "2021", "last year", "this year", "recent", "latest")
_SPEAKER_PATTERNS = ("speaker:", "senator", "representative", "president", "governor", "mayor")


def count_political_terms(text: str) -> int:
    lowered = text.lower()
    return sum(1 for term in POLITICAL_TERMS if term in lowered)


class QueryEnhancer:
    """
    Produces an EnhancedQuery for a submitted search.

    Results are cached per exact query string in a bounded TTL cache
    (default 24 h, 500 entries).

    Usage:
        enhancer = QueryEnhancer()
        enhanced = enhancer.enhance("economy")
        enhanced.enhanced_text  # "economy policy"
    """

    def __init__(
        self,
        normalizer: QueryNormalizer | None = None,
        extractor: EntityAndIntentExtractor | None = None,
        lexicon: PoliticalLexicon | None = None,
        cache: BoundedTTLCache[EnhancedQuery] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        lexicon = lexicon or PoliticalLexicon()
        self._normalizer = normalizer or QueryNormalizer(lexicon.abbreviations)
        self._extractor = extractor or EntityAndIntentExtractor(lexicon, self._normalizer)
        self._cache = cache if cache is not None else BoundedTTLCache(500, 24 * 3600, name="enhancement")
        self._clock = clock

    def enhance(self, query: str) -> EnhancedQuery:
        """Enhance *query*; never raises."""
        key = query
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        try:
            enhanced = self._run_pipeline(query)
        except Exception as e:
            logger.warning(f"Query enhancement failed for {query!r}: {e}")
            return EnhancedQuery.fallback(query, str(e))

        self._cache.set(key, enhanced)
        logger.debug(
            f"Enhanced {query!r} -> {enhanced.enhanced_text!r} "
            f"({', '.join(t.value for t in enhanced.techniques)})"
        )
        return enhanced

    def _run_pipeline(self, query: str) -> EnhancedQuery:
        if not query.strip():
            raise InvalidQueryError(query)

        techniques: list[EnhancementTechnique] = []

        text = self._normalizer.normalize(query)
        techniques.append(EnhancementTechnique.NORMALIZATION)

        expanded = self._normalizer.expand_abbreviations(text)
        abbreviation_expanded = expanded != text
        if abbreviation_expanded:
            text = expanded
            techniques.append(EnhancementTechnique.ABBREVIATION_EXPANSION)

        stages = (
            (self.add_contextual_terms, EnhancementTechnique.CONTEXTUAL_ENHANCEMENT),
            (self.add_semantic_terms, EnhancementTechnique.SEMANTIC_ENHANCEMENT),
            (self.optimize_for_domain, EnhancementTechnique.DOMAIN_SPECIFIC),
        )
        for stage, technique in stages:
            updated = stage(text)
            if updated != text:
                text = updated
                techniques.append(technique)

        score = self._improvement_score(query, text, abbreviation_expanded)
        confidence = 0.15 * len(techniques) + 0.6 * score + 0.25
        analysis = self._extractor.analyze(text)

        return EnhancedQuery(
            original_text=query,
            enhanced_text=text,
            techniques=techniques,
            improvement_score=score,
            confidence=confidence,
            explanation=EXPLANATION_PREFIX + ", ".join(t.description for t in techniques),
            suggested_filters=analysis.suggested_filters,
            timestamp=self._clock(),
        )

    # =========================================================================
    # Stages
    # =========================================================================

    @staticmethod
    def add_contextual_terms(text: str) -> str:
        lowered = text.lower()
        result = text
        if ("economy" in lowered or "economic" in lowered) and "policy" not in lowered:
            result += " policy"
        if ("law" in lowered or "legal" in lowered) and "legislation" not in lowered:
            result += " legislation"
        if any(term in lowered for term in _CONTROVERSIAL_TERMS):
            if "debate" not in lowered and "discussion" not in lowered:
                result += " debate"
        return result

    def add_semantic_terms(self, text: str) -> str:
        lowered = text.lower()
        extra: list[str] = []
        if self._extractor.find_speakers(text) and not any(w in lowered for w in _ROLE_WORDS):
            extra.append("politician")
        if self._extractor.find_organizations(text) and not any(w in lowered for w in _INSTITUTION_WORDS):
            extra.append("institution")
        if not extra:
            return text
        return f"{text} {' '.join(extra)}"

    @staticmethod
    def optimize_for_domain(text: str) -> str:
        lowered = text.lower()
        if any(keyword in lowered for keyword in POLITICAL_KEYWORDS):
            return text
        for trigger, suffix in _DOMAIN_SUFFIXES:
            if trigger in lowered:
                return text + suffix
        return text + _DEFAULT_SUFFIX

    @staticmethod
    def _improvement_score(original: str, enhanced: str, abbreviation_expanded: bool) -> float:
        before = len(original)
        length_score = min((len(enhanced) - before) / before, 0.5)
        terms_added = max(0, count_political_terms(enhanced) - count_political_terms(original))
        score = length_score + 0.1 * terms_added + (0.2 if abbreviation_expanded else 0.0)
        return max(0.0, min(1.0, score))

    # =========================================================================
    # Refinement hints
    # =========================================================================

    def suggest_refinements(self, query: str) -> list[QueryRefinement]:
        """Human-facing rewrite hints, highest confidence first."""
        lowered = query.lower()
        words = query.split()
        hints: list[QueryRefinement] = []

        if not any(p in lowered for p in _TIME_PATTERNS):
            hints.append(
                QueryRefinement(
                    type=RefinementType.ADD_CONTEXT,
                    original=query,
                    suggested=f"{query} in {self._clock().year}",
                    improvement="Add time context for more precise results",
                    confidence=0.8,
                )
            )

        if not any(p in lowered for p in _SPEAKER_PATTERNS) and len(query) < 50:
            hints.append(
                QueryRefinement(
                    type=RefinementType.ADD_CONTEXT,
                    original=query,
                    suggested=f"speaker: {query}",
                    improvement="Specify speaker for targeted search",
                    confidence=0.7,
                )
            )

        if len(words) < 2:
            hints.append(
                QueryRefinement(
                    type=RefinementType.SPECIFICITY,
                    original=query,
                    suggested=f"{query} policy details",
                    improvement="Add more specific terms",
                    confidence=0.6,
                )
            )

        if len(words) > 10:
            hints.append(
                QueryRefinement(
                    type=RefinementType.SIMPLIFICATION,
                    original=query,
                    suggested=" ".join(words[:3] + words[-3:]),
                    improvement="Simplify for better results",
                    confidence=0.7,
                )
            )

        return sorted(hints, key=lambda h: h.confidence, reverse=True)

    @property
    def cache(self) -> BoundedTTLCache[EnhancedQuery]:
        return self._cache
