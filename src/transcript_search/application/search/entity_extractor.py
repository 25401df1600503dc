"""
EntityAndIntentExtractor - rule-based entity detection and intent classification.

Detection is signal based: membership against the lexicon lists for
speakers, topics and organisations, plus lightweight date-phrase recognition
(relative terms, explicit years, named months). No statistical model.

Intent priority (first match wins):
    DATE_RANGE_QUERY > COMPARATIVE > SPEAKER_SPECIFIC > TOPIC_RESEARCH
    > FACT_FINDING > SENTIMENT > GENERAL
"""

from __future__ import annotations

import calendar
import logging
import re
from collections.abc import Callable
from datetime import datetime, timedelta

from transcript_search.domain.entities import (
    AnalyzedQuery,
    DateRange,
    ExtractedEntities,
    SearchIntent,
    SuggestedFilter,
)
from transcript_search.domain.entities.common import utcnow

from .lexicon import PoliticalLexicon
from .normalizer import QueryNormalizer

logger = logging.getLogger(__name__)

# Signal kinds counted for entity confidence: speakers, topics, dates
_SIGNAL_KINDS = 3

_MONTHS = {name.lower(): index for index, name in enumerate(calendar.month_name) if name}
# Month names that are also common English words only count with a year
_AMBIGUOUS_MONTHS = {"may", "march"}

_YEAR = r"(19\d{2}|20\d{2})"
_MONTH_PATTERN = re.compile(
    rf"\b({'|'.join(_MONTHS)})(?:\s+{_YEAR})?\b",
    re.IGNORECASE,
)
_YEAR_PATTERN = re.compile(rf"\b{_YEAR}\b")
_RELATIVE_PATTERN = re.compile(
    r"\b(today|yesterday|(?:this|last)\s+(?:week|month|year)|recent(?:ly)?)\b",
    re.IGNORECASE,
)

_TITLE_PATTERN = re.compile(
    r"\b(senator|sen|representative|rep|congressman|congresswoman|president|"
    r"governor|gov|mayor|secretary|speaker)\.?\s+([a-z][a-z'\-]+)\b",
    re.IGNORECASE,
)
_NOT_NAMES = {"of", "the", "on", "and", "for", "in", "to", "about", "says", "said"}

_COMPARATIVE_PATTERN = re.compile(r"\b(vs\.?|versus|compared\s+(?:to|with))(?=\s|$)", re.IGNORECASE)
_FACT_FINDING_PATTERN = re.compile(
    r"\b(did|fact[\s-]check(?:ed|ing)?|true\s+that|claims?|claimed)\b",
    re.IGNORECASE,
)
_SENTIMENT_PATTERN = re.compile(r"\b(opinions?|feels?|feelings?|sentiment|stance)\b", re.IGNORECASE)

_INTENT_CONFIDENCE = {
    SearchIntent.DATE_RANGE_QUERY: 0.9,
    SearchIntent.COMPARATIVE: 0.85,
    SearchIntent.SPEAKER_SPECIFIC: 0.8,
    SearchIntent.TOPIC_RESEARCH: 0.75,
    SearchIntent.FACT_FINDING: 0.6,
    SearchIntent.SENTIMENT: 0.6,
    SearchIntent.GENERAL: 0.5,
}


def _display_name(name: str) -> str:
    return name.title()


def _word_pattern(term: str, plural: bool = False) -> re.Pattern[str]:
    suffix = r"(?:es|s)?" if plural else ""
    return re.compile(rf"\b{re.escape(term)}{suffix}\b", re.IGNORECASE)


class EntityAndIntentExtractor:
    """
    Detects speakers, topics, organisations and dates in a query and
    classifies the search intent.

    Usage:
        extractor = EntityAndIntentExtractor()
        entities = extractor.extract("Senator Johnson on healthcare last year")
        entities.speakers    # ["Senator Johnson"]
        entities.topics      # ["healthcare"]
        extractor.classify_intent("biden vs trump")  # (COMPARATIVE, 0.85)
    """

    def __init__(
        self,
        lexicon: PoliticalLexicon | None = None,
        normalizer: QueryNormalizer | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._lexicon = lexicon or PoliticalLexicon()
        self._normalizer = normalizer or QueryNormalizer(self._lexicon.abbreviations)
        self._clock = clock
        self._speaker_patterns = [(s, _word_pattern(s)) for s in self._lexicon.speakers]
        self._topic_patterns = [(t, _word_pattern(t, plural=True)) for t in self._lexicon.topics]
        self._org_patterns = [(o, _word_pattern(o)) for o in self._lexicon.organizations]

    # =========================================================================
    # Entities
    # =========================================================================

    def extract(self, query: str) -> ExtractedEntities:
        """Recognise entities in *query*. Returns empty lists when nothing matches."""
        speakers = self.find_speakers(query)
        topics = [topic for topic, pattern in self._topic_patterns if pattern.search(query)]
        organizations = self.find_organizations(query)
        date_ranges = self.find_date_ranges(query)

        signals = sum(1 for found in (speakers, topics, date_ranges) if found)
        return ExtractedEntities(
            speakers=speakers,
            topics=topics,
            date_ranges=date_ranges,
            organizations=organizations,
            confidence=signals / _SIGNAL_KINDS,
        )

    def find_speakers(self, query: str) -> list[str]:
        """Titled names ("Senator Johnson") first, then lexicon members."""
        speakers: list[str] = []
        for match in _TITLE_PATTERN.finditer(query):
            title, name = match.group(1), match.group(2)
            if name.lower() in _NOT_NAMES:
                continue
            title = {"sen": "senator", "rep": "representative", "gov": "governor"}.get(title.lower(), title)
            speakers.append(f"{_display_name(title)} {_display_name(name)}")

        already = " ".join(speakers).lower()
        for name, pattern in self._speaker_patterns:
            if pattern.search(query) and name not in already:
                speakers.append(_display_name(name))
        return list(dict.fromkeys(speakers))

    def find_organizations(self, query: str) -> list[str]:
        return [org for org, pattern in self._org_patterns if pattern.search(query)]

    def find_date_ranges(self, query: str) -> list[DateRange]:
        """Relative terms, named months (optionally with a year) and bare years."""
        now = self._clock()
        ranges: list[DateRange] = []
        consumed: list[tuple[int, int]] = []

        for match in _RELATIVE_PATTERN.finditer(query):
            label = " ".join(match.group(1).lower().split())
            ranges.append(self._relative_range(label, now))

        for match in _MONTH_PATTERN.finditer(query):
            month_name = match.group(1).lower()
            year_text = match.group(2)
            if month_name in _AMBIGUOUS_MONTHS and not year_text:
                continue
            year = int(year_text) if year_text else now.year
            month = _MONTHS[month_name]
            last_day = calendar.monthrange(year, month)[1]
            start = now.replace(year=year, month=month, day=1, hour=0, minute=0, second=0, microsecond=0)
            end = start.replace(day=last_day, hour=23, minute=59, second=59)
            ranges.append(DateRange(label=match.group(0).lower(), start=start, end=end))
            consumed.append(match.span())

        for match in _YEAR_PATTERN.finditer(query):
            if any(lo <= match.start() < hi for lo, hi in consumed):
                continue
            year = int(match.group(1))
            start = now.replace(year=year, month=1, day=1, hour=0, minute=0, second=0, microsecond=0)
            end = start.replace(month=12, day=31, hour=23, minute=59, second=59)
            ranges.append(DateRange(label=match.group(1), start=start, end=end))

        return ranges

    @staticmethod
    def _relative_range(label: str, now: datetime) -> DateRange:
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        if label == "today":
            return DateRange(label=label, start=day_start, end=now)
        if label == "yesterday":
            return DateRange(label=label, start=day_start - timedelta(days=1), end=day_start)
        if label == "this week":
            return DateRange(label=label, start=day_start - timedelta(days=now.weekday()), end=now)
        if label == "last week":
            this_week = day_start - timedelta(days=now.weekday())
            return DateRange(label=label, start=this_week - timedelta(days=7), end=this_week)
        if label == "this month":
            return DateRange(label=label, start=day_start.replace(day=1), end=now)
        if label == "last month":
            this_month = day_start.replace(day=1)
            previous = (this_month - timedelta(days=1)).replace(day=1)
            return DateRange(label=label, start=previous, end=this_month)
        if label == "this year":
            return DateRange(label=label, start=day_start.replace(month=1, day=1), end=now)
        if label == "last year":
            this_year = day_start.replace(month=1, day=1)
            return DateRange(label=label, start=this_year.replace(year=this_year.year - 1), end=this_year)
        # recent / recently
        return DateRange(label=label, start=day_start - timedelta(days=30), end=now)

    # =========================================================================
    # Intent
    # =========================================================================

    def classify_intent(self, query: str) -> tuple[SearchIntent, float]:
        """Rule-based intent; see module docstring for the priority order."""
        entities = self.extract(query)
        return self._classify(query, entities)

    def _classify(self, query: str, entities: ExtractedEntities) -> tuple[SearchIntent, float]:
        if entities.date_ranges:
            intent = SearchIntent.DATE_RANGE_QUERY
        elif _COMPARATIVE_PATTERN.search(query):
            intent = SearchIntent.COMPARATIVE
        elif entities.speakers:
            intent = SearchIntent.SPEAKER_SPECIFIC
        elif entities.topics:
            intent = SearchIntent.TOPIC_RESEARCH
        elif _FACT_FINDING_PATTERN.search(query):
            intent = SearchIntent.FACT_FINDING
        elif _SENTIMENT_PATTERN.search(query):
            intent = SearchIntent.SENTIMENT
        else:
            intent = SearchIntent.GENERAL
        return intent, _INTENT_CONFIDENCE[intent]

    # =========================================================================
    # Composition
    # =========================================================================

    def analyze(self, query: str) -> AnalyzedQuery:
        """Normalize, extract and classify in one pass."""
        normalized = self._normalizer.normalize(query)
        entities = self.extract(normalized)
        intent, intent_confidence = self._classify(normalized, entities)
        return AnalyzedQuery(
            original_query=query,
            normalized_query=normalized,
            entities=entities,
            intent=intent,
            intent_confidence=intent_confidence,
            confidence=(entities.confidence + intent_confidence) / 2,
            suggested_filters=self.suggest_filters(entities),
        )

    @staticmethod
    def suggest_filters(entities: ExtractedEntities) -> list[SuggestedFilter]:
        filters: list[SuggestedFilter] = []
        if entities.speakers:
            filters.append(
                SuggestedFilter(
                    category="speakers",
                    values=list(entities.speakers),
                    confidence=0.8,
                    reasoning=f"Detected speaker mention: {', '.join(entities.speakers)}",
                )
            )
        if entities.topics:
            filters.append(
                SuggestedFilter(
                    category="categories",
                    values=list(entities.topics),
                    confidence=0.7,
                    reasoning=f"Detected topic: {', '.join(entities.topics)}",
                )
            )
        if entities.date_ranges:
            filters.append(
                SuggestedFilter(
                    category="date_range",
                    values=[d.label for d in entities.date_ranges],
                    confidence=0.75,
                    reasoning="Detected time reference",
                )
            )
        return filters
