"""
QueryNormalizer - text cleanup and abbreviation expansion.

Pure string functions: no I/O, no state beyond the abbreviation table,
never raise for any str input.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from .lexicon import DEFAULT_ABBREVIATIONS

_WHITESPACE = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^A-Za-z0-9 _-]")


class QueryNormalizer:
    """
    Canonicalizes raw user queries.

    Usage:
        normalizer = QueryNormalizer()
        normalizer.normalize("  healthcare   policy!!  ")  # "healthcare policy"
        normalizer.expand_abbreviations("POTUS speech")
        # "President of the United States speech"
    """

    def __init__(self, abbreviations: Mapping[str, str] | None = None) -> None:
        self._abbreviations = dict(DEFAULT_ABBREVIATIONS if abbreviations is None else abbreviations)
        self._abbreviation_pattern = self._compile(self._abbreviations)

    @staticmethod
    def _compile(table: Mapping[str, str]) -> re.Pattern[str] | None:
        if not table:
            return None
        # Longest first so overlapping keys prefer the most specific match
        keys = sorted(table, key=len, reverse=True)
        alternation = "|".join(re.escape(k) for k in keys)
        return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)

    @property
    def abbreviations(self) -> dict[str, str]:
        return dict(self._abbreviations)

    def normalize(self, raw: str) -> str:
        """
        Trim, collapse whitespace and drop characters outside [A-Za-z0-9 _-].

        Returns the trimmed input unchanged when stripping would leave nothing,
        so non-empty input never yields an empty result.
        """
        trimmed = raw.strip()
        collapsed = _WHITESPACE.sub(" ", trimmed)
        cleaned = _WHITESPACE.sub(" ", _DISALLOWED.sub("", collapsed)).strip()
        if not cleaned:
            return trimmed
        return cleaned

    def expand_abbreviations(self, text: str) -> str:
        """Replace whole-word abbreviations (case-insensitive) with their expansion."""
        if self._abbreviation_pattern is None:
            return text
        lookup = {k.lower(): v for k, v in self._abbreviations.items()}
        return self._abbreviation_pattern.sub(lambda m: lookup[m.group(0).lower()], text)
