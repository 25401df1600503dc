"""
Lexical sentiment analyzer.

Counts positive and negative words; the label is whichever count is larger,
"neutral" on a tie. Good enough as a default SentimentAnalyzer; swap in a
real model through the container if needed.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

POSITIVE = "positive"
NEGATIVE = "negative"
NEUTRAL = "neutral"

DEFAULT_POSITIVE_WORDS = frozenset(
    {
        "good",
        "great",
        "excellent",
        "strong",
        "success",
        "successful",
        "progress",
        "improve",
        "improved",
        "growth",
        "support",
        "benefit",
        "hope",
        "proud",
        "win",
        "opportunity",
        "agree",
        "bipartisan",
        "protect",
        "secure",
    }
)

DEFAULT_NEGATIVE_WORDS = frozenset(
    {
        "bad",
        "terrible",
        "weak",
        "fail",
        "failed",
        "failure",
        "crisis",
        "disaster",
        "oppose",
        "against",
        "threat",
        "danger",
        "corrupt",
        "corruption",
        "wrong",
        "harm",
        "decline",
        "loss",
        "attack",
        "fear",
    }
)

_WORD = re.compile(r"[a-z']+")


class LexiconSentimentAnalyzer:
    def __init__(
        self,
        positive_words: Iterable[str] = DEFAULT_POSITIVE_WORDS,
        negative_words: Iterable[str] = DEFAULT_NEGATIVE_WORDS,
    ) -> None:
        self._positive = frozenset(w.lower() for w in positive_words)
        self._negative = frozenset(w.lower() for w in negative_words)

    def score(self, text: str) -> int:
        """Positive minus negative word count."""
        words = _WORD.findall(text.lower())
        return sum(w in self._positive for w in words) - sum(w in self._negative for w in words)

    def classify(self, text: str) -> str:
        score = self.score(text)
        if score > 0:
            return POSITIVE
        if score < 0:
            return NEGATIVE
        return NEUTRAL
