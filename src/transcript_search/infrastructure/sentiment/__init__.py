"""Sentiment analysis adapters."""

from .lexicon import NEGATIVE, NEUTRAL, POSITIVE, LexiconSentimentAnalyzer

__all__ = ["LexiconSentimentAnalyzer", "NEGATIVE", "NEUTRAL", "POSITIVE"]
