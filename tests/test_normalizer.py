"""Tests for QueryNormalizer - cleanup and abbreviation expansion."""

from __future__ import annotations

import pytest

from transcript_search.application.search.normalizer import QueryNormalizer


@pytest.fixture
def normalizer():
    return QueryNormalizer()


class TestNormalize:
    def test_collapses_whitespace_and_strips_punctuation(self, normalizer):
        assert normalizer.normalize("  healthcare   policy!!  ") == "healthcare policy"

    def test_keeps_hyphens_and_underscores(self, normalizer):
        assert normalizer.normalize("covid-19 relief_fund") == "covid-19 relief_fund"

    def test_drops_apostrophes(self, normalizer):
        assert normalizer.normalize("biden's speech") == "bidens speech"

    def test_tabs_and_newlines_are_whitespace(self, normalizer):
        assert normalizer.normalize("climate\t\nchange") == "climate change"

    def test_punctuation_only_returns_trimmed_input(self, normalizer):
        assert normalizer.normalize("  ?!  ") == "?!"

    def test_empty_string(self, normalizer):
        assert normalizer.normalize("") == ""

    def test_case_is_preserved(self, normalizer):
        assert normalizer.normalize("Senator JOHNSON") == "Senator JOHNSON"

    @pytest.mark.parametrize(
        "raw",
        [
            "  healthcare   policy!!  ",
            "a !",
            "?!",
            "  --  ",
            "What did Pelosi say about the 2023 budget?",
            "tax reform",
        ],
    )
    def test_idempotent(self, normalizer, raw):
        once = normalizer.normalize(raw)
        assert normalizer.normalize(once) == once

    @pytest.mark.parametrize("raw", ["x", "!", "   ...   ", "é", "a  b"])
    def test_non_empty_input_never_empties(self, normalizer, raw):
        assert normalizer.normalize(raw) != ""


class TestExpandAbbreviations:
    def test_potus(self, normalizer):
        assert normalizer.expand_abbreviations("POTUS healthcare") == "President of the United States healthcare"

    def test_case_insensitive(self, normalizer):
        assert normalizer.expand_abbreviations("potus speech") == "President of the United States speech"

    def test_multiple(self, normalizer):
        assert (
            normalizer.expand_abbreviations("VP and SCOTUS")
            == "Vice President and Supreme Court of the United States"
        )

    def test_whole_words_only(self, normalizer):
        assert normalizer.expand_abbreviations("GOPHER") == "GOPHER"

    def test_no_abbreviation_unchanged(self, normalizer):
        assert normalizer.expand_abbreviations("climate policy") == "climate policy"

    def test_empty_table(self):
        assert QueryNormalizer({}).expand_abbreviations("POTUS") == "POTUS"

    def test_custom_table(self):
        normalizer = QueryNormalizer({"IRA": "Inflation Reduction Act"})
        assert normalizer.expand_abbreviations("the ira vote") == "the Inflation Reduction Act vote"
        assert normalizer.abbreviations == {"IRA": "Inflation Reduction Act"}
