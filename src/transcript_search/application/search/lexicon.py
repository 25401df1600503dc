"""
Political Lexicon - keyword tables used by the query pipeline.

The heuristics in this package are rule-based: speakers, topics and
organisations are recognised by membership in these lists, abbreviations are
expanded from a fixed table. Everything here can be overridden with a YAML
file (``TRANSCRIPT_SEARCH_LEXICON_PATH``):

    abbreviations:
      POTUS: President of the United States
    speakers: [biden, harris]
    topics: [healthcare, climate]
    organizations: [congress, senate]
    trending: [climate policy]

Keys that are absent keep their defaults.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from transcript_search.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


DEFAULT_ABBREVIATIONS: dict[str, str] = {
    "POTUS": "President of the United States",
    "VP": "Vice President",
    "GOP": "Republican Party",
    "DNC": "Democratic National Committee",
    "RNC": "Republican National Committee",
    "SCOTUS": "Supreme Court of the United States",
    "FDA": "Food and Drug Administration",
    "EPA": "Environmental Protection Agency",
    "DoD": "Department of Defense",
    "DoJ": "Department of Justice",
    "HHS": "Health and Human Services",
    "DHS": "Department of Homeland Security",
}

DEFAULT_SPEAKERS: list[str] = [
    "biden",
    "trump",
    "harris",
    "obama",
    "pence",
    "pelosi",
    "mcconnell",
    "schumer",
    "sanders",
    "warren",
    "desantis",
    "newsom",
    "johnson",
    "jeffries",
    "ocasio-cortez",
]

DEFAULT_TOPICS: list[str] = [
    "healthcare",
    "economy",
    "climate",
    "immigration",
    "education",
    "foreign policy",
    "infrastructure",
    "tax",
    "social security",
    "medicare",
    "defense",
    "trade",
    "abortion",
    "gun control",
    "energy",
    "inflation",
]

DEFAULT_ORGANIZATIONS: list[str] = [
    "white house",
    "pentagon",
    "supreme court",
    "federal reserve",
    "united nations",
    "nato",
    "fbi",
    "cia",
    "state department",
    "treasury",
]

DEFAULT_TRENDING: list[str] = [
    "climate policy",
    "healthcare reform",
    "economic recovery",
    "foreign relations",
    "immigration policy",
    "education funding",
    "infrastructure investment",
    "social security",
    "tax policy",
]

# Domain queries the semantic source compares a partial query against
DEFAULT_SEMANTIC_CANDIDATES: list[str] = [
    "healthcare reform policies",
    "economic recovery plans",
    "climate change legislation",
    "foreign policy decisions",
    "immigration reform",
    "education funding",
    "infrastructure investment",
    "social security reform",
    "tax policy changes",
]

DEFAULT_COMPLETIONS: list[str] = [
    "healthcare policy",
    "economic policy",
    "foreign policy",
    "immigration policy",
    "climate change",
    "education reform",
    "infrastructure bill",
    "tax reform",
    "social security",
    "medicare",
    "defense spending",
    "trade policy",
]

# Presence of any of these means the query already has political framing
POLITICAL_KEYWORDS: tuple[str, ...] = (
    "policy",
    "legislation",
    "congress",
    "senate",
    "house",
    "committee",
    "hearing",
    "testimony",
    "statement",
    "address",
)

# Counted when scoring how much an enhancement added
POLITICAL_TERMS: tuple[str, ...] = (
    *POLITICAL_KEYWORDS,
    "government",
    "administration",
    "political",
    "politician",
)


@dataclass
class PoliticalLexicon:
    """Configurable lookup lists for the rule-based extractors."""

    abbreviations: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_ABBREVIATIONS))
    speakers: list[str] = field(default_factory=lambda: list(DEFAULT_SPEAKERS))
    topics: list[str] = field(default_factory=lambda: list(DEFAULT_TOPICS))
    organizations: list[str] = field(default_factory=lambda: list(DEFAULT_ORGANIZATIONS))
    trending: list[str] = field(default_factory=lambda: list(DEFAULT_TRENDING))
    semantic_candidates: list[str] = field(default_factory=lambda: list(DEFAULT_SEMANTIC_CANDIDATES))
    completions: list[str] = field(default_factory=lambda: list(DEFAULT_COMPLETIONS))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PoliticalLexicon:
        """Build a lexicon, keeping defaults for keys that are missing."""
        lexicon = cls()
        known = {f.name for f in fields(cls)}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown lexicon key: {key}")
                continue
            if key == "abbreviations":
                if not isinstance(value, dict):
                    msg = "Lexicon 'abbreviations' must be a mapping"
                    raise ConfigurationError(msg)
                lexicon.abbreviations = {str(k): str(v) for k, v in value.items()}
            else:
                if not isinstance(value, list):
                    msg = f"Lexicon '{key}' must be a list of strings"
                    raise ConfigurationError(msg)
                setattr(lexicon, key, [str(v).strip().lower() for v in value if str(v).strip()])
        return lexicon

    @classmethod
    def from_yaml(cls, path: str | Path) -> PoliticalLexicon:
        """
        Load a lexicon override file.

        Raises:
            ConfigurationError: If the file is missing or not valid YAML.
        """
        path = Path(path).expanduser()
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except OSError as e:
            msg = f"Cannot read lexicon file {path}: {e}"
            raise ConfigurationError(msg, setting="lexicon_path") from e
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in lexicon file {path}: {e}"
            raise ConfigurationError(msg, setting="lexicon_path") from e

        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            msg = f"Lexicon file {path} must contain a mapping at the top level"
            raise ConfigurationError(msg, setting="lexicon_path")

        logger.info(f"Loaded lexicon overrides from {path}: {sorted(raw)}")
        return cls.from_dict(raw)


def load_lexicon(path: str | Path | None = None) -> PoliticalLexicon:
    """Default lexicon, or the YAML override at *path* when given."""
    if not path:
        return PoliticalLexicon()
    return PoliticalLexicon.from_yaml(path)
