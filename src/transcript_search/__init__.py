"""
Transcript Search - query intelligence for political video transcript search

Sits between a search box and a transcript backend:
    - per-keystroke suggestions (history, trending, semantic, personalized)
    - query enhancement (normalization, abbreviation expansion, domain terms)
    - contextual insights over result sets
    - persistent local query history

Usage:
    from transcript_search import ApplicationContainer, SearchSettings

    container = ApplicationContainer()
    container.config.from_dict(SearchSettings.from_env().to_dict())
    intelligence = container.intelligence()
    await intelligence.start()

    batch = await intelligence.suggest("clim")
    enhanced = intelligence.enhance("POTUS healthcare")
"""

from .application import SearchIntelligence, SearchOutcome
from .config import SearchSettings
from .container import ApplicationContainer

__version__ = "0.1.0"

__all__ = [
    "ApplicationContainer",
    "SearchIntelligence",
    "SearchOutcome",
    "SearchSettings",
    "__version__",
]
