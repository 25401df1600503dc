"""
Application Layer - query intelligence use cases.

Contains:
- search: normalization, entity/intent extraction, enhancement, result insights
- suggestions: suggestion sources, ranking and the per-keystroke service
- session: persistent query history
- intelligence: the SearchIntelligence facade tying them together
"""

from .intelligence import SearchIntelligence, SearchOutcome

__all__ = ["SearchIntelligence", "SearchOutcome"]
