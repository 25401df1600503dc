"""
Domain Entity: HistoricalSearchRecord

One record per case-folded query text. Repeated searches update the record
in place: frequency only ever increases.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from .common import parse_timestamp, utcnow


@dataclass
class HistoricalSearchRecord:
    """Record of a normalized query and how often it was searched."""

    key: str  # case-folded query text
    query: str  # display text of the most recent search
    last_seen: datetime
    frequency: int = 1
    last_result_count: int = 0
    sequence: int = 0  # insertion order, breaks timestamp ties

    @staticmethod
    def make_key(query: str) -> str:
        return " ".join(query.split()).casefold()

    def touch(self, query: str, result_count: int, now: datetime | None = None) -> None:
        """Register a repeat search of this query."""
        self.query = query
        self.frequency += 1
        self.last_seen = now or utcnow()
        self.last_result_count = result_count

    def is_expired(self, retention: timedelta, now: datetime | None = None) -> bool:
        return (now or utcnow()) - self.last_seen > retention

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "query": self.query,
            "last_seen": self.last_seen.isoformat(),
            "frequency": self.frequency,
            "last_result_count": self.last_result_count,
            "sequence": self.sequence,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HistoricalSearchRecord:
        query = data.get("query", "")
        return cls(
            key=data.get("key") or cls.make_key(query),
            query=query,
            last_seen=parse_timestamp(data.get("last_seen")) or utcnow(),
            frequency=max(1, int(data.get("frequency", 1))),
            last_result_count=int(data.get("last_result_count", 0)),
            sequence=int(data.get("sequence", 0)),
        )
