"""
QueryHistoryStore - frequency-aware record of past searches.

Storage model:
- One HistoricalSearchRecord per case-folded query text, under the key
  ``history:{key}`` in a KeyValueStore collaborator.
- An in-memory mirror serves every read; writes go to the mirror first and
  are then persisted. Persistence failures are logged and otherwise ignored.
- Writes are serialized through an asyncio.Lock (single writer).

Capacity overflow evicts the least recently used record (oldest
``last_seen``, ties broken by insertion order). Records older than the
retention window are invisible to reads, dropped by ``load()`` and
deleted from storage by ``prune()``; recording an expired query starts a
fresh record.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

from transcript_search.core.exceptions import ConfigurationError
from transcript_search.domain.entities import HistoricalSearchRecord, SearchTrend, TrendDirection
from transcript_search.domain.entities.common import utcnow
from transcript_search.domain.ports import KeyValueStore

logger = logging.getLogger(__name__)

KEY_PREFIX = "history:"
DEFAULT_CAPACITY = 1000
DEFAULT_RETENTION_DAYS = 30
TREND_WINDOW = timedelta(days=7)


class QueryHistoryStore:
    """
    Usage:
        store = QueryHistoryStore(InMemoryKeyValueStore())
        await store.load()
        await store.record("healthcare policy", result_count=42)
        store.search("health")    # bidirectional substring match
        store.completions("hea")  # prefix completions
    """

    def __init__(
        self,
        storage: KeyValueStore,
        capacity: int = DEFAULT_CAPACITY,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Raises:
            ConfigurationError: If capacity or retention_days is not positive.
        """
        if capacity <= 0:
            msg = f"History capacity must be positive, got {capacity}"
            raise ConfigurationError(msg, setting="history_capacity")
        if retention_days <= 0:
            msg = f"History retention must be positive, got {retention_days} days"
            raise ConfigurationError(msg, setting="history_retention_days")

        self._storage = storage
        self._capacity = capacity
        self._retention = timedelta(days=retention_days)
        self._clock = clock
        self._records: dict[str, HistoricalSearchRecord] = {}
        self._sequence = 0
        self._lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._records)

    # =========================================================================
    # Writes (serialized)
    # =========================================================================

    async def load(self) -> int:
        """Hydrate the in-memory mirror from storage. Returns records loaded."""
        async with self._lock:
            try:
                keys = await self._storage.keys(KEY_PREFIX)
            except Exception as e:
                logger.warning(f"History storage unavailable, starting empty: {e}")
                return 0

            loaded: dict[str, HistoricalSearchRecord] = {}
            for storage_key in keys:
                try:
                    data = await self._storage.get(storage_key)
                    if data is None:
                        continue
                    record = HistoricalSearchRecord.from_dict(data)
                except Exception as e:
                    logger.warning(f"Skipping unreadable history entry {storage_key}: {e}")
                    continue
                loaded[record.key] = record

            self._records = loaded
            self._sequence = max((r.sequence for r in loaded.values()), default=0)
            expired = self._drop_expired()
            evicted = self._evict_over_capacity()
            await self._delete_persisted([*expired, *evicted])
            logger.info(f"Loaded {len(self._records)} history records")
        return len(self._records)

    async def record(self, query: str, result_count: int = 0) -> HistoricalSearchRecord | None:
        """
        Record a search. Repeats update the existing record in place.

        Returns None for blank queries, which are not recorded.
        """
        key = HistoricalSearchRecord.make_key(query)
        if not key:
            return None
        display = " ".join(query.split())

        async with self._lock:
            now = self._clock()
            record = self._records.get(key)
            if record is not None and record.is_expired(self._retention, now):
                # Past retention: starts over as a new query
                del self._records[key]
                record = None
            if record is not None:
                record.touch(display, result_count, now)
            else:
                self._sequence += 1
                record = HistoricalSearchRecord(
                    key=key,
                    query=display,
                    last_seen=now,
                    frequency=1,
                    last_result_count=result_count,
                    sequence=self._sequence,
                )
                self._records[key] = record
            evicted = self._evict_over_capacity()
            snapshot = record.to_dict()

            await self._persist(key, snapshot)
            await self._delete_persisted(evicted)
        return record

    async def prune(self) -> int:
        """Remove records older than the retention window. Returns count removed."""
        async with self._lock:
            expired = self._drop_expired()
            await self._delete_persisted(expired)
        if expired:
            logger.info(f"Pruned {len(expired)} expired history records")
        return len(expired)

    async def clear(self) -> None:
        async with self._lock:
            keys = list(self._records)
            self._records.clear()
            await self._delete_persisted(keys)

    def _drop_expired(self) -> list[str]:
        now = self._clock()
        expired = [k for k, r in self._records.items() if r.is_expired(self._retention, now)]
        for key in expired:
            del self._records[key]
        return expired

    def _evict_over_capacity(self) -> list[str]:
        overflow = len(self._records) - self._capacity
        if overflow <= 0:
            return []
        victims = sorted(self._records.values(), key=lambda r: (r.last_seen, r.sequence))[:overflow]
        for victim in victims:
            del self._records[victim.key]
        logger.debug(f"Evicted {len(victims)} least recently used history records")
        return [v.key for v in victims]

    async def _persist(self, key: str, data: dict) -> None:
        try:
            await self._storage.set(KEY_PREFIX + key, data)
        except Exception as e:
            logger.warning(f"Failed to persist history record {key!r}: {e}")

    async def _delete_persisted(self, keys: Iterable[str]) -> None:
        for key in keys:
            try:
                await self._storage.delete(KEY_PREFIX + key)
            except Exception as e:
                logger.warning(f"Failed to delete history record {key!r}: {e}")

    # =========================================================================
    # Reads (in-memory mirror)
    # =========================================================================

    def get(self, query: str) -> HistoricalSearchRecord | None:
        record = self._records.get(HistoricalSearchRecord.make_key(query))
        if record is None or record.is_expired(self._retention, self._clock()):
            return None
        return record

    def snapshot(self) -> list[HistoricalSearchRecord]:
        """Copies of all records within retention, most recently used first."""
        now = self._clock()
        live = [r for r in self._records.values() if not r.is_expired(self._retention, now)]
        ordered = sorted(live, key=lambda r: (r.last_seen, r.sequence), reverse=True)
        return [HistoricalSearchRecord.from_dict(r.to_dict()) for r in ordered]

    def lookup(self, prefix: str) -> list[HistoricalSearchRecord]:
        """Records whose query starts with *prefix*, most recently used first."""
        needle = HistoricalSearchRecord.make_key(prefix)
        return [r for r in self.snapshot() if r.key.startswith(needle)]

    def search(self, fragment: str) -> list[HistoricalSearchRecord]:
        """
        Bidirectional substring match: the record contains *fragment* or
        *fragment* contains the record. Most frequent first.
        """
        needle = HistoricalSearchRecord.make_key(fragment)
        if not needle:
            return []
        matches = [r for r in self.snapshot() if needle in r.key or r.key in needle]
        return sorted(matches, key=lambda r: r.frequency, reverse=True)

    def trends(self, window: timedelta = TREND_WINDOW, limit: int = 10) -> list[SearchTrend]:
        """Most frequent queries seen within *window*."""
        now = self._clock()
        recent = [r for r in self.snapshot() if now - r.last_seen <= window]
        recent.sort(key=lambda r: r.frequency, reverse=True)
        timeframe = f"{window.days} days" if window.days else f"{int(window.total_seconds() // 3600)} hours"
        return [
            SearchTrend(
                query=r.query.lower(),
                frequency=r.frequency,
                direction=TrendDirection.RISING if r.frequency > 1 else TrendDirection.STABLE,
                timeframe=timeframe,
            )
            for r in recent[:limit]
        ]

    def completions(self, prefix: str, common_terms: Iterable[str] = (), limit: int = 8) -> list[str]:
        """
        Prefix completions: up to 5 recent history queries, then common
        terms, deduplicated case-insensitively.
        """
        needle = prefix.strip().lower()
        history = [r.query for r in self.lookup(needle)[:5]]
        common = [term for term in common_terms if term.lower().startswith(needle)]

        seen: set[str] = set()
        result: list[str] = []
        for candidate in [*history, *common]:
            folded = candidate.lower()
            if folded in seen:
                continue
            seen.add(folded)
            result.append(candidate)
        return result[:limit]
