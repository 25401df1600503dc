"""
JSON file KeyValueStore.

Storage model:
    {data_dir}/kv/{quoted key}.json

One file per key; keys are percent-encoded so any string is a valid key.
Disk I/O runs in a worker thread (asyncio.to_thread) so the event loop is
never blocked. Writes go through a temp file and an atomic rename.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any
from urllib.parse import quote, unquote

from transcript_search.core.exceptions import CollaboratorError, ErrorContext

logger = logging.getLogger(__name__)

_SUFFIX = ".json"


class JsonFileKeyValueStore:
    """
    Example:
        store = JsonFileKeyValueStore("~/.transcript-search")
        await store.set("history:economy", {"frequency": 2})
        await store.keys("history:")  # ["history:economy"]
    """

    def __init__(self, data_dir: str | Path) -> None:
        self._root = Path(data_dir).expanduser() / "kv"
        self._root.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._root

    def _path(self, key: str) -> Path:
        return self._root / f"{quote(key, safe='')}{_SUFFIX}"

    # ── sync helpers (run in worker thread) ─────────────────────────────

    def _read(self, key: str) -> Any | None:
        path = self._path(key)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except json.JSONDecodeError as e:
            logger.warning(f"Corrupt JSON in {path.name}, ignoring: {e}")
            return None

    def _write(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(value, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, path)

    def _remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def _list(self, prefix: str) -> list[str]:
        keys = [unquote(p.name[: -len(_SUFFIX)]) for p in self._root.glob(f"*{_SUFFIX}")]
        return sorted(k for k in keys if k.startswith(prefix))

    # ── async API ───────────────────────────────────────────────────────

    async def get(self, key: str) -> Any | None:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: Any) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except (OSError, TypeError, ValueError) as e:
            raise CollaboratorError(
                f"Failed to write {key!r}: {e}",
                context=ErrorContext(operation="set", collaborator="json_file_store"),
            ) from e

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    async def keys(self, prefix: str = "") -> list[str]:
        return await asyncio.to_thread(self._list, prefix)
