"""Persistence adapters implementing the KeyValueStore port."""

from .json_file import JsonFileKeyValueStore
from .memory import InMemoryKeyValueStore

__all__ = ["InMemoryKeyValueStore", "JsonFileKeyValueStore"]
