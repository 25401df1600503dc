from .history_store import QueryHistoryStore

__all__ = ["QueryHistoryStore"]
