"""Bounded request history, newest first."""

import logging
from typing import List, Optional, Tuple

from .models import EndpointConfig, HistoryEntry, ResponseRecord

DEFAULT_MAX_HISTORY_ITEMS = 10


class HistoryStore:
    """Ordered log of completed requests

    Index 0 is always the most recently completed request. Once the store
    holds more than ``max_items`` entries the oldest ones are discarded.
    """

    def __init__(self, max_items: int = DEFAULT_MAX_HISTORY_ITEMS):
        if max_items < 0:
            raise ValueError("max_items must not be negative")
        self.max_items = max_items
        self._entries: List[HistoryEntry] = []

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> HistoryEntry:
        return self._entries[index]

    @property
    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def prepend(self, entry: HistoryEntry) -> None:
        self._entries.insert(0, entry)
        evicted = len(self._entries) - self.max_items
        if evicted > 0:
            del self._entries[self.max_items:]
            logging.info(f"[History] Evicted {evicted} oldest entr{'y' if evicted == 1 else 'ies'}")

    def load_at(self, index: int) -> Optional[Tuple[EndpointConfig, ResponseRecord]]:
        """Return a copy of the config and the response stored at ``index``

        Returns:
            None if the index is out of range
        """
        if not 0 <= index < len(self._entries):
            logging.warning(f"[History] No entry at index {index}")
            return None
        entry = self._entries[index]
        return entry.endpoint_config.clone(), entry.response

    def clear(self) -> None:
        self._entries.clear()
        logging.info("[History] Cleared")

    def to_list(self) -> List[dict]:
        return [entry.to_dict() for entry in self._entries]


__all__ = [
    "DEFAULT_MAX_HISTORY_ITEMS",
    "HistoryStore",
]
