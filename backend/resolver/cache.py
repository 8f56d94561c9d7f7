"""Resolver-owned store for dynamically resolved id mappings."""
from __future__ import annotations

from collections import OrderedDict
from threading import Lock
from typing import Dict, Optional, Protocol


class ResolutionCache(Protocol):
    """Backing store for AniList id to catalog slug mappings."""

    def get(self, external_id: int) -> Optional[str]: ...

    def set(self, external_id: int, internal_id: str) -> None: ...

    def snapshot(self) -> Dict[int, str]: ...

    def __len__(self) -> int: ...


class InMemoryResolutionCache:
    """Thread-safe process-lifetime cache.

    Unbounded unless ``max_entries`` is given, in which case the least
    recently used mapping is evicted first. Concurrent writers for the same
    key are last-writer-wins.
    """

    def __init__(self, max_entries: Optional[int] = None) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError("max_entries must be positive when set")
        self._max_entries = max_entries
        self._entries: "OrderedDict[int, str]" = OrderedDict()
        self._lock = Lock()

    def get(self, external_id: int) -> Optional[str]:
        with self._lock:
            internal_id = self._entries.get(external_id)
            if internal_id is not None:
                self._entries.move_to_end(external_id)
            return internal_id

    def set(self, external_id: int, internal_id: str) -> None:
        with self._lock:
            self._entries[external_id] = internal_id
            self._entries.move_to_end(external_id)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)

    def snapshot(self) -> Dict[int, str]:
        with self._lock:
            return dict(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
