from __future__ import annotations

import threading
from collections import deque
from datetime import datetime
from typing import Deque, List, Optional, Protocol

from polarhooks.contracts.timestamps import ensure_utc
from polarhooks.core.models import StoredEventRecord


DEFAULT_MAX_ITEMS = 500
DEFAULT_QUERY_ITEMS = 200
MAX_QUERY_ITEMS = 500


class EventStore(Protocol):
    """Bounded window of recently accepted webhook events.

    Contract: `add` never fails for capacity reasons (oldest records are evicted) and
    `list` returns a consistent snapshot, newest first.
    """

    def add(self, record: StoredEventRecord) -> None:
        ...

    def list(
        self,
        since_utc: datetime,
        type: Optional[str] = None,
        max_items: int = DEFAULT_QUERY_ITEMS,
    ) -> List[StoredEventRecord]:
        ...


def clamp_max(max_items) -> int:
    if isinstance(max_items, bool) or not isinstance(max_items, int):
        return DEFAULT_QUERY_ITEMS
    return max(1, min(MAX_QUERY_ITEMS, max_items))


class InMemoryEventStore:
    """Process-local FIFO buffer guarded by a lock.

    The lock is held only to append/evict and to copy a snapshot; filtering and sorting
    run on the copy.
    """

    def __init__(self, *, max_items: int = DEFAULT_MAX_ITEMS) -> None:
        if max_items < 1:
            raise ValueError("max_items must be >= 1")
        self.max_items = max_items
        self._items: Deque[StoredEventRecord] = deque()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def add(self, record: StoredEventRecord) -> None:
        with self._lock:
            self._items.append(record)
            while len(self._items) > self.max_items:
                self._items.popleft()

    def list(
        self,
        since_utc: datetime,
        type: Optional[str] = None,
        max_items: int = DEFAULT_QUERY_ITEMS,
    ) -> List[StoredEventRecord]:
        with self._lock:
            snapshot = list(self._items)

        since = ensure_utc(since_utc)
        wanted = type.casefold() if type else None
        # Newest-inserted first so the stable sort keeps it ahead on equal timestamps.
        matches = [
            r
            for r in reversed(snapshot)
            if ensure_utc(r.created_at) >= since and (wanted is None or r.type.casefold() == wanted)
        ]
        matches.sort(key=lambda r: ensure_utc(r.created_at), reverse=True)
        # Callers get copies; stored records are never mutated after add().
        return [r.clone() for r in matches[: clamp_max(max_items)]]
