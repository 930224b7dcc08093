"""
Bounded newest-first logs for contract events and token transactions.
"""

import threading
from collections import deque
from typing import Any, Callable, Iterator

DEFAULT_CAPACITY = 1000


class BoundedLog:
    """
    Fixed-capacity append-only log.

    Entries are pushed to the front; once the capacity is reached the oldest
    entry falls off the back.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._entries: deque = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def push(self, entry: Any):
        with self._lock:
            self._entries.appendleft(entry)

    def latest(self, limit: int | None = None, predicate: Callable[[Any], bool] | None = None) -> list[Any]:
        """
        Return up to limit entries, newest first.

        Args:
            limit: Maximum number of entries (None returns every match)
            predicate: Optional filter applied before the limit
        """
        with self._lock:
            entries = list(self._entries)
        if predicate is not None:
            entries = [entry for entry in entries if predicate(entry)]
        if limit is not None:
            entries = entries[:max(limit, 0)]
        return entries

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Any]:
        return iter(self.latest())
