"""
Memory Storage Module for BloodChain

This module provides an in-memory record store for a single collection.
It supports keyed storage with secondary indexes computed from the stored
records, and guards every operation with a per-collection lock.
"""

import threading
from typing import Any, Callable, Hashable


class MemoryStorage:
    """Simple in-memory storage backend for one collection of records"""

    def __init__(self, name: str):
        self.name = name
        self.data: dict[Hashable, Any] = {}
        self.indexes: dict[str, dict[Hashable, list[Hashable]]] = {}
        self._index_keys: dict[str, Callable[[Any], Hashable | None]] = {}
        # Re-entrant so callers can hold it across check-then-set sequences
        self.lock = threading.RLock()

    def create_index(self, index_name: str, key_func: Callable[[Any], Hashable | None]):
        """Create index over the value returned by key_func (None values are not indexed)"""
        with self.lock:
            if index_name in self.indexes:
                return
            self.indexes[index_name] = {}
            self._index_keys[index_name] = key_func
            for key, value in self.data.items():
                self._add_to_index(index_name, key, value)

    def _add_to_index(self, index_name: str, key: Hashable, value: Any):
        field_value = self._index_keys[index_name](value)
        if field_value is None:
            return
        keys = self.indexes[index_name].setdefault(field_value, [])
        if key not in keys:
            keys.append(key)

    def _remove_from_index(self, index_name: str, key: Hashable, value: Any):
        field_value = self._index_keys[index_name](value)
        keys = self.indexes[index_name].get(field_value)
        if keys is None:
            return
        if key in keys:
            keys.remove(key)
        if not keys:
            del self.indexes[index_name][field_value]

    def get(self, key: Hashable) -> Any | None:
        """Get value by key"""
        with self.lock:
            return self.data.get(key)

    def contains(self, key: Hashable) -> bool:
        with self.lock:
            return key in self.data

    def set(self, key: Hashable, value: Any):
        """Set value by key, replacing any previous value and its index entries"""
        with self.lock:
            previous = self.data.get(key)
            if previous is not None:
                for index_name in self.indexes:
                    self._remove_from_index(index_name, key, previous)
            self.data[key] = value
            for index_name in self.indexes:
                self._add_to_index(index_name, key, value)

    def delete(self, key: Hashable) -> bool:
        """Delete value by key"""
        with self.lock:
            if key not in self.data:
                return False
            value = self.data.pop(key)
            for index_name in self.indexes:
                self._remove_from_index(index_name, key, value)
            return True

    def query_by_index(self, index_name: str, value: Hashable) -> list[Any]:
        """Return the records whose indexed value equals value, in insertion order"""
        with self.lock:
            if index_name not in self.indexes:
                return []
            return [self.data[key] for key in self.indexes[index_name].get(value, [])]

    def get_all_values(self) -> list[Any]:
        """Get all values in insertion order"""
        with self.lock:
            return list(self.data.values())

    def clear(self):
        """Clear all data, keeping the index definitions"""
        with self.lock:
            self.data.clear()
            for index in self.indexes.values():
                index.clear()

    def size(self) -> int:
        """Get number of items in storage"""
        with self.lock:
            return len(self.data)
