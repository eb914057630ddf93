"""A double-ended list of items kept in insertion order."""

from __future__ import annotations

from collections import deque

__all__ = ["DoubleList"]


class DoubleList:
    """Items appended at the tail and popped from the head."""

    def __init__(self, items=()):
        self._items = deque(items)

    def add(self, data):
        """Append data at the end of the list and return it."""
        self._items.append(data)
        return data

    def pop(self):
        """Remove and return the first item; IndexError if empty."""
        if not self._items:
            raise IndexError("pop from empty list")
        return self._items.popleft()

    def __iter__(self):
        return iter(self._items)

    def __len__(self):
        return len(self._items)

    def __repr__(self):
        return f"{type(self).__name__}({list(self._items)!r})"