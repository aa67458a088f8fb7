"""
Snapshot-based undo/redo history for paper elements.

Every committed mutation stores a deep copy of the whole element list, so
undo and redo simply swap the current list for a stored one.
"""

from typing import List, Optional

from ..config import Config
from .types import Element, copy_elements


class PaperHistory:
    """
    Bounded linear history of element-list snapshots.

    Invariant: 0 <= index < len(snapshots), and snapshots[index] matches the
    element list as of the last committed mutation.

    When a push overflows the capacity the oldest snapshot is evicted and the
    index is held where it is instead of advancing. Once the history is full
    this leaves capacity - 1 undo steps.
    """

    def __init__(self, elements: Optional[List[Element]] = None,
                 capacity: int = Config.HISTORY_CAPACITY):
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._snapshots: List[List[Element]] = []
        self._index = 0
        self.reset(elements or [])

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def index(self) -> int:
        return self._index

    def __len__(self) -> int:
        return len(self._snapshots)

    def reset(self, elements: List[Element]):
        """Drop everything and start over with a single snapshot."""
        self._snapshots = [copy_elements(elements)]
        self._index = 0

    def push(self, elements: List[Element]):
        """Record a new state, discarding any redo entries."""
        del self._snapshots[self._index + 1:]
        self._snapshots.append(copy_elements(elements))
        if len(self._snapshots) > self._capacity:
            self._snapshots.pop(0)
        else:
            self._index += 1

    def can_undo(self) -> bool:
        return self._index > 0

    def can_redo(self) -> bool:
        return self._index < len(self._snapshots) - 1

    def undo(self) -> Optional[List[Element]]:
        """Step back; returns a copy of the restored list, or None."""
        if not self.can_undo():
            return None
        self._index -= 1
        return self.current()

    def redo(self) -> Optional[List[Element]]:
        """Step forward; returns a copy of the restored list, or None."""
        if not self.can_redo():
            return None
        self._index += 1
        return self.current()

    def current(self) -> List[Element]:
        return copy_elements(self._snapshots[self._index])


__all__ = ['PaperHistory']
