"""
Bounded undo/redo history of whole-surface snapshots.
"""
from typing import Any, Dict, List, Optional

from config import HISTORY_CAPACITY
from state.errors import EmptyHistory
from state.snapshot import Snapshot
from utils.logger import get_logger

logger = get_logger(__name__)


class HistoryStack:
    """
    Linear undo/redo history over raster snapshots.

    The undo stack is oldest-first and never holds more than ``capacity``
    entries; pushing past the limit silently evicts the oldest entry. Its
    first entry is the floor state and is never popped by ``undo()``. The
    redo stack is unbounded and is cleared by every push.
    """

    def __init__(self, floor: Snapshot, capacity: Optional[int] = None):
        """
        Initialize the history.

        Args:
            floor: Snapshot of the initial (blank) surface
            capacity: Maximum undo depth including the floor (default from config)
        """
        capacity = HISTORY_CAPACITY if capacity is None else capacity
        if capacity < 1:
            raise ValueError(f"History capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._undo: List[Snapshot] = [floor]
        self._redo: List[Snapshot] = []

    @property
    def current(self) -> Snapshot:
        """Snapshot the surface should currently show."""
        return self._undo[-1]

    @property
    def undo_depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def can_undo(self) -> bool:
        return len(self._undo) > 1

    def can_redo(self) -> bool:
        return bool(self._redo)

    def push(self, snapshot: Snapshot) -> None:
        """Record a new state. Always succeeds."""
        self._undo.append(snapshot)
        if len(self._undo) > self.capacity:
            evicted = self._undo.pop(0)
            logger.debug(f"History full ({self.capacity}) - evicted oldest {evicted!r}")
        self._redo.clear()

    def undo(self) -> Snapshot:
        """
        Step back one state.

        Returns:
            The snapshot to restore (the new top of the undo stack)

        Raises:
            EmptyHistory: if only the floor state remains
        """
        if not self.can_undo():
            raise EmptyHistory("Nothing to undo.")
        self._redo.append(self._undo.pop())
        return self._undo[-1]

    def redo(self) -> Snapshot:
        """
        Re-apply the most recently undone state.

        Raises:
            EmptyHistory: if there is nothing to redo
        """
        if not self._redo:
            raise EmptyHistory("Nothing to redo.")
        snapshot = self._redo.pop()
        self._undo.append(snapshot)
        return snapshot

    def reset(self, floor: Snapshot) -> None:
        """Drop all history; ``floor`` becomes the only entry."""
        self._undo = [floor]
        self._redo = []

    def undo_snapshots(self) -> List[Snapshot]:
        """Copy of the undo stack, oldest first."""
        return list(self._undo)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "undo_depth": self.undo_depth,
            "redo_depth": self.redo_depth,
            "capacity": self.capacity,
            "can_undo": self.can_undo(),
            "can_redo": self.can_redo(),
        }
