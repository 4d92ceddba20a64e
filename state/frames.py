"""
Animation frame sequence.
"""
from typing import Iterable, List, Optional

from config import FRAME_CAPACITY
from state.errors import CapacityExceeded, IndexOutOfRange
from state.snapshot import Snapshot
from utils.logger import get_logger

logger = get_logger(__name__)


class FrameSequence:
    """
    Ordered, append-only list of animation frames.

    Frames are added one at a time or replaced wholesale (import); the only
    removal is ``clear()``. Unlike history, a full sequence rejects new
    frames instead of evicting old ones.
    """

    def __init__(self, capacity: Optional[int] = None):
        capacity = FRAME_CAPACITY if capacity is None else capacity
        if capacity < 1:
            raise ValueError(f"Frame capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self._frames: List[Snapshot] = []

    def __len__(self) -> int:
        return len(self._frames)

    def length(self) -> int:
        return len(self._frames)

    def is_empty(self) -> bool:
        return not self._frames

    def add_frame(self, snapshot: Snapshot) -> int:
        """
        Append a frame.

        Returns:
            The new frame count

        Raises:
            CapacityExceeded: if the sequence is full (nothing is added)
        """
        if len(self._frames) >= self.capacity:
            raise CapacityExceeded(
                f"Cannot add more than {self.capacity} frames. Clear frames before adding more."
            )
        self._frames.append(snapshot)
        return len(self._frames)

    def get(self, index: int) -> Snapshot:
        """Frame at ``index``; negative indices are not accepted."""
        if not 0 <= index < len(self._frames):
            raise IndexOutOfRange(
                f"Frame {index} does not exist ({len(self._frames)} frames available)."
            )
        return self._frames[index]

    def clear(self) -> None:
        self._frames = []

    def replace(self, snapshots: Iterable[Snapshot]) -> int:
        """
        Replace every frame at once.

        Raises:
            CapacityExceeded: if ``snapshots`` exceeds capacity (nothing changes)
        """
        incoming = list(snapshots)
        if len(incoming) > self.capacity:
            raise CapacityExceeded(
                f"Archive has {len(incoming)} frames but the limit is {self.capacity}."
            )
        self._frames = incoming
        return len(self._frames)

    def snapshot_list(self) -> List[Snapshot]:
        """Copy of the ordered frame list (the snapshots themselves are shared read-only)."""
        return list(self._frames)
