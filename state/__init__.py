"""State management for the animation sketchpad."""

from .snapshot import Snapshot, blank_snapshot
from .history import HistoryStack
from .frames import FrameSequence
from .errors import (
    SketchpadError,
    EmptyHistory,
    CapacityExceeded,
    IndexOutOfRange,
    EmptySequence,
    EncodingFailure,
    CorruptArchive,
    EmptyArchive,
)

__all__ = [
    "Snapshot",
    "blank_snapshot",
    "HistoryStack",
    "FrameSequence",
    "SketchpadError",
    "EmptyHistory",
    "CapacityExceeded",
    "IndexOutOfRange",
    "EmptySequence",
    "EncodingFailure",
    "CorruptArchive",
    "EmptyArchive",
]
