"""
Rendering surface contract used by the sketchpad session.
"""
from abc import ABC, abstractmethod

from state.snapshot import Snapshot


class RenderSurface(ABC):
    """Something that can be snapshotted and can display a snapshot."""

    @abstractmethod
    def capture_snapshot(self) -> Snapshot:
        """Return an independent copy of what the surface shows right now."""

    @abstractmethod
    def render_snapshot(self, snapshot: Snapshot) -> None:
        """Replace the surface contents with ``snapshot``."""

    @abstractmethod
    def clear(self) -> None:
        """Reset the surface to its blank background."""

    def export_image(self, fmt: str = "png") -> bytes:
        raise NotImplementedError(f"{type(self).__name__} does not support image export")
