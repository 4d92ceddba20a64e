"""
Surface whose pixels live in a web client.

The client uploads its canvas as a PNG data URL before each capture, and
rendering is forwarded back to the client through an emit callback.
"""
import dataclasses
from typing import Callable, Optional

from config import CANVAS_BACKGROUND, get_canvas_size
from state.snapshot import Snapshot, blank_snapshot
from surface.base import RenderSurface
from utils.logger import get_logger

logger = get_logger(__name__)


class BrowserSurface(RenderSurface):
    """Proxy for a browser canvas."""

    def __init__(self, emit: Optional[Callable[[str, dict], None]] = None,
                 width: Optional[int] = None, height: Optional[int] = None,
                 background: str = CANVAS_BACKGROUND):
        default_width, default_height = get_canvas_size()
        self.width = width or default_width
        self.height = height or default_height
        self.background = background
        self._emit = emit
        self._staged: Snapshot = blank_snapshot(self.width, self.height, background)

    def stage(self, snapshot: Snapshot) -> None:
        """Record the client's latest canvas contents."""
        self._staged = snapshot

    def capture_snapshot(self) -> Snapshot:
        # Fresh instance per capture; history and frames never hold the same one
        return dataclasses.replace(self._staged)

    def render_snapshot(self, snapshot: Snapshot) -> None:
        self._staged = snapshot
        if self._emit:
            self._emit("render_frame", {
                "image": snapshot.to_data_url(),
                "width": snapshot.width,
                "height": snapshot.height,
            })
        else:
            logger.debug("No client attached - render dropped")

    def clear(self) -> None:
        self._staged = blank_snapshot(self.width, self.height, self.background)
