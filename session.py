"""
Sketchpad session.
Coordinates the surface, undo history, frame sequence, playback and archive.
"""
import threading
from typing import Any, Callable, Dict, Optional

from archive.bridge import ArchiveBridge, ZipArchiveBridge
from playback.scheduler import PlaybackScheduler
from state.errors import EmptySequence, SketchpadError
from state.frames import FrameSequence
from state.history import HistoryStack
from state.snapshot import Snapshot
from surface.base import RenderSurface
from utils.logger import get_logger

logger = get_logger(__name__)


class AnimationSession:
    """
    Command surface for one drawing session.

    Commands run to completion under a single re-entrant lock that playback
    ticks also take, so history and frames are never mutated concurrently.
    Failed commands raise a SketchpadError and leave state unchanged.
    """

    def __init__(self, surface: RenderSurface,
                 archive: Optional[ArchiveBridge] = None,
                 history_capacity: Optional[int] = None,
                 frame_capacity: Optional[int] = None,
                 spawn: Optional[Callable] = None,
                 on_playback_change: Optional[Callable[[bool], None]] = None):
        """
        Initialize the session.

        Args:
            surface: Rendering surface to capture from and render to
            archive: Archive codec (default: zip of PNG frames)
            history_capacity: Undo depth (default from config)
            frame_capacity: Maximum number of frames (default from config)
            spawn: Background task runner for playback (default: daemon thread)
            on_playback_change: Callback receiving ``is_playing`` on start/stop
        """
        self.surface = surface
        self.archive = archive or ZipArchiveBridge()
        self.lock = threading.RLock()

        # The blank surface is the history floor
        self.history = HistoryStack(surface.capture_snapshot(), capacity=history_capacity)
        self.frames = FrameSequence(capacity=frame_capacity)
        self.playback = PlaybackScheduler(
            self.frames,
            render=surface.render_snapshot,
            spawn=spawn,
            lock=self.lock,
            on_state_change=on_playback_change,
        )
        self.running = False

    # ---- history ----

    def on_capture(self) -> Snapshot:
        """Snapshot the surface into history (call once a stroke is finished)."""
        with self.lock:
            snapshot = self.surface.capture_snapshot()
            self.history.push(snapshot)
            logger.debug(f"Captured {snapshot!r} (undo depth {self.history.undo_depth})")
            return snapshot

    def undo(self) -> Snapshot:
        with self.lock:
            snapshot = self.history.undo()
            self.surface.render_snapshot(snapshot)
            logger.info(f"Undo (undo depth {self.history.undo_depth}, redo depth {self.history.redo_depth})")
            return snapshot

    def redo(self) -> Snapshot:
        with self.lock:
            snapshot = self.history.redo()
            self.surface.render_snapshot(snapshot)
            logger.info(f"Redo (undo depth {self.history.undo_depth}, redo depth {self.history.redo_depth})")
            return snapshot

    def clear_canvas(self) -> Snapshot:
        """Blank the surface and record the blank state in history."""
        with self.lock:
            self.surface.clear()
            return self.on_capture()

    def clear_history(self) -> None:
        """Forget all history; what the surface shows now becomes the floor."""
        with self.lock:
            self.history.reset(self.surface.capture_snapshot())
            logger.info("History cleared")

    # ---- frames ----

    def add_frame(self) -> int:
        """
        Capture the surface as a new animation frame.

        Returns:
            The new frame count
        """
        with self.lock:
            # Separate capture from history so no snapshot is shared between them
            count = self.frames.add_frame(self.surface.capture_snapshot())
            logger.info(f"Frame {count} added.")
            return count

    def clear_frames(self) -> None:
        # A running playback stops itself on its next tick
        with self.lock:
            self.frames.clear()
            logger.info("Frames cleared")

    def get_frame(self, index: int) -> Snapshot:
        with self.lock:
            return self.frames.get(index)

    # ---- playback ----

    def start_playback(self, interval_ms: Optional[int] = None) -> None:
        self.playback.start(interval_ms)

    def stop_playback(self) -> None:
        self.playback.stop()

    def toggle_playback(self, interval_ms: Optional[int] = None) -> bool:
        return self.playback.toggle(interval_ms)

    # ---- archive ----

    def export_frames(self) -> bytes:
        """
        Pack all frames into archive bytes.

        Raises:
            EmptySequence: if there are no frames
            EncodingFailure: if any frame fails to encode
        """
        with self.lock:
            if self.frames.is_empty():
                raise EmptySequence("There are no frames to export.")
            frames = self.frames.snapshot_list()
        # Snapshots are immutable, so encoding can run outside the lock
        data = self.archive.encode_frames(frames)
        logger.info(f"Exported {len(frames)} frames ({len(data)} bytes)")
        return data

    def import_frames(self, data: bytes) -> int:
        """
        Replace all frames with the contents of an archive.

        Decoding happens before anything is touched, so a corrupt or empty
        archive leaves the current frames as they were.

        Returns:
            Number of frames imported
        """
        frames = self.archive.decode_archive(data)
        with self.lock:
            count = self.frames.replace(frames)
        logger.info(f"{count} frames imported.")
        return count

    def export_image(self, fmt: str = "png") -> bytes:
        """Encode the current surface as a single image."""
        with self.lock:
            return self.surface.export_image(fmt)

    # ---- status ----

    def status(self) -> Dict[str, Any]:
        with self.lock:
            return {
                "history": self.history.to_dict(),
                "frames": {
                    "count": len(self.frames),
                    "capacity": self.frames.capacity,
                },
                "playback": self.playback.to_dict(),
            }

    def shutdown(self) -> None:
        self.playback.stop()
        self.running = False

    def run_interactive_loop(self, input_handler, output_handler, command_handler):
        """
        Run the main interactive loop.

        Args:
            input_handler: Function that returns user input string
            output_handler: Function that displays messages to user
            command_handler: Function(command, session) -> bool; False ends the loop
        """
        self.running = True

        output_handler("Sketchpad ready! Type 'help' for commands.\n")

        while self.running:
            try:
                command = input_handler()

                if not command:
                    continue

                if not command_handler(command, self):
                    self.running = False
                    break

            except SketchpadError as e:
                logger.warning(f"Command rejected ({e.code}): {e.message}")
                output_handler(f"ERROR: {e.message}")
            except KeyboardInterrupt:
                logger.info("Keyboard interrupt - stopping")
                output_handler("\nStopped by user.")
                break
            except EOFError:
                logger.info("EOF - stopping")
                break
            except Exception as e:
                logger.error(f"Error in main loop: {e}", exc_info=True)
                output_handler(f"\nError: {e}\n")

        # Cleanup
        self.shutdown()
        output_handler("Sketchpad closed. Goodbye!")
