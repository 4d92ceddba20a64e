"""
Minimal CLI interface for the sketchpad.
"""
import shlex
from pathlib import Path
from typing import List, Tuple

from config import ARCHIVE_FILENAME
from utils.logger import get_logger

logger = get_logger(__name__)

QUIT_COMMANDS = ("quit", "exit")


def parse_points(tokens: List[str]) -> List[Tuple[float, float]]:
    """
    Parse "x,y" tokens into points.

    Raises:
        ValueError: if a token is not a coordinate pair
    """
    points = []
    for token in tokens:
        parts = token.split(",")
        if len(parts) != 2:
            raise ValueError(f"Expected x,y but got {token!r}")
        points.append((float(parts[0]), float(parts[1])))
    return points


class CLIInterface:
    """Simple CLI interface."""

    def __init__(self):
        self.prompt = "> "

    def get_input(self) -> str:
        """Get user input from command line."""
        return input(self.prompt).strip()

    def display(self, message: str) -> None:
        """Display a message to the user."""
        print(message)
        logger.info(f"UI: {message}")

    def display_error(self, message: str) -> None:
        """Display an error message."""
        print(f"ERROR: {message}")
        logger.error(f"UI Error: {message}")

    def display_success(self, message: str) -> None:
        """Display a success message."""
        print(f"✓ {message}")
        logger.info(f"UI Success: {message}")

    def show_help(self) -> None:
        """Show help message."""
        help_text = """
Sketchpad Commands:
  draw x,y x,y ...     - Draw a stroke through pixel points
  erase x,y x,y ...    - Erase along a stroke
  color <#rrggbb>      - Set brush colour
  size <1-50>          - Set brush size
  shape round|square   - Set brush shape
  undo / redo          - Step through history
  clear                - Clear the canvas
  clear-history        - Forget undo/redo history
  frame                - Add the canvas as an animation frame
  clear-frames         - Remove all frames
  play [ms]            - Loop the animation (default 500 ms per frame)
  stop                 - Stop playback
  toggle [ms]          - Start or stop playback
  export [path]        - Save frames to a zip archive
  import <path>        - Load frames from a zip archive
  save-image <path>    - Save the canvas as .png or .jpg
  status               - Show history, frames and playback state
  help                 - Show this help
  quit                 - Exit
        """
        self.display(help_text)

    def handle_command(self, command: str, session) -> bool:
        """
        Run one CLI command against the session.

        Sketchpad errors propagate to the interactive loop, which reports them.

        Returns:
            False if the user asked to quit, True otherwise
        """
        try:
            tokens = shlex.split(command)
        except ValueError as e:
            self.display_error(f"Could not parse command: {e}")
            return True
        if not tokens:
            return True
        cmd, args = tokens[0].lower(), tokens[1:]

        if cmd in QUIT_COMMANDS:
            return False
        elif cmd == "help":
            self.show_help()
        elif cmd == "status":
            self._show_status(session.status())
        elif cmd in ("draw", "erase"):
            try:
                points = parse_points(args)
            except ValueError as e:
                self.display_error(str(e))
                return True
            session.surface.draw_stroke(points, eraser=(cmd == "erase"))
            # The top of history is always what the canvas shows
            session.on_capture()
            self.display_success(f"{cmd.capitalize()} stroke with {len(points)} point(s)")
        elif cmd in ("color", "size", "shape"):
            if not args:
                self.display_error(f"Usage: {cmd} <value>")
                return True
            try:
                session.surface.set_brush(**{cmd: args[0]})
            except ValueError as e:
                self.display_error(str(e))
                return True
            self.display_success(f"Brush {cmd} set to {args[0]}")
        elif cmd == "undo":
            session.undo()
            self.display_success("Undone")
        elif cmd == "redo":
            session.redo()
            self.display_success("Redone")
        elif cmd == "clear":
            session.clear_canvas()
            self.display_success("Canvas cleared")
        elif cmd == "clear-history":
            session.clear_history()
            self.display_success("History cleared")
        elif cmd == "frame":
            count = session.add_frame()
            self.display_success(f"Frame {count} added")
        elif cmd == "clear-frames":
            session.clear_frames()
            self.display_success("Frames cleared")
        elif cmd in ("play", "toggle"):
            interval = self._parse_interval(args)
            if interval is False:
                return True
            if cmd == "play":
                session.start_playback(interval)
                playing = True
            else:
                playing = session.toggle_playback(interval)
            self.display_success("Playing" if playing else "Stopped")
        elif cmd == "stop":
            session.stop_playback()
            self.display_success("Stopped")
        elif cmd == "export":
            path = Path(args[0] if args else ARCHIVE_FILENAME)
            data = session.export_frames()
            path.write_bytes(data)
            self.display_success(f"Exported {len(session.frames)} frames to {path}")
        elif cmd == "import":
            if not args:
                self.display_error("Usage: import <path>")
                return True
            try:
                data = Path(args[0]).read_bytes()
            except OSError as e:
                self.display_error(f"Could not read {args[0]}: {e}")
                return True
            count = session.import_frames(data)
            self.display_success(f"{count} frames imported")
        elif cmd == "save-image":
            if not args:
                self.display_error("Usage: save-image <path.png|path.jpg>")
                return True
            path = Path(args[0])
            fmt = path.suffix.lstrip(".") or "png"
            try:
                path.write_bytes(session.export_image(fmt))
            except ValueError as e:
                self.display_error(str(e))
                return True
            self.display_success(f"Canvas saved to {path}")
        else:
            self.display_error(f"Unknown command {cmd!r}. Type 'help' for commands.")

        return True

    def _parse_interval(self, args: List[str]):
        if not args:
            return None
        if not args[0].isdigit():
            self.display_error(f"Interval must be a whole number of milliseconds, got {args[0]!r}")
            return False
        return int(args[0])

    def _show_status(self, status: dict) -> None:
        history = status["history"]
        frames = status["frames"]
        playback = status["playback"]
        self.display(
            "\nCurrent Sketchpad State:\n"
            f"  History: {history['undo_depth']}/{history['capacity']} undo, {history['redo_depth']} redo\n"
            f"  Frames: {frames['count']}/{frames['capacity']}\n"
            f"  Playback: {playback['state']} ({playback['interval_ms']} ms, cursor {playback['cursor']})\n"
        )
