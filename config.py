"""
Configuration for the animation sketchpad.
"""
import os
from typing import Tuple
from dotenv import load_dotenv

load_dotenv()

# History
HISTORY_CAPACITY = int(os.getenv("HISTORY_CAPACITY", "50"))  # Undo steps kept (floor included)

# Animation
FRAME_CAPACITY = int(os.getenv("FRAME_CAPACITY", "200"))
DEFAULT_INTERVAL_MS = int(os.getenv("DEFAULT_INTERVAL_MS", "500"))
MIN_INTERVAL_MS = 1
MAX_INTERVAL_MS = int(os.getenv("MAX_INTERVAL_MS", "10000"))

# Canvas (pixels)
CANVAS_WIDTH = int(os.getenv("CANVAS_WIDTH", "800"))
CANVAS_HEIGHT = int(os.getenv("CANVAS_HEIGHT", "600"))
CANVAS_BACKGROUND = os.getenv("CANVAS_BACKGROUND", "#ffffff")

# Brush defaults
DEFAULT_BRUSH_COLOR = "#000000"
DEFAULT_BRUSH_SIZE = 5
MAX_BRUSH_SIZE = 50
BRUSH_SHAPES = ("round", "square")

# Archive
ARCHIVE_FILENAME = os.getenv("ARCHIVE_FILENAME", "animation_frames.zip")
FRAME_ENTRY_PREFIX = "frame_"
MAX_ARCHIVE_ENTRIES = int(os.getenv("MAX_ARCHIVE_ENTRIES", "1000"))
MAX_ARCHIVE_ENTRY_BYTES = int(os.getenv("MAX_ARCHIVE_ENTRY_BYTES", str(20 * 1024 * 1024)))  # Uncompressed size per frame

# Web
WEB_HOST = os.getenv("WEB_HOST", "0.0.0.0")
WEB_PORT = int(os.getenv("WEB_PORT", "5000"))
WEB_DEBUG = os.getenv("WEB_DEBUG", "false").lower() == "true"

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE", "sketchpad.log")


def get_canvas_size() -> Tuple[int, int]:
    """Returns (width, height)"""
    return (CANVAS_WIDTH, CANVAS_HEIGHT)


def clamp_interval_ms(interval_ms: int) -> int:
    """Clamp a playback interval to [MIN_INTERVAL_MS, MAX_INTERVAL_MS]."""
    return max(MIN_INTERVAL_MS, min(MAX_INTERVAL_MS, int(interval_ms)))
