"""Shared pytest fixtures."""
import io
import os
import struct
import sys
import zlib

# Keep test runs from writing a log file next to the sources
os.environ.setdefault("LOG_FILE", "")
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest
from PIL import Image

from state.snapshot import Snapshot


def png_bytes(color="#ff0000", size=(4, 3), fmt="PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def oversized_png_header(width=30000, height=30000) -> bytes:
    """PNG signature and IHDR chunk declaring a huge image, with no pixel data."""
    ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    crc = zlib.crc32(b"IHDR" + ihdr) & 0xFFFFFFFF
    return b"\x89PNG\r\n\x1a\n" + struct.pack(">I", len(ihdr)) + b"IHDR" + ihdr + struct.pack(">I", crc)


@pytest.fixture
def make_snapshot():
    """Factory for small solid-colour PNG snapshots."""
    def _make(color="#ff0000", size=(4, 3)):
        return Snapshot(data=png_bytes(color, size), width=size[0], height=size[1])
    return _make


class SpawnRecorder:
    """Stands in for a background runner; records tasks without running them."""

    def __init__(self):
        self.targets = []

    def __call__(self, target):
        self.targets.append(target)

    @property
    def tasks(self):
        return [target.__self__ for target in self.targets]


@pytest.fixture
def spawn():
    return SpawnRecorder()
