"""
Archive bridge: packs animation frames into a portable zip of images and back.
"""
import io
import posixpath
import re
import zipfile
import zlib
from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from PIL import Image

from config import FRAME_ENTRY_PREFIX, MAX_ARCHIVE_ENTRIES, MAX_ARCHIVE_ENTRY_BYTES
from state.errors import CorruptArchive, EmptyArchive, EncodingFailure
from state.snapshot import Snapshot
from utils.logger import get_logger

logger = get_logger(__name__)


class ArchiveBridge(ABC):
    """Serializes an ordered frame list to archive bytes and back."""

    @abstractmethod
    def encode_frames(self, frames: Sequence[Snapshot]) -> bytes:
        """Encode every frame, or raise EncodingFailure without producing output."""

    @abstractmethod
    def decode_archive(self, data: bytes) -> List[Snapshot]:
        """Decode archive bytes into frames ordered by entry number."""


class ZipArchiveBridge(ArchiveBridge):
    """
    Zip archive with one PNG per frame: frame_1.png, frame_2.png, ...

    Decoding orders entries by their numeric suffix, never by the order the
    zip directory lists them in.
    """

    def __init__(self, prefix: str = FRAME_ENTRY_PREFIX, max_entries: int = MAX_ARCHIVE_ENTRIES,
                 max_entry_bytes: int = MAX_ARCHIVE_ENTRY_BYTES):
        self.prefix = prefix
        self.max_entries = max_entries
        self.max_entry_bytes = max_entry_bytes
        self._entry_re = re.compile(rf"^{re.escape(prefix)}(\d+)(?:\.[A-Za-z0-9]+)?$")

    def entry_name(self, index: int) -> str:
        """Archive entry name for the zero-based frame ``index``."""
        return f"{self.prefix}{index + 1}.png"

    def encode_frames(self, frames: Sequence[Snapshot]) -> bytes:
        """
        Encode frames into zip bytes.

        Raises:
            EncodingFailure: if there are no frames or any frame fails to encode
        """
        if not frames:
            raise EncodingFailure("There are no frames to export.")

        # Encode everything first so a failure never leaves a partial archive
        entries: List[Tuple[str, bytes]] = []
        for index, snapshot in enumerate(frames):
            try:
                entries.append((self.entry_name(index), _as_png(snapshot)))
            except (OSError, ValueError, SyntaxError) as e:
                logger.error(f"Failed to encode frame {index + 1}: {e}")
                raise EncodingFailure(f"Frame {index + 1} could not be encoded: {e}") from e

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for name, data in entries:
                archive.writestr(name, data)

        logger.info(f"Encoded {len(entries)} frames into archive ({buffer.tell()} bytes)")
        return buffer.getvalue()

    def decode_archive(self, data: bytes) -> List[Snapshot]:
        """
        Decode zip bytes into an ordered frame list.

        Raises:
            CorruptArchive: if the bytes are not a zip, a frame entry is too large,
                or a frame entry is not an image
            EmptyArchive: if no entry is named like a frame
        """
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, ValueError) as e:
            raise CorruptArchive(f"The file is not a valid zip archive: {e}") from e

        with archive:
            numbered = []
            for info in archive.infolist():
                if info.is_dir():
                    continue
                number = self.frame_number(info.filename)
                if number is None:
                    logger.debug(f"Skipping non-frame entry {info.filename!r}")
                    continue
                numbered.append((number, info.filename, info))

            if not numbered:
                raise EmptyArchive()
            if len(numbered) > self.max_entries:
                raise CorruptArchive(
                    f"Archive has {len(numbered)} frames, more than the {self.max_entries} allowed."
                )

            # Total order: numeric suffix, then full name for duplicate numbers
            numbered.sort(key=lambda item: (item[0], item[1]))

            frames = []
            for _, name, info in numbered:
                # Checked against the directory before inflating anything
                if info.file_size > self.max_entry_bytes:
                    raise CorruptArchive(
                        f"Entry {name!r} is {info.file_size} bytes, more than the {self.max_entry_bytes} allowed."
                    )
                try:
                    # Bounded read; the declared size may understate what inflates
                    with archive.open(info) as entry:
                        payload = entry.read(self.max_entry_bytes + 1)
                except (zipfile.BadZipFile, zlib.error, NotImplementedError, OSError, RuntimeError) as e:
                    raise CorruptArchive(f"Entry {name!r} could not be read: {e}") from e
                if len(payload) > self.max_entry_bytes:
                    raise CorruptArchive(f"Entry {name!r} inflates past the {self.max_entry_bytes} bytes allowed.")
                try:
                    frames.append(Snapshot.from_image_bytes(payload))
                except ValueError as e:
                    raise CorruptArchive(f"Entry {name!r} is not a valid image.") from e

        logger.info(f"Decoded {len(frames)} frames from archive")
        return frames

    def frame_number(self, filename: str):
        """Numeric suffix of a frame entry name, or None if it isn't one."""
        base = posixpath.basename(filename)
        if filename.startswith("__MACOSX/") or base.startswith("._"):
            return None
        match = self._entry_re.match(base)
        return int(match.group(1)) if match else None


def _as_png(snapshot: Snapshot) -> bytes:
    with Image.open(io.BytesIO(snapshot.data)) as image:
        if image.format == "PNG":
            # Validate without re-encoding so round trips stay byte-identical
            image.verify()
            return snapshot.data
        image.load()
        if image.mode not in ("RGB", "RGBA", "L", "LA", "P"):
            image = image.convert("RGBA")
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
