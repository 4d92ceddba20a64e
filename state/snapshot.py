"""
Immutable raster snapshots shared by history and animation frames.
"""
import base64
import binascii
import io
import re
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)

# Pillow format name -> MIME type
_FORMAT_MIME = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "GIF": "image/gif",
    "BMP": "image/bmp",
    "WEBP": "image/webp",
}


@dataclass(frozen=True, eq=False)
class Snapshot:
    """
    An encoded still image plus its pixel dimensions.

    Instances are write-once. Equality is identity, so two captures of the
    same pixels are still two snapshots.
    """
    data: bytes
    width: int
    height: int
    mime_type: str = "image/png"

    def __post_init__(self):
        if isinstance(self.data, (bytearray, memoryview)):
            # Copy so later writes to the caller's buffer can't leak in
            object.__setattr__(self, "data", bytes(self.data))
        if not isinstance(self.data, bytes) or not self.data:
            raise ValueError("Snapshot data must be non-empty bytes")
        if not isinstance(self.width, int) or not isinstance(self.height, int):
            raise ValueError("Snapshot dimensions must be integers")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Invalid snapshot size {self.width}x{self.height}")

    @property
    def size(self):
        return (self.width, self.height)

    def to_data_url(self) -> str:
        """Encode as a data URL (what a browser canvas produces)."""
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{payload}"

    def to_image(self) -> Image.Image:
        """Decode into a Pillow image."""
        image = Image.open(io.BytesIO(self.data))
        image.load()
        return image

    @classmethod
    def from_image_bytes(cls, data: bytes) -> "Snapshot":
        """
        Build a snapshot from encoded image bytes, probing size and format.

        Raises:
            ValueError: if the bytes are not a decodable image
        """
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.verify()
                fmt = image.format
                width, height = image.size
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            raise ValueError(f"Not a decodable image: {e}") from e
        except Image.DecompressionBombError as e:
            raise ValueError(f"Image too large: {e}") from e
        mime_type = _FORMAT_MIME.get(fmt, "application/octet-stream")
        return cls(data=bytes(data), width=width, height=height, mime_type=mime_type)

    @classmethod
    def from_image(cls, image: Image.Image, fmt: str = "PNG") -> "Snapshot":
        """Encode a Pillow image. The result never aliases the image buffer."""
        buffer = io.BytesIO()
        image.save(buffer, format=fmt)
        return cls(
            data=buffer.getvalue(),
            width=image.width,
            height=image.height,
            mime_type=_FORMAT_MIME.get(fmt.upper(), "image/png"),
        )

    @classmethod
    def from_data_url(cls, url: str, width: int = None, height: int = None) -> "Snapshot":
        """
        Parse a base64 data URL.

        When width/height are not given they are probed from the image.

        Raises:
            ValueError: if the URL is malformed or the payload is not an image
        """
        match = _DATA_URL_RE.match(url.strip()) if isinstance(url, str) else None
        if match is None:
            raise ValueError("Expected a base64 data URL")
        try:
            data = base64.b64decode(match.group("payload"), validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"Invalid base64 payload: {e}") from e

        if width is None or height is None:
            probed = cls.from_image_bytes(data)
            return cls(data=probed.data, width=probed.width, height=probed.height,
                       mime_type=match.group("mime"))
        return cls(data=data, width=width, height=height, mime_type=match.group("mime"))

    def __repr__(self) -> str:
        return f"Snapshot({self.width}x{self.height}, {self.mime_type}, {len(self.data)} bytes)"


def blank_snapshot(width: int, height: int, background: str = "#ffffff") -> Snapshot:
    """Snapshot of an empty surface filled with the background colour."""
    return Snapshot.from_image(Image.new("RGB", (width, height), background))
