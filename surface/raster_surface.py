"""
Pillow-backed raster surface.
Rasterizes simple brush strokes and produces/consumes snapshots.
"""
import io
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageColor, ImageDraw

from config import (
    CANVAS_BACKGROUND,
    DEFAULT_BRUSH_COLOR,
    DEFAULT_BRUSH_SIZE,
    MAX_BRUSH_SIZE,
    BRUSH_SHAPES,
    get_canvas_size,
)
from state.snapshot import Snapshot
from surface.base import RenderSurface
from utils.logger import get_logger

logger = get_logger(__name__)

# Export format -> Pillow format name
EXPORT_FORMATS = {"png": "PNG", "jpg": "JPEG", "jpeg": "JPEG"}


class RasterSurface(RenderSurface):
    """
    In-memory drawing surface.

    Brush settings persist between strokes like a paint toolbar. Snapshots
    are PNG encodings of the image, so they never alias the live pixels.
    """

    def __init__(self, width: Optional[int] = None, height: Optional[int] = None,
                 background: str = CANVAS_BACKGROUND):
        """
        Initialize the surface.

        Args:
            width: Canvas width in pixels (default from config)
            height: Canvas height in pixels (default from config)
            background: Fill colour, also used by the eraser
        """
        default_width, default_height = get_canvas_size()
        self.width = width or default_width
        self.height = height or default_height
        self.background = background
        self.image = Image.new("RGB", (self.width, self.height), background)

        self.brush_color = DEFAULT_BRUSH_COLOR
        self.brush_size = DEFAULT_BRUSH_SIZE
        self.brush_shape = "round"
        self.eraser_mode = False

        logger.info(f"Raster surface initialized ({self.width}x{self.height})")

    def set_brush(self, color: Optional[str] = None, size: Optional[int] = None,
                  shape: Optional[str] = None) -> None:
        """
        Update brush settings.

        Raises:
            ValueError: for an unknown colour or shape
        """
        if color is not None:
            ImageColor.getrgb(color)  # raises ValueError if unknown
            self.brush_color = color
        if size is not None:
            self.brush_size = max(1, min(MAX_BRUSH_SIZE, int(size)))
        if shape is not None:
            if shape not in BRUSH_SHAPES:
                raise ValueError(f"Unknown brush shape {shape!r}; expected one of {BRUSH_SHAPES}")
            self.brush_shape = shape

    def toggle_eraser(self) -> bool:
        self.eraser_mode = not self.eraser_mode
        return self.eraser_mode

    def draw_stroke(self, points: Sequence[Tuple[float, float]], eraser: Optional[bool] = None) -> None:
        """
        Draw a polyline with the current brush.

        Args:
            points: Pixel coordinates along the stroke
            eraser: Paint with the background colour (default: current eraser mode)
        """
        if not points:
            return

        erase = self.eraser_mode if eraser is None else eraser
        color = self.background if erase else self.brush_color
        size = self.brush_size
        draw = ImageDraw.Draw(self.image)

        path: List[Tuple[float, float]] = [(float(x), float(y)) for x, y in points]
        if len(path) > 1:
            draw.line(path, fill=color, width=size)
        # Caps and joints
        radius = size / 2.0
        for x, y in path:
            box = [x - radius, y - radius, x + radius, y + radius]
            if self.brush_shape == "round":
                draw.ellipse(box, fill=color)
            else:
                draw.rectangle(box, fill=color)

        logger.debug(f"Drew {'eraser' if erase else 'brush'} stroke with {len(path)} points")

    def capture_snapshot(self) -> Snapshot:
        return Snapshot.from_image(self.image, "PNG")

    def render_snapshot(self, snapshot: Snapshot) -> None:
        image = snapshot.to_image().convert("RGB")
        if image.size != (self.width, self.height):
            image = image.resize((self.width, self.height))
        self.image = image

    def clear(self) -> None:
        self.image = Image.new("RGB", (self.width, self.height), self.background)
        logger.info("Surface cleared")

    def export_image(self, fmt: str = "png") -> bytes:
        """
        Encode the current surface as a standalone image.

        Raises:
            ValueError: for an unsupported format
        """
        pil_format = EXPORT_FORMATS.get(fmt.lower())
        if pil_format is None:
            raise ValueError(f"Unsupported export format {fmt!r}; expected one of {sorted(EXPORT_FORMATS)}")
        buffer = io.BytesIO()
        self.image.save(buffer, format=pil_format)
        return buffer.getvalue()
