"""Rendering surfaces the sketchpad session draws on."""

from .base import RenderSurface
from .raster_surface import RasterSurface
from .browser_surface import BrowserSurface

__all__ = ["RenderSurface", "RasterSurface", "BrowserSurface"]
