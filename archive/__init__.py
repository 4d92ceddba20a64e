"""Frame archive import/export."""

from .bridge import ArchiveBridge, ZipArchiveBridge

__all__ = ["ArchiveBridge", "ZipArchiveBridge"]
