"""Animation playback."""

from .scheduler import PlaybackScheduler, PlaybackState, PlaybackTask, spawn_thread

__all__ = ["PlaybackScheduler", "PlaybackState", "PlaybackTask", "spawn_thread"]
