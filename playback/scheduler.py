"""
Playback scheduler for the animation frame sequence.

Runs a cancellable ticking task that renders frames in a loop
(F1, F2, ..., Fn, F1, ...) until stopped.
"""
import threading
from enum import Enum
from typing import Callable, Optional

from config import DEFAULT_INTERVAL_MS, clamp_interval_ms
from state.errors import EmptySequence
from state.frames import FrameSequence
from state.snapshot import Snapshot
from utils.logger import get_logger

logger = get_logger(__name__)


class PlaybackState(Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


def spawn_thread(target: Callable[[], None]) -> threading.Thread:
    """Default task spawner: run ``target`` on a daemon thread."""
    thread = threading.Thread(target=target, name="playback", daemon=True)
    thread.start()
    return thread


class PlaybackTask:
    """
    Handle for one ticking loop.

    Once ``cancel()`` returns the loop fires no further ticks.
    """

    def __init__(self, interval_ms: int, on_tick: Callable[["PlaybackTask"], None]):
        self.interval_ms = interval_ms
        self._on_tick = on_tick
        self._cancelled = threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def run(self) -> None:
        # wait() returns True as soon as cancel() is called
        while not self._cancelled.wait(self.interval_ms / 1000.0):
            self._on_tick(self)


class PlaybackScheduler:
    """
    STOPPED/PLAYING state machine driving frame playback.

    ``cursor`` is only meaningful while playing. ``stop()`` leaves it where
    it was; ``start()`` always rewinds to frame 0, so a stop followed by a
    start replays from the beginning.
    """

    def __init__(self, frames: FrameSequence,
                 render: Callable[[Snapshot], None],
                 spawn: Optional[Callable[[Callable[[], None]], object]] = None,
                 lock: Optional[threading.RLock] = None,
                 on_state_change: Optional[Callable[[bool], None]] = None):
        """
        Initialize the scheduler.

        Args:
            frames: Sequence to play
            render: Effect invoked with each frame to show
            spawn: Function that runs a callable in the background (default: daemon thread)
            lock: Lock shared with the command surface so ticks never interleave with commands
            on_state_change: Optional callback receiving ``is_playing`` after start/stop
        """
        self.frames = frames
        self.render = render
        self._spawn = spawn or spawn_thread
        self._lock = lock or threading.RLock()
        self._on_state_change = on_state_change
        self._task: Optional[PlaybackTask] = None

        self.state = PlaybackState.STOPPED
        self.interval_ms = DEFAULT_INTERVAL_MS
        self.cursor = 0

    @property
    def is_playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    def start(self, interval_ms: Optional[int] = None) -> None:
        """
        Start looping playback from the first frame.

        Raises:
            EmptySequence: if there are no frames (scheduler stays stopped)
        """
        with self._lock:
            if self.frames.is_empty():
                raise EmptySequence()

            # Never leave two loops ticking
            self._cancel_task()

            interval = clamp_interval_ms(DEFAULT_INTERVAL_MS if interval_ms is None else interval_ms)
            self.interval_ms = interval
            self.cursor = 0
            self.state = PlaybackState.PLAYING
            task = PlaybackTask(interval, self._on_task_tick)
            self._task = task

        logger.info(f"Playback started: {len(self.frames)} frames every {interval} ms")
        self._spawn(task.run)
        self._notify()

    def stop(self) -> None:
        """Stop playback. Calling it while stopped does nothing."""
        with self._lock:
            if not self.is_playing:
                return
            self._halt()
        logger.info(f"Playback stopped at frame {self.cursor}")
        self._notify()

    def toggle(self, interval_ms: Optional[int] = None) -> bool:
        """
        Start if stopped, stop if playing.

        Returns:
            True if playback is now running
        """
        with self._lock:
            if self.is_playing:
                self.stop()
            else:
                self.start(interval_ms)
            return self.is_playing

    def tick(self) -> Optional[int]:
        """
        Advance playback by one frame.

        Returns:
            Index of the frame rendered, or None if nothing was rendered
        """
        with self._lock:
            if not self.is_playing:
                return None

            count = len(self.frames)
            if count == 0:
                logger.info("Frame sequence emptied during playback - stopping")
                self._halt()
                stopped = True
            else:
                stopped = False
                index = self.cursor % count
                snapshot = self.frames.get(index)
                self.cursor = (index + 1) % count
                logger.debug(f"Tick: rendering frame {index + 1}/{count}")
                self.render(snapshot)

        if stopped:
            self._notify()
            return None
        return index

    def _on_task_tick(self, task: PlaybackTask) -> None:
        with self._lock:
            # A superseded or cancelled task must not render
            if task is not self._task or task.cancelled:
                return
            try:
                self.tick()
            except Exception as e:
                logger.error(f"Playback tick failed: {e}", exc_info=True)
                self._halt()
                failed = True
            else:
                failed = False
        if failed:
            self._notify()

    def _halt(self) -> None:
        self._cancel_task()
        self.state = PlaybackState.STOPPED

    def _cancel_task(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _notify(self) -> None:
        if self._on_state_change:
            self._on_state_change(self.is_playing)

    def to_dict(self) -> dict:
        return {
            "state": self.state.value,
            "is_playing": self.is_playing,
            "interval_ms": self.interval_ms,
            "cursor": self.cursor,
        }
