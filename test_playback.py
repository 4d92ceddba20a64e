"""Tests for the playback scheduler."""
import threading

import pytest

from config import MIN_INTERVAL_MS
from playback.scheduler import PlaybackScheduler, PlaybackState, PlaybackTask
from state.errors import EmptySequence
from state.frames import FrameSequence


@pytest.fixture
def frames(make_snapshot):
    sequence = FrameSequence(capacity=10)
    for _ in range(3):
        sequence.add_frame(make_snapshot())
    return sequence


@pytest.fixture
def rendered():
    return []


@pytest.fixture
def scheduler(frames, rendered, spawn):
    return PlaybackScheduler(frames, render=rendered.append, spawn=spawn)


def test_start_on_empty_sequence_fails_and_stays_stopped(rendered, spawn):
    scheduler = PlaybackScheduler(FrameSequence(capacity=3), render=rendered.append, spawn=spawn)

    with pytest.raises(EmptySequence):
        scheduler.start(100)

    assert scheduler.state is PlaybackState.STOPPED
    assert spawn.targets == []


def test_ticks_cycle_through_frames(scheduler, frames, rendered):
    scheduler.start(100)
    for _ in range(5):
        scheduler.tick()

    f1, f2, f3 = frames.snapshot_list()
    assert rendered == [f1, f2, f3, f1, f2]


def test_start_spawns_one_task_with_clamped_interval(scheduler, spawn):
    scheduler.start(0)

    assert scheduler.is_playing
    assert scheduler.interval_ms == MIN_INTERVAL_MS
    assert len(spawn.tasks) == 1
    assert spawn.tasks[0].interval_ms == MIN_INTERVAL_MS


def test_restart_cancels_previous_task(scheduler, spawn, rendered):
    scheduler.start(100)
    scheduler.tick()
    first = spawn.tasks[0]

    scheduler.start(50)
    second = spawn.tasks[1]

    assert first.cancelled
    assert not second.cancelled
    assert scheduler.cursor == 0

    # A stale task firing late must not render anything
    scheduler._on_task_tick(first)
    assert len(rendered) == 1
    scheduler._on_task_tick(second)
    assert len(rendered) == 2


def test_stop_is_idempotent_and_keeps_cursor(scheduler, spawn):
    scheduler.start(100)
    scheduler.tick()
    scheduler.tick()

    scheduler.stop()
    scheduler.stop()

    assert scheduler.state is PlaybackState.STOPPED
    assert scheduler.cursor == 2
    assert spawn.tasks[0].cancelled


def test_tick_after_stop_renders_nothing(scheduler, rendered):
    scheduler.start(100)
    scheduler.stop()

    assert scheduler.tick() is None
    assert rendered == []


def test_start_after_stop_rewinds(scheduler, frames, rendered):
    scheduler.start(100)
    scheduler.tick()
    scheduler.tick()
    scheduler.stop()

    scheduler.start(100)
    scheduler.tick()

    assert rendered[-1] is frames.get(0)


def test_clearing_frames_mid_playback_stops(scheduler, frames, rendered, spawn):
    scheduler.start(100)
    scheduler.tick()
    frames.clear()

    assert scheduler.tick() is None
    assert scheduler.state is PlaybackState.STOPPED
    assert spawn.tasks[0].cancelled
    assert len(rendered) == 1


def test_shrunk_sequence_wraps_cursor(scheduler, frames, rendered, make_snapshot):
    scheduler.start(100)
    scheduler.tick()
    scheduler.tick()
    replacement = make_snapshot()
    frames.replace([replacement])

    assert scheduler.tick() == 0
    assert rendered[-1] is replacement


def test_toggle_starts_and_stops(scheduler):
    assert scheduler.toggle(200) is True
    assert scheduler.interval_ms == 200
    assert scheduler.toggle() is False
    assert scheduler.state is PlaybackState.STOPPED


def test_toggle_on_empty_sequence_fails(rendered, spawn):
    scheduler = PlaybackScheduler(FrameSequence(capacity=3), render=rendered.append, spawn=spawn)
    with pytest.raises(EmptySequence):
        scheduler.toggle()
    assert not scheduler.is_playing


def test_stop_from_render_prevents_further_ticks(frames, spawn):
    calls = []

    def render(snapshot):
        calls.append(snapshot)
        scheduler.stop()

    scheduler = PlaybackScheduler(frames, render=render, spawn=spawn)
    scheduler.start(100)

    scheduler._on_task_tick(spawn.tasks[0])
    scheduler._on_task_tick(spawn.tasks[0])

    assert len(calls) == 1
    assert not scheduler.is_playing


def test_render_failure_stops_playback(frames, spawn):
    states = []

    def render(snapshot):
        raise RuntimeError("surface gone")

    scheduler = PlaybackScheduler(frames, render=render, spawn=spawn, on_state_change=states.append)
    scheduler.start(100)
    scheduler._on_task_tick(spawn.tasks[0])

    assert not scheduler.is_playing
    assert states == [True, False]


def test_state_change_callback(frames, rendered, spawn):
    states = []
    scheduler = PlaybackScheduler(frames, render=rendered.append, spawn=spawn, on_state_change=states.append)

    scheduler.start(100)
    scheduler.stop()
    scheduler.stop()

    assert states == [True, False]


def test_cancelled_task_never_ticks():
    ticks = []
    task = PlaybackTask(1, ticks.append)
    task.cancel()
    task.run()
    assert ticks == []


def test_threaded_playback_loops_until_stopped(frames):
    rendered = []
    enough = threading.Event()

    def render(snapshot):
        rendered.append(snapshot)
        if len(rendered) >= 4:
            enough.set()

    scheduler = PlaybackScheduler(frames, render=render)
    scheduler.start(5)
    assert enough.wait(5.0)
    scheduler.stop()
    count = len(rendered)

    # Give a late tick the chance to show up
    threading.Event().wait(0.05)

    assert len(rendered) == count
    f1, f2, f3 = frames.snapshot_list()
    assert rendered[:4] == [f1, f2, f3, f1]
