"""Tests for the sketchpad session and its CLI commands."""
import io
import zipfile

import pytest

from session import AnimationSession
from state.errors import (
    CapacityExceeded,
    CorruptArchive,
    EmptyArchive,
    EmptyHistory,
    EmptySequence,
)
from surface.browser_surface import BrowserSurface
from surface.raster_surface import RasterSurface
from ui.cli import CLIInterface, parse_points

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


@pytest.fixture
def session(spawn):
    surface = RasterSurface(20, 20)
    surface.set_brush(color="#000000", size=4)
    return AnimationSession(surface, history_capacity=10, frame_capacity=3, spawn=spawn)


def draw(session, points):
    session.surface.draw_stroke(points)
    return session.on_capture()


def pixel(session, xy=(10, 10)):
    return session.surface.image.getpixel(xy)


def test_history_starts_with_blank_floor(session):
    assert session.history.undo_depth == 1
    with pytest.raises(EmptyHistory):
        session.undo()


def test_undo_and_redo_render_to_surface(session):
    draw(session, [(0, 10), (19, 10)])
    assert pixel(session) == BLACK

    session.undo()
    assert pixel(session) == WHITE

    session.redo()
    assert pixel(session) == BLACK


def test_new_stroke_after_undo_drops_redo(session):
    draw(session, [(0, 10), (19, 10)])
    session.undo()
    draw(session, [(10, 0), (10, 19)])

    with pytest.raises(EmptyHistory):
        session.redo()


def test_clear_canvas_is_undoable(session):
    draw(session, [(0, 10), (19, 10)])
    session.clear_canvas()
    assert pixel(session) == WHITE

    session.undo()
    assert pixel(session) == BLACK


def test_clear_history_keeps_canvas_as_floor(session):
    draw(session, [(0, 10), (19, 10)])
    draw(session, [(10, 0), (10, 19)])

    session.clear_history()

    assert session.history.undo_depth == 1
    assert pixel(session) == BLACK
    with pytest.raises(EmptyHistory):
        session.undo()


def test_frames_do_not_share_history_snapshots(session):
    captured = draw(session, [(0, 10), (19, 10)])
    session.add_frame()

    frame = session.get_frame(0)
    assert frame is not captured
    assert frame.data == captured.data


def test_browser_frames_do_not_share_history_snapshots(spawn, make_snapshot):
    surface = BrowserSurface(width=4, height=3)
    session = AnimationSession(surface, history_capacity=10, frame_capacity=3, spawn=spawn)
    surface.stage(make_snapshot(size=(4, 3)))

    pushed = session.on_capture()
    session.add_frame()
    assert session.get_frame(0) is not pushed

    # Undo renders a history entry back onto the surface
    session.on_capture()
    restored = session.undo()
    session.add_frame()
    assert session.get_frame(1) is not restored
    assert session.get_frame(1).data == restored.data


def test_add_frame_rejects_past_capacity(session):
    for expected in (1, 2, 3):
        assert session.add_frame() == expected
    with pytest.raises(CapacityExceeded):
        session.add_frame()
    assert len(session.frames) == 3


def test_start_playback_needs_frames(session, spawn):
    with pytest.raises(EmptySequence):
        session.start_playback(100)
    assert not session.playback.is_playing
    assert spawn.targets == []


def test_playback_renders_frames_in_a_loop(session):
    draw(session, [(0, 10), (19, 10)])
    session.add_frame()
    session.clear_canvas()
    session.add_frame()

    session.start_playback(100)
    session.playback.tick()
    assert pixel(session) == BLACK
    session.playback.tick()
    assert pixel(session) == WHITE
    session.playback.tick()
    assert pixel(session) == BLACK

    session.stop_playback()
    assert not session.playback.is_playing


def test_clear_frames_stops_running_playback(session):
    session.add_frame()
    session.start_playback(100)
    session.clear_frames()

    session.playback.tick()

    assert not session.playback.is_playing


def test_toggle_playback(session):
    session.add_frame()
    assert session.toggle_playback(250) is True
    assert session.toggle_playback() is False


def test_export_without_frames(session):
    with pytest.raises(EmptySequence):
        session.export_frames()


def test_export_then_import_round_trip(session):
    draw(session, [(0, 10), (19, 10)])
    session.add_frame()
    session.clear_canvas()
    session.add_frame()
    originals = [frame.data for frame in session.frames.snapshot_list()]

    data = session.export_frames()
    session.clear_frames()
    assert session.import_frames(data) == 2

    assert [frame.data for frame in session.frames.snapshot_list()] == originals


@pytest.mark.parametrize("data,error", [
    (b"garbage", CorruptArchive),
    (None, EmptyArchive),
])
def test_failed_import_leaves_frames_untouched(session, data, error):
    if data is None:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("readme.txt", "empty")
        data = buffer.getvalue()
    session.add_frame()
    before = session.frames.snapshot_list()

    with pytest.raises(error):
        session.import_frames(data)

    assert session.frames.snapshot_list() == before


def test_import_larger_than_capacity_is_rejected(session):
    for _ in range(3):
        session.add_frame()
    data = session.export_frames()
    small = AnimationSession(RasterSurface(20, 20), frame_capacity=2)

    with pytest.raises(CapacityExceeded):
        small.import_frames(data)
    assert len(small.frames) == 0


def test_status(session):
    session.add_frame()
    status = session.status()
    assert status["history"]["undo_depth"] == 1
    assert status["frames"] == {"count": 1, "capacity": 3}
    assert status["playback"]["state"] == "stopped"


def test_parse_points():
    assert parse_points(["1,2", "3.5,4"]) == [(1.0, 2.0), (3.5, 4.0)]
    with pytest.raises(ValueError):
        parse_points(["1;2"])


def test_cli_commands_drive_the_session(session, tmp_path, capsys):
    cli = CLIInterface()
    archive_path = tmp_path / "frames.zip"

    assert cli.handle_command("draw 0,10 19,10", session)
    assert session.history.undo_depth == 2
    assert cli.handle_command("frame", session)
    assert cli.handle_command("undo", session)
    assert pixel(session) == WHITE
    assert cli.handle_command(f"export {archive_path}", session)
    assert archive_path.exists()
    assert cli.handle_command("clear-frames", session)
    assert cli.handle_command(f"import {archive_path}", session)
    assert len(session.frames) == 1
    assert cli.handle_command("play 100", session)
    assert session.playback.is_playing
    assert cli.handle_command("stop", session)
    assert cli.handle_command("status", session)
    assert cli.handle_command("quit", session) is False

    out = capsys.readouterr().out
    assert "Frames: 1/3" in out


def test_cli_reports_bad_input_without_raising(session, capsys):
    cli = CLIInterface()
    assert cli.handle_command("draw nonsense", session)
    assert cli.handle_command("shape triangle", session)
    assert cli.handle_command("play fast", session)
    assert cli.handle_command("dance", session)

    out = capsys.readouterr().out
    assert out.count("ERROR:") == 4
    assert session.history.undo_depth == 1


def test_interactive_loop_reports_sketchpad_errors(session):
    inputs = iter(["undo", "frame", "quit"])
    output = []

    session.run_interactive_loop(
        input_handler=lambda: next(inputs),
        output_handler=output.append,
        command_handler=CLIInterface().handle_command
    )

    assert "ERROR: Nothing to undo." in output
    assert len(session.frames) == 1
    assert not session.running
