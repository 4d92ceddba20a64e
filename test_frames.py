"""Tests for the animation frame sequence."""
import pytest

from state.errors import CapacityExceeded, IndexOutOfRange
from state.frames import FrameSequence


def test_add_frame_until_capacity_then_reject(make_snapshot):
    frames = FrameSequence(capacity=2)
    x, y, z = make_snapshot(), make_snapshot(), make_snapshot()

    assert frames.add_frame(x) == 1
    assert frames.add_frame(y) == 2
    with pytest.raises(CapacityExceeded):
        frames.add_frame(z)

    assert frames.length() == 2
    assert frames.get(0) is x
    assert frames.get(1) is y


def test_get_rejects_out_of_range_indices(make_snapshot):
    frames = FrameSequence(capacity=5)
    frames.add_frame(make_snapshot())

    for index in (-1, 1, 99):
        with pytest.raises(IndexOutOfRange):
            frames.get(index)


def test_get_on_empty_sequence(make_snapshot):
    with pytest.raises(IndexOutOfRange):
        FrameSequence(capacity=3).get(0)


def test_clear_empties_and_allows_new_frames(make_snapshot):
    frames = FrameSequence(capacity=1)
    frames.add_frame(make_snapshot())
    frames.clear()

    assert frames.is_empty()
    assert len(frames) == 0
    assert frames.add_frame(make_snapshot()) == 1


def test_replace_swaps_all_frames(make_snapshot):
    frames = FrameSequence(capacity=5)
    frames.add_frame(make_snapshot())
    incoming = [make_snapshot(), make_snapshot(), make_snapshot()]

    assert frames.replace(incoming) == 3
    assert frames.snapshot_list() == incoming


def test_replace_over_capacity_changes_nothing(make_snapshot):
    frames = FrameSequence(capacity=2)
    original = make_snapshot()
    frames.add_frame(original)

    with pytest.raises(CapacityExceeded):
        frames.replace([make_snapshot() for _ in range(3)])

    assert frames.snapshot_list() == [original]


def test_snapshot_list_is_a_copy(make_snapshot):
    frames = FrameSequence(capacity=5)
    frames.add_frame(make_snapshot())

    listed = frames.snapshot_list()
    listed.append(make_snapshot())

    assert frames.length() == 1


def test_rejects_non_positive_capacity():
    with pytest.raises(ValueError):
        FrameSequence(capacity=0)
