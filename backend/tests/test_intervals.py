import pytest

from intervals import MAX_INTERVALS, IntervalListEditor
from schemas import Interval


def test_initial_state_is_one_empty_interval():
    editor = IntervalListEditor()
    assert editor.items == [Interval(start="", end="")]


def test_append_never_exceeds_capacity():
    """Test that appending past the limit is a no-op."""
    editor = IntervalListEditor()
    for _ in range(10):
        state = editor.append()
        assert len(state) <= MAX_INTERVALS
    assert len(editor) == 5


def test_set_field_updates_in_place():
    editor = IntervalListEditor()
    editor.append()
    editor.set_field(1, "start", "12:00")
    state = editor.set_field(1, "end", "13:00")
    assert state == [Interval(), Interval(start="12:00", end="13:00")]


def test_set_field_out_of_bounds():
    editor = IntervalListEditor()
    with pytest.raises(IndexError):
        editor.set_field(1, "start", "12:00")
    with pytest.raises(IndexError):
        editor.set_field(-1, "start", "12:00")


def test_set_field_unknown_field():
    editor = IntervalListEditor()
    with pytest.raises(ValueError):
        editor.set_field(0, "duration", "01:00")


def test_returned_state_is_a_copy():
    editor = IntervalListEditor()
    state = editor.items
    state[0].start = "08:00"
    assert editor.items[0].start == ""


def test_to_persistable_drops_incomplete_intervals():
    editor = IntervalListEditor()
    editor.set_field(0, "start", "08:00")
    editor.set_field(0, "end", "09:00")
    editor.append()
    editor.append()
    editor.set_field(2, "start", "12:00")

    assert editor.to_persistable() == [Interval(start="08:00", end="09:00")]


def test_to_persistable_does_not_check_order():
    editor = IntervalListEditor()
    editor.set_field(0, "start", "14:00")
    editor.set_field(0, "end", "13:00")
    assert editor.to_persistable() == [Interval(start="14:00", end="13:00")]


def test_reset():
    editor = IntervalListEditor()
    editor.append()
    editor.set_field(0, "start", "08:00")
    assert editor.reset() == [Interval()]
