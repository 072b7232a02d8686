"""Tests for the composite row device."""

import threading

import pytest

from monomegrid.devices import CloseTester, GetTester, RowConnection, SetTester, tester_connection
from monomegrid.exceptions import AggregateError, DeviceError

from conftest import RecordingHandler


@pytest.fixture
def row_parts():
    """An 8x8 and an 8x16 set-recording connection side by side."""
    calls = {"left": [], "right": []}

    def recorder_for(name, fail=False):
        def set_light(x, y, brightness):
            if fail:
                raise OSError("broken")
            calls[name].append((x, y, brightness))
        return set_light

    left = tester_connection(SetTester(8, 8, recorder_for("left")))
    right = tester_connection(SetTester(16, 8, recorder_for("right")))
    return left, right, calls


@pytest.mark.unit
class TestGeometry:
    """Test offsets and naming."""

    def test_cols_and_rows(self, row_parts):
        left, right, _ = row_parts
        row = RowConnection([left, right])

        assert row.cols == 24
        assert row.rows == 8
        assert row.num_buttons == 192
        assert row.offsets == (0, 8)

    def test_rows_is_minimum(self):
        small = tester_connection(SetTester(8, 4, lambda x, y, b: None))
        big = tester_connection(SetTester(8, 8, lambda x, y, b: None))

        assert RowConnection([big, small]).rows == 4

    def test_name(self, row_parts):
        left, right, _ = row_parts

        assert RowConnection([left, right]).name == "monome row192"
        assert str(RowConnection([left], name="ROW")) == "ROW64"

    def test_member_lookup(self, row_parts):
        left, right, _ = row_parts
        row = RowConnection([left, right])

        assert row.member("setTester") is left
        with pytest.raises(KeyError):
            row.member("monome128")

    def test_needs_members(self):
        with pytest.raises(ValueError):
            RowConnection([])


@pytest.mark.unit
class TestLedControl:
    """Test coordinate translation for output."""

    def test_set_on_second_member(self, row_parts):
        left, right, calls = row_parts
        row = RowConnection([left, right])

        row.set(0, 10, 15)

        assert calls["right"] == [(0, 2, 15)]
        assert calls["left"] == []

    def test_set_on_boundaries(self, row_parts):
        left, right, calls = row_parts
        row = RowConnection([left, right])

        row.set(1, 7, 3)
        row.set(1, 8, 4)
        row.set(1, 23, 5)

        assert calls["left"] == [(1, 7, 3)]
        assert calls["right"] == [(1, 0, 4), (1, 15, 5)]

    def test_every_column_maps_to_exactly_one_member_pad(self, row_parts):
        left, right, calls = row_parts
        row = RowConnection([left, right])

        for y in range(row.cols):
            row.set(0, y, 1)

        assert [c[1] for c in calls["left"]] == list(range(8))
        assert [c[1] for c in calls["right"]] == list(range(16))

    def test_set_failure_is_relabeled(self):
        def broken(x, y, b):
            raise OSError("x")

        row = RowConnection([tester_connection(SetTester(8, 8, broken))])

        with pytest.raises(DeviceError) as exc_info:
            row.set(2, 3, 7)

        assert exc_info.value.task == "set brightness to 7 (2/3 in row device)"

    def test_switch_failure_is_relabeled(self):
        def broken(x, y, b):
            raise OSError("x")

        row = RowConnection([tester_connection(SetTester(8, 8, broken))])

        with pytest.raises(DeviceError) as exc_info:
            row.switch(2, 3, True)

        assert exc_info.value.task == "switch on (2/3 in row device)"

    def test_switch_all_fans_out(self, row_parts):
        left, right, calls = row_parts
        row = RowConnection([left, right])

        row.switch_all(True)

        assert len(calls["left"]) == 64
        assert len(calls["right"]) == 128

    def test_switch_all_aggregates_member_failures(self, row_parts):
        left, _, calls = row_parts

        def broken(x, y, b):
            raise OSError("x")

        row = RowConnection([left, tester_connection(SetTester(8, 8, broken))])

        with pytest.raises(AggregateError) as exc_info:
            row.switch_all(False)

        assert exc_info.value.task == "switch all off (row device)"
        assert len(exc_info.value) == 1
        assert len(calls["left"]) == 64


@pytest.mark.unit
class TestEventsAndLifecycle:
    """Test handlers, listening and closing."""

    def test_handler_translates_columns(self, row_parts):
        left, right, _ = row_parts
        row = RowConnection([left, right])
        handler = RecordingHandler(expected=2)

        row.set_handler(handler)
        left.dispatch(1, 3, True)
        right.dispatch(4, 5, False)

        assert handler.events == [(row, 1, 3, True), (row, 4, 13, False)]

    def test_clearing_handler(self, row_parts):
        left, right, _ = row_parts
        row = RowConnection([left, right])
        handler = RecordingHandler()

        row.set_handler(handler)
        row.set_handler(None)
        right.dispatch(0, 0, True)

        assert handler.events == []

    def test_is_closed_only_when_all_members_closed(self, row_parts):
        left, right, _ = row_parts
        row = RowConnection([left, right])

        left.close()
        assert not row.is_closed

        right.close()
        assert row.is_closed

    def test_close_aggregates_failures(self):
        def broken():
            raise OSError("busy")

        closed = []
        row = RowConnection([
            tester_connection(CloseTester(8, 8, broken)),
            tester_connection(CloseTester(8, 8, lambda: closed.append(True))),
        ])

        with pytest.raises(AggregateError) as exc_info:
            row.close()

        assert len(exc_info.value) == 1
        assert closed == [True]

    def test_read_message_is_not_supported(self, row_parts):
        left, right, _ = row_parts

        with pytest.raises(NotImplementedError):
            RowConnection([left, right]).read_message()

    @pytest.mark.integration
    def test_listening_fans_out(self, fast_options):
        left = tester_connection(GetTester(8, 8, lambda: (0, 1, True)), fast_options)
        right = tester_connection(GetTester(8, 8, lambda: (0, 1, True)), fast_options)
        row = RowConnection([left, right])
        seen = set()
        both = threading.Event()

        def handle(source, x, y, down):
            seen.add(y)
            if seen == {1, 9}:
                both.set()

        row.set_handler(handle)
        row.start_listening()
        assert both.wait(2.0)
        row.stop_listening()
        row.close()

        assert row.is_closed
