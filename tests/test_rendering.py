"""Tests for text rendering and lighting effects."""

from unittest.mock import patch

import pytest

from monomegrid.devices import SetTester, tester_connection
from monomegrid.exceptions import AggregateError, DeviceError
from monomegrid.rendering import FONT, GLYPH_ROWS, flash, greeter, marquee, print_text, switch_all, text_columns


@pytest.fixture(autouse=True)
def no_sleep():
    """Skip the pauses of marquee and print."""
    with patch("monomegrid.rendering.text.time.sleep"), \
            patch("monomegrid.rendering.effects.time.sleep"):
        yield


@pytest.mark.unit
class TestFont:
    """Test the bitmap font."""

    def test_covers_letters_and_digits(self):
        for char in "abcdefghijklmnopqrstuvwxyz0123456789 ":
            assert char in FONT

    def test_glyphs_fit_the_grid(self):
        for char, glyph in FONT.items():
            for row, col in glyph.pixels:
                assert 0 <= row < GLYPH_ROWS, char
                assert 0 <= col < glyph.width, char

    def test_space_is_blank(self):
        assert not FONT[" "].pixels

    def test_text_columns_skips_unknown(self):
        assert text_columns("aéb", 8) == text_columns("ab", 8)
        assert len(text_columns("ab", 8)) == FONT["a"].width + FONT["b"].width

    def test_columns_are_truncated_to_rows(self):
        assert all(len(column) == 4 for column in text_columns("hi", 4))


@pytest.mark.unit
class TestSwitchAll:
    """Test switching the whole grid."""

    def test_switches_every_pad(self, recorder):
        conn, calls = recorder()

        switch_all(conn, True)

        assert len(calls) == 64
        assert {b for _, _, b in calls} == {15}
        assert {(x, y) for x, y, _ in calls} == {(x, y) for x in range(8) for y in range(8)}

    def test_collects_every_failure(self, recorder):
        conn, calls = recorder(fail_at={(0, 1), (3, 3), (7, 7)})

        with pytest.raises(AggregateError) as exc_info:
            conn.switch_all(True)

        assert exc_info.value.task == "switch all on"
        assert len(exc_info.value) == 3
        assert all(isinstance(e, DeviceError) for e in exc_info.value)
        assert len(calls) == 61


@pytest.mark.unit
class TestMarquee:
    """Test the scrolling text."""

    def test_blanks_then_scrolls(self, recorder):
        conn, calls = recorder(cols=8, rows=8)

        marquee(conn, "I", 0.01)

        blank, rest = calls[:64], calls[64:]
        assert {b for _, _, b in blank} == {0}
        assert rest
        # lit pixels are as bright as their column + 1
        assert all(b == y + 1 for _, y, b in rest if b)

    def test_window_count(self, recorder):
        conn, calls = recorder(cols=4, rows=8)
        columns = text_columns("   i ", 8)

        marquee(conn, "i", 0.01)

        scrolled = calls[32:]
        expected = sum(min(4, len(columns) - start) * 8 for start in range(len(columns)))
        assert len(scrolled) == expected

    def test_pixel_failure(self):
        fail_after_blank = {"n": 0}

        def set_light(x, y, b):
            fail_after_blank["n"] += 1
            if fail_after_blank["n"] > 64:
                raise OSError("broken")

        conn = tester_connection(SetTester(8, 8, set_light))

        with pytest.raises(DeviceError) as exc_info:
            marquee(conn, "a", 0.01)

        assert "while marqueing" in exc_info.value.task
        assert "setTester" in exc_info.value.task

    def test_blank_failure(self, recorder):
        conn, _ = recorder(fail_at={(0, 0)})

        with pytest.raises(AggregateError) as exc_info:
            marquee(conn, "a", 0.01)

        assert exc_info.value.task == "blank (switch all off) before marquee on device setTester"
        assert isinstance(exc_info.value.errors[0], AggregateError)


@pytest.mark.unit
class TestPrint:
    """Test letter-by-letter printing."""

    def test_prints_glyph_pixels(self, recorder):
        conn, calls = recorder()

        print_text(conn, "L", 0.01)

        lit = {(x, y) for x, y, b in calls if b == 15}
        assert lit == set(FONT["l"].pixels)

    def test_skips_unknown_characters(self, recorder):
        conn, calls = recorder()

        print_text(conn, "é", 0.01)

        assert len(calls) == 64

    def test_pixel_failure_names_letter(self):
        def set_light(x, y, b):
            if b:
                raise OSError("broken")

        conn = tester_connection(SetTester(8, 8, set_light))

        with pytest.raises(DeviceError) as exc_info:
            print_text(conn, "a", 0.01)

        assert exc_info.value.task.startswith("switch on ")
        assert exc_info.value.task.endswith("to print letter 'a'")

    def test_clips_to_small_devices(self, recorder):
        conn, calls = recorder(cols=2, rows=2)

        print_text(conn, "m", 0.01)

        assert all(x < 2 and y < 2 for x, y, _ in calls)


@pytest.mark.integration
class TestEffects:
    """Test flash and greeter."""

    def test_flash_switches_everything_off_again(self, recorder):
        conn, calls = recorder()

        flash(conn)

        lit = [(x, y) for x, y, b in calls if b]
        assert len(lit) == 64
        assert {b for x, _, b in calls if b} == {4 + x for x in range(8)}
        off = [(x, y) for x, y, b in calls if b == 0]
        assert sorted(off) == sorted(lit)

    def test_flash_snakes(self, recorder):
        conn, calls = recorder()

        flash(conn)

        order = [(x, y) for x, y, b in calls if b]
        assert order[:8] == [(0, y) for y in range(8)]
        assert order[8:16] == [(1, y) for y in reversed(range(8))]

    def test_greeter_ends_dark(self, recorder):
        conn, calls = recorder()

        greeter(conn)

        assert calls[-64:] == [(x, y, 0) for x in range(8) for y in range(8)]
