"""
Text rendering on grid devices.

Marquee
-------

The text is laid out as one long strip of columns and a window as wide
as the device slides over it, one column per step::

    strip:   |   h    e    l    l    o  |
    step 0:  [--------]
    step 1:   [--------]
    step 2:    [--------]

Within the window a lit pixel gets the brightness ``col + 1``, so the
text brightens from left to right; unlit pixels are set to 0.

Print
-----

Shows one character at a time: light the glyph, hold, blank, hold for
half as long, next character.

Both algorithms only use the public device API (set, switch,
switch_all, rows, cols) and stop at the first failure.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from monomegrid.exceptions import AggregateError, DeviceError

from .font import FONT

if TYPE_CHECKING:
    from monomegrid.devices.device import GridDevice

logger = logging.getLogger(__name__)


def text_columns(text: str, rows: int) -> list[tuple[bool, ...]]:
    """
    Concatenate the glyphs of `text` into one strip of columns.

    Characters missing from the font are skipped.
    """
    columns: list[tuple[bool, ...]] = []
    for char in text:
        glyph = FONT.get(char)
        if glyph is None:
            logger.debug(f"No glyph for {char!r}, skipping")
            continue
        columns.extend(glyph.columns(rows))
    return columns


def _blank(device: GridDevice, task: str) -> None:
    try:
        device.switch_all(False)
    except AggregateError as e:
        raise AggregateError(task, [e]) from e


def marquee(device: GridDevice, text: str, duration: float) -> None:
    """
    Scroll `text` across the device from right to left.

    Args:
        device: Target device
        text: Text to show (lower-cased; unknown characters are skipped)
        duration: Seconds between two window positions

    Raises:
        AggregateError: Blanking the device failed
        DeviceError: Setting a pixel failed
    """
    text = "   " + text.lower() + " "
    _blank(device, f"blank (switch all off) before marquee on device {device}")

    columns = text_columns(text, device.rows)
    width = device.cols
    logger.debug(f"Marquee on {device}: {len(columns)} columns, window {width}")

    for start in range(len(columns)):
        for target_col, column in enumerate(columns[start:start + width]):
            for row, on in enumerate(column):
                brightness = target_col + 1 if on else 0
                try:
                    device.set(row, target_col, brightness)
                except DeviceError as e:
                    what = "on" if on else "off"
                    raise e.with_task(
                        f"switch {what} {row}/{target_col} on device {device} while marqueing"
                    ) from e
        time.sleep(duration)


def print_text(device: GridDevice, text: str, duration: float) -> None:
    """
    Show `text` one character after another.

    Args:
        device: Target device
        text: Text to show (lower-cased; unknown characters are skipped)
        duration: Seconds each character is shown; the pause after it is half as long

    Raises:
        AggregateError: Blanking the device failed
        DeviceError: Switching a pixel on failed
    """
    text = text.lower()
    _blank(device, f"blank (switch all off) before printing on device {device}")

    for char in text:
        glyph = FONT.get(char)
        if glyph is None:
            continue

        for x, y in sorted(glyph.pixels):
            if x >= device.rows or y >= device.cols:
                continue
            try:
                device.switch(x, y, True)
            except DeviceError as e:
                raise e.with_task(
                    f"switch on {x}/{y} on device {device} to print letter {char!r}"
                ) from e

        time.sleep(duration)
        _blank(device, f"blank (switch all off) after printing letter {char!r} on device {device}")
        time.sleep(duration / 2)
