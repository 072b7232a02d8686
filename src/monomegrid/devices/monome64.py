"""Wire protocol of the 64-button (8x8) grid generation."""

from __future__ import annotations

from typing import TYPE_CHECKING

from monomegrid.exceptions import DeviceError, ReadError

from .protocols import ButtonEvent

if TYPE_CHECKING:
    from .connection import Connection


LED_ON = 0x21
LED_OFF = 0x30
HEADER_SIZE = 2


def change_y(y: int) -> int:
    """
    Mirror a column index on the 8 column axis.

    The hardware counts columns right to left: 7 -> 0, 6 -> 1, ... 0 -> 7.
    Applying it twice gives back the input.
    """
    return abs(y - 7)


def encode_led(x: int, y: int, on: bool) -> bytes:
    """Build the 2-byte LED frame for the pad at x/y."""
    return bytes([LED_ON if on else LED_OFF, ((x << 4) | change_y(y)) & 0xFF])


def decode_frame(frame: bytes) -> list[ButtonEvent]:
    """
    Decode a raw frame into button events.

    After a 2-byte header every 2 bytes are one event: a state byte
    (0 means pressed) and a position byte (row in the high nibble, mirrored
    column in the low nibble). A trailing odd byte is ignored.
    """
    events = []
    for i in range(HEADER_SIZE, len(frame) - 1, 2):
        state, position = frame[i], frame[i + 1]
        events.append(ButtonEvent(position // 16, change_y(position % 16), state == 0))
    return events


class Monome64:
    """Protocol variant for the 8x8 grid; it only knows on and off."""

    name = "monome64"
    rows = 8
    cols = 8

    def __init__(self, connection: Connection):
        self.connection = connection

    def switch(self, x: int, y: int, on: bool) -> None:
        try:
            self.connection.write(encode_led(x, y, on))
        except Exception as e:
            raise DeviceError(self.name, x, y, "switch on" if on else "switch off", e) from e

    def set(self, x: int, y: int, brightness: int) -> None:
        """Any brightness above 0 switches the pad on."""
        try:
            self.switch(x, y, brightness > 0)
        except DeviceError as e:
            raise e.with_task(f"set brightness to {brightness}") from e.cause

    def read_message(self) -> None:
        try:
            frame = self.connection.read()
        except Exception as e:
            raise ReadError(self.name, e) from e

        for event in decode_frame(frame):
            self.connection.dispatch(event.x, event.y, event.down)
