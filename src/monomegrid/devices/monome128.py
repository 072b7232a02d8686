"""Wire protocol of the 128-button (8x16) grid generation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from monomegrid.exceptions import DeviceError, ReadError

from .protocols import ButtonEvent

if TYPE_CHECKING:
    from .connection import Connection

logger = logging.getLogger(__name__)

LED_COMMAND = 24
KEY_DOWN = 0x21
HEADER_SIZE = 2
EVENT_SIZE = 3
MAX_LEVEL = 15


def encode_led(x: int, y: int, brightness: int) -> bytes:
    """Build the 4-byte LED frame; brightness is clamped to [0, 15]."""
    level = max(0, min(brightness, MAX_LEVEL))
    return bytes([LED_COMMAND, y & 0xFF, x & 0xFF, level])


def decode_frame(frame: bytes) -> list[ButtonEvent]:
    """
    Decode a raw frame into button events.

    After a 2-byte header every 3 bytes are one event: state, column, row.
    A state byte of 0 marks an empty slot, 0x21 a press, anything else a
    release. Incomplete trailing events are ignored.
    """
    events = []
    for i in range(HEADER_SIZE, len(frame) - EVENT_SIZE + 1, EVENT_SIZE):
        state, y, x = frame[i], frame[i + 1], frame[i + 2]
        if state == 0:
            continue
        events.append(ButtonEvent(x, y, state == KEY_DOWN))
    return events


class Monome128:
    """Protocol variant for the 8x16 grid with 16 brightness levels."""

    name = "monome128"
    rows = 8
    cols = 16

    def __init__(self, connection: Connection):
        self.connection = connection

    def set(self, x: int, y: int, brightness: int) -> None:
        frame = encode_led(x, y, brightness)
        try:
            self.connection.write(frame)
        except Exception as e:
            raise DeviceError(self.name, x, y, f"set brightness to {frame[3]}", e) from e

    def switch(self, x: int, y: int, on: bool) -> None:
        try:
            self.set(x, y, MAX_LEVEL if on else 0)
        except DeviceError as e:
            raise e.with_task("switch on" if on else "switch off") from e.cause

    def read_message(self) -> None:
        try:
            frame = self.connection.read()
        except Exception as e:
            raise ReadError(self.name, e) from e

        events = decode_frame(frame)
        if events:
            logger.debug(f"{self.name}: decoded {len(events)} events")
        for event in events:
            self.connection.dispatch(event.x, event.y, event.down)
