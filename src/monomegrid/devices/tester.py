"""
Fake devices for testing code that drives grids.

A Tester stands in for the USB endpoints; ``tester_connection`` wraps one
in a real Connection so listening, handlers and closing behave exactly as
with hardware::

    events = iter([(0, 1, True), None, (0, 1, False)])
    conn = tester_connection(GetTester(8, 8, lambda: next(events)))
    conn.set_handler(lambda src, x, y, down: print(x, y, down))
    conn.start_listening()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from monomegrid.exceptions import DeviceError, ReadError

from .connection import Connection
from .device import MAX_BRIGHTNESS
from .options import ConnectionOptions

ButtonState = tuple[int, int, bool]


class Tester(Protocol):
    """The device side of a fake grid."""

    name: str
    rows: int
    cols: int

    def get(self) -> ButtonState | None:
        """Return the next (x, y, down) event, or None when nothing happened."""
        ...

    def set(self, x: int, y: int, brightness: int) -> None:
        ...

    def close(self) -> None:
        ...


class _BaseTester:
    name = "tester"

    def __init__(self, cols: int, rows: int):
        self.cols = cols
        self.rows = rows

    def get(self) -> ButtonState | None:
        raise NotImplementedError(f"{self.name} does not support get()")

    def set(self, x: int, y: int, brightness: int) -> None:
        raise NotImplementedError(f"{self.name} does not support set()")

    def close(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(cols={self.cols}, rows={self.rows})"


class GetTester(_BaseTester):
    """Tester for reading button events."""

    name = "getTester"

    def __init__(self, cols: int, rows: int, get: Callable[[], ButtonState | None]):
        super().__init__(cols, rows)
        self._get = get

    def get(self) -> ButtonState | None:
        return self._get()


class SetTester(_BaseTester):
    """Tester for setting lights."""

    name = "setTester"

    def __init__(self, cols: int, rows: int, set: Callable[[int, int, int], None]):
        super().__init__(cols, rows)
        self._set = set

    def set(self, x: int, y: int, brightness: int) -> None:
        self._set(x, y, brightness)


class CloseTester(_BaseTester):
    """Tester for closing the device."""

    name = "closeTester"

    def __init__(self, cols: int, rows: int, close: Callable[[], None]):
        super().__init__(cols, rows)
        self._close = close

    def close(self) -> None:
        self._close()


class TesterVariant:
    """Protocol variant that forwards to a Tester instead of USB."""

    def __init__(self, connection: Connection, tester: Tester):
        self.connection = connection
        self.tester = tester
        self.name = tester.name
        self.rows = tester.rows
        self.cols = tester.cols

    def set(self, x: int, y: int, brightness: int) -> None:
        try:
            self.tester.set(x, y, brightness)
        except Exception as e:
            raise DeviceError(self.name, x, y, f"set brightness to {brightness}", e) from e

    def switch(self, x: int, y: int, on: bool) -> None:
        try:
            self.set(x, y, MAX_BRIGHTNESS if on else 0)
        except DeviceError as e:
            raise e.with_task("switch on" if on else "switch off") from e.cause

    def read_message(self) -> None:
        try:
            event = self.tester.get()
        except Exception as e:
            raise ReadError(self.name, e) from e

        if event is not None:
            x, y, down = event
            self.connection.dispatch(x, y, down)


def tester_connection(tester: Tester, options: ConnectionOptions | None = None) -> Connection:
    """Create a Connection backed by the given tester."""
    return Connection(
        handle=tester,
        variant_factory=lambda conn: TesterVariant(conn, tester),
        options=options,
    )
