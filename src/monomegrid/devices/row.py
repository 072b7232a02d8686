"""Several grids side by side acting as one wide grid."""

import bisect
import logging
from collections.abc import Sequence

from monomegrid.exceptions import DeviceError, collect_errors

from .device import MAX_BRIGHTNESS, GridDevice
from .protocols import Handler, HandlerLike, as_handler

logger = logging.getLogger(__name__)

DEFAULT_ROW_NAME = "monome row"


class _OffsetHandler:
    """Translates member-local events into row coordinates."""

    def __init__(self, row: "RowConnection", handler: Handler, offset: int):
        self.row = row
        self.handler = handler
        self.offset = offset

    def handle(self, source: GridDevice, x: int, y: int, down: bool) -> None:
        self.handler.handle(self.row, x, self.offset + y, down)


class RowConnection(GridDevice):
    """
    A unified device made out of a row of devices.

    The order is from left to right. The number of columns is the sum of
    the columns of the members, the number of rows is the smallest number
    of rows of any member.

    Example:
        >>> row = RowConnection([m64, m128])   # 8 + 16 columns
        >>> row.set(0, 10, 15)                 # -> m128.set(0, 2, 15)
    """

    def __init__(self, connections: Sequence[GridDevice], name: str = DEFAULT_ROW_NAME):
        if not connections:
            raise ValueError("A row device needs at least one connection")

        self._members = tuple(connections)
        self._base_name = name or DEFAULT_ROW_NAME

        offsets = []
        names: dict[str, int] = {}
        start = 0
        for i, member in enumerate(self._members):
            offsets.append(start)
            # first member wins when several share a name
            names.setdefault(member.name, i)
            start += member.cols

        self._offsets = tuple(offsets)
        self._names = names
        self._cols = start
        self._rows = min(member.rows for member in self._members)

        logger.debug(f"Row device {self.name}: members {self._members}, offsets {self._offsets}")

    # ================================================================
    # GEOMETRY
    # ================================================================

    @property
    def name(self) -> str:
        return f"{self._base_name}{self.num_buttons}"

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def members(self) -> tuple[GridDevice, ...]:
        return self._members

    @property
    def offsets(self) -> tuple[int, ...]:
        """Starting column of every member."""
        return self._offsets

    def member(self, name: str) -> GridDevice:
        """Look up a member by its name."""
        try:
            return self._members[self._names[name]]
        except KeyError:
            raise KeyError(f"No device {name!r} in {self.name}") from None

    def locate(self, y: int) -> tuple[GridDevice, int]:
        """Return the member holding column y and the column local to it."""
        index = max(bisect.bisect_right(self._offsets, y) - 1, 0)
        return self._members[index], y - self._offsets[index]

    # ================================================================
    # LED CONTROL
    # ================================================================

    def set(self, x: int, y: int, brightness: int) -> None:
        member, local_y = self.locate(y)
        try:
            member.set(x, local_y, brightness)
        except DeviceError as e:
            raise e.with_task(
                f"set brightness to {brightness} ({x}/{y} in row device)"
            ) from e

    def switch(self, x: int, y: int, on: bool) -> None:
        try:
            self.set(x, y, MAX_BRIGHTNESS if on else 0)
        except DeviceError as e:
            state = "on" if on else "off"
            raise e.with_task(f"switch {state} ({x}/{y} in row device)") from e

    def switch_all(self, on: bool) -> None:
        """
        Switch all lights of all members.

        Raises:
            AggregateError: Collected failures of the members
        """
        collector = collect_errors("switch all on (row device)" if on else "switch all off (row device)")
        for member in self._members:
            with collector.try_operation(f"switch all {member}"):
                member.switch_all(on)
        collector.raise_for_errors()

    def print_text(self, text: str, duration: float) -> None:
        """Print the text on every member, one member after the other."""
        collector = collect_errors(f"printing {text!r} to row device {self.name}")
        for member in self._members:
            with collector.try_operation(f"print on {member}"):
                member.print_text(text, duration)
        collector.raise_for_errors()

    # ================================================================
    # EVENTS & LIFECYCLE
    # ================================================================

    def set_handler(self, handler: HandlerLike | None) -> None:
        handler = as_handler(handler)
        for member, offset in zip(self._members, self._offsets):
            if handler is None:
                member.set_handler(None)
            else:
                member.set_handler(_OffsetHandler(self, handler, offset))

    def start_listening(self, err_handler=None) -> None:
        for member in self._members:
            member.start_listening(err_handler)

    def stop_listening(self) -> None:
        for member in self._members:
            member.stop_listening()

    def close(self) -> None:
        """
        Close every member.

        Raises:
            AggregateError: One or more members failed to close
        """
        collector = collect_errors(f"close {self.name}")
        for member in self._members:
            with collector.try_operation(f"close {member}"):
                member.close()
        collector.raise_for_errors()

    @property
    def is_closed(self) -> bool:
        """Only true if all members are closed."""
        return all(member.is_closed for member in self._members)

    def read_message(self) -> None:
        raise NotImplementedError("Row devices are not polled; their members are")

    def __repr__(self) -> str:
        return f"RowConnection({list(self._members)!r}, name={self._base_name!r})"
