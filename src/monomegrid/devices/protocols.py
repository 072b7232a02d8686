"""Device protocols and abstractions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .device import GridDevice


@dataclass(frozen=True)
class ButtonEvent:
    """A button was pressed (down=True) or released (down=False)."""

    x: int
    y: int
    down: bool


@runtime_checkable
class Handler(Protocol):
    """Receives decoded button events from a device."""

    def handle(self, source: GridDevice, x: int, y: int, down: bool) -> None:
        """
        Called from the polling thread for every button event.

        Implementations must not block indefinitely.
        """
        ...


class HandlerFunc:
    """Adapts a plain function to the Handler protocol."""

    def __init__(self, func: Callable[[GridDevice, int, int, bool], None]):
        self.func = func

    def handle(self, source: GridDevice, x: int, y: int, down: bool) -> None:
        self.func(source, x, y, down)

    def __repr__(self) -> str:
        return f"HandlerFunc({self.func!r})"


HandlerLike = Handler | Callable[..., None]


def as_handler(handler: HandlerLike | None) -> Handler | None:
    """Normalize a handler object or plain callable to a Handler."""
    if handler is None or isinstance(handler, Handler):
        return handler
    if callable(handler):
        return HandlerFunc(handler)
    raise TypeError(f"Handler must be callable or provide handle(), got {handler!r}")


class Reader(Protocol):
    """Read side of a device transport."""

    @property
    def max_packet_size(self) -> int:
        ...

    def read(self, size: int) -> bytes:
        ...


class Writer(Protocol):
    """Write side of a device transport."""

    def write(self, data: bytes) -> int:
        ...


class Closer(Protocol):
    """Releases the underlying device handle."""

    def close(self) -> None:
        ...


class Variant(Protocol):
    """
    Generation-specific protocol strategy bound to one connection.

    Encodes LED commands and decodes incoming frames; the connection
    selects exactly one variant at construction time.
    """

    name: str
    rows: int
    cols: int

    def set(self, x: int, y: int, brightness: int) -> None:
        ...

    def switch(self, x: int, y: int, on: bool) -> None:
        ...

    def read_message(self) -> None:
        """Read one frame and dispatch any decoded events."""
        ...
