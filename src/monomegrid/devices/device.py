"""Common base for everything that looks like a grid device."""

from abc import ABC, abstractmethod

from monomegrid import rendering
from monomegrid.exceptions import DeviceError

from .protocols import HandlerLike

MAX_BRIGHTNESS = 15


class GridDevice(ABC):
    """
    A grid of lights and buttons addressed by (x, y).

    x is the row (0 <= x < rows), y the column (0 <= y < cols).
    Brightness levels go from 0 (off) to 15 (full).

    Subclasses provide the geometry, LED output and listening lifecycle;
    whole-grid operations and text rendering are built on top of those.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifier of the device (e.g. "monome128")."""

    @property
    @abstractmethod
    def rows(self) -> int:
        """Number of rows."""

    @property
    @abstractmethod
    def cols(self) -> int:
        """Number of columns."""

    @property
    @abstractmethod
    def is_closed(self) -> bool:
        """Whether the device can no longer be used."""

    @abstractmethod
    def set(self, x: int, y: int, brightness: int) -> None:
        """
        Set the light at x/y to the given brightness.

        From the monome docs about brightness levels:
        [0, 3] - off, [4, 7] - low, [8, 11] - medium, [12, 15] - high.

        Raises:
            DeviceError: The LED command could not be sent
        """

    @abstractmethod
    def set_handler(self, handler: HandlerLike | None) -> None:
        """Set the handler that receives button events (None to clear)."""

    @abstractmethod
    def start_listening(self, err_handler=None) -> None:
        """Start polling for button events; errors are passed to err_handler."""

    @abstractmethod
    def stop_listening(self) -> None:
        """Stop polling; returns once polling has fully stopped."""

    @abstractmethod
    def close(self) -> None:
        """Stop listening and release the device."""

    @abstractmethod
    def read_message(self) -> None:
        """Read one message from the device and dispatch its events."""

    def switch(self, x: int, y: int, on: bool) -> None:
        """Switch the light at x/y fully on (brightness 15) or off (0)."""
        try:
            self.set(x, y, MAX_BRIGHTNESS if on else 0)
        except DeviceError as e:
            raise e.with_task("switch on" if on else "switch off") from e

    def switch_all(self, on: bool) -> None:
        """
        Switch all lights on or off.

        Raises:
            AggregateError: One or more pads failed; the rest were still switched
        """
        rendering.switch_all(self, on)

    def marquee(self, text: str, duration: float) -> None:
        """Scroll `text` across the device, `duration` seconds per column."""
        rendering.marquee(self, text, duration)

    def print_text(self, text: str, duration: float) -> None:
        """Show `text` letter by letter, each for `duration` seconds."""
        rendering.print_text(self, text, duration)

    @property
    def num_buttons(self) -> int:
        """Number of available buttons (rows * cols)."""
        return self.rows * self.cols

    def __str__(self) -> str:
        return self.name

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
