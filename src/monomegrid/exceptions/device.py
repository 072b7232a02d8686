"""Device-related exceptions.

This module defines exceptions raised while talking to grid hardware:
- DeviceError: A single coordinate-level operation failed
- ConnectionClosedError: I/O attempted on a closed connection
- ReadError: Reading a frame from the device failed
- CloseError: Releasing the device handle failed
- AggregateError: A batch operation collected several failures
"""

from collections.abc import Iterable

from .base import MonomeGridError


class DeviceError(MonomeGridError):
    """Setting or switching a single pad failed."""

    def __init__(
        self,
        device: str,
        x: int,
        y: int,
        task: str,
        cause: BaseException | None = None,
    ):
        """
        Initialize device error.

        Args:
            device: Identity of the device (e.g. "monome128")
            x: Row of the pad
            y: Column of the pad
            task: What the caller was trying to do (e.g. "switch on")
            cause: The underlying transport error
        """
        super().__init__(
            user_message=(
                f"device {device!r} had the following error when trying to set "
                f"{x}/{y} in order to {task}: {cause}"
            ),
            technical_message=(
                f"DeviceError(device={device!r}, x={x}, y={y}, task={task!r}): {cause!r}"
            ),
        )
        self.device = device
        self.x = x
        self.y = y
        self.task = task
        self.cause = cause

    def with_task(self, task: str) -> "DeviceError":
        """Return a copy of this error describing a different task."""
        return DeviceError(self.device, self.x, self.y, task, self.cause)


class ConnectionClosedError(MonomeGridError):
    """I/O was attempted on a connection that is already closed."""

    def __init__(self, device: str):
        super().__init__(
            user_message=f"connection to device {device!r} is closed",
            recoverable=True,
            recovery_hint="Reconnect the device and run 'monomegrid list' to check it is visible.",
        )
        self.device = device


class ReadError(MonomeGridError):
    """Reading from the device failed."""

    def __init__(self, device: str, cause: BaseException):
        super().__init__(
            user_message=(
                f"when reading from device {device!r} the following error occured: {cause}"
            ),
            technical_message=f"ReadError(device={device!r}): {cause!r}",
        )
        self.device = device
        self.cause = cause


class CloseError(MonomeGridError):
    """Releasing the USB handle of a device failed."""

    def __init__(self, device: str, cause: BaseException):
        super().__init__(
            user_message=(
                f"when closing device {device!r} the following error occured: {cause}"
            ),
            technical_message=f"CloseError(device={device!r}): {cause!r}",
        )
        self.device = device
        self.cause = cause


class AggregateError(MonomeGridError):
    """
    Several operations of one batch failed.

    The causes are kept in the order they happened. Batch operations
    (switching all lights, closing a row device, scanning the USB bus)
    raise this instead of stopping at the first failure.
    """

    def __init__(self, task: str, errors: Iterable[BaseException]):
        """
        Initialize aggregate error.

        Args:
            task: Description of the batch operation
            errors: The collected causes, in order
        """
        self.task = task
        self.errors: list[BaseException] = list(errors)
        details = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(
            user_message=f"{len(self.errors)} errors happened while trying to {task}",
            technical_message=f"{len(self.errors)} errors during {task!r}:\n{details}",
        )

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)
