"""USB-related exceptions.

This module defines exceptions for discovery and endpoint setup:
- USBAccessError: The USB bus could not be accessed at all
- EndpointOpenError: A bulk endpoint could not be opened
- UnknownDeviceError: The generation probe returned an unknown signature
"""

from typing import Any

from .base import MonomeGridError


class USBAccessError(MonomeGridError):
    """The USB bus could not be accessed (missing libusb backend, permissions)."""

    def __init__(self, cause: BaseException | str):
        super().__init__(
            user_message="Could not access the USB bus.",
            technical_message=f"USB access failed: {cause}",
            recoverable=True,
            recovery_hint=(
                "Install libusb (e.g. 'apt install libusb-1.0-0') and make sure "
                "the current user may access USB devices (udev rule or root)."
            ),
        )
        self.cause = cause


class EndpointOpenError(MonomeGridError):
    """A USB bulk endpoint could not be opened during connection setup."""

    def __init__(
        self,
        purpose: str,
        number: int,
        config: int,
        interface: int,
        setup: int,
        cause: BaseException,
        endpoint: Any = None,
        device: Any = None,
    ):
        """
        Initialize endpoint open error.

        Args:
            purpose: "usbReader" or "usbWriter"
            number: Index of the endpoint within the interface setting
            config: Configuration value that was used
            interface: Interface number that was used
            setup: Alternate setting that was used
            cause: The underlying USB error
            endpoint: The endpoint descriptor, if it could be looked up
            device: The raw USB device
        """
        super().__init__(
            user_message=(
                f"the following error happened while trying to connect to USB endpoint "
                f"{number} as {purpose}: {cause}"
            ),
            technical_message=(
                f"Opening endpoint {number} ({purpose}) failed "
                f"[config={config}, interface={interface}, setup={setup}]: {cause!r}"
            ),
            recoverable=True,
            recovery_hint=(
                "Another program or kernel driver may hold the device. "
                "Unplug and replug the grid, then try again."
            ),
        )
        self.purpose = purpose
        self.number = number
        self.config = config
        self.interface = interface
        self.setup = setup
        self.cause = cause
        self.endpoint = endpoint
        self.device = device


class UnknownDeviceError(MonomeGridError):
    """The generation probe did not match any known grid signature."""

    def __init__(
        self,
        response: bytes,
        device: str = "",
        reader_endpoint: Any = None,
        writer_endpoint: Any = None,
    ):
        """
        Initialize unknown device error.

        Args:
            response: Raw bytes returned by the probe
            device: Description of the USB device that was probed
            reader_endpoint: Descriptor of the read endpoint
            writer_endpoint: Descriptor of the write endpoint
        """
        response = bytes(response)
        hex_dump = response.hex(" ").upper()
        text = response.decode("ascii", errors="replace")
        super().__init__(
            user_message=f"unknown monome kind (got {hex_dump} ({text}))",
            technical_message=f"Unknown probe response from {device or 'USB device'}: {response!r}",
            recovery_hint="Only 64-button and 128-button grids are supported.",
        )
        self.response = response
        self.device = device
        self.reader_endpoint = reader_endpoint
        self.writer_endpoint = writer_endpoint
