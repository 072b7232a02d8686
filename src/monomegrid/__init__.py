"""monomegrid: userspace driver for monome grids attached over USB."""

__version__ = "0.1.0"

# Devices and discovery
from .devices import (
    Connection,
    ConnectionOptions,
    GridDevice,
    RowConnection,
    connect,
    connections,
    usb_devices,
)

__all__ = [
    "Connection",
    "ConnectionOptions",
    "GridDevice",
    "RowConnection",
    "connect",
    "connections",
    "usb_devices",
]
