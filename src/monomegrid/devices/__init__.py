"""Grid device drivers: USB connections, protocol variants and composites."""

from .connection import Connection
from .device import MAX_BRIGHTNESS, GridDevice
from .monome64 import Monome64
from .monome128 import Monome128
from .options import ConnectionOptions, poll_interval
from .protocols import ButtonEvent, Handler, HandlerFunc, as_handler
from .row import RowConnection
from .tester import CloseTester, GetTester, SetTester, Tester, tester_connection
from .usb import PRODUCT_ID, VENDOR_ID, connect, connections, usb_devices

__all__ = [
    "MAX_BRIGHTNESS",
    "PRODUCT_ID",
    "VENDOR_ID",
    "ButtonEvent",
    "CloseTester",
    "Connection",
    "ConnectionOptions",
    "GetTester",
    "GridDevice",
    "Handler",
    "HandlerFunc",
    "Monome64",
    "Monome128",
    "RowConnection",
    "SetTester",
    "Tester",
    "as_handler",
    "connect",
    "connections",
    "poll_interval",
    "tester_connection",
    "usb_devices",
]
