"""
USB transport and discovery of grid devices.

Grids sit behind an FTDI serial chip (0403:6001 by default). Discovery
lists all matching devices, claims the first interface of each and sends
a probe frame; the answer tells the hardware generation apart:

    write [0x01, 0x00, 0x00] ── wait settle_delay ──> read one packet

    response[3:13] == b"monome 128"  ->  128-button grid
    response[0] == 0x31              ->  64-button grid
    anything else                    ->  UnknownDeviceError

Uses pyusb (``usb.core`` / ``usb.util``); a libusb backend must be
installed on the system.
"""

import logging
import time

import usb.core
import usb.util

from monomegrid.exceptions import (
    AggregateError,
    EndpointOpenError,
    ErrorContext,
    UnknownDeviceError,
    USBAccessError,
    collect_errors,
)

from .connection import Connection
from .monome64 import Monome64
from .monome128 import Monome128
from .options import DEFAULT_PRODUCT_ID, DEFAULT_VENDOR_ID, ConnectionOptions
from .protocols import Reader, Writer

logger = logging.getLogger(__name__)

VENDOR_ID = f"{DEFAULT_VENDOR_ID:04x}"
PRODUCT_ID = f"{DEFAULT_PRODUCT_ID:04x}"

PROBE_FRAME = bytes([0x01, 0x00, 0x00])
MONOME128_SIGNATURE = b"monome 128"
MONOME64_SIGNATURE = 0x31


# ================================================================
# ENDPOINT ADAPTERS
# ================================================================


class UsbReader:
    """Bulk IN endpoint; a timed out read yields an empty frame."""

    def __init__(self, endpoint, timeout_ms: int):
        self.endpoint = endpoint
        self.timeout_ms = timeout_ms

    @property
    def max_packet_size(self) -> int:
        return self.endpoint.wMaxPacketSize

    def read(self, size: int) -> bytes:
        try:
            return bytes(self.endpoint.read(size, timeout=self.timeout_ms))
        except usb.core.USBTimeoutError:
            return b""


class UsbWriter:
    """Bulk OUT endpoint."""

    def __init__(self, endpoint, timeout_ms: int):
        self.endpoint = endpoint
        self.timeout_ms = timeout_ms

    def write(self, data: bytes) -> int:
        return self.endpoint.write(data, timeout=self.timeout_ms)


class UsbHandle:
    """Releases the claimed interface and the libusb resources of a device."""

    def __init__(self, device, interface: int):
        self.device = device
        self.interface = interface

    def close(self) -> None:
        usb.util.release_interface(self.device, self.interface)
        usb.util.dispose_resources(self.device)


def _release_quietly(handle: UsbHandle) -> None:
    try:
        handle.close()
    except usb.core.USBError as e:
        logger.debug(f"Releasing {describe(handle.device)} failed: {e}")


# ================================================================
# DISCOVERY
# ================================================================


def _parse_id(value: int | str | None, default: int) -> int:
    if value is None or value == "":
        return default
    if isinstance(value, str):
        return int(value, 16)
    return value


def describe(dev) -> str:
    """Short human readable identity of a USB device."""
    return (
        f"{dev.idVendor:04x}:{dev.idProduct:04x} "
        f"(bus {dev.bus}, address {dev.address})"
    )


def device_details(dev) -> list[str]:
    """Describe the configurations, interfaces and endpoints of a USB device."""
    lines = [
        describe(dev),
        f"  class: {dev.bDeviceClass} subclass: {dev.bDeviceSubClass} "
        f"protocol: {dev.bDeviceProtocol}",
    ]
    for cfg in dev:
        lines.append(f"  config {cfg.bConfigurationValue}")
        for intf in cfg:
            lines.append(
                f"    interface {intf.bInterfaceNumber} setup {intf.bAlternateSetting} "
                f"class: {intf.bInterfaceClass}"
            )
            for ep in intf:
                direction = usb.util.endpoint_direction(ep.bEndpointAddress)
                lines.append(
                    f"      endpoint 0x{ep.bEndpointAddress:02x} "
                    f"{'in' if direction == usb.util.ENDPOINT_IN else 'out'} "
                    f"max packet size: {ep.wMaxPacketSize}"
                )
    return lines


def usb_devices(vendor_id: int | str | None = None, product_id: int | str | None = None) -> list:
    """
    Return all USB devices with the given vendor and product id.

    Ids may be ints or hex strings like "0403"; missing ids default to
    VENDOR_ID / PRODUCT_ID. Only devices with device class 0 match.

    Raises:
        USBAccessError: No libusb backend, or the bus could not be read
    """
    vid = _parse_id(vendor_id, DEFAULT_VENDOR_ID)
    pid = _parse_id(product_id, DEFAULT_PRODUCT_ID)

    try:
        found = usb.core.find(
            find_all=True,
            idVendor=vid,
            idProduct=pid,
            custom_match=lambda d: d.bDeviceClass == 0,
        )
        devices = list(found)
    except usb.core.NoBackendError as e:
        raise USBAccessError(e) from e
    except usb.core.USBError as e:
        raise USBAccessError(e) from e

    logger.debug(f"Found {len(devices)} USB devices matching {vid:04x}:{pid:04x}")
    return devices


def _claim(dev, config: int, interface: int) -> None:
    try:
        if dev.is_kernel_driver_active(interface):
            dev.detach_kernel_driver(interface)
            logger.debug(f"Detached kernel driver from interface {interface}")
    except NotImplementedError:
        logger.debug("Kernel driver detaching is not supported on this platform")

    dev.set_configuration(config)
    usb.util.claim_interface(dev, interface)


def open_endpoints(dev, options: ConnectionOptions | None = None) -> tuple[UsbHandle, UsbReader, UsbWriter]:
    """
    Claim the device and open its read and write endpoints.

    Uses the first configuration, first interface and first alternate
    setting; endpoint 0 reads, endpoint 1 writes.

    Raises:
        EndpointOpenError: Claiming the device or opening an endpoint failed
    """
    options = options or ConnectionOptions()
    config = interface = setup = 0
    handle = None

    try:
        cfg = dev[0]
        intf = cfg[(0, 0)]
        config = cfg.bConfigurationValue
        interface = intf.bInterfaceNumber
        setup = intf.bAlternateSetting
        _claim(dev, config, interface)
        handle = UsbHandle(dev, interface)
        reader_endpoint = intf[0]
    except (usb.core.USBError, IndexError, KeyError) as e:
        if handle is not None:
            _release_quietly(handle)
        raise EndpointOpenError("usbReader", 0, config, interface, setup, e, device=dev) from e

    try:
        writer_endpoint = intf[1]
    except (usb.core.USBError, IndexError) as e:
        _release_quietly(handle)
        raise EndpointOpenError(
            "usbWriter", 1, config, interface, setup, e, endpoint=reader_endpoint, device=dev
        ) from e

    reader = UsbReader(reader_endpoint, options.read_timeout_ms)
    writer = UsbWriter(writer_endpoint, options.write_timeout_ms)
    return handle, reader, writer


def probe(reader: Reader, writer: Writer, settle_delay: float = 1.0) -> bytes:
    """
    Ask the device what it is and return its raw answer.

    Raises:
        AggregateError: The probe could not be written or the answer read
    """
    try:
        writer.write(PROBE_FRAME)
    except Exception as e:
        raise AggregateError("initial write to find out the kind of monome", [e]) from e

    time.sleep(settle_delay)

    try:
        return reader.read(reader.max_packet_size)
    except Exception as e:
        raise AggregateError("initial read to find out the kind of monome", [e]) from e


def classify(response: bytes, device: str = "", reader_endpoint=None, writer_endpoint=None):
    """
    Pick the protocol variant matching a probe response.

    Raises:
        UnknownDeviceError: Neither generation signature matched
    """
    if response[3:13] == MONOME128_SIGNATURE:
        return Monome128
    if response[:1] == bytes([MONOME64_SIGNATURE]):
        return Monome64
    raise UnknownDeviceError(response, device, reader_endpoint, writer_endpoint)


def connect(dev, options: ConnectionOptions | None = None) -> Connection:
    """
    Open, probe and wrap one USB device.

    The device is released again when the probe fails.

    Raises:
        EndpointOpenError: The device could not be claimed
        AggregateError: The probe could not be exchanged
        UnknownDeviceError: The device is not a known grid
    """
    options = options or ConnectionOptions()
    name = describe(dev)

    with ErrorContext(f"connect to {name}", logger_instance=logger):
        handle, reader, writer = open_endpoints(dev, options)
        try:
            response = probe(reader, writer, options.settle_delay)
            variant = classify(response, name, reader.endpoint, writer.endpoint)
        except Exception:
            _release_quietly(handle)
            raise

        connection = Connection(handle, variant, reader, writer, options)

    logger.info(f"found: {connection} ({connection.num_buttons} buttons) at {name}")
    return connection


def connections(options: ConnectionOptions | None = None) -> tuple[list[Connection], AggregateError | None]:
    """
    Connect to every grid that can be found.

    Devices that fail do not stop the scan; their errors are returned
    together as one AggregateError (None when everything worked).

    Raises:
        USBAccessError: The USB bus could not be read at all
    """
    options = options or ConnectionOptions()
    found: list[Connection] = []
    collector = collect_errors("connect to monome devices")

    for dev in usb_devices(options.vendor_id, options.product_id):
        with collector.try_operation(f"connect {describe(dev)}"):
            found.append(connect(dev, options))

    if options.flash_on_connect:
        for connection in found:
            with collector.try_operation(f"flash {connection}"):
                connection.flash()

    error = collector.to_error()
    if error is not None:
        logger.warning(collector.get_summary())
    return found, error
