"""
Connection to one physical grid device.

Lifecycle
=========

::

    discovery probe OK
          │
          ↓
    ┌───────────────┐  start_listening()   ┌───────────────┐
    │ open          │ ───────────────────→ │ open          │
    │ not listening │ ←─────────────────── │ listening     │
    └──────┬────────┘   stop_listening()   └──────┬────────┘
           │            (waits for the poller)    │
           │ close()                              │ I/O error, close()
           ↓                                      ↓
    ┌──────────────────────────────────────────────────────┐
    │                      closed                          │
    └──────────────────────────────────────────────────────┘

Polling
-------

One daemon thread per listening connection. It waits on the stop event
with the poll interval as timeout, so a tick and a stop request are served
by the same wait::

    while not stop_event.wait(poll_interval):   # tick
        if closed: report ConnectionClosedError, exit
        variant.read_message()                   # may dispatch events
    # stop requested: exit without touching the closed flag

``stop_listening()`` sets the event and joins the thread, so when it
returns no handler call for this connection can still be running. This
is what lets ``close()`` release the USB handle without racing a read in
progress.

Shared state
------------

Only the closed flag, the released flag, the handler and the poller
reference are touched from more than one thread; all of them are guarded
by ``_lock``. The variant, geometry and endpoints never change after
construction.
"""

import logging
import threading
from collections.abc import Callable

from monomegrid import rendering
from monomegrid.exceptions import CloseError, ConnectionClosedError

from .device import GridDevice
from .options import ConnectionOptions
from .protocols import Closer, Handler, HandlerLike, Reader, Variant, Writer, as_handler

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[Exception], None]


class Connection(GridDevice):
    """
    A live, owned binding to one grid's USB endpoints plus its listening state.

    The generation-specific protocol is delegated to a variant chosen once
    at construction (see monome64 / monome128).
    """

    # ================================================================
    # INITIALIZATION
    # ================================================================

    def __init__(
        self,
        handle: Closer,
        variant_factory: Callable[["Connection"], Variant],
        reader: Reader | None = None,
        writer: Writer | None = None,
        options: ConnectionOptions | None = None,
    ):
        """
        Initialize connection.

        Normally not called directly; use ``monomegrid.devices.usb.connect``
        or ``connections`` instead.

        Args:
            handle: Releases the underlying device on close
            variant_factory: Builds the protocol variant bound to this connection
            reader: Read endpoint
            writer: Write endpoint
            options: Connection options (poll interval etc.)
        """
        self._options = options or ConnectionOptions()
        self._handle = handle
        self._reader = reader
        self._writer = writer
        self._max_packet_size = reader.max_packet_size if reader is not None else 0

        self._lock = threading.Lock()
        self._closed = False
        self._released = False
        self._handler: Handler | None = None
        self._poll_thread: threading.Thread | None = None
        self._stop_event = threading.Event()

        self._variant = variant_factory(self)

    # ================================================================
    # PROPERTIES
    # ================================================================

    @property
    def name(self) -> str:
        return self._variant.name

    @property
    def rows(self) -> int:
        return self._variant.rows

    @property
    def cols(self) -> int:
        return self._variant.cols

    @property
    def variant(self) -> Variant:
        """The protocol variant selected for this device."""
        return self._variant

    @property
    def max_packet_size(self) -> int:
        """Size of one read from the device."""
        return self._max_packet_size

    @property
    def options(self) -> ConnectionOptions:
        return self._options

    @property
    def is_closed(self) -> bool:
        with self._lock:
            return self._closed

    @property
    def is_listening(self) -> bool:
        """Whether a poller thread is running."""
        with self._lock:
            return self._poll_thread is not None and self._poll_thread.is_alive()

    # ================================================================
    # RAW I/O
    # ================================================================

    def read(self, size: int | None = None) -> bytes:
        """
        Read one frame from the device.

        Any transport error closes the connection and is re-raised.

        Raises:
            ConnectionClosedError: The connection is closed
        """
        if self.is_closed:
            raise ConnectionClosedError(self.name)

        try:
            return self._reader.read(size or self._max_packet_size)
        except Exception as e:
            logger.warning(
                f"stopping read/write to device {self.name}, because of reading error: {e}"
            )
            self._mark_closed()
            raise

    def write(self, data: bytes) -> int:
        """
        Write raw bytes to the device.

        Any transport error closes the connection and is re-raised.

        Raises:
            ConnectionClosedError: The connection is closed
        """
        if self.is_closed:
            raise ConnectionClosedError(self.name)

        try:
            return self._writer.write(data)
        except Exception as e:
            logger.warning(
                f"stopping read/write to device {self.name}, because of writing error: {e}"
            )
            self._mark_closed()
            raise

    def _mark_closed(self) -> None:
        with self._lock:
            self._closed = True

    # ================================================================
    # LED CONTROL
    # ================================================================

    def set(self, x: int, y: int, brightness: int) -> None:
        self._variant.set(x, y, brightness)

    def switch(self, x: int, y: int, on: bool) -> None:
        self._variant.switch(x, y, on)

    def flash(self) -> None:
        """Run the worm animation over the grid."""
        rendering.flash(self)

    # ================================================================
    # EVENTS
    # ================================================================

    def set_handler(self, handler: HandlerLike | None) -> None:
        handler = as_handler(handler)
        with self._lock:
            self._handler = handler

    def dispatch(self, x: int, y: int, down: bool) -> None:
        """
        Deliver one decoded button event to the active handler.

        Called by the variant from the polling thread. Events without a
        handler are logged and dropped; handler exceptions are logged.
        """
        with self._lock:
            handler = self._handler

        if handler is None:
            action = "press" if down else "release"
            logger.info(f"unhandled key {action} on device {self.name}: x: {x}, y: {y}")
            return

        try:
            handler.handle(self, x, y, down)
        except Exception:
            logger.exception(f"Error in button handler for {self.name} ({x}/{y})")

    def read_message(self) -> None:
        self._variant.read_message()

    # ================================================================
    # LISTENING
    # ================================================================

    def start_listening(self, err_handler: ErrorHandler | None = None) -> None:
        """
        Start polling for button events in a background thread.

        Args:
            err_handler: Called (from the polling thread) with the error that
                ended polling: a read failure, or ConnectionClosedError when
                the connection was closed underneath the poller
        """
        with self._lock:
            if self._poll_thread is not None and self._poll_thread.is_alive():
                logger.warning(f"Already listening on {self.name}")
                return

            stop_event = threading.Event()
            thread = threading.Thread(
                target=self._poll,
                args=(err_handler, stop_event),
                name=f"{self.name}-poll",
                daemon=True,
            )
            self._stop_event = stop_event
            self._poll_thread = thread

        thread.start()
        logger.debug(
            f"Listening on {self.name} every {self._options.poll_interval * 1000:.1f}ms"
        )

    def _poll(self, err_handler: ErrorHandler | None, stop_event: threading.Event) -> None:
        interval = self._options.poll_interval

        while not stop_event.wait(interval):
            if self.is_closed:
                logger.info(f"stop listening, because device {self.name} is closed")
                self._report(err_handler, ConnectionClosedError(self.name))
                return

            try:
                self._variant.read_message()
            except Exception as e:
                logger.warning(
                    f"stop listening, because could not read from device {self.name}: {e}"
                )
                self._mark_closed()
                self._report(err_handler, e)
                return

        logger.debug(f"Poller of {self.name} stopped")

    def _report(self, err_handler: ErrorHandler | None, error: Exception) -> None:
        if err_handler is None:
            return
        try:
            err_handler(error)
        except Exception:
            logger.exception(f"Error in error handler for {self.name}")

    def stop_listening(self) -> None:
        """
        Stop polling and wait until the poller has exited.

        Does nothing if the connection is closed or not listening. When
        called from the polling thread itself (e.g. inside a handler) the
        poller is only asked to stop.
        """
        if self.is_closed:
            return

        with self._lock:
            thread = self._poll_thread
            stop_event = self._stop_event

        if thread is None:
            return

        stop_event.set()

        if thread is threading.current_thread():
            logger.debug(f"stop_listening called from the poller of {self.name}")
            return

        thread.join()

        with self._lock:
            if self._poll_thread is thread:
                self._poll_thread = None

        logger.debug(f"Stopped listening on {self.name}")

    def _wait_for_poller(self) -> None:
        with self._lock:
            thread = self._poll_thread

        if thread is not None and thread is not threading.current_thread():
            thread.join()

    # ================================================================
    # LIFECYCLE
    # ================================================================

    def close(self) -> None:
        """
        Stop listening and release the device.

        Idempotent: once the handle has been released this does nothing.

        Raises:
            CloseError: Releasing the device handle failed
        """
        with self._lock:
            if self._released:
                return
            was_closed = self._closed

        if not was_closed:
            self.stop_listening()
        # a poller on a connection closed by an I/O error exits at its next tick
        self._wait_for_poller()

        with self._lock:
            if self._released:
                return
            self._closed = True
            self._released = True

        try:
            self._handle.close()
        except Exception as e:
            if was_closed:
                logger.warning(f"Releasing {self.name} after an I/O failure failed: {e}")
                return
            raise CloseError(self.name, e) from e

        logger.info(f"Closed {self.name}")

    def __repr__(self) -> str:
        return f"Connection({self.name!r}, rows={self.rows}, cols={self.cols})"
