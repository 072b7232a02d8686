"""Pytest fixtures for tests."""

import threading
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest

from monomegrid.devices import ConnectionOptions, SetTester, tester_connection


class FakeReader:
    """Reader returning queued frames, then empty frames."""

    def __init__(self, frames=(), max_packet_size=64, error=None):
        self.frames = list(frames)
        self.max_packet_size = max_packet_size
        self.error = error
        self.sizes = []

    def read(self, size):
        self.sizes.append(size)
        if self.error is not None:
            raise self.error
        if self.frames:
            return self.frames.pop(0)
        return b""


class FakeWriter:
    """Writer recording every frame."""

    def __init__(self, error=None):
        self.frames = []
        self.error = error

    def write(self, data):
        if self.error is not None:
            raise self.error
        self.frames.append(bytes(data))
        return len(data)


class FakeHandle:
    """Closer counting how often it was released."""

    def __init__(self, error=None):
        self.close_count = 0
        self.error = error

    def close(self):
        self.close_count += 1
        if self.error is not None:
            raise self.error


class RecordingHandler:
    """Handler collecting events and signalling when enough arrived."""

    def __init__(self, expected=1):
        self.events = []
        self.expected = expected
        self.done = threading.Event()
        self._lock = threading.Lock()

    def handle(self, source, x, y, down):
        with self._lock:
            self.events.append((source, x, y, down))
            if len(self.events) >= self.expected:
                self.done.set()


@pytest.fixture
def temp_dir():
    """Create a temporary directory that gets cleaned up."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def fast_options():
    """Connection options with a short poll interval."""
    return ConnectionOptions(poll_interval=0.001, settle_delay=0)


@pytest.fixture
def recorder():
    """Factory for set-recording tester connections."""

    def make(cols=8, rows=8, fail_at=()):
        calls = []

        def set_light(x, y, brightness):
            if (x, y) in fail_at:
                raise OSError(f"broken pad {x}/{y}")
            calls.append((x, y, brightness))

        conn = tester_connection(SetTester(cols, rows, set_light))
        return conn, calls

    return make
