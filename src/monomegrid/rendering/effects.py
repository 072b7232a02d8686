"""Whole-grid lighting effects: switch all, flash and greeter."""

from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING

from monomegrid.exceptions import collect_errors

from .text import marquee

if TYPE_CHECKING:
    from monomegrid.devices.device import GridDevice

logger = logging.getLogger(__name__)

# Worm animation timing (seconds)
FLASH_STEP = 0.004
FLASH_AFTERGLOW = 0.047

GREETER_MARQUEE_DELAY = 0.08


def switch_all(device: GridDevice, on: bool) -> None:
    """
    Switch every light of the device on or off.

    Keeps going after a failure and reports all of them at the end.

    Raises:
        AggregateError: One or more pads could not be switched
    """
    collector = collect_errors("switch all on" if on else "switch all off")
    for x in range(device.rows):
        for y in range(device.cols):
            with collector.try_operation(f"switch {x}/{y}"):
                device.switch(x, y, on)
    collector.raise_for_errors()


def flash(device: GridDevice) -> None:
    """
    Run a worm through the grid.

    Snakes row by row (alternating direction), lighting each pad at a
    brightness that grows with the row and switching it off again shortly
    after. Returns once every pad has been switched off.

    Raises:
        AggregateError: Some pads could not be set or switched off
    """
    lock = threading.Lock()
    timers: list[threading.Timer] = []
    collector = collect_errors(f"flash device {device}")

    def switch_off(x: int, y: int) -> None:
        with lock, collector.try_operation(f"switch off {x}/{y}"):
            device.switch(x, y, False)

    try:
        for x in range(device.rows):
            cols = range(device.cols) if x % 2 == 0 else reversed(range(device.cols))
            for y in cols:
                time.sleep(FLASH_STEP)
                with lock, collector.try_operation(f"set {x}/{y}"):
                    device.set(x, y, 4 + x)

                timer = threading.Timer(FLASH_AFTERGLOW, switch_off, args=(x, y))
                timer.daemon = True
                timer.start()
                timers.append(timer)
    finally:
        for timer in timers:
            timer.join()

    collector.raise_for_errors()


def greeter(device: GridDevice) -> None:
    """Scroll the device's name over it, followed by a short full flash."""
    logger.info(f"Greeting {device}")
    marquee(device, str(device), GREETER_MARQUEE_DELAY)
    time.sleep(0.02)
    device.switch_all(True)
    time.sleep(0.3)
    device.switch_all(False)
