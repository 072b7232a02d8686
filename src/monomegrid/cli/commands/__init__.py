"""CLI commands for monomegrid."""

from .demo import demo
from .list import list_devices
from .show import marquee, print_text

__all__ = ["demo", "list_devices", "marquee", "print_text"]
