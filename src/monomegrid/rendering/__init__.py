"""Text rendering and lighting effects built on the public device API."""

from .effects import flash, greeter, switch_all
from .font import FONT, GLYPH_ROWS, Glyph
from .text import marquee, print_text, text_columns

__all__ = [
    "FONT",
    "GLYPH_ROWS",
    "Glyph",
    "flash",
    "greeter",
    "marquee",
    "print_text",
    "switch_all",
    "text_columns",
]
