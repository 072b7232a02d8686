"""
Static bitmap font used by marquee and print.

Each glyph is drawn on an 8-row grid: row 0 is left blank and the
character occupies rows 1-7. A glyph's width includes one blank spacing
column on the right so that glyphs can be concatenated directly.

Pixels are addressed as (row, col), the same (x, y) order the devices use.
"""

from typing import NamedTuple

GLYPH_ROWS = 8


class Glyph(NamedTuple):
    """Bitmap of one character."""

    width: int
    pixels: frozenset[tuple[int, int]]

    def columns(self, rows: int = GLYPH_ROWS) -> list[tuple[bool, ...]]:
        """Return the glyph column by column, each column `rows` tall."""
        return [
            tuple((row, col) in self.pixels for row in range(rows))
            for col in range(self.width)
        ]


_BITMAPS: dict[str, tuple[str, ...]] = {
    "a": (".###.", "#...#", "#...#", "#####", "#...#", "#...#", "#...#"),
    "b": ("####.", "#...#", "#...#", "####.", "#...#", "#...#", "####."),
    "c": (".###.", "#...#", "#....", "#....", "#....", "#...#", ".###."),
    "d": ("####.", "#...#", "#...#", "#...#", "#...#", "#...#", "####."),
    "e": ("#####", "#....", "#....", "####.", "#....", "#....", "#####"),
    "f": ("#####", "#....", "#....", "####.", "#....", "#....", "#...."),
    "g": (".###.", "#...#", "#....", "#.###", "#...#", "#...#", ".###."),
    "h": ("#...#", "#...#", "#...#", "#####", "#...#", "#...#", "#...#"),
    "i": ("###", ".#.", ".#.", ".#.", ".#.", ".#.", "###"),
    "j": ("..###", "...#.", "...#.", "...#.", "#..#.", "#..#.", ".##.."),
    "k": ("#...#", "#..#.", "#.#..", "##...", "#.#..", "#..#.", "#...#"),
    "l": ("#....", "#....", "#....", "#....", "#....", "#....", "#####"),
    "m": ("#...#", "##.##", "#.#.#", "#.#.#", "#...#", "#...#", "#...#"),
    "n": ("#...#", "#...#", "##..#", "#.#.#", "#..##", "#...#", "#...#"),
    "o": (".###.", "#...#", "#...#", "#...#", "#...#", "#...#", ".###."),
    "p": ("####.", "#...#", "#...#", "####.", "#....", "#....", "#...."),
    "q": (".###.", "#...#", "#...#", "#...#", "#.#.#", "#..#.", ".##.#"),
    "r": ("####.", "#...#", "#...#", "####.", "#.#..", "#..#.", "#...#"),
    "s": (".####", "#....", "#....", ".###.", "....#", "....#", "####."),
    "t": ("#####", "..#..", "..#..", "..#..", "..#..", "..#..", "..#.."),
    "u": ("#...#", "#...#", "#...#", "#...#", "#...#", "#...#", ".###."),
    "v": ("#...#", "#...#", "#...#", "#...#", "#...#", ".#.#.", "..#.."),
    "w": ("#...#", "#...#", "#...#", "#.#.#", "#.#.#", "#.#.#", ".#.#."),
    "x": ("#...#", "#...#", ".#.#.", "..#..", ".#.#.", "#...#", "#...#"),
    "y": ("#...#", "#...#", ".#.#.", "..#..", "..#..", "..#..", "..#.."),
    "z": ("#####", "....#", "...#.", "..#..", ".#...", "#....", "#####"),
    "0": (".###.", "#...#", "#..##", "#.#.#", "##..#", "#...#", ".###."),
    "1": ("..#..", ".##..", "..#..", "..#..", "..#..", "..#..", ".###."),
    "2": (".###.", "#...#", "....#", "...#.", "..#..", ".#...", "#####"),
    "3": ("#####", "...#.", "..#..", "...#.", "....#", "#...#", ".###."),
    "4": ("...#.", "..##.", ".#.#.", "#..#.", "#####", "...#.", "...#."),
    "5": ("#####", "#....", "####.", "....#", "....#", "#...#", ".###."),
    "6": ("..##.", ".#...", "#....", "####.", "#...#", "#...#", ".###."),
    "7": ("#####", "....#", "...#.", "..#..", ".#...", ".#...", ".#..."),
    "8": (".###.", "#...#", "#...#", ".###.", "#...#", "#...#", ".###."),
    "9": (".###.", "#...#", "#...#", ".####", "....#", "...#.", ".##.."),
    " ": ("...", "...", "...", "...", "...", "...", "..."),
    ".": (".", ".", ".", ".", ".", ".", "#"),
    ",": ("..", "..", "..", "..", "..", ".#", "#."),
    "!": ("#", "#", "#", "#", "#", ".", "#"),
    "?": (".###.", "#...#", "....#", "...#.", "..#..", ".....", "..#.."),
    ":": (".", "#", ".", ".", ".", "#", "."),
    "'": ("#", "#", ".", ".", ".", ".", "."),
    "-": (".....", ".....", ".....", "#####", ".....", ".....", "....."),
    "+": (".....", "..#..", "..#..", "#####", "..#..", "..#..", "....."),
    "=": (".....", ".....", "#####", ".....", "#####", ".....", "....."),
    "/": ("....#", "...#.", "...#.", "..#..", ".#...", ".#...", "#...."),
}


def _parse(char: str, lines: tuple[str, ...]) -> Glyph:
    width = len(lines[0])
    if any(len(line) != width for line in lines):
        raise ValueError(f"Glyph {char!r} has rows of different widths")
    pixels = frozenset(
        (row + 1, col)
        for row, line in enumerate(lines)
        for col, mark in enumerate(line)
        if mark == "#"
    )
    # one blank spacing column
    return Glyph(width=width + 1, pixels=pixels)


FONT: dict[str, Glyph] = {char: _parse(char, lines) for char, lines in _BITMAPS.items()}
