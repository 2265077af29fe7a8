"""Palette table with a reserved color key at index 0."""

from __future__ import annotations

from typing import Iterator, List

from .color import Color15
from .errors import CapacityExceeded

PALETTE_SIZE = 256
# Insertion is refused once the table holds this many entries, so the last
# hardware slot is never assigned.
INSERT_LIMIT = PALETTE_SIZE - 1


class PaletteTable:
    """Ordered, deduplicated list of 15-bit colors.

    Index 0 always holds the color key. Other colors get indices in the
    order they are first seen, so the same pixel sequence always produces the
    same table.
    """

    def __init__(self, key_color: Color15):
        self.key_color = key_color
        self._colors: List[Color15] = [key_color]

    def insert_or_lookup(self, color: Color15) -> int:
        if color in self._colors:
            return self._colors.index(color)
        if len(self._colors) >= INSERT_LIMIT:
            raise CapacityExceeded(
                f"Too many colors for a {PALETTE_SIZE}-entry palette "
                f"(0x{color:04X} would be color {len(self._colors) + 1})",
                capacity=PALETTE_SIZE,
            )
        self._colors.append(color)
        return len(self._colors) - 1

    def copy(self) -> "PaletteTable":
        clone = PaletteTable(self.key_color)
        clone._colors = list(self._colors)
        return clone

    @property
    def colors(self) -> List[Color15]:
        return list(self._colors)

    def table(self) -> List[Color15]:
        """All hardware slots; unassigned entries are 0."""
        return self._colors + [0] * (PALETTE_SIZE - len(self._colors))

    def __len__(self) -> int:
        return len(self._colors)

    def __iter__(self) -> Iterator[Color15]:
        return iter(self._colors)

    def __contains__(self, color: object) -> bool:
        return color in self._colors
