"""Pixel visiting orders: row-major or 8x8 tile blocks.

Reference: GBA tile memory
- Tiles are 8x8 pixels stored one after another, 64 entries per tile.
- Tiles of a sheet are stored left to right, then top to bottom.
- Pixels inside a tile are stored row by row.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

TILE_SIZE = 8

Coordinate = Tuple[int, int]


class TraversalMode(Enum):
    LINEAR = "linear"
    TILED = "tiled"


@dataclass
class TraversalCursor:
    """Position of the next pixel to visit.

    Linear traversals treat the whole image as a single block, so only
    ``row`` and ``col`` move.
    """

    block_row: int = 0
    block_col: int = 0
    row: int = 0
    col: int = 0


class PixelTraversal:
    """Iterator over every ``(row, col)`` of a ``width`` x ``height`` grid.

    Each instance owns its cursor. Edge tiles of images whose sides are not
    multiples of 8 are clipped to the remaining pixels.
    """

    def __init__(self, width: int, height: int, mode: TraversalMode = TraversalMode.LINEAR):
        if width < 0 or height < 0:
            raise ValueError(f"Invalid grid size: {width}x{height}")
        self.width = width
        self.height = height
        self.mode = TraversalMode(mode)
        if self.mode is TraversalMode.TILED:
            self.block_width = TILE_SIZE
            self.block_height = TILE_SIZE
        else:
            self.block_width = max(width, 1)
            self.block_height = max(height, 1)
        self.blocks_across = -(-width // self.block_width)
        self.blocks_down = -(-height // self.block_height)
        self.cursor = TraversalCursor()

    def reset(self) -> None:
        self.cursor = TraversalCursor()

    def _clipped_block(self, block_row: int, block_col: int) -> Tuple[int, int]:
        left = block_col * self.block_width
        top = block_row * self.block_height
        return (
            min(self.block_width, self.width - left),
            min(self.block_height, self.height - top),
        )

    def __iter__(self) -> Iterator[Coordinate]:
        return self

    def __next__(self) -> Coordinate:
        cur = self.cursor
        if cur.block_row >= self.blocks_down or self.blocks_across == 0:
            raise StopIteration

        coordinate = (
            cur.block_row * self.block_height + cur.row,
            cur.block_col * self.block_width + cur.col,
        )

        block_w, block_h = self._clipped_block(cur.block_row, cur.block_col)
        cur.col += 1
        if cur.col == block_w:
            cur.col = 0
            cur.row += 1
            if cur.row == block_h:
                cur.row = 0
                cur.block_col += 1
                if cur.block_col == self.blocks_across:
                    cur.block_col = 0
                    cur.block_row += 1

        return coordinate

    def __len__(self) -> int:
        return self.width * self.height


def traverse(width: int, height: int, mode: TraversalMode = TraversalMode.LINEAR) -> PixelTraversal:
    """Return a fresh traversal; never reuse one across images."""
    return PixelTraversal(width, height, mode)
