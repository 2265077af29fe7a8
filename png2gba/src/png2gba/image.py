"""Decoding PNG files into pixel grids."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from PIL import Image

from .errors import DecodeError, UnsupportedChannelLayout

SUPPORTED_MODES = {"RGB": 3, "RGBA": 4}


@dataclass(frozen=True)
class PixelGrid:
    """Decoded pixels: ``height`` rows of ``width * channels`` samples."""

    width: int
    height: int
    channels: int
    rows: Tuple[bytes, ...]

    def __post_init__(self) -> None:
        if self.channels not in (3, 4):
            raise UnsupportedChannelLayout(
                f"Expected 3 or 4 channels per pixel, got {self.channels}",
                self.channels,
            )
        if len(self.rows) != self.height:
            raise DecodeError(f"Expected {self.height} rows, got {len(self.rows)}")
        stride = self.width * self.channels
        for index, row in enumerate(self.rows):
            if len(row) != stride:
                raise DecodeError(
                    f"Row {index} holds {len(row)} samples, expected {stride}"
                )

    def sample(self, row: int, col: int) -> Tuple[int, int, int]:
        """Return the (r, g, b) sample at ``row``/``col``; alpha is ignored."""
        offset = col * self.channels
        data = self.rows[row]
        return data[offset], data[offset + 1], data[offset + 2]


def grid_from_image(image: Image.Image, identifier: str = "<image>") -> PixelGrid:
    channels = SUPPORTED_MODES.get(image.mode)
    if channels is None:
        bands = len(image.getbands())
        raise UnsupportedChannelLayout(
            f"{identifier}: unsupported image mode {image.mode} ({bands} channels); "
            "only RGB and RGBA are accepted",
            bands,
        )
    if channels == 4:
        warnings.warn(
            f"{identifier} has an alpha channel; alpha is discarded",
            RuntimeWarning,
            stacklevel=2,
        )

    width, height = image.size
    data = image.tobytes()
    stride = width * channels
    rows: List[bytes] = [data[y * stride : (y + 1) * stride] for y in range(height)]
    return PixelGrid(width=width, height=height, channels=channels, rows=tuple(rows))


def load_pixel_grid(path: str | Path) -> PixelGrid:
    path = Path(path)
    try:
        with Image.open(path) as img:
            img.load()
            return grid_from_image(img, str(path))
    except FileNotFoundError as exc:
        raise DecodeError(f"Input file not found: {path}") from exc
    except OSError as exc:
        raise DecodeError(f"Failed to read PNG: {path}") from exc
