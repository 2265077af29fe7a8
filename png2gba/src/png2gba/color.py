"""15-bit color packing for the GBA.

Reference: GBA color word (BGR555)
Bits    | Channel | Notes
--------|---------|-----------------------------------
0-4     | Red     | high 5 bits of the 8-bit sample
5-9     | Green   | high 5 bits of the 8-bit sample
10-14   | Blue    | high 5 bits of the 8-bit sample
15      | unused  | always 0
"""

from __future__ import annotations

from .errors import ConfigurationError

Color15 = int

HEX_DIGITS = "0123456789abcdefABCDEF"


def quantize(r: int, g: int, b: int) -> Color15:
    return ((b >> 3) << 10) | ((g >> 3) << 5) | (r >> 3)


def parse_hex_color(text: str) -> Color15:
    """Parse a ``#RRGGBB`` string into a packed 15-bit color.

    Exactly six hex digits must follow the leading ``#``; anything else is a
    configuration error.
    """

    if len(text) != 7 or not text.startswith("#"):
        raise ConfigurationError(f"Color key must look like #RRGGBB: {text!r}")
    digits = text[1:]
    if not all(c in HEX_DIGITS for c in digits):
        raise ConfigurationError(f"Invalid hex digits in color key: {text!r}")
    r, g, b = (int(digits[i : i + 2], 16) for i in range(0, 6, 2))
    return quantize(r, g, b)


def format_color(value: int, digits: int = 4) -> str:
    return f"0x{value:0{digits}X}"
