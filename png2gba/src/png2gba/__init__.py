"""PNG to GBA header converter.

This package turns PNG images into C declarations of 15-bit colors, or of
palette indices plus a 256-entry palette, optionally in 8x8 tile order. It can
be invoked through the CLI (``python -m png2gba``) or imported to convert
decoded images in memory.
"""

from .color import quantize, parse_hex_color
from .encoder import (
    BatchContext,
    EncodedImage,
    EncodedStream,
    EncodeOptions,
    FormatEncoder,
    HeaderDocument,
    build_document,
    declaration_name,
    encode_single,
    render_header,
)
from .errors import (
    CapacityExceeded,
    ConfigurationError,
    ConversionError,
    DecodeError,
    UnsupportedChannelLayout,
)
from .image import PixelGrid, grid_from_image, load_pixel_grid
from .palette import PaletteTable
from .traversal import PixelTraversal, TraversalCursor, TraversalMode, traverse

__all__ = [
    "BatchContext",
    "CapacityExceeded",
    "ConfigurationError",
    "ConversionError",
    "DecodeError",
    "EncodeOptions",
    "EncodedImage",
    "EncodedStream",
    "FormatEncoder",
    "HeaderDocument",
    "PaletteTable",
    "PixelGrid",
    "PixelTraversal",
    "TraversalCursor",
    "TraversalMode",
    "UnsupportedChannelLayout",
    "build_document",
    "declaration_name",
    "encode_single",
    "grid_from_image",
    "load_pixel_grid",
    "parse_hex_color",
    "quantize",
    "render_header",
    "traverse",
]
