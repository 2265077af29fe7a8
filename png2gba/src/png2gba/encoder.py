"""Core conversion logic: pixel grids to GBA C declarations."""

# Reference: declaration layout
# Mode      | Data element       | Digits | Tokens per line
# ----------|--------------------|--------|----------------
# raw       | unsigned short     | 4      | 9
# palette   | unsigned char      | 2      | 12
# palette table (always 256 slots) | 4 | 9

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterator, List, Sequence

import jinja2

from .color import Color15, format_color, parse_hex_color, quantize
from .errors import CapacityExceeded, ConfigurationError
from .image import PixelGrid
from .palette import PALETTE_SIZE, PaletteTable
from .traversal import TraversalMode, traverse

DEFAULT_COLORKEY = "#ff00ff"
INDEX_DIGITS, INDEX_PER_ROW = 2, 12
COLOR_DIGITS, COLOR_PER_ROW = 4, 9
IMAGE_EXTENSIONS = {".png", ".bmp", ".gif", ".jpg", ".jpeg", ".tga"}
INDENT = "    "


@dataclass
class EncodeOptions:
    """Options for one conversion run."""

    palette: bool = False
    tileize: bool = False
    colorkey: str = DEFAULT_COLORKEY
    output_name: str | None = None
    shared_palette: bool = False

    @property
    def key_color(self) -> Color15:
        return parse_hex_color(self.colorkey)

    @property
    def traversal_mode(self) -> TraversalMode:
        return TraversalMode.TILED if self.tileize else TraversalMode.LINEAR

    def validate(self) -> None:
        parse_hex_color(self.colorkey)
        if self.output_name is not None and not self.output_name.strip():
            raise ConfigurationError("Output name must not be empty")


@dataclass
class EncodedStream:
    """Emitted tokens plus how they are laid out in source text."""

    digits: int
    per_row: int
    tokens: List[int] = field(default_factory=list)

    @classmethod
    def for_indices(cls) -> "EncodedStream":
        return cls(INDEX_DIGITS, INDEX_PER_ROW)

    @classmethod
    def for_colors(cls, tokens: Sequence[int] = ()) -> "EncodedStream":
        return cls(COLOR_DIGITS, COLOR_PER_ROW, list(tokens))

    def append(self, value: int) -> None:
        self.tokens.append(value)

    def rows(self) -> Iterator[List[int]]:
        for start in range(0, len(self.tokens), self.per_row):
            yield self.tokens[start : start + self.per_row]

    def format_rows(self, indent: str = INDENT) -> str:
        lines = [
            indent + ", ".join(format_color(value, self.digits) for value in row)
            for row in self.rows()
        ]
        return ",\n".join(lines)

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass
class EncodedImage:
    name: str
    identifier: str
    width: int
    height: int
    data: EncodedStream
    palette: EncodedStream | None = None


def declaration_name(identifier: str) -> str:
    """Derive a C identifier from an input path: base name, no extension."""

    path = Path(identifier.replace("\\", "/"))
    stem = path.stem if path.suffix.lower() in IMAGE_EXTENSIONS else path.name
    name = re.sub(r"[^0-9A-Za-z_]", "_", stem)
    if not name:
        raise ConfigurationError(f"Cannot derive a declaration name from {identifier!r}")
    if name[0].isdigit():
        name = "_" + name
    return name


class BatchContext:
    """Images sharing one output header.

    Holds the state that survives from one image to the next: position in the
    batch and, when configured, the palette all images resolve through.
    """

    def __init__(
        self,
        options: EncodeOptions,
        output_name: str | None = None,
        batched: bool = False,
    ):
        self.output_name = declaration_name(output_name) if output_name else None
        self.options = options
        self.batched = batched
        self.images: List[EncodedImage] = []
        self.shared_palette: PaletteTable | None = None
        if options.palette and options.shared_palette:
            self.shared_palette = PaletteTable(options.key_color)

    @property
    def position(self) -> int:
        return len(self.images)

    def add(self, image: EncodedImage) -> None:
        if any(existing.name == image.name for existing in self.images):
            raise ConfigurationError(
                f"Duplicate declaration name {image.name!r}: {image.identifier}"
            )
        self.images.append(image)

    def close(self) -> "HeaderDocument":
        if not self.images:
            raise ConfigurationError("No images were converted")
        name = self.output_name or self.images[0].name
        return build_document(
            name, self.images, self.shared_palette, batched=self.batched or None
        )


class FormatEncoder:
    def __init__(self, options: EncodeOptions | None = None):
        self.options = options or EncodeOptions()
        self.options.validate()

    def encode(
        self,
        grid: PixelGrid,
        identifier: str,
        batch: BatchContext | None = None,
        name: str | None = None,
    ) -> EncodedImage:
        """Convert one grid.

        With a batch that shares its palette, colors are resolved through a
        copy of the shared table that is committed only when the whole image
        fits, so a failed image leaves the batch untouched.
        """

        options = self.options
        palette: PaletteTable | None = None
        if options.palette:
            if batch is not None and batch.shared_palette is not None:
                palette = batch.shared_palette.copy()
            else:
                palette = PaletteTable(options.key_color)

        data = EncodedStream.for_indices() if palette is not None else EncodedStream.for_colors()
        for row, col in traverse(grid.width, grid.height, options.traversal_mode):
            color = quantize(*grid.sample(row, col))
            if palette is None:
                data.append(color)
                continue
            try:
                data.append(palette.insert_or_lookup(color))
            except CapacityExceeded as exc:
                raise CapacityExceeded(
                    f"{identifier}: {exc}", identifier=identifier, capacity=exc.capacity
                ) from exc

        encoded = EncodedImage(
            name=name or declaration_name(identifier),
            identifier=identifier,
            width=grid.width,
            height=grid.height,
            data=data,
        )
        if palette is not None:
            encoded.palette = EncodedStream.for_colors(palette.table())

        if batch is not None:
            batch.add(encoded)
            if batch.shared_palette is not None and palette is not None:
                batch.shared_palette = palette
        return encoded


@dataclass
class ArrayDeclaration:
    name: str
    ctype: str
    dims: List[int]
    body: str


@dataclass
class HeaderDocument:
    """Everything one header file declares."""

    name: str
    guard: str
    images: List[EncodedImage]
    arrays: List[ArrayDeclaration]
    batched: bool
    sources: List[str]


def _ctype(stream: EncodedStream) -> str:
    return "char" if stream.digits == INDEX_DIGITS else "short"


def _nested_body(streams: Sequence[EncodedStream]) -> str:
    blocks = [
        f"{INDENT}{{\n{stream.format_rows(INDENT * 2)}\n{INDENT}}}" for stream in streams
    ]
    return ",\n".join(blocks)


def build_document(
    name: str,
    images: Sequence[EncodedImage],
    shared_palette: PaletteTable | None = None,
    batched: bool | None = None,
) -> HeaderDocument:
    """Describe the arrays of one header.

    ``batched`` forces the per-image-position layout even when only one image
    is left; by default it is used for more than one image.
    """
    if not images:
        raise ConfigurationError(f"No images to declare for {name}")
    images = list(images)
    arrays: List[ArrayDeclaration] = []
    if batched is None:
        batched = len(images) > 1

    if not batched:
        image = replace(images[0], name=name)
        images = [image]
        arrays.append(
            ArrayDeclaration(
                f"{image.name}_data",
                _ctype(image.data),
                [len(image.data)],
                image.data.format_rows(),
            )
        )
        if image.palette is not None:
            arrays.append(
                ArrayDeclaration(
                    f"{image.name}_palette", "short", [PALETTE_SIZE], image.palette.format_rows()
                )
            )
    else:
        longest = max(len(image.data) for image in images)
        arrays.append(
            ArrayDeclaration(
                f"{name}_data",
                _ctype(images[0].data),
                [len(images), longest],
                _nested_body([image.data for image in images]),
            )
        )
        if shared_palette is not None:
            arrays.append(
                ArrayDeclaration(
                    f"{name}_palette",
                    "short",
                    [PALETTE_SIZE],
                    EncodedStream.for_colors(shared_palette.table()).format_rows(),
                )
            )
        elif images[0].palette is not None:
            arrays.append(
                ArrayDeclaration(
                    f"{name}_palette",
                    "short",
                    [len(images), PALETTE_SIZE],
                    _nested_body([image.palette for image in images if image.palette]),
                )
            )

    return HeaderDocument(
        name=name,
        guard=f"{name.upper()}_H",
        images=images,
        arrays=arrays,
        batched=batched,
        sources=[image.identifier for image in images],
    )


HEADER_TEMPLATE = """\
/* generated by png2gba from {{ doc.sources|join(", ") }} */

#ifndef {{ doc.guard }}
#define {{ doc.guard }}

{% for image in doc.images %}
{% if doc.batched %}
#define {{ image.name }}_index {{ loop.index0 }}
{% endif %}
#define {{ image.name }}_width {{ image.width }}
#define {{ image.name }}_height {{ image.height }}
{% endfor %}

{% for array in doc.arrays %}
const unsigned {{ array.ctype }} {{ array.name }}{% for dim in array.dims %}[{{ dim }}]{% endfor %} = {
{{ array.body }}
};

{% endfor %}
#endif
"""

_environment = jinja2.Environment(
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
    undefined=jinja2.StrictUndefined,
    autoescape=False,
)
_template = _environment.from_string(HEADER_TEMPLATE)


def render_header(document: HeaderDocument) -> str:
    return _template.render(doc=document)


def encode_single(grid: PixelGrid, identifier: str, options: EncodeOptions | None = None) -> str:
    """Convert one grid into a complete header text."""

    options = options or EncodeOptions()
    encoder = FormatEncoder(options)
    name = declaration_name(options.output_name) if options.output_name else None
    image = encoder.encode(grid, identifier, name=name)
    return render_header(build_document(image.name, [image]))
