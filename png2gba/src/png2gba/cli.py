"""Command line interface for png2gba."""

from __future__ import annotations

import argparse
import sys
import warnings
from pathlib import Path
from typing import Iterable, List

from .encoder import (
    DEFAULT_COLORKEY,
    BatchContext,
    EncodeOptions,
    FormatEncoder,
    declaration_name,
    render_header,
)
from .errors import ConfigurationError, ConversionError
from .image import load_pixel_grid

DEFAULT_GROUP_NAME = "images"


def iter_pngs(paths: Iterable[str]) -> List[Path]:
    results: List[Path] = []
    for raw in paths:
        path = Path(raw)
        if path.is_file():
            if path.suffix.lower() != ".png":
                raise ConfigurationError(f"Unsupported file type (expected .png): {path}")
            results.append(path)
        elif path.is_dir():
            for entry in sorted(path.iterdir()):
                if entry.is_file() and entry.suffix.lower() == ".png":
                    results.append(entry)
        else:
            raise ConfigurationError(f"Input path does not exist: {path}")
    if not results:
        raise ConfigurationError("No PNG files were found in the provided inputs.")
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="png2gba",
        description=(
            "Convert PNG images into C header files for the GBA.\n"
            "Colors are truncated to 15 bits (5 bits per channel). With --palette, pixels\n"
            "become 8-bit indices into a 256-entry palette whose slot 0 is the color key."
        ),
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "inputs",
        nargs="+",
        help="PNG files or folders containing PNGs (non-recursive)",
    )
    destination = parser.add_mutually_exclusive_group()
    destination.add_argument(
        "-o",
        "--output",
        help="Header file receiving every input (default: stdout)",
    )
    destination.add_argument(
        "--output-dir",
        help="Write one <name>.h per input into this directory",
    )
    parser.add_argument(
        "-n",
        "--name",
        help=(
            "Base name for the generated declarations "
            "(with --output-dir only a single input is allowed)"
        ),
    )
    parser.add_argument(
        "-p",
        "--palette",
        action="store_true",
        help="Emit palette indices and a 256-color palette instead of raw colors",
    )
    parser.add_argument(
        "-t",
        "--tileize",
        action="store_true",
        help="Emit pixels in 8x8 tile order",
    )
    parser.add_argument(
        "-c",
        "--colorkey",
        default=DEFAULT_COLORKEY,
        help=f"Transparent color stored in palette slot 0 (default {DEFAULT_COLORKEY})",
    )
    parser.add_argument(
        "--shared-palette",
        action="store_true",
        help="Let every image of a shared header use one palette",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Report failed images and continue with the rest",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite existing files",
    )
    return parser


def ensure_writable(targets: Iterable[Path], force: bool) -> None:
    conflicts = [str(target) for target in targets if target.exists() and not force]
    if conflicts:
        raise ConfigurationError(
            "Output files already exist (use --force to overwrite):\n" + "\n".join(conflicts)
        )


def ensure_unique_names(names: List[str], where: str) -> None:
    seen = set()
    for name in names:
        if name in seen:
            raise ConfigurationError(f"Duplicate declaration name would occur in {where}: {name}")
        seen.add(name)


def write_each(
    inputs: List[Path],
    options: EncodeOptions,
    output_dir: Path,
    force: bool,
    keep_going: bool,
) -> int:
    if options.output_name is not None:
        if len(inputs) != 1:
            raise ConfigurationError("--name cannot be combined with --output-dir for several inputs")
        names = [declaration_name(options.output_name)]
    else:
        names = [declaration_name(str(path)) for path in inputs]
    ensure_unique_names(names, "--output-dir")
    targets = [output_dir / f"{name}.h" for name in names]
    ensure_writable(targets, force)
    output_dir.mkdir(parents=True, exist_ok=True)

    encoder = FormatEncoder(options)
    failures = 0
    for src, name, target in zip(inputs, names, targets):
        try:
            batch = BatchContext(options)
            encoder.encode(load_pixel_grid(src), str(src), batch=batch, name=name)
            target.write_text(render_header(batch.close()))
        except ConversionError as exc:
            if not keep_going:
                raise
            failures += 1
            print(exc, file=sys.stderr)
            continue
        print(f"wrote {target}")
    return failures


def write_shared(
    inputs: List[Path],
    options: EncodeOptions,
    output: Path | None,
    force: bool,
    keep_going: bool,
) -> int:
    if output is not None:
        ensure_writable([output], force)

    batched = len(inputs) > 1
    if batched:
        ensure_unique_names([declaration_name(str(path)) for path in inputs], "the shared header")

    group_name = options.output_name
    if group_name is None and batched:
        group_name = output.stem if output is not None else DEFAULT_GROUP_NAME

    encoder = FormatEncoder(options)
    batch = BatchContext(options, output_name=group_name, batched=batched)
    failures = 0
    for src in inputs:
        try:
            encoder.encode(load_pixel_grid(src), str(src), batch=batch)
        except ConversionError as exc:
            if not keep_going:
                raise
            failures += 1
            print(exc, file=sys.stderr)

    text = render_header(batch.close())
    if output is None:
        sys.stdout.write(text)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text)
        print(f"wrote {output}")
    return failures


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = EncodeOptions(
            palette=args.palette,
            tileize=args.tileize,
            colorkey=args.colorkey,
            output_name=args.name,
            shared_palette=args.shared_palette,
        )
        options.validate()
        inputs = iter_pngs(args.inputs)

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            try:
                if args.output_dir is not None:
                    failures = write_each(
                        inputs, options, Path(args.output_dir), args.force, args.keep_going
                    )
                else:
                    output = Path(args.output) if args.output else None
                    failures = write_shared(
                        inputs, options, output, args.force, args.keep_going
                    )
            finally:
                for warning in caught:
                    print(f"Warning: {warning.message}", file=sys.stderr)
        return 1 if failures else 0
    except ConversionError as exc:
        print(exc, file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
