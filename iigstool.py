from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from iigslib import (
    ConversionError,
    PaletteOverflow,
    UnreadableImage,
    UnsupportedWidth,
    check_limits,
    convert,
    generate_assembly,
    limit_violations,
    render_preview,
    resolve_label,
)
from iigslib.palette import PALETTE_SIZE, describe

# Sentinel used to detect whether optional CLI parameters were explicitly provided
ARG_UNSET = object()


class SingleValueAction(argparse.Action):
    """Prevent options that should appear only once from being repeated."""

    def __call__(self, parser, namespace, values, option_string=None):
        current = getattr(namespace, self.dest, ARG_UNSET)
        if current is not ARG_UNSET:
            flag = option_string or self.option_strings[-1]
            raise argparse.ArgumentError(self, f"{flag} may be provided at most once.")
        setattr(namespace, self.dest, values)


def warn(message: str) -> None:
    print(f"Warning: {message}", file=sys.stderr)


def load_or_exit(image: str):
    try:
        return convert(image)
    except UnreadableImage as exc:
        print(str(exc), file=sys.stderr)
        raise SystemExit(1)


def print_palette(indexed, out=None) -> None:
    out = out or sys.stderr
    print(f"Palette: {len(indexed.palette)} distinct colors ({PALETTE_SIZE} usable)", file=out)
    for index, color, name in describe(indexed.palette):
        slot = f"{index:2d}" if index >= 0 else '--'
        print(f"  {slot}  ${color.word}  {name}", file=out)


def report_limits(indexed, strict: bool, verbose: bool) -> None:
    if strict:
        try:
            check_limits(indexed)
        except (PaletteOverflow, UnsupportedWidth) as exc:
            print(f"Error: {exc}", file=sys.stderr)
            raise SystemExit(2)
    elif verbose:
        for problem in limit_violations(indexed):
            warn(str(problem))


def preview_path(image: Path, value: str) -> Path:
    if value:
        return Path(value).expanduser()
    return image.with_name(f"{image.stem}.preview.png")


def run_convert(args) -> None:
    image = Path(args.image).expanduser()
    indexed = load_or_exit(str(image))
    report_limits(indexed, args.strict, args.warn)

    label = resolve_label(args.label)
    if args.label is not None and label != args.label:
        if args.warn:
            warn(f"label truncated to {label!r}")

    if args.show_palette:
        print_palette(indexed)

    if args.preview is not None:
        prev_path = preview_path(image, args.preview)
        prev_path.parent.mkdir(parents=True, exist_ok=True)
        render_preview(indexed).save(prev_path)
        print(f"Preview image saved to {prev_path}", file=sys.stderr)

    if args.indices:
        idx_path = Path(args.indices).expanduser()
        idx_path.parent.mkdir(parents=True, exist_ok=True)
        idx_path.write_text('\n'.join(indexed.stream.rows()) + '\n')
        print(f"Index dump written to {idx_path}", file=sys.stderr)

    asm = generate_assembly(indexed, label)
    output = args.output if args.output is not ARG_UNSET else None
    if output is None or output == '-':
        sys.stdout.write(asm)
        return
    out_path = Path(output).expanduser()
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(asm)
    print(f"Assembly file written to {out_path}")


def run_palette(args) -> None:
    indexed = load_or_exit(args.image)
    print_palette(indexed, sys.stdout)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='iigstool', description='Convert images to Apple IIGS assembly code')
    subparsers = parser.add_subparsers(dest='command', required=True)

    conv = subparsers.add_parser('convert', help='Convert an image to Merlin assembly')
    conv.set_defaults(func=run_convert)
    conv.add_argument('image', help='Path to the image file')
    conv.add_argument('label', nargs='?', default=None, help='Label used to reference the image in assembly code (default: PIC). Truncated to 16 characters.')
    conv.add_argument('-o', '--output', default=ARG_UNSET, action=SingleValueAction, help='Write assembly to this file instead of stdout')
    conv.add_argument('--preview', nargs='?', const='', help='Save a PNG of the image as the IIGS will draw it (default: <image>.preview.png)')
    conv.add_argument('--indices', help='Write the palette index of every pixel, one line per image row')
    conv.add_argument('--show-palette', action='store_true', help='Print the palette with the nearest CSS color names to stderr')
    conv.add_argument('--strict', action='store_true', help='Fail when the image has more than 16 colors or a width that is not a multiple of 8')
    conv.add_argument('--warn', action='store_true', help='Report palette overflow, unsupported widths and label truncation on stderr')

    pal = subparsers.add_parser('palette', help='List the colors an image resolves to')
    pal.set_defaults(func=run_palette)
    pal.add_argument('image', help='Path to the image file')

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except ConversionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1)


if __name__ == '__main__':
    main()
