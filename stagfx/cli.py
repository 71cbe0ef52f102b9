#!/usr/bin/env python3
"""
Command line front-end.

Usage:
    stagfx greyscale photo.png -o grey.png
    stagfx color photo.png --hex '#ff8800' --mode wash --opacity 0.4 -o washed.png
    stagfx circle avatar.png --border-width 8 --border-color '#1e90ff' -o round.png
    stagfx blink a.png b.png --delay 150 --no-loop -o blink.gif
    stagfx list
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

from .config import settings
from .errors import NotFoundError, TransformError, ValidationError
from .processor import Processor

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _add_single_input(parser: argparse.ArgumentParser) -> None:
    parser.add_argument('input', help='Input image (path or asset name)')
    parser.add_argument('-o', '--output', required=True, type=Path, help='Output file')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='stagfx', description='Apply named image transforms.')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    parser.add_argument('--assets', type=Path, default=None, help='Assets directory')
    parser.add_argument(
        '--asset-mode', choices=['strict', 'warn', 'silent'], default=None,
        help='How unresolved asset names are handled',
    )
    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('list', help='List available transforms')

    p = sub.add_parser('greyscale', help='Convert to greyscale')
    _add_single_input(p)

    p = sub.add_parser('color', help='Blend a color into the image')
    _add_single_input(p)
    p.add_argument('--hex', required=True, dest='color', help="Color, e.g. '#ff8800'")
    p.add_argument('--mode', default='tint', choices=['tint', 'wash', 'softlight'])
    p.add_argument('--opacity', type=float, default=0.5)
    p.add_argument('--intensity', type=float, default=1.0)

    p = sub.add_parser('circle', help='Circular crop with optional border')
    _add_single_input(p)
    p.add_argument('--border-width', type=int, default=0)
    p.add_argument('--border-color', default=None)

    p = sub.add_parser('blink', help='Animated GIF from several images')
    p.add_argument('inputs', nargs='+', help='Frames in display order')
    p.add_argument('-o', '--output', required=True, type=Path, help='Output GIF')
    p.add_argument('--delay', type=int, default=None, help='Milliseconds per frame (rounded to 10 ms)')
    p.add_argument('--loop', dest='loop', action='store_true', default=None)
    p.add_argument('--no-loop', dest='loop', action='store_false')

    p = sub.add_parser('invert', help='Invert colors')
    _add_single_input(p)

    p = sub.add_parser('sepia', help='Sepia tone')
    _add_single_input(p)
    p.add_argument('--intensity', type=float, default=1.0)

    p = sub.add_parser('blur', help='Gaussian blur')
    _add_single_input(p)
    p.add_argument('--radius', type=float, default=5.0)

    return parser


_OPTION_NAMES = {
    'color': ['color', 'mode', 'opacity', 'intensity'],
    'circle': ['border_width', 'border_color'],
    'blink': ['delay', 'loop'],
    'sepia': ['intensity'],
    'blur': ['radius'],
}


def params_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Build transform parameters from parsed arguments; unset options are left out."""
    if args.command == 'blink':
        params: dict[str, Any] = {'inputs': args.inputs}
    else:
        params = {'input': args.input}
    for name in _OPTION_NAMES.get(args.command, []):
        value = getattr(args, name)
        if value is not None:
            params[name] = value
    return params


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL.upper(),
        format='%(levelname)s %(name)s: %(message)s',
    )

    overrides = {}
    if args.assets is not None:
        overrides['ASSETS_DIR'] = args.assets
    if args.asset_mode is not None:
        overrides['ASSET_MODE'] = args.asset_mode
    processor = Processor(settings=settings.model_copy(update=overrides) if overrides else settings)

    if args.command == 'list':
        for name in processor.transforms():
            print(name)
        return EXIT_OK

    try:
        data = processor.execute(args.command, params_from_args(args))
    except (ValidationError, NotFoundError) as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except TransformError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        args.output.write_bytes(data)
    except OSError as e:
        print(f"error: cannot write {args.output}: {e.strerror or e}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
