"""
cheese-convert - convert .jpg <-> .cheese from the command line.

    cheese-convert photo.jpg              # writes photo.cheese
    cheese-convert photo.cheese -o out.jpg
    cheese-convert photo.cheese --info    # header summary only
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from cheese_types import CheeseError
from cheese_bridge import PillowImageBridge, DEFAULT_JPEG_QUALITY
from cheese_convert import CheeseConverter, DEFAULT_TIMEOUT
from cheese_decoder import CheeseDecoder
from cheese_logger import setup_logger


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="cheese-convert",
        description="Convert a .jpg image to a .cheese container or back.")
    ap.add_argument("input", help="Input .jpg or .cheese file")
    ap.add_argument("-o", "--output", help="Output path (default: input with swapped extension)")
    ap.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                    help="Seconds to wait for image decode/encode")
    ap.add_argument("--quality", type=int, default=DEFAULT_JPEG_QUALITY,
                    help="JPEG quality when writing .jpg (1-100)")
    ap.add_argument("--info", action="store_true",
                    help="Print the .cheese header and exit")
    ap.add_argument("--show", action="store_true",
                    help="Open a preview of the converted image")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logger(logging.DEBUG if args.verbose else logging.WARNING)

    path = Path(args.input)
    try:
        data = path.read_bytes()
    except OSError as e:
        print(f"cannot read {path}: {e}", file=sys.stderr)
        return 2

    try:
        bridge = PillowImageBridge(quality=args.quality)
        if args.info:
            info = CheeseDecoder(bridge=bridge).inspect(data)
            for key, value in info.items():
                print(f"{key}: {value}")
            return 0 if info['valid'] else 1

        converter = CheeseConverter(bridge=bridge, timeout=args.timeout)
        result = asyncio.run(converter.convert(data, path.name))
    except (CheeseError, ValueError) as e:
        print(f"{type(e).__name__}: {e}", file=sys.stderr)
        return 1

    out = Path(args.output) if args.output else path.with_name(result.output_name)
    try:
        out.write_bytes(result.data)
    except OSError as e:
        print(f"cannot write {out}: {e}", file=sys.stderr)
        return 2
    print(out)

    if args.show:
        bridge.to_image(result.pixels).show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
