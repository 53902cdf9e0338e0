"""extjson command-line interface.

Usage:
    python3 -m extjson canon < dump.bson             # one line per document
    python3 -m extjson canon --input dump.bson
    echo 0C000000106100F9FFFFFF00 | python3 -m extjson canon --hex
    python3 -m extjson canon --max-depth 20 --input dump.bson
    python3 -m extjson version
"""

from __future__ import annotations

import argparse
import io
import sys
from typing import BinaryIO, List, Optional

from . import (
    MAX_DEPTH,
    ExtJSONError,
    __version__,
    bson_to_canonical,
    iter_canonical,
)
from ._constants import __format_version__


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="extjson",
        description="extjson — canonical Extended JSON for BSON documents",
    )
    sub = parser.add_subparsers(dest="command")

    # ── canon ──
    canon_p = sub.add_parser("canon", help="Emit canonical Extended JSON")
    canon_p.add_argument("--input", "-i", metavar="FILE",
                         help="Read BSON from FILE instead of stdin")
    canon_p.add_argument("--hex", action="store_true",
                         help="Input is one document as hex text")
    canon_p.add_argument("--max-depth", type=int, default=MAX_DEPTH, metavar="N",
                         help="Nesting bound (default: %(default)s)")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _open_input(filepath: Optional[str]) -> BinaryIO:
    """Open FILE for binary reading, or fall back to stdin."""
    if filepath:
        return open(filepath, "rb")
    if sys.stdin.isatty():
        print("extjson: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer


def _cmd_canon(args: argparse.Namespace) -> None:
    stream = _open_input(args.input)
    try:
        if args.hex:
            try:
                raw = bytes.fromhex(stream.read().decode("ascii"))
            except ValueError as e:
                print(f"extjson: bad hex input: {e}", file=sys.stderr)
                sys.exit(2)
            print(bson_to_canonical(raw, max_depth=args.max_depth))
            return
        # Buffer so the decoder gets exact-length reads from pipes.
        data = io.BytesIO(stream.read())
        for line in iter_canonical(data, max_depth=args.max_depth):
            print(line)
    finally:
        if stream is not sys.stdin.buffer:
            stream.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"extjson {__version__} (canonical Extended JSON {__format_version__})")
        return

    try:
        if args.command == "canon":
            _cmd_canon(args)
    except ExtJSONError as e:
        print(f"extjson: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
