"""Command line entry point: parse JSON objects and print them compactly."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from .parser import JsonStreamParser, ParseError, to_json


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emjson",
        description="Parse a stream of JSON objects and print each one compactly.",
    )
    parser.add_argument(
        "files",
        nargs="*",
        type=Path,
        help="files fed to the parser one after another (default: standard input)",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="print the number of objects held and parsed",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command; returns the exit status."""
    args = _build_argument_parser().parse_args(argv)
    json_parser = JsonStreamParser()

    try:
        if args.files:
            for path in args.files:
                json_parser.parse(path.read_text(encoding="utf-8"))
        else:
            json_parser.parse(sys.stdin.read())
    except OSError as exc:
        print(f"emjson: {exc}", file=sys.stderr)
        return 1
    except ParseError as exc:
        print(f"emjson: {exc}", file=sys.stderr)
        return 1

    if not json_parser.is_complete:
        print("emjson: input ends inside an object", file=sys.stderr)
        return 1

    objects = json_parser.objects
    for obj in objects[: json_parser.parsed_len]:
        print(to_json(obj))
    if args.summary:
        print(f"{len(objects)} , {json_parser.parsed_len}")
    return 0


if __name__ == "__main__":
    sys.exit(main())