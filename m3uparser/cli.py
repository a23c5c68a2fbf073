"""Command-line entry point: parse a playlist and save the result."""

from __future__ import annotations

import argparse
import logging
import sys

from .parser import DEFAULT_TIMEOUT, M3uParser


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="m3uparser", description="Parse an M3U playlist and save its streams."
    )
    parser.add_argument("source", help="URL, file path or raw M3U content")
    parser.add_argument("--user-agent", default=None, help="User-Agent for requests")
    parser.add_argument(
        "--timeout", type=int, default=DEFAULT_TIMEOUT, help="request timeout in seconds"
    )
    parser.add_argument(
        "--check-live",
        action="store_true",
        help="check each stream and keep only the working ones",
    )
    parser.add_argument(
        "--enforce-schema", action="store_true", help="keep fields with empty values"
    )
    parser.add_argument("--sort-by", default="category", help="key to sort streams by")
    parser.add_argument("--desc", action="store_true", help="sort in descending order")
    parser.add_argument(
        "-o",
        "--output",
        action="append",
        default=[],
        help="file to save to (.json or .m3u); may be repeated",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command and return its exit status."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    parser = M3uParser(user_agent=args.user_agent, timeout=args.timeout)
    try:
        parser.parse_m3u(args.source, args.check_live, args.enforce_schema)
    except (OSError, ValueError) as exc:
        print(f"m3uparser: {exc}", file=sys.stderr)
        return 1
    if args.check_live:
        parser.filter_by("status", ["GOOD"], True)
    parser.sort_by(args.sort_by, not args.desc)
    print("Saved stream information: ", len(parser.get_streams()))
    try:
        for output in args.output:
            parser.to_file(output)
    except OSError as exc:
        print(f"m3uparser: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())