"""termreader CLI entry point.

Allows running via `python -m termreader` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version


def get_version_string() -> str:
    try:
        return f"termreader {version('termreader')}"
    except PackageNotFoundError:
        return "termreader (not installed)"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="termreader", description="Read a text file in the terminal.")
    parser.add_argument("file", nargs="?", help="text file to read")
    parser.add_argument("--words", action="store_true",
                        help="load the whole file and paginate by word")
    parser.add_argument("--log-file", metavar="PATH",
                        help="write debug logging to PATH")
    parser.add_argument("-V", "--version", action="store_true",
                        help="print the version and exit")
    return parser


def configure_logging(log_file: str | None) -> None:
    """Send log records to a file; the terminal is in use while reading."""
    if log_file is None:
        logging.getLogger().addHandler(logging.NullHandler())
        return
    logging.basicConfig(
        filename=log_file,
        level=logging.DEBUG,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.version:
        print(get_version_string())
        return 0
    if args.file is None:
        parser.error("a file to read is required")

    configure_logging(args.log_file)

    # Lazy import to avoid importing UI deps for --version
    from .reader import Reader
    try:
        reader = Reader.open(args.file, words=args.words)
    except OSError as e:
        print(f"Error loading file: {e}", file=sys.stderr)
        return 1
    reader.run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
