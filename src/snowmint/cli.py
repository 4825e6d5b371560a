"""Command line tool for converting between ids and times."""

import argparse
import logging
import re
import sys
from datetime import datetime

from pydantic import ValidationError

from snowmint.config import LoggingSettings, Settings, load_settings
from snowmint.errors import SnowmintError, TimeFormatError
from snowmint.generator import IdGenerator
from snowmint.layout import decode_id, id_end_of_time, id_end_of_timestamp, id_to_time

logger = logging.getLogger(__name__)

RFC822 = "%d %b %y %H:%M %Z"

# Tried in order; the first format that parses wins.
TIME_FORMATS = [
    "%a %b %d %H:%M:%S %Y",  # ANSI C
    "%a %b %d %H:%M:%S %Z %Y",  # Unix date
    "%a %b %d %H:%M:%S %z %Y",  # Ruby date
    RFC822,
    "%d %b %y %H:%M %z",  # RFC 822 with numeric zone
    "%A, %d-%b-%y %H:%M:%S %Z",  # RFC 850
    "%a, %d %b %Y %H:%M:%S %Z",  # RFC 1123
    "%a, %d %b %Y %H:%M:%S %z",  # RFC 1123 with numeric zone
    "%Y-%m-%dT%H:%M:%S%z",  # RFC 3339
    "%Y-%m-%dT%H:%M:%S.%f%z",  # RFC 3339 with fractional seconds
]

# strptime's %f takes at most 6 digits; RFC 3339 allows nanoseconds.
_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_time(value: str) -> datetime:
    """Parse ``value`` with the first matching entry of TIME_FORMATS.

    Results without a numeric offset are naive and treated as UTC downstream.
    Fractional seconds beyond microseconds are truncated.
    """
    text = _EXTRA_FRACTION.sub(r"\1", value)
    for fmt in TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise TimeFormatError(value)


def setup_logging(settings: LoggingSettings) -> None:
    """Attach a handler to the package logger."""
    root = logging.getLogger("snowmint")
    root.setLevel(settings.level.upper())
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    if settings.file:
        handler: logging.Handler = logging.FileHandler(settings.file)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snowmint",
        description="Convert between Snowflake ids and points in time",
    )
    parser.add_argument("--id", type=int, default=0, help="Convert ID to time")
    parser.add_argument("--parts", action="store_true", help="With --id, also print the decoded fields as JSON")
    parser.add_argument("--unix", type=int, default=0, help="Convert a Unix timestamp (seconds) to ID")
    parser.add_argument("--time", default="", help="Convert time to ID (allows for various common formats)")
    parser.add_argument("--next", type=int, default=0, metavar="N", help="Generate N ids for the configured location")
    return parser


def run(args: argparse.Namespace, settings: Settings) -> None:
    if args.id > 0:
        print(id_to_time(args.id).strftime(RFC822))
        if args.parts:
            print(decode_id(args.id).model_dump_json())

    if args.unix > 0:
        print(id_end_of_timestamp(args.unix * 1000))

    if args.time:
        print(id_end_of_time(parse_time(args.time)))

    if args.next > 0:
        generator = IdGenerator.from_settings(settings)
        logger.info("Generating %d ids with %r", args.next, generator)
        for id in generator.iter_ids(args.next):
            print(id)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
        setup_logging(settings.logging)
        run(args, settings)
    except ValidationError as e:
        print(f"error: invalid settings: {e}", file=sys.stderr)
        return 1
    except SnowmintError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    return 0
