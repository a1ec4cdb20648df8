"""
Binary field dumper CLI entry point.

Decode a sequence of fields from a hex string or a file and print one line
per field: the offset it started at, the field name, and the decoded value.

Usage::

    python -m binstruct --hex "81828384 e58e26" u32_be uleb128
    python -m binstruct --file record.bin u8 cstring block_be16 block:4

Fields:
    bool, u8, s8, {u,s}{16,32,64}_{be,le}   Fixed-width integers
    uleb128, sleb128                        LEB128 integers
    cstring                                 Null-terminated string
    block:N                                 N raw bytes
    block_{u8,be16,le16,be32,le32,be64,le64,uleb128}
                                            Length-prefixed blocks
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

from binstruct.config import DecoderConfig
from binstruct.decoder import Decoder
from binstruct.exceptions import DecodeError

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"
        return f"{levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter("%(levelname)-8s %(name)s: %(message)s")
    else:
        formatter = ColoredFormatter()

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def load_data(hex_string: str | None, path: Path | None) -> bytes:
    """
    Load the input buffer from a hex string or a file.

    Whitespace inside the hex string is ignored.

    Raises:
        ValueError: If neither source is given or the hex string is malformed.
    """
    if path is not None:
        return path.read_bytes()
    if hex_string is None:
        raise ValueError("either a hex string or a file path is required")
    return bytes.fromhex(hex_string)


def resolve_field(decoder: Decoder, field: str) -> Callable[[], Any]:
    """
    Map a field name to a bound zero-argument decode call.

    `block:N` binds N to `decode_block`; every other name selects
    `decode_<name>`.

    Raises:
        ValueError: If the field name is unknown or `N` is not an integer.
    """
    if field.startswith("block:"):
        length = int(field.removeprefix("block:"))
        return lambda: decoder.decode_block(length)

    method = getattr(decoder, f"decode_{field}", None)
    if method is None or field == "block":
        raise ValueError(f"unknown field: {field!r}")
    return method


def format_value(value: Any) -> str:
    """Render a decoded value for display."""
    if isinstance(value, bytes):
        return value.hex() if value else "(empty)"
    if isinstance(value, str):
        return repr(value)
    return str(value)


def dump_fields(decoder: Decoder, fields: list[str]) -> list[str]:
    """
    Decode `fields` in order and return one output line per field.

    Raises:
        ValueError: If a field name is unknown.
        DecodeError: If a field cannot be decoded.
    """
    # Resolve everything up front so a typo fails before any output.
    calls = [(field, resolve_field(decoder, field)) for field in fields]

    lines = []
    for field, call in calls:
        offset = decoder.position
        value = call()
        logger.debug("Decoded %s at %d, cursor now %d", field, offset, decoder.position)
        lines.append(f"{offset:>8} {field:<14} {format_value(value)}")
    return lines


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="binstruct",
        description="Decode binary fields sequentially",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--hex",
        dest="hex_string",
        help="Input bytes as a hex string (whitespace allowed)",
    )
    source.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Path to a binary input file",
    )
    parser.add_argument(
        "fields",
        nargs="+",
        help="Fields to decode, in order",
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="Text encoding for cstring fields (default: BINSTRUCT_TEXT_ENCODING or utf-8)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        data = load_data(args.hex_string, args.file)
        config = DecoderConfig() if args.encoding is None else DecoderConfig(encoding=args.encoding)
    except (OSError, ValueError) as e:
        parser.error(str(e))

    decoder = Decoder(data, config)
    logger.debug("Loaded %d bytes", len(decoder))

    try:
        lines = dump_fields(decoder, args.fields)
    except ValueError as e:
        parser.error(str(e))
    except DecodeError as e:
        logger.error("Decoding failed at offset %d: %s", decoder.position, e.message)
        sys.exit(1)

    for line in lines:
        print(line)


if __name__ == "__main__":
    main()
