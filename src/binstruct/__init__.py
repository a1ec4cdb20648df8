"""Bounds-checked sequential binary decoder.

Usage::

    from binstruct import Decoder, OutOfBoundsError

    decoder = Decoder(payload)
    magic = decoder.decode_u32_be()
    name = decoder.decode_cstring()
    body = decoder.decode_block_uleb128()

All failures derive from `DecodeError`. `InvalidArgumentError` reports a
misused call, `OutOfBoundsError` reports short or malformed input.
"""

from __future__ import annotations

from .config import DecoderConfig
from .decoder import Decoder
from .exceptions import (
    DecodeError,
    InvalidArgumentError,
    LEB128Error,
    LEB128OverflowError,
    MalformedTextError,
    OutOfBoundsError,
    PositionError,
    TruncatedLEB128Error,
)
from .integers import INT64_MAX, INT64_MIN, UINT64_MAX, IntFormat

__all__ = [
    # Core API
    "Decoder",
    "DecoderConfig",
    "IntFormat",
    # Range constants
    "UINT64_MAX",
    "INT64_MIN",
    "INT64_MAX",
    # Exceptions
    "DecodeError",
    "InvalidArgumentError",
    "OutOfBoundsError",
    "PositionError",
    "LEB128Error",
    "TruncatedLEB128Error",
    "LEB128OverflowError",
    "MalformedTextError",
]
