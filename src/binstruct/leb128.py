"""
LEB128 variable-length integer decoding.

HOW LEB128 ENCODING WORKS
-------------------------
LEB128 (Little-Endian Base 128) splits an integer into 7-bit groups,
encoding each group in one byte. The MSB (bit 7) signals continuation:

- MSB = 1: More bytes follow
- MSB = 0: This is the final byte

Byte structure::

    [C|D D D D D D D]
     ^-- Continuation bit (1 = more bytes, 0 = last byte)
       ^-----------^-- 7 bits of data

Low-order groups come first, so byte ``i`` contributes its payload at
``7 * i`` bits.


DECODING EXAMPLE: BYTES [0xE5, 0x8E, 0x26]
------------------------------------------
    0xE5 -> payload 0x65, shift 0,  continuation set
    0x8E -> payload 0x0E, shift 7,  continuation set
    0x26 -> payload 0x26, shift 14, final byte

    0x65 + (0x0E << 7) + (0x26 << 14) = 624485


SIGNED LEB128
-------------
Signed values use the same groups in two's complement. After the final
byte, bit 6 of its payload is the sign bit. When it is set the value is
negative and is sign-extended by subtracting ``2**(shift + 7)``.

    [0x9B, 0xF1, 0x59] -> unsigned accumulator 1472667
    bit 6 of 0x59 is set, shift = 14 -> 1472667 - 2**21 = -624485


RANGE
-----
Results must fit 64 bits:
``[0, 2**64 - 1]`` unsigned and ``[-2**63, 2**63 - 1]`` signed. Out of
range values are rejected, never wrapped. Padded encodings of in range
values are accepted at any length: groups past the tenth must all be
``0x00``, or all ``0x7F`` for a negative signed value.

References:
    LEB128 specification:
        https://en.wikipedia.org/wiki/LEB128
    DWARF Debugging Information Format, section 7.6
"""

from __future__ import annotations

from .exceptions import LEB128OverflowError, TruncatedLEB128Error
from .integers import INT64_MAX, INT64_MIN, UINT64_MAX

CONTINUATION_BIT = 0x80
"""Set on every byte except the last."""

PAYLOAD_MASK = 0x7F
"""Low 7 bits carrying data."""

SIGN_BIT = 0x40
"""Bit 6 of the final payload, the sign of a signed value."""

ACCUMULATOR_BITS = 70
"""Groups below this shift are accumulated. Ten groups cover any 64-bit value."""

MIXED_PADDING = -1
"""Marks excess groups whose payloads differ from one another."""


def _read_groups(
    data: bytes, offset: int, operation: str
) -> tuple[int, int, int, int, int | None]:
    """
    Accumulate 7-bit groups up to and including the terminating byte.

    Only the first ten groups are accumulated. Groups past them are
    summarized by their common payload, which is all that is needed to
    tell padding (``0x00`` or ``0x7F``) from an out of range value.

    Returns:
        Tuple of (accumulator, last_byte, last_shift, end_offset, excess).
        `excess` is None when no group lies past the accumulator, the shared
        payload of those groups, or MIXED_PADDING when they differ.

    Raises:
        TruncatedLEB128Error: If the data ends before a terminating byte.
    """
    result = 0
    shift = 0
    pos = offset
    excess: int | None = None

    while True:
        # A value must end with a byte where MSB = 0.
        if pos >= len(data):
            raise TruncatedLEB128Error(operation, offset=offset, end=pos)

        byte = data[pos]
        pos += 1

        payload = byte & PAYLOAD_MASK
        if shift < ACCUMULATOR_BITS:
            result |= payload << shift
        elif excess is None:
            excess = payload
        elif excess != payload:
            excess = MIXED_PADDING

        if not (byte & CONTINUATION_BIT):
            return result, byte, shift, pos, excess

        shift += 7


def decode_uleb128(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode an unsigned LEB128 value starting at `offset`.

    Args:
        data: Input bytes containing the value.
        offset: Starting position in data. Defaults to 0.

    Returns:
        Tuple of (decoded_value, end_offset). `end_offset` points just past
        the terminating byte.

    Raises:
        TruncatedLEB128Error: If the data ends before a terminating byte.
        LEB128OverflowError: If the value exceeds 2^64 - 1.
    """
    value, _, _, end, excess = _read_groups(data, offset, "uleb128")

    # Any bit set past the accumulator puts the value above 2^70.
    if excess not in (None, 0) or value > UINT64_MAX:
        raise LEB128OverflowError(
            "uleb128", min_value=0, max_value=UINT64_MAX, offset=offset, end=end
        )

    return value, end


def decode_sleb128(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a signed LEB128 value starting at `offset`.

    Args:
        data: Input bytes containing the value.
        offset: Starting position in data. Defaults to 0.

    Returns:
        Tuple of (decoded_value, end_offset).

    Raises:
        TruncatedLEB128Error: If the data ends before a terminating byte.
        LEB128OverflowError: If the value is outside [-2^63, 2^63 - 1].
    """
    value, last, shift, end, excess = _read_groups(data, offset, "sleb128")
    overflow = excess not in (None, 0, PAYLOAD_MASK)

    if excess is None:
        # Sign-extend from the top payload bit of the final byte.
        if last & SIGN_BIT:
            value -= 1 << (shift + 7)
    elif excess == PAYLOAD_MASK:
        # Padding of all ones: the sign extends down to the accumulator.
        value -= 1 << ACCUMULATOR_BITS

    if overflow or not (INT64_MIN <= value <= INT64_MAX):
        raise LEB128OverflowError(
            "sleb128", min_value=INT64_MIN, max_value=INT64_MAX, offset=offset, end=end
        )

    return value, end
