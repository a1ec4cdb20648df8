"""LEB128 encoders used to build test inputs."""

from __future__ import annotations


def encode_uleb128(value: int) -> bytes:
    """
    Encode a non-negative integer as unsigned LEB128.

    Raises:
        ValueError: If value is negative.
    """
    if value < 0:
        raise ValueError("ULEB128 value must be non-negative")

    result = bytearray()
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value)
    return bytes(result)


def encode_sleb128(value: int) -> bytes:
    """Encode an integer as signed LEB128 (minimal length)."""
    result = bytearray()
    while True:
        byte = value & 0x7F
        # Arithmetic shift keeps the sign.
        value >>= 7

        # Done once the remaining bits are pure sign extension of bit 6.
        if (value == 0 and not byte & 0x40) or (value == -1 and byte & 0x40):
            result.append(byte)
            return bytes(result)

        result.append(byte | 0x80)


def pad_leb128(encoded: bytes, extra: int, *, negative: bool = False) -> bytes:
    """
    Lengthen an encoding by `extra` redundant groups without changing its value.

    Unsigned and non-negative signed values pad with zero groups. Negative
    signed values pad with all-ones groups.
    """
    fill = 0x7F if negative else 0x00
    body = encoded[:-1] + bytes([encoded[-1] | 0x80])
    return body + bytes([fill | 0x80]) * (extra - 1) + bytes([fill])
