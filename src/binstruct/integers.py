"""
Fixed-Width Integer Formats
===========================

Every fixed-width read shares one algorithm, parameterized by three things:

- **width**: 1, 2, 4 or 8 bytes
- **byte order**: most-significant byte first ("big") or last ("little")
- **signedness**: unsigned, or two's complement signed

Composition
-----------

The bytes are first combined into an unsigned integer in the requested
byte order. A signed result reinterprets that full ``width * 8`` bit
pattern as two's complement: when the high bit is set, ``2**(width * 8)``
is subtracted.

Example, the bytes ``81 82`` as a 16-bit value::

    big-endian unsigned     0x8182              = 33154
    big-endian signed       33154 - 65536       = -32382
    little-endian unsigned  0x8281              = 33409
    little-endian signed    33409 - 65536       = -32127

Results are plain Python integers, always inside the format's range.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Literal

ByteOrder = Literal["big", "little"]

UINT64_MAX: Final = 2**64 - 1
"""Largest unsigned 64-bit value."""

INT64_MIN: Final = -(2**63)
"""Smallest signed 64-bit value."""

INT64_MAX: Final = 2**63 - 1
"""Largest signed 64-bit value."""


@dataclass(frozen=True, slots=True)
class IntFormat:
    """Layout of one fixed-width integer on the wire."""

    name: str
    """Operation name used in error messages (e.g., "u32_be")."""

    width: int
    """Number of bytes."""

    byteorder: ByteOrder
    """Byte order of the encoded value."""

    signed: bool
    """Whether the value is two's complement signed."""

    @property
    def bits(self) -> int:
        """Number of bits in the value."""
        return self.width * 8

    @property
    def min_value(self) -> int:
        """Smallest representable value (inclusive)."""
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        """Largest representable value (inclusive)."""
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def compose(self, raw: bytes) -> int:
        """
        Combine exactly `width` bytes into an integer.

        Raises:
            ValueError: If `raw` does not hold exactly `width` bytes.
        """
        if len(raw) != self.width:
            raise ValueError(f"{self.name} needs {self.width} bytes, got {len(raw)}")

        value = int.from_bytes(raw, self.byteorder)

        # Two's complement: the high bit carries a negative weight.
        if self.signed and value >> (self.bits - 1):
            value -= 1 << self.bits

        return value


U8 = IntFormat("u8", 1, "big", False)
S8 = IntFormat("s8", 1, "big", True)

U16_BE = IntFormat("u16_be", 2, "big", False)
U16_LE = IntFormat("u16_le", 2, "little", False)
S16_BE = IntFormat("s16_be", 2, "big", True)
S16_LE = IntFormat("s16_le", 2, "little", True)

U32_BE = IntFormat("u32_be", 4, "big", False)
U32_LE = IntFormat("u32_le", 4, "little", False)
S32_BE = IntFormat("s32_be", 4, "big", True)
S32_LE = IntFormat("s32_le", 4, "little", True)

U64_BE = IntFormat("u64_be", 8, "big", False)
U64_LE = IntFormat("u64_le", 8, "little", False)
S64_BE = IntFormat("s64_be", 8, "big", True)
S64_LE = IntFormat("s64_le", 8, "little", True)

ALL_FORMATS: Final[tuple[IntFormat, ...]] = (
    U8,
    S8,
    U16_BE,
    U16_LE,
    S16_BE,
    S16_LE,
    U32_BE,
    U32_LE,
    S32_BE,
    S32_LE,
    U64_BE,
    U64_LE,
    S64_BE,
    S64_LE,
)
"""Every fixed-width format, in decoder method order."""
