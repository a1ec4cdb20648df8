"""
Bounds-checked sequential decoder.

A `Decoder` is a cursor over an immutable byte buffer. Each `decode_*`
operation reads the next value at the cursor and advances past it.

Position Invariant
------------------

``0 <= position <= len(data)`` holds before and after every operation,
successful or not. Failures move the cursor as follows:

+---------------------------+-------------------------------------------+
| Operation                 | Position after failure                    |
+===========================+===========================================+
| fixed-width integers      | unchanged                                 |
+---------------------------+-------------------------------------------+
| ``decode_block(n)``       | unchanged                                 |
+---------------------------+-------------------------------------------+
| ``decode_cstring``        | unchanged                                 |
+---------------------------+-------------------------------------------+
| LEB128                    | past every byte read, no rollback         |
+---------------------------+-------------------------------------------+
| length-prefixed blocks    | past the prefix, no rollback              |
+---------------------------+-------------------------------------------+

Thread Safety
-------------

A decoder is owned by one reader at a time. Callers sharing one across
threads must lock around it.
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from . import integers, leb128
from .config import DecoderConfig
from .exceptions import (
    InvalidArgumentError,
    LEB128Error,
    MalformedTextError,
    OutOfBoundsError,
    PositionError,
)
from .integers import IntFormat

logger = logging.getLogger(__name__)

R = TypeVar("R")

BytesLike = bytes | bytearray | memoryview
"""Buffer types accepted by the decoder."""


def _arity(count: int) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """
    Enforce an exact positional argument count on a decode operation.

    Keyword arguments and a wrong count raise `InvalidArgumentError` before
    the method body runs, so the buffer is never touched.
    """

    def decorator(method: Callable[..., R]) -> Callable[..., R]:
        operation = method.__name__.removeprefix("decode_")

        @functools.wraps(method)
        def wrapper(self: Decoder, *args: Any, **kwargs: Any) -> R:
            if kwargs:
                raise InvalidArgumentError(
                    operation, f"takes no keyword arguments ({', '.join(kwargs)} given)"
                )
            if len(args) != count:
                raise InvalidArgumentError(
                    operation, f"takes exactly {count} arguments ({len(args)} given)"
                )
            return method(self, *args)

        return wrapper

    return decorator


def _as_buffer(data: Any) -> bytes:
    """Validate a buffer and return it as immutable bytes."""
    if isinstance(data, bytes):
        return data
    if isinstance(data, (bytearray, memoryview)):
        return bytes(data)
    raise InvalidArgumentError(
        "data", f"expected bytes, bytearray or memoryview, got {type(data).__name__}"
    )


def _as_index(operation: str, value: Any) -> int:
    """Validate an integer argument, rejecting `bool` and non-integers."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(operation, f"expected int, got {type(value).__name__}")
    return value


class Decoder:
    """
    Cursor over an immutable byte buffer.

    Example::

        >>> d = Decoder(bytes.fromhex("81828384"))
        >>> hex(d.decode_u32_be())
        '0x81828384'
        >>> d.position
        4
    """

    __slots__ = ("_data", "_position", "_config", "__weakref__")

    def __init__(self, data: BytesLike, config: DecoderConfig | None = None) -> None:
        self._config = config if config is not None else DecoderConfig()
        self._data, self._position = _as_buffer(data), 0

    def reinit(self, data: BytesLike) -> None:
        """
        Replace the buffer and rewind to the start.

        The new buffer is validated before anything changes. Buffer and
        position are then swapped in a single assignment.
        """
        buffer = _as_buffer(data)
        self._data, self._position = buffer, 0
        logger.debug("Decoder reinitialized with %d bytes", len(buffer))

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(position={self._position}, length={len(self._data)})"

    @property
    def data(self) -> bytes:
        """The buffer being decoded (read-only)."""
        return self._data

    @property
    def config(self) -> DecoderConfig:
        """Settings used for text decoding."""
        return self._config

    @property
    def remaining(self) -> int:
        """Number of bytes between the cursor and the end of the buffer."""
        return len(self._data) - self._position

    def get_position(self) -> int:
        """Return the offset of the next unread byte."""
        return self._position

    def set_position(self, value: int) -> None:
        """
        Move the cursor to an absolute offset.

        Raises:
            InvalidArgumentError: If `value` is not an integer.
            PositionError: If `value` is outside [0, len(data)].
        """
        value = _as_index("position", value)
        if not (0 <= value <= len(self._data)):
            raise PositionError(value, len(self._data))
        self._position = value

    position = property(get_position, set_position, doc="Offset of the next unread byte.")

    # Fixed-width integers

    def _decode_int(self, fmt: IntFormat) -> int:
        """Read one fixed-width integer; the cursor only moves on success."""
        start = self._position
        end = start + fmt.width
        if end > len(self._data):
            raise OutOfBoundsError(
                fmt.name, needed=fmt.width, available=self.remaining, offset=start
            )
        value = fmt.compose(self._data[start:end])
        self._position = end
        return value

    @_arity(0)
    def decode_bool(self) -> bool:
        """Read one byte; any nonzero value is true."""
        return self._decode_int(integers.U8) != 0

    @_arity(0)
    def decode_u8(self) -> int:
        return self._decode_int(integers.U8)

    @_arity(0)
    def decode_s8(self) -> int:
        return self._decode_int(integers.S8)

    @_arity(0)
    def decode_u16_be(self) -> int:
        return self._decode_int(integers.U16_BE)

    @_arity(0)
    def decode_u16_le(self) -> int:
        return self._decode_int(integers.U16_LE)

    @_arity(0)
    def decode_s16_be(self) -> int:
        return self._decode_int(integers.S16_BE)

    @_arity(0)
    def decode_s16_le(self) -> int:
        return self._decode_int(integers.S16_LE)

    @_arity(0)
    def decode_u32_be(self) -> int:
        return self._decode_int(integers.U32_BE)

    @_arity(0)
    def decode_u32_le(self) -> int:
        return self._decode_int(integers.U32_LE)

    @_arity(0)
    def decode_s32_be(self) -> int:
        return self._decode_int(integers.S32_BE)

    @_arity(0)
    def decode_s32_le(self) -> int:
        return self._decode_int(integers.S32_LE)

    @_arity(0)
    def decode_u64_be(self) -> int:
        """Read an unsigned 64-bit big-endian value in [0, 2^64 - 1]."""
        return self._decode_int(integers.U64_BE)

    @_arity(0)
    def decode_u64_le(self) -> int:
        """Read an unsigned 64-bit little-endian value in [0, 2^64 - 1]."""
        return self._decode_int(integers.U64_LE)

    @_arity(0)
    def decode_s64_be(self) -> int:
        """Read a signed 64-bit big-endian value in [-2^63, 2^63 - 1]."""
        return self._decode_int(integers.S64_BE)

    @_arity(0)
    def decode_s64_le(self) -> int:
        """Read a signed 64-bit little-endian value in [-2^63, 2^63 - 1]."""
        return self._decode_int(integers.S64_LE)

    # LEB128

    def _decode_leb128(self, decode: Callable[[bytes, int], tuple[int, int]]) -> int:
        try:
            value, self._position = decode(self._data, self._position)
        except LEB128Error as e:
            # Bytes read before the failure stay consumed.
            self._position = e.end
            raise
        return value

    @_arity(0)
    def decode_uleb128(self) -> int:
        """
        Read an unsigned LEB128 value.

        Raises:
            TruncatedLEB128Error: If the buffer ends inside the value.
            LEB128OverflowError: If the value exceeds 2^64 - 1.
        """
        return self._decode_leb128(leb128.decode_uleb128)

    @_arity(0)
    def decode_sleb128(self) -> int:
        """
        Read a signed LEB128 value.

        Raises:
            TruncatedLEB128Error: If the buffer ends inside the value.
            LEB128OverflowError: If the value is outside [-2^63, 2^63 - 1].
        """
        return self._decode_leb128(leb128.decode_sleb128)

    # Strings

    @_arity(0)
    def decode_cstring(self) -> str:
        """
        Read text up to the next zero byte and skip the terminator.

        A missing terminator is tolerated: the rest of the buffer is returned.

        Raises:
            OutOfBoundsError: If the cursor is already at the end of the buffer.
            MalformedTextError: If the bytes are not valid text under the
                configured encoding and error handler. The cursor does not move.
        """
        start = self._position
        if start == len(self._data):
            raise OutOfBoundsError("cstring", needed=1, available=0, offset=start)

        terminator = self._data.find(b"\x00", start)
        if terminator < 0:
            raw, end = self._data[start:], len(self._data)
        else:
            raw, end = self._data[start:terminator], terminator + 1

        encoding = self._config.encoding
        try:
            text = raw.decode(encoding, self._config.errors)
        except UnicodeDecodeError as e:
            raise MalformedTextError(
                "cstring", encoding=encoding, reason=e.reason, offset=start + e.start
            ) from e

        self._position = end
        return text

    # Blocks

    def _take(self, length: int, operation: str = "block") -> bytes:
        """Read `length` raw bytes, all or nothing."""
        start = self._position
        if length > len(self._data) - start:
            raise OutOfBoundsError(
                operation, needed=length, available=self.remaining, offset=start
            )
        self._position = start + length
        return self._data[start : self._position]

    @_arity(1)
    def decode_block(self, length: int) -> bytes:
        """
        Read exactly `length` raw bytes.

        A zero length always succeeds, also at the end of the buffer.

        Raises:
            InvalidArgumentError: If `length` is not a non-negative integer.
            OutOfBoundsError: If fewer than `length` bytes remain. The cursor
                does not move.
        """
        length = _as_index("block", length)
        if length < 0:
            raise InvalidArgumentError("block", f"length must not be negative, got {length}")
        return self._take(length)

    # Length-prefixed blocks.
    #
    # The prefix is decoded first and stays consumed if the block is short.

    def _take_prefixed(self, length: int, operation: str) -> bytes:
        try:
            return self._take(length, operation)
        except OutOfBoundsError as e:
            logger.debug(
                "%s: prefix consumed up to %d, block failed: %s",
                operation,
                self._position,
                e.message,
            )
            raise

    @_arity(0)
    def decode_block_u8(self) -> bytes:
        return self._take_prefixed(self._decode_int(integers.U8), "block_u8")

    @_arity(0)
    def decode_block_be16(self) -> bytes:
        return self._take_prefixed(self._decode_int(integers.U16_BE), "block_be16")

    @_arity(0)
    def decode_block_le16(self) -> bytes:
        return self._take_prefixed(self._decode_int(integers.U16_LE), "block_le16")

    @_arity(0)
    def decode_block_be32(self) -> bytes:
        return self._take_prefixed(self._decode_int(integers.U32_BE), "block_be32")

    @_arity(0)
    def decode_block_le32(self) -> bytes:
        return self._take_prefixed(self._decode_int(integers.U32_LE), "block_le32")

    @_arity(0)
    def decode_block_be64(self) -> bytes:
        return self._take_prefixed(self._decode_int(integers.U64_BE), "block_be64")

    @_arity(0)
    def decode_block_le64(self) -> bytes:
        return self._take_prefixed(self._decode_int(integers.U64_LE), "block_le64")

    @_arity(0)
    def decode_block_uleb128(self) -> bytes:
        return self._take_prefixed(self._decode_leb128(leb128.decode_uleb128), "block_uleb128")
