"""Exception hierarchy for the binary decoder."""

from __future__ import annotations


class DecodeError(Exception):
    """
    Base exception for all decoder errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidArgumentError(DecodeError, TypeError):
    """
    Raised when a decode operation is called incorrectly.

    Covers a wrong argument count, a wrong argument type, and a negative value
    where a length or position is required. Correct client code never sees it.

    Attributes:
        operation: The operation that was misused.
        detail: Description of what was wrong with the call.
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail

        super().__init__(f"{operation}: {detail}")


class OutOfBoundsError(DecodeError):
    """
    Raised when the buffer cannot satisfy a decode operation.

    Callers may treat it as an end-of-data signal, e.g. to stop iterating
    a sequence of records.

    Attributes:
        operation: The operation being performed (e.g., "u32_be", "block").
        needed: Number of bytes the operation required (if known).
        available: Number of bytes left in the buffer (if known).
        offset: The byte offset where the operation started (if known).
    """

    def __init__(
        self,
        operation: str,
        *,
        needed: int | None = None,
        available: int | None = None,
        offset: int | None = None,
        detail: str | None = None,
    ) -> None:
        self.operation = operation
        self.needed = needed
        self.available = available
        self.offset = offset

        if detail is not None:
            msg = f"{operation}: {detail}"
        elif needed is not None and available is not None:
            msg = f"{operation} requires {needed} bytes, {available} available"
        elif needed is not None:
            msg = f"{operation} requires {needed} bytes"
        else:
            msg = f"{operation} ran out of data"

        if offset is not None:
            msg = f"{msg} (at byte offset {offset})"

        super().__init__(msg)


class PositionError(OutOfBoundsError):
    """
    Raised when the cursor is moved outside the buffer.

    Attributes:
        value: The rejected position.
        limit: The largest valid position (the buffer length).
    """

    def __init__(self, value: int, limit: int) -> None:
        self.value = value
        self.limit = limit

        super().__init__(
            "position",
            detail=f"{value} is out of range (valid range: [0, {limit}])",
        )


class LEB128Error(OutOfBoundsError):
    """
    Base class for LEB128 decoding failures.

    Attributes:
        end: The offset where reading stopped. Bytes before it were consumed.
    """

    def __init__(self, operation: str, detail: str, *, offset: int, end: int) -> None:
        self.end = end

        super().__init__(operation, offset=offset, detail=detail)


class TruncatedLEB128Error(LEB128Error):
    """Raised when the buffer ends before a byte with the continuation bit clear."""

    def __init__(self, operation: str, *, offset: int, end: int) -> None:
        super().__init__(
            operation,
            f"unterminated LEB128 after {end - offset} bytes",
            offset=offset,
            end=end,
        )


class LEB128OverflowError(LEB128Error):
    """
    Raised when a LEB128 value does not fit its 64-bit result type.

    The value itself is not kept: an encoding may run to any length, so
    only the range it missed is reported.

    Attributes:
        min_value: The minimum allowed value (inclusive).
        max_value: The maximum allowed value (inclusive).
    """

    def __init__(
        self,
        operation: str,
        *,
        min_value: int,
        max_value: int,
        offset: int,
        end: int,
    ) -> None:
        self.min_value = min_value
        self.max_value = max_value

        super().__init__(
            operation,
            f"{end - offset}-byte value is out of range "
            f"(valid range: [{min_value}, {max_value}])",
            offset=offset,
            end=end,
        )


class MalformedTextError(OutOfBoundsError):
    """
    Raised when the bytes of a string cannot be decoded as text.

    Attributes:
        encoding: The codec that rejected the bytes.
        reason: The codec's description of the failure.
    """

    def __init__(self, operation: str, *, encoding: str, reason: str, offset: int) -> None:
        self.encoding = encoding
        self.reason = reason

        super().__init__(operation, offset=offset, detail=f"invalid {encoding} text: {reason}")
