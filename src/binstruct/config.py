"""
Configuration for the binary decoder.

Environment variables set the process-wide defaults. A `DecoderConfig`
instance overrides them for a single decoder.
"""

import codecs
import os
from typing import Literal, get_args

from pydantic import Field, field_validator

from .base import StrictBaseModel

TextErrors = Literal["strict", "replace", "ignore", "surrogateescape", "backslashreplace"]
"""Codec error handlers accepted for text decoding."""

_SUPPORTED_TEXT_ERRORS: tuple[str, ...] = get_args(TextErrors)

TEXT_ENCODING = os.environ.get("BINSTRUCT_TEXT_ENCODING", "utf-8").lower()
"""Default encoding for null-terminated strings. Defaults to 'utf-8'."""

TEXT_ERRORS = os.environ.get("BINSTRUCT_TEXT_ERRORS", "surrogateescape").lower()
"""
Default codec error handler for null-terminated strings.

'surrogateescape' never fails on ASCII-compatible codecs and keeps the raw
bytes recoverable.
"""


def resolve_text_encoding(name: str) -> str:
    """
    Return the canonical codec name for a string encoding.

    Strings end at a single zero byte, so the codec must encode U+0000 as
    exactly that byte. Wide codecs such as UTF-16 and UTF-32 do not.

    Raises:
        ValueError: If the codec is unknown or unsuitable.
    """
    try:
        canonical = codecs.lookup(name).name
    except LookupError:
        raise ValueError(f"unknown text encoding: {name!r}") from None
    try:
        terminator = "\x00".encode(canonical)
    except (LookupError, UnicodeError):
        # Not a text codec, or one that cannot encode U+0000.
        terminator = b""
    if terminator != b"\x00":
        raise ValueError(f"text encoding {name!r} does not use a one-byte zero terminator")
    return canonical


try:
    resolve_text_encoding(TEXT_ENCODING)
except ValueError as e:
    raise ValueError(f"Invalid BINSTRUCT_TEXT_ENCODING environment variable: {e}") from None

if TEXT_ERRORS not in _SUPPORTED_TEXT_ERRORS:
    raise ValueError(
        f"Invalid BINSTRUCT_TEXT_ERRORS environment variable: '{TEXT_ERRORS}'. "
        f"Supported values: {list(_SUPPORTED_TEXT_ERRORS)}"
    )


class DecoderConfig(StrictBaseModel):
    """Per-decoder settings."""

    encoding: str = Field(default=TEXT_ENCODING)
    """Text encoding used by `Decoder.decode_cstring`."""

    errors: TextErrors = Field(default=TEXT_ERRORS)  # type: ignore[assignment]
    """Codec error handler used by `Decoder.decode_cstring`."""

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: str) -> str:
        """Reject unknown codecs and codecs without a one-byte terminator."""
        return resolve_text_encoding(value)
