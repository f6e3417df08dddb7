"""Exception hierarchy for bencore.

Provides the exception hierarchy shared by the decoder, the command
protocol and the configuration layer.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class BencoreError(Exception):
    """Base exception for all bencore errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize bencore error."""
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class ValidationError(BencoreError):
    """Data validation errors."""


class ConfigurationError(ValidationError):
    """Configuration validation errors."""


class BencodeError(ValidationError):
    """Bencode decoding errors."""


class ProtocolError(BencoreError):
    """Command protocol errors."""


class CommandError(ProtocolError):
    """Command parsing/serialization errors."""


class DecodeErrorKind(str, Enum):
    """Kinds of bencode decode failures."""

    UNEXPECTED_END = "unexpected_end"
    UNRECOGNIZED_TAG = "unrecognized_tag"
    MALFORMED_INTEGER = "malformed_integer"
    MALFORMED_LENGTH = "malformed_length"
    NON_STRING_KEY = "non_string_key"
    DUPLICATE_KEY = "duplicate_key"
    NESTING_TOO_DEEP = "nesting_too_deep"
    TRAILING_DATA = "trailing_data"


class ParseContext(str, Enum):
    """Grammar rule active when a decode error was detected."""

    VALUE = "value"
    INTEGER = "integer"
    STRING = "string"
    LIST = "list"
    DICTIONARY = "dictionary"


class BencodeDecodeError(BencodeError):
    """A bencode blob was rejected by the decoder.

    Subclasses fix ``kind``; ``context`` names the rule that failed and
    ``position`` is the cursor offset at which the failure was detected.
    """

    kind: DecodeErrorKind

    def __init__(
        self,
        message: str,
        *,
        context: ParseContext = ParseContext.VALUE,
        position: int = 0,
        remaining: int | None = None,
    ):
        """Initialize decode error."""
        details: dict[str, Any] = {
            "kind": self.kind.value,
            "context": context.value,
            "position": position,
        }
        if remaining is not None:
            details["remaining"] = remaining
        super().__init__(message, details)
        self.context = context
        self.position = position
        self.remaining = remaining


class UnexpectedEndError(BencodeDecodeError):
    """Input ended before a delimiter or the announced byte count."""

    kind = DecodeErrorKind.UNEXPECTED_END


class UnrecognizedTagError(BencodeDecodeError):
    """Lookahead byte is not ``i``, ``l``, ``d`` or a digit."""

    kind = DecodeErrorKind.UNRECOGNIZED_TAG


class MalformedIntegerError(BencodeDecodeError):
    """Integer body is not a canonical 64-bit integer."""

    kind = DecodeErrorKind.MALFORMED_INTEGER


class MalformedLengthError(BencodeDecodeError):
    """String length prefix is not a non-negative integer."""

    kind = DecodeErrorKind.MALFORMED_LENGTH


class NonStringKeyError(BencodeDecodeError):
    """Dictionary key position does not hold a byte string."""

    kind = DecodeErrorKind.NON_STRING_KEY


class DuplicateKeyError(BencodeDecodeError):
    """Dictionary repeats a key while duplicates are rejected."""

    kind = DecodeErrorKind.DUPLICATE_KEY


class NestingTooDeepError(BencodeDecodeError):
    """Lists/dictionaries are nested deeper than the configured limit."""

    kind = DecodeErrorKind.NESTING_TOO_DEEP


class TrailingDataError(BencodeDecodeError):
    """Strict decoding found bytes after the top-level value."""

    kind = DecodeErrorKind.TRAILING_DATA
