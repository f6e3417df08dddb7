"""Bencode decoder.

Recursive-descent parser over a single forward-only cursor. Dispatch is a
one-byte lookahead:

- ``i`` integer (``i<digits>e``)
- ``l`` list (``l<items>e``)
- ``d`` dictionary (``d(<key><value>)*e``)
- ``0``-``9`` byte string (``<len>:<bytes>``)

Every rejection raises a :class:`~bencore.utils.exceptions.BencodeDecodeError`
subclass; the decoder keeps no state between calls.
"""

from __future__ import annotations

import re

from bencore.config.config import get_config
from bencore.core.values import INT64_MAX, INT64_MIN, Dictionary, Integer, List, Text, Value
from bencore.models import MAX_DEPTH_LIMIT, DuplicateKeyPolicy
from bencore.utils.exceptions import (
    DuplicateKeyError,
    MalformedIntegerError,
    MalformedLengthError,
    NestingTooDeepError,
    NonStringKeyError,
    ParseContext,
    TrailingDataError,
    UnexpectedEndError,
    UnrecognizedTagError,
)
from bencore.utils.logging_config import get_logger

logger = get_logger(__name__)

_INTEGER_BODY = re.compile(rb"-?[0-9]+")
_LENGTH_PREFIX = re.compile(rb"[0-9]+")

# Longest int64 literal is "-9223372036854775808"
_INTEGER_MAX_CHARS = 20
_LENGTH_MAX_DIGITS = 19


def _describe(tag: bytes) -> str:
    return repr(tag.decode("latin-1"))


class Cursor:
    """Forward-only, one-byte lookahead view over the input."""

    __slots__ = ("_data", "_pos")

    def __init__(self, data: bytes):
        """Initialize cursor at the start of ``data``."""
        self._data = data
        self._pos = 0

    @property
    def position(self) -> int:
        """Offset of the next unread byte."""
        return self._pos

    def at_end(self) -> bool:
        """Return True when every byte has been consumed."""
        return self._pos >= len(self._data)

    def peek(self) -> bytes | None:
        """Return the next byte without consuming it, or None at the end."""
        if self.at_end():
            return None
        return self._data[self._pos : self._pos + 1]

    def next(self) -> bytes | None:
        """Consume and return the next byte, or None at the end."""
        tag = self.peek()
        if tag is not None:
            self._pos += 1
        return tag

    def read_until(self, delimiter: bytes) -> bytes | None:
        """Consume bytes up to (not including) ``delimiter``.

        Returns None, with the cursor exhausted, if the delimiter never
        appears.
        """
        end = self._data.find(delimiter, self._pos)
        if end == -1:
            self._pos = len(self._data)
            return None
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def take(self, count: int) -> bytes:
        """Consume up to ``count`` bytes; fewer are returned at the end."""
        chunk = self._data[self._pos : self._pos + count]
        self._pos += len(chunk)
        return chunk


class BencodeDecoder:
    """Decodes one complete bencoded blob into a :class:`Value` tree."""

    def __init__(
        self,
        data: bytes | str,
        *,
        strict: bool | None = None,
        max_depth: int | None = None,
        duplicate_keys: DuplicateKeyPolicy | str | None = None,
    ):
        """Initialize decoder.

        Args:
            data: The whole input; ``str`` is UTF-8 encoded first
            strict: Reject bytes following the top-level value
            max_depth: Maximum nesting of lists/dictionaries
            duplicate_keys: ``last_wins`` or ``reject``

        Options left as None are taken from the ``decoder`` config section.

        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        elif isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif not isinstance(data, bytes):
            msg = f"Cannot decode {type(data).__name__}, expected bytes or str"
            raise TypeError(msg)
        self.data = data

        if strict is None or max_depth is None or duplicate_keys is None:
            defaults = get_config().decoder
            strict = defaults.strict if strict is None else strict
            max_depth = defaults.max_depth if max_depth is None else max_depth
            if duplicate_keys is None:
                duplicate_keys = defaults.duplicate_keys

        if not 1 <= max_depth <= MAX_DEPTH_LIMIT:
            msg = f"max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {max_depth}"
            raise ValueError(msg)
        self.strict = strict
        self.max_depth = max_depth
        self.duplicate_keys = DuplicateKeyPolicy(duplicate_keys)

    def decode(self) -> Value:
        """Decode the input and return the value tree."""
        cursor = Cursor(self.data)
        value = self._parse_value(cursor, 0)
        if self.strict and not cursor.at_end():
            msg = f"{len(self.data) - cursor.position} trailing byte(s) after value"
            raise TrailingDataError(
                msg, context=ParseContext.VALUE, position=cursor.position
            )
        logger.debug("Decoded %d bytes into %s", len(self.data), value.kind)
        return value

    def _parse_value(self, cursor: Cursor, depth: int) -> Value:
        tag = cursor.peek()
        if tag is None:
            msg = "unexpected end of input, expected a value"
            raise UnexpectedEndError(
                msg, context=ParseContext.VALUE, position=cursor.position
            )
        if tag == b"i":
            return self._parse_integer(cursor)
        if tag == b"d":
            self._check_depth(cursor, depth, ParseContext.DICTIONARY)
            return self._parse_dictionary(cursor, depth)
        if tag == b"l":
            self._check_depth(cursor, depth, ParseContext.LIST)
            return self._parse_list(cursor, depth)
        if tag.isdigit():
            return self._parse_string(cursor)
        msg = f"unrecognized tag {_describe(tag)}"
        raise UnrecognizedTagError(
            msg, context=ParseContext.VALUE, position=cursor.position
        )

    def _check_depth(self, cursor: Cursor, depth: int, context: ParseContext) -> None:
        if depth >= self.max_depth:
            msg = f"nesting deeper than {self.max_depth} levels"
            raise NestingTooDeepError(msg, context=context, position=cursor.position)

    def _parse_integer(self, cursor: Cursor) -> Integer:
        start = cursor.position
        cursor.next()  # 'i'

        body = cursor.read_until(b"e")
        if body is None:
            msg = "premature end of integer"
            raise UnexpectedEndError(
                msg, context=ParseContext.INTEGER, position=cursor.position
            )

        # Canonical form: no negative zero, no leading zeros.
        if body.startswith(b"-0"):
            msg = "integer cannot start with or consist of -0"
            raise MalformedIntegerError(
                msg, context=ParseContext.INTEGER, position=start
            )
        if len(body) > 1 and body.startswith(b"0"):
            msg = "integer cannot start with leading 0"
            raise MalformedIntegerError(
                msg, context=ParseContext.INTEGER, position=start
            )

        cursor.next()  # 'e'

        if not _INTEGER_BODY.fullmatch(body):
            msg = f"invalid integer literal {_describe(body)}"
            raise MalformedIntegerError(
                msg, context=ParseContext.INTEGER, position=start
            )
        if len(body) > _INTEGER_MAX_CHARS:
            msg = f"integer literal of {len(body)} characters does not fit in 64 bits"
            raise MalformedIntegerError(
                msg, context=ParseContext.INTEGER, position=start
            )
        number = int(body)
        if not INT64_MIN <= number <= INT64_MAX:
            msg = f"integer {number} does not fit in 64 bits"
            raise MalformedIntegerError(
                msg, context=ParseContext.INTEGER, position=start
            )
        return Integer(number)

    def _parse_string(self, cursor: Cursor) -> Text:
        start = cursor.position

        prefix = cursor.read_until(b":")
        if prefix is None:
            msg = "premature end of string length"
            raise UnexpectedEndError(
                msg, context=ParseContext.STRING, position=cursor.position
            )
        if not _LENGTH_PREFIX.fullmatch(prefix):
            if prefix.startswith(b"-") and _LENGTH_PREFIX.fullmatch(prefix[1:]):
                msg = f"negative string length {_describe(prefix)}"
            else:
                msg = f"invalid string length {_describe(prefix)}"
            raise MalformedLengthError(
                msg, context=ParseContext.STRING, position=start
            )
        if len(prefix.lstrip(b"0")) > _LENGTH_MAX_DIGITS:
            msg = f"string length of {len(prefix)} digits is too large"
            raise MalformedLengthError(
                msg, context=ParseContext.STRING, position=start
            )
        length = int(prefix)

        cursor.next()  # ':'

        payload = cursor.take(length)
        if len(payload) < length:
            remaining = length - len(payload)
            msg = f"premature end of string after length - {remaining} bytes remaining"
            raise UnexpectedEndError(
                msg,
                context=ParseContext.STRING,
                position=cursor.position,
                remaining=remaining,
            )
        return Text(payload)

    def _parse_list(self, cursor: Cursor, depth: int) -> List:
        cursor.next()  # 'l'

        items: list[Value] = []
        while not cursor.at_end() and cursor.peek() != b"e":
            items.append(self._parse_value(cursor, depth + 1))

        if cursor.at_end():
            msg = "premature end of list"
            raise UnexpectedEndError(
                msg, context=ParseContext.LIST, position=cursor.position
            )

        cursor.next()  # 'e'
        return List(items)

    def _parse_dictionary(self, cursor: Cursor, depth: int) -> Dictionary:
        cursor.next()  # 'd'

        entries: dict[bytes, Value] = {}
        while not cursor.at_end() and cursor.peek() != b"e":
            tag = cursor.peek()
            # Also stops "-" here, so keys never reach the negative length check
            if tag is not None and not tag.isdigit():
                msg = f"dictionary key must be a byte string, found tag {_describe(tag)}"
                raise NonStringKeyError(
                    msg, context=ParseContext.DICTIONARY, position=cursor.position
                )

            key_position = cursor.position
            key = self._parse_string(cursor).value
            value = self._parse_value(cursor, depth + 1)

            if key in entries:
                if self.duplicate_keys is DuplicateKeyPolicy.REJECT:
                    msg = f"duplicate dictionary key {key!r}"
                    raise DuplicateKeyError(
                        msg, context=ParseContext.DICTIONARY, position=key_position
                    )
                logger.debug("Duplicate dictionary key %r, keeping last value", key)
            entries[key] = value

        if cursor.at_end():
            msg = "premature end of dictionary"
            raise UnexpectedEndError(
                msg, context=ParseContext.DICTIONARY, position=cursor.position
            )

        cursor.next()  # 'e'
        return Dictionary(entries)


def decode(
    data: bytes | str,
    *,
    strict: bool | None = None,
    max_depth: int | None = None,
    duplicate_keys: DuplicateKeyPolicy | str | None = None,
) -> Value:
    """Decode a complete bencoded blob into a :class:`Value` tree."""
    return BencodeDecoder(
        data,
        strict=strict,
        max_depth=max_depth,
        duplicate_keys=duplicate_keys,
    ).decode()
