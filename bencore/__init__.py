"""bencore - a bencode decoder and command protocol toolkit."""

from __future__ import annotations

__version__ = "0.1.0"

from bencore.core.bencode import BencodeDecoder, decode
from bencore.core.values import Dictionary, Integer, List, Text, Value
from bencore.utils.exceptions import (
    BencodeDecodeError,
    DecodeErrorKind,
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

__all__ = [
    "BencodeDecodeError",
    "BencodeDecoder",
    "DecodeErrorKind",
    "Dictionary",
    "DuplicateKeyError",
    "Integer",
    "List",
    "MalformedIntegerError",
    "MalformedLengthError",
    "NestingTooDeepError",
    "NonStringKeyError",
    "ParseContext",
    "Text",
    "TrailingDataError",
    "UnexpectedEndError",
    "UnrecognizedTagError",
    "Value",
    "__version__",
    "decode",
]
