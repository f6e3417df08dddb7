"""Core bencode implementation.

This module contains the decoder and the value tree it produces.
"""

from __future__ import annotations

from bencore.core.bencode import BencodeDecoder, Cursor, decode
from bencore.core.values import Dictionary, Integer, List, Text, Value

__all__ = [
    # Decoding
    "BencodeDecoder",
    "Cursor",
    # Values
    "Dictionary",
    "Integer",
    "List",
    "Text",
    "Value",
    "decode",
]
