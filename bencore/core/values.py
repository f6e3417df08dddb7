"""Decoded bencode value tree.

Four immutable variants: :class:`Text`, :class:`Integer`, :class:`List`
and :class:`Dictionary`. Equality is structural and only defined between
values of the same variant.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _key_bytes(key: Any) -> bytes:
    """Normalize a dictionary key to its raw bytes."""
    if isinstance(key, Text):
        return key.value
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    msg = f"Dictionary keys must be text, got {type(key).__name__}"
    raise TypeError(msg)


def _require_value(item: Any) -> Value:
    if not isinstance(item, Value):
        msg = f"Expected a bencode Value, got {type(item).__name__}"
        raise TypeError(msg)
    return item


class Value(ABC):
    """Base class for decoded bencode values."""

    __slots__ = ()

    kind: ClassVar[str] = "value"

    @abstractmethod
    def to_python(self, text: bool = False) -> Any:
        """Convert the tree to plain Python objects.

        Args:
            text: Decode byte strings (and dictionary keys) as UTF-8 ``str``

        """
        raise NotImplementedError


@dataclass(frozen=True)
class Text(Value):
    """A bencode byte string.

    Accepts ``str`` for convenience; it is stored UTF-8 encoded.
    """

    kind: ClassVar[str] = "text"

    value: bytes = b""

    def __post_init__(self) -> None:
        if isinstance(self.value, str):
            object.__setattr__(self, "value", self.value.encode("utf-8"))
        elif isinstance(self.value, (bytearray, memoryview)):
            object.__setattr__(self, "value", bytes(self.value))
        elif not isinstance(self.value, bytes):
            msg = f"Text requires bytes or str, got {type(self.value).__name__}"
            raise TypeError(msg)

    @property
    def text(self) -> str:
        """UTF-8 decoding of the payload, undecodable bytes replaced."""
        return self.value.decode("utf-8", errors="replace")

    def __len__(self) -> int:
        return len(self.value)

    def to_python(self, text: bool = False) -> bytes | str:
        return self.text if text else self.value


@dataclass(frozen=True)
class Integer(Value):
    """A 64-bit signed bencode integer."""

    kind: ClassVar[str] = "integer"

    value: int = 0

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            msg = f"Integer requires int, got {type(self.value).__name__}"
            raise TypeError(msg)
        if not INT64_MIN <= self.value <= INT64_MAX:
            msg = f"Integer {self.value} is outside the 64-bit signed range"
            raise ValueError(msg)

    def __int__(self) -> int:
        return self.value

    def to_python(self, text: bool = False) -> int:
        return self.value


@dataclass(frozen=True)
class List(Value):
    """An ordered sequence of values."""

    kind: ClassVar[str] = "list"

    items: tuple[Value, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "items", tuple(_require_value(item) for item in self.items)
        )

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Value]:
        return iter(self.items)

    def __getitem__(self, index: int) -> Value:
        return self.items[index]

    def to_python(self, text: bool = False) -> list[Any]:
        return [item.to_python(text) for item in self.items]


@dataclass(frozen=True)
class Dictionary(Value, Mapping):
    """A mapping from byte-string keys to values.

    Built from a mapping or an iterable of ``(key, value)`` pairs; a later
    pair replaces an earlier one with the same key. Entries are kept sorted
    by key bytes, so equality ignores construction order.
    """

    kind: ClassVar[str] = "dictionary"

    entries: tuple[tuple[bytes, Value], ...] = ()

    def __post_init__(self) -> None:
        source: Mapping[Any, Value] | Iterable[tuple[Any, Value]] = self.entries
        pairs = source.items() if isinstance(source, Mapping) else source
        merged: dict[bytes, Value] = {}
        for key, value in pairs:
            merged[_key_bytes(key)] = _require_value(value)
        ordered = tuple(sorted(merged.items(), key=lambda pair: pair[0]))
        object.__setattr__(self, "entries", ordered)
        object.__setattr__(self, "_index", merged)

    def __getitem__(self, key: str | bytes | Text) -> Value:
        return self._index[_key_bytes(key)]  # type: ignore[attr-defined]

    def __contains__(self, key: object) -> bool:
        try:
            return _key_bytes(key) in self._index  # type: ignore[attr-defined]
        except TypeError:
            return False

    def __iter__(self) -> Iterator[bytes]:
        return (key for key, _ in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def to_python(self, text: bool = False) -> dict[Any, Any]:
        return {
            (key.decode("utf-8", errors="replace") if text else key): value.to_python(
                text
            )
            for key, value in self.entries
        }
