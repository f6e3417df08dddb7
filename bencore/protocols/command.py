"""Line-oriented command protocol.

A command is a short name plus positional string arguments, e.g.
``["add", "2", "3"]``. Commands travel as one JSON object per line::

    {"command": "echo", "echoed": "hello"}
    {"command": "add", "a": 2, "b": 3}
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from bencore.utils.exceptions import CommandError

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_OPERAND = re.compile(r"[+-]?[0-9]+")


class Command(ABC):
    """Base class for protocol commands."""

    __slots__ = ()

    name: ClassVar[str]

    def arguments(self) -> dict[str, Any]:
        """Variant-specific fields of the wire form."""
        return {}

    @abstractmethod
    def execute(self) -> Any:
        """Run the command and return its result."""
        raise NotImplementedError


@dataclass(frozen=True)
class TestCommand(Command):
    """No-op test signal."""

    __test__ = False  # not a pytest test class

    name: ClassVar[str] = "test"

    def execute(self) -> None:
        return None


@dataclass(frozen=True)
class HealthCheckCommand(Command):
    """Health check."""

    name: ClassVar[str] = "health"

    def execute(self) -> str:
        return "ok"


@dataclass(frozen=True)
class EchoCommand(Command):
    """Echo a message back."""

    name: ClassVar[str] = "echo"

    message: str = ""

    def arguments(self) -> dict[str, Any]:
        return {"echoed": self.message}

    def execute(self) -> str:
        return self.message


@dataclass(frozen=True)
class AddCommand(Command):
    """Add two 32-bit integers."""

    name: ClassVar[str] = "add"

    a: int
    b: int

    def arguments(self) -> dict[str, Any]:
        return {"a": self.a, "b": self.b}

    def execute(self) -> int:
        return self.a + self.b


# Wire names accepted by deserialize(); "health_check" is an older spelling.
_WIRE_ALIASES = {"health_check": "health"}


def _parse_operand(raw: str, label: str) -> int:
    if not _OPERAND.fullmatch(raw):
        msg = f"{label} is not an integer: {raw!r}"
        raise CommandError(msg)
    value = int(raw)
    if not INT32_MIN <= value <= INT32_MAX:
        msg = f"{label} is out of 32-bit range: {value}"
        raise CommandError(msg)
    return value


def _json_operand(data: dict[str, Any], label: str) -> int:
    value = data.get(label)
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"bad add - key `{label}` must be an integer"
        raise CommandError(msg, {"value": value})
    if not INT32_MIN <= value <= INT32_MAX:
        msg = f"bad add - key `{label}` is out of 32-bit range"
        raise CommandError(msg, {"value": value})
    return value


def parse(args: Sequence[str]) -> Command:
    """Build a command from a name and its positional arguments.

    Raises:
        CommandError: no name, unknown name, or bad/missing operands

    """
    if not args:
        msg = "no command given"
        raise CommandError(msg)

    name, rest = args[0], list(args[1:])
    if name == "test":
        return TestCommand()
    if name == "health":
        return HealthCheckCommand()
    if name == "echo":
        return EchoCommand(" ".join(rest))
    if name == "add":
        if len(rest) < 2:
            missing = "a" if not rest else "b"
            msg = f"{missing} was not present"
            raise CommandError(msg)
        return AddCommand(_parse_operand(rest[0], "a"), _parse_operand(rest[1], "b"))

    msg = f"no such command {name}"
    raise CommandError(msg)


def serialize(command: Command) -> str:
    """Render a command as one JSON line, newline-terminated."""
    payload: dict[str, Any] = {"command": command.name}
    payload.update(command.arguments())
    return json.dumps(payload) + "\n"


def deserialize(blob: str) -> Command:
    """Parse one JSON line back into a command.

    Raises:
        CommandError: invalid JSON, missing ``command``, or bad fields

    """
    try:
        data = json.loads(blob)
    except json.JSONDecodeError as e:
        msg = f"invalid command line: {e.msg}"
        raise CommandError(msg, {"line": e.lineno, "column": e.colno}) from e

    if not isinstance(data, dict) or not isinstance(data.get("command"), str):
        msg = "no command"
        raise CommandError(msg)

    name = _WIRE_ALIASES.get(data["command"], data["command"])
    if name == "test":
        return TestCommand()
    if name == "health":
        return HealthCheckCommand()
    if name == "echo":
        echoed = data.get("echoed")
        if not isinstance(echoed, str):
            msg = "bad echo - no key `echoed`"
            raise CommandError(msg)
        return EchoCommand(echoed)
    if name == "add":
        return AddCommand(_json_operand(data, "a"), _json_operand(data, "b"))

    msg = f"bad command {data['command']}"
    raise CommandError(msg)
