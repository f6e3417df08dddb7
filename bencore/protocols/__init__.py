"""Command protocol support for bencore.

Provides the line-oriented JSON command protocol:
- ``parse`` builds a command from positional arguments
- ``serialize`` / ``deserialize`` convert to and from the wire line
"""

from __future__ import annotations

from bencore.protocols.command import (
    AddCommand,
    Command,
    EchoCommand,
    HealthCheckCommand,
    TestCommand,
    deserialize,
    parse,
    serialize,
)

__all__ = [
    "AddCommand",
    "Command",
    "EchoCommand",
    "HealthCheckCommand",
    "TestCommand",
    "deserialize",
    "parse",
    "serialize",
]
