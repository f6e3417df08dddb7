"""Shared utilities and infrastructure.

This module contains the exception hierarchy and logging setup.
"""

from __future__ import annotations

from bencore.utils.exceptions import (
    BencodeDecodeError,
    BencodeError,
    BencoreError,
    CommandError,
    ConfigurationError,
    ValidationError,
)
from bencore.utils.logging_config import get_logger, setup_logging

__all__ = [
    # Exceptions
    "BencodeDecodeError",
    "BencodeError",
    "BencoreError",
    "CommandError",
    "ConfigurationError",
    "ValidationError",
    # Logging
    "get_logger",
    "setup_logging",
]
