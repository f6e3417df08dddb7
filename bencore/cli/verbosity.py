"""Verbosity management for the bencore CLI.

Maps repeated ``-v`` flags to logging levels.
"""

from __future__ import annotations

import logging
from enum import IntEnum


class VerbosityLevel(IntEnum):
    """Verbosity levels for CLI commands."""

    NORMAL = 0  # Default: errors and warnings
    VERBOSE = 1  # -v: All above + info
    DEBUG = 2  # -vv: All above + debug messages


class VerbosityManager:
    """Maps verbosity levels to logging levels."""

    LEVEL_TO_LOGGING: dict[VerbosityLevel, int] = {
        VerbosityLevel.NORMAL: logging.WARNING,
        VerbosityLevel.VERBOSE: logging.INFO,
        VerbosityLevel.DEBUG: logging.DEBUG,
    }

    def __init__(self, verbosity_count: int = 0):
        """Initialize verbosity manager.

        Args:
            verbosity_count: Number of -v flags (clamped to 0-2)

        """
        self.verbosity_count = max(0, min(2, verbosity_count))
        self.level = VerbosityLevel(self.verbosity_count)
        self.logging_level = self.LEVEL_TO_LOGGING[self.level]

    @classmethod
    def from_count(cls, count: int) -> VerbosityManager:
        """Create VerbosityManager from the number of -v flags."""
        return cls(count)

    def is_verbose(self) -> bool:
        """Check if verbose mode is enabled."""
        return self.level >= VerbosityLevel.VERBOSE

    def is_debug(self) -> bool:
        """Check if debug mode is enabled."""
        return self.level >= VerbosityLevel.DEBUG
