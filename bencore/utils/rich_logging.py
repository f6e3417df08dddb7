"""Rich logging integration for bencore.

Provides Rich-based logging handlers and formatters.
"""

from __future__ import annotations

import logging
import re
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape


class CorrelationRichHandler(RichHandler):
    """RichHandler with correlation ID support.

    Function names are colored pink and decode error kinds
    (``unexpected_end``, ``malformed_integer``, ...) are highlighted.
    """

    KIND_PATTERN = re.compile(
        r"\b(unexpected_end|unrecognized_tag|malformed_integer|malformed_length"
        r"|non_string_key|duplicate_key|nesting_too_deep|trailing_data)\b"
    )

    def __init__(
        self,
        *args: Any,
        console: Console | None = None,
        show_colors: bool = True,
        **kwargs: Any,
    ) -> None:
        """Initialize RichHandler with markup enabled.

        Args:
            *args: Positional arguments for RichHandler
            console: Optional Rich Console instance
            show_colors: Whether to colorize function names and error kinds
            **kwargs: Keyword arguments for RichHandler

        """
        if console is None:
            console = Console(file=sys.stderr, markup=True)

        self.show_colors = show_colors
        kwargs.setdefault("markup", True)
        super().__init__(*args, console=console, **kwargs)

    def _colorize(self, message: str) -> str:
        """Highlight decode error kinds in an already escaped message."""
        return self.KIND_PATTERN.sub(r"[orange1]\1[/orange1]", message)

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record with correlation ID and colorized message."""
        try:
            if not hasattr(record, "correlation_id"):
                # Lazy import to avoid circular dependency
                from bencore.utils.logging_config import correlation_id

                record.correlation_id = correlation_id.get() or "no-correlation-id"

            message = escape(record.getMessage())
            if self.show_colors:
                message = self._colorize(message)
                func_name = getattr(record, "funcName", None)
                if func_name:
                    message = f"[#ff69b4]{func_name}[/#ff69b4] {message}"

            # Other handlers (the file handler) see the record after us
            original_msg, original_args = record.msg, record.args
            record.msg, record.args = message, ()
            try:
                super().emit(record)
            finally:
                record.msg, record.args = original_msg, original_args
        except Exception:
            self.handleError(record)


def strip_rich_markup(text: str) -> str:
    """Remove Rich markup tags from text.

    Args:
        text: Text that may contain Rich markup

    Returns:
        Text with Rich markup removed

    """
    # Pattern matches [tag], [tag=value], [/tag]
    pattern = r"\[/?[^\]]+\]"
    return re.sub(pattern, "", text)


class FileFormatter(logging.Formatter):
    """Formatter for file output that strips Rich markup."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record, stripping Rich markup for file output."""
        return strip_rich_markup(super().format(record))


def create_rich_handler(
    console: Console | None = None,
    level: int | str = logging.INFO,
    show_path: bool = False,
    rich_tracebacks: bool = True,
    show_colors: bool = True,
) -> logging.Handler:
    """Create a RichHandler with correlation ID support.

    Args:
        console: Optional Rich Console instance (defaults to stderr)
        level: Log level
        show_path: Whether to show file paths in log output
        rich_tracebacks: Whether to use rich tracebacks
        show_colors: Whether to colorize function names and error kinds

    Returns:
        Configured RichHandler instance

    """
    return CorrelationRichHandler(
        console=console,
        level=level,
        show_path=show_path,
        rich_tracebacks=rich_tracebacks,
        show_colors=show_colors,
    )
