"""Pydantic models for bencore.

Provides validated configuration models for the decoder and logging.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator


# Deepest list/dictionary nesting the recursive decoder will follow
MAX_DEPTH_LIMIT = 256


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DuplicateKeyPolicy(str, Enum):
    """How the decoder treats a repeated dictionary key."""

    LAST_WINS = "last_wins"  # Later value replaces the earlier one
    REJECT = "reject"  # Fail with DuplicateKeyError


class DecoderConfig(BaseModel):
    """Decoder configuration."""

    strict: bool = Field(
        default=False,
        description="Reject bytes after the top-level value",
    )
    max_depth: int = Field(
        default=128,
        ge=1,
        le=MAX_DEPTH_LIMIT,
        description="Maximum nesting of lists and dictionaries",
    )
    duplicate_keys: DuplicateKeyPolicy = Field(
        default=DuplicateKeyPolicy.LAST_WINS,
        description="Policy for repeated dictionary keys",
    )


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.WARNING, description="Log level")
    log_file: str | None = Field(None, description="Log file path")
    structured_logging: bool = Field(
        default=False,
        description="Use structured JSON logging",
    )
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        """Accept log level names in any case."""
        if isinstance(v, str):
            return v.upper()
        return v


class Config(BaseModel):
    """Top-level bencore configuration."""

    decoder: DecoderConfig = Field(default_factory=DecoderConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
