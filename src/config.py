"""Configuration loading and validation.

This module is responsible for:

- Loading `.env` into the process environment (without overriding existing vars).
- Converting environment variables into strongly-typed Pydantic models.
- Validating fields and providing actionable error messages.
"""

import logging
import os
from typing import TypeVar

import dotenv
from pydantic import BaseModel, Field, field_validator

_T = TypeVar("_T", int, float)


def _get_env_str(name: str, default: str | None) -> str | None:
    """Read an optional string env var (blank counts as unset)."""
    value = os.getenv(name, "").strip()
    return value or default


def _get_env_bool(name: str, default: bool) -> bool:
    """Read a boolean env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    normalized = raw.strip().lower()
    if normalized in {"true", "1", "yes", "y", "on"}:
        return True
    if normalized in {"false", "0", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be a boolean (true/false). Got: {raw!r}")


def _get_env_number(name: str, default: _T, cast: type[_T]) -> _T:
    """Read an int/float env var with a default."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be a {cast.__name__}. Got: {raw!r}") from exc


class ObservabilityConfig(BaseModel):
    """Where and how sequence events are recorded."""

    db_path: str | None = Field(default=None, description="DuckDB file; None keeps records in memory")
    table: str = Field(default="sequence_events", description="DuckDB table for records")
    max_queue_size: int = Field(default=10000, description="Recorder buffer bound")
    stage: str = Field(default="sequence", description="Stage label stored on every record")

    @field_validator("table")
    def validate_table(cls, v: str) -> str:
        """Table names are interpolated into SQL, so only identifiers are allowed."""
        if not v.isidentifier():
            raise ValueError(f"OBSERVABILITY_TABLE must be a plain identifier. Got: {v!r}")
        return v

    @field_validator("max_queue_size")
    def validate_max_queue_size(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"OBSERVABILITY_MAX_QUEUE_SIZE must be > 0. Got: {v}")
        return v


class DemoConfig(BaseModel):
    """Options for the demo entrypoint."""

    color: bool = Field(default=True, description="Colourise printed events")
    log_level: str = Field(default="INFO", description="Root logging level")

    @field_validator("log_level")
    def validate_log_level(cls, v: str) -> str:
        """Accept any standard logging level name, case-insensitively."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"DEMO_LOG_LEVEL must be a logging level name (DEBUG, INFO, ...). Got: {v!r}")
        return level


class Config(BaseModel):
    """Top-level application configuration."""

    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
    demo: DemoConfig = Field(default_factory=DemoConfig)


def load_config() -> Config:
    """Load application configuration from environment variables.

    Notes:
    - Calls `dotenv.load_dotenv()` so local `.env` values are visible to the process.
    - Raises `ValueError` with actionable messages for malformed values.
    """
    # Load variables from `.env` into the process environment (without overriding
    # already-set env vars).
    dotenv.load_dotenv()

    observability = ObservabilityConfig(
        db_path=_get_env_str("OBSERVABILITY_DB_PATH", None),
        table=_get_env_str("OBSERVABILITY_TABLE", "sequence_events"),
        max_queue_size=_get_env_number("OBSERVABILITY_MAX_QUEUE_SIZE", 10000, int),
        stage=_get_env_str("OBSERVABILITY_STAGE", "sequence"),
    )
    demo = DemoConfig(
        color=_get_env_bool("DEMO_COLOR", True),
        log_level=_get_env_str("DEMO_LOG_LEVEL", "INFO"),
    )
    return Config(observability=observability, demo=demo)
