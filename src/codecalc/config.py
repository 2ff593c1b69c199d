"""Application settings loaded from the environment.

Environment variables use the ``CODECALC_`` prefix (for example
``CODECALC_CATALOG_PATH`` or ``CODECALC_LOG_LEVEL``) and may also come
from a ``.env`` file in the working directory.  Command-line flags always
override these values.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from codecalc.core.engine import FallbackPolicy
from codecalc.core.models import Duration, Selection
from codecalc.exceptions import CodecalcError, ConfigurationError

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Typed application settings.

    Notes
    -----
    - ``default_resolution`` / ``default_frame_rate`` only seed the first
      selection of a session; the resolver replaces them as soon as a
      variant without those entries is chosen.
    - ``max_resolver_passes`` bounds the constraint resolver.  The rules
      settle in far fewer corrections, so the bound only trips on bugs.
    """

    model_config = SettingsConfigDict(env_prefix="CODECALC_", env_file=".env", extra="ignore")

    catalog_path: Path | None = Field(
        default=None,
        description="JSON catalog to load instead of the bundled one",
    )
    log_level: str = Field(default="WARNING", description="Level for the codecalc logger")
    max_resolver_passes: int = Field(
        default=32,
        ge=1,
        description="Maximum resolver corrections per selection change",
    )
    frame_rate_fallback: FallbackPolicy = Field(
        default=FallbackPolicy.FIRST_KEY,
        description="Bitrate to use when the chosen frame rate has no entry of its own",
    )
    default_resolution: str | None = Field(default="1080p", description="Initial resolution")
    default_frame_rate: str | None = Field(default="30", description="Initial frame rate")
    default_duration: str = Field(default="01:00:00", description="Initial clip length")
    binary_units: bool = Field(
        default=False,
        description="Show GB/TB with 1024 steps instead of 1000",
    )

    @field_validator("catalog_path")
    @classmethod
    def _expand_catalog_path(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("default_duration")
    @classmethod
    def _check_duration(cls, value: str) -> str:
        try:
            Duration.parse(value)
        except CodecalcError as exc:
            raise ValueError(str(exc)) from exc
        return value

    def default_selection(self) -> Selection:
        """Session-start selection built from the defaults above."""
        return Selection(
            resolution_id=self.default_resolution or None,
            frame_rate_id=self.default_frame_rate or None,
            duration=Duration.parse(self.default_duration),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache application settings.

    Cached so every caller in the process sees the same instance; tests
    call ``get_settings.cache_clear()`` after changing the environment.

    Raises
    ------
    ConfigurationError
        If an environment variable or ``.env`` entry fails validation.
    """
    try:
        return Settings()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigurationError(
            f"Invalid settings: {problems}",
            hint="Check the CODECALC_* environment variables and any .env file.",
        ) from exc
