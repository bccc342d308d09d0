"""
Application configuration using Pydantic settings.

All configurable values are loaded from environment variables with sensible defaults.
Settings are passed explicitly into the registry and the debug application;
nothing in the core reads the module-level instance behind the caller's back.
"""
import logging
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Get the directory containing this config file (flaggate/)
_PACKAGE_DIR = Path(__file__).parent.resolve()

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App metadata
    app_name: str = "FlagGate"
    app_version: str = "0.1.0"
    debug: bool = False

    # Logging configuration
    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    # Persisted definitions, loaded once at registry start-up
    cache_enabled: bool = False
    cache_path: Path = Path("flag_cache.json")

    # Host identity, used by the debug panel to report "supported on this host"
    platform_level: Optional[int] = None  # e.g. 29
    host_version: Optional[str] = None  # e.g. "1.0.0"

    # Debug panel streams check for a dropped client at least this often (seconds)
    stream_poll_interval: float = 1.0

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize the log level and reject unknown names."""
        level = value.strip().upper()
        if level not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level '{value}' not valid. Must be one of: {', '.join(_VALID_LOG_LEVELS)}"
            )
        return level

    @field_validator("stream_poll_interval")
    @classmethod
    def validate_stream_poll_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("stream_poll_interval must be greater than zero")
        return value

    @field_validator("platform_level")
    @classmethod
    def validate_platform_level(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 0:
            raise ValueError("platform_level must be zero or greater")
        return value

    model_config = SettingsConfigDict(
        env_file=_PACKAGE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def logging_level(self) -> int:
        """The configured level as a `logging` constant."""
        return getattr(logging, self.log_level, logging.INFO)


def get_settings(**overrides) -> Settings:
    """
    Factory function to create Settings instance.

    Useful for testing where you need to override specific values
    without modifying environment variables.

    Args:
        **overrides: Key-value pairs to override default settings

    Returns:
        Settings instance with overrides applied

    Example:
        test_settings = get_settings(cache_enabled=True, cache_path="flags.json")
    """
    return Settings(**overrides)


def configure_logging(config: Settings) -> None:
    """Configure root logging with the shared format at the configured level."""
    logging.basicConfig(
        level=config.logging_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# Default settings instance for entry points (CLI, ASGI module)
settings = get_settings()
