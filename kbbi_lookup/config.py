"""
Configuration module for kbbi-lookup.

Uses Pydantic Settings for environment variable support and validation.
Every component receives its values through its constructor; nothing here
is read as global state.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional, Literal
from pathlib import Path

from .models import DEFAULT_HOST

DEFAULT_COOKIE_PATH = Path.home() / ".kbbi" / "kuki.json"


class Settings(BaseSettings):
    """
    Application configuration with environment variable support.

    All settings can be overridden via ``KBBI_``-prefixed environment
    variables or a .env file.
    """

    host: str = Field(
        default=DEFAULT_HOST,
        description="Base URL of KBBI Daring"
    )

    # Session
    cookie_path: str = Field(
        default=str(DEFAULT_COOKIE_PATH),
        description="JSON file holding the saved account cookie"
    )

    # Cache settings
    use_cache: bool = Field(
        default=True,
        description="Serve repeated lookups from the page cache"
    )
    cache_dir: Optional[str] = Field(
        default=None,
        description="Cache directory (defaults to 'cache' next to the cookie file)"
    )
    cache_ttl_days: int = Field(
        default=30,
        ge=1,
        description="Lifetime of a cached page in days"
    )

    # Retry and rate limiting
    max_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Maximum fetch attempts per lookup"
    )
    request_delay_seconds: float = Field(
        default=0.5,
        ge=0.0,
        description="Courtesy delay before every request"
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="HTTP request timeout"
    )

    # Logging settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional log file path"
    )
    json_logs: bool = Field(
        default=False,
        description="Output logs as JSON"
    )

    model_config = SettingsConfigDict(
        env_prefix="KBBI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("host", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the host so paths can be appended with a single slash."""
        return v.rstrip("/") if isinstance(v, str) else v

    @property
    def resolved_cache_dir(self) -> Path:
        """Cache directory, derived from the cookie location when unset."""
        if self.cache_dir:
            return Path(self.cache_dir).expanduser()
        return Path(self.cookie_path).expanduser().parent / "cache"
