"""Configuration management with pydantic-settings for the intranet client.

- Automatic .env file loading with proper precedence
- Validation with clear error messages
- SecretStr for the autologin link
- Frozen config (thread-safe, immutable after load)

The configuration is resolved once and handed to the transport and client
at construction; the request path never reads the environment itself.
"""

import logging
from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("epitech_intra.config")

__all__ = [
    "DEFAULT_COURSE",
    "DEFAULT_ENDPOINT",
    "DEFAULT_RETRY_COUNT",
    "IntraConfig",
    "get_config",
    "reset_config",
]

DEFAULT_ENDPOINT = "https://intra.epitech.eu"
DEFAULT_RETRY_COUNT = 5
DEFAULT_COURSE = "bachelor/classic"


class IntraConfig(BaseSettings):
    """Configuration for the Epitech intranet client.

    Loads from (in order of precedence):
    1. Environment variables (highest priority)
    2. .env file in the working directory
    3. Default values (lowest priority)

    Attributes:
        intra_endpoint: Service origin every resource path is resolved against
        intra_retry_count: GET attempts per request before RetryLimitError
        intra_retry_delay_ms: Base delay between attempts (0 = retry immediately)
        intra_connect_timeout: Per-attempt connect timeout in seconds
        intra_read_timeout: Per-attempt read timeout in seconds
        intra_default_course: Course filter used when a listing sets none
        intra_autologin: Optional autologin link (SecretStr)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        validate_default=True,
        frozen=True,
        extra="ignore",
    )

    intra_endpoint: str = Field(
        default=DEFAULT_ENDPOINT,
        min_length=8,
        description="Origin of the intranet (scheme + host, no trailing slash).",
    )

    intra_retry_count: int = Field(
        default=DEFAULT_RETRY_COUNT,
        ge=1,
        le=50,
        description="Number of GET attempts per request before giving up.",
    )

    intra_retry_delay_ms: int = Field(
        default=0,
        ge=0,
        le=10_000,
        description="Base delay between attempts, doubled after each failure. 0 retries immediately.",
    )

    intra_connect_timeout: float = Field(
        default=5.0,
        gt=0,
        le=120,
        description="Connect timeout per attempt (seconds).",
    )

    intra_read_timeout: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Read timeout per attempt (seconds).",
    )

    intra_default_course: str = Field(
        default=DEFAULT_COURSE,
        min_length=1,
        description="Course code used by student listings when none is given.",
    )

    intra_autologin: SecretStr | None = Field(
        default=None,
        description="Autologin link (https://intra.epitech.eu/auth-...). Grants full account access.",
    )

    @field_validator("intra_endpoint")
    @classmethod
    def normalize_endpoint(cls, v: str) -> str:
        """Require an http(s) origin and strip the trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("INTRA_ENDPOINT must start with http:// or https://")
        return v.rstrip("/")


@lru_cache(maxsize=1)
def get_config() -> IntraConfig:
    """Get global configuration singleton.

    First call loads from environment + .env file, subsequent calls return
    the cached instance.

    Returns:
        IntraConfig singleton instance.

    Raises:
        ValidationError: If configuration values are invalid.

    Example:
        >>> config = get_config()
        >>> config.intra_retry_count
        5
    """
    return IntraConfig()


def reset_config() -> None:
    """Reset configuration singleton for testing.

    Warning:
        Only use in test code. Production code should not reset config.
    """
    get_config.cache_clear()
