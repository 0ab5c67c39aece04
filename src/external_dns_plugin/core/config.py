"""Centralized configuration using Pydantic BaseSettings."""

import re
from functools import lru_cache
from typing import Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogFormat = Literal["text", "json"]
LogLevel = Literal["panic", "fatal", "error", "warning", "info", "debug", "trace"]

_DURATION_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)(ms|s|m|h)?$")
_DURATION_UNITS = {"ms": 0.001, "s": 1, "m": 60, "h": 3600}


def parse_duration(value: str) -> float:
    """
    Parse a duration string like '5s', '250ms' or '1m' into seconds.

    A bare number is taken as seconds.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    match = _DURATION_PATTERN.match(value.strip().lower())

    if not match:
        raise ValueError(f"invalid duration: {value!r}")

    amount, unit = match.groups()

    return float(amount) * _DURATION_UNITS[unit or "s"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Behaviour
    dry_run: bool = False

    # Logging
    log_format: LogFormat = "text"
    log_level: LogLevel = "info"

    # Backend configuration
    record_prefix: str = "/skydns/"
    txt_owner_id: str = "default"
    pre_filter_external_owned_records: bool = False
    domain_filter: str = ""  # Space-separated list of allowed domains
    exclude_domains: str = ""  # Space-separated list of excluded domains

    # Listener
    webhook_host: str = "0.0.0.0"
    webhook_port: int = 8888
    webhook_read_timeout: float = 5.0
    webhook_write_timeout: float = 10.0

    # Sentry configuration (optional)
    sentry_dsn: Optional[str] = None
    sentry_environment: str = "production"
    sentry_traces_sample_rate: float = 1.0

    @field_validator("log_format", "log_level", mode="before")
    @classmethod
    def _lowercase(cls, value):
        if isinstance(value, str):
            return value.strip().lower()

        return value

    @field_validator("webhook_read_timeout", "webhook_write_timeout", mode="before")
    @classmethod
    def _duration(cls, value):
        if isinstance(value, str):
            return parse_duration(value)

        return value

    @field_validator("webhook_read_timeout", "webhook_write_timeout")
    @classmethod
    def _positive(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("timeout must be positive")

        return value

    @property
    def domain_filter_list(self) -> list[str]:
        """Return allowed domains as a lowercased list."""
        return self.domain_filter.lower().split()

    @property
    def exclude_domains_list(self) -> list[str]:
        """Return excluded domains as a lowercased list."""
        return self.exclude_domains.lower().split()

    def summary(self) -> dict:
        """Return the effective configuration without secrets, for logging."""
        return self.model_dump(exclude={"sentry_dsn"})


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
