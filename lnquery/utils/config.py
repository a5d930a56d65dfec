"""Application settings.

Pydantic-based configuration, overridable through environment variables or a
``.env`` file.

Environment Variables:
- LNQUERY_ENVIRONMENT: development, test or production (default: development)
- LNQUERY_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LNQUERY_JSON_LOGS: Emit JSON log lines (default: false)
- LNQUERY_HEALTH_MIN_LOCAL_RATIO: Lower bound of the healthy band (default: 0.1)
- LNQUERY_HEALTH_MAX_LOCAL_RATIO: Upper bound of the healthy band (default: 0.9)
- LNQUERY_ALIAS_TIMEOUT_SECONDS: Per-lookup alias timeout (default: 5.0)
- LNQUERY_MAX_CONCURRENT_ALIAS_LOOKUPS: Alias fan-out bound (default: 16)
- LNQUERY_STRICT_PUBKEYS: Require 66-hex-char pubkeys (default: on in production)
- LNQUERY_FIXTURE_PATH: JSON fixture served by the static gateway
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from lnquery.utils.logging import get_logger

logger = get_logger(__name__)


class Settings(BaseSettings):
    """lnquery configuration.

    Example:
        >>> settings = Settings(health_min_local_ratio=0.2, health_max_local_ratio=0.8)
        >>> settings.health_band
        (0.2, 0.8)
    """

    model_config = SettingsConfigDict(
        env_prefix="LNQUERY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "test", "production"] = Field(
        default="development",
        description="Deployment environment",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines instead of console output",
    )

    # Health band
    health_min_local_ratio: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Minimum local/capacity ratio for a healthy channel",
    )

    health_max_local_ratio: float = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="Maximum local/capacity ratio for a healthy channel",
    )

    # Alias enrichment
    alias_timeout_seconds: float = Field(
        default=5.0,
        gt=0.0,
        le=120.0,
        description="Timeout for a single node alias lookup",
    )

    max_concurrent_alias_lookups: int = Field(
        default=16,
        ge=1,
        le=256,
        description="Maximum alias lookups in flight at once",
    )

    # Channel records
    strict_pubkeys: bool | None = Field(
        default=None,
        description="Require 66-hex-char remote pubkeys (None: strict only in production)",
    )

    fixture_path: Path | None = Field(
        default=None,
        description="JSON fixture file served by the static gateway",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level choice."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got {v}")
        return v.upper()

    @model_validator(mode="after")
    def validate_health_band(self) -> "Settings":
        """Reject an empty or inverted healthy band."""
        if self.health_min_local_ratio >= self.health_max_local_ratio:
            raise ValueError(
                "health_min_local_ratio must be less than health_max_local_ratio, got "
                f"{self.health_min_local_ratio} >= {self.health_max_local_ratio}"
            )
        return self

    @property
    def health_band(self) -> tuple[float, float]:
        return (self.health_min_local_ratio, self.health_max_local_ratio)

    @property
    def strict_pubkey_validation(self) -> bool:
        """Whether channel records must carry a full 66-hex-char pubkey."""
        if self.strict_pubkeys is not None:
            return self.strict_pubkeys
        return self.environment == "production"

    @property
    def dev_mode(self) -> bool:
        return self.environment == "development" and not self.json_logs


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings(force_reload: bool = False) -> Settings:
    """Get or create the settings singleton.

    Args:
        force_reload: Force reload from environment

    Returns:
        Settings instance
    """
    global _settings

    if _settings is None or force_reload:
        _settings = Settings()
        logger.debug(
            "settings_loaded",
            environment=_settings.environment,
            health_band=_settings.health_band,
            max_concurrent_alias_lookups=_settings.max_concurrent_alias_lookups,
        )

    return _settings


def reload_settings() -> Settings:
    """Re-read settings from the environment (used by tests)."""
    return get_settings(force_reload=True)
