import logging
from typing import List, Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

from autowin.calculation.match_scores import AUTO_POINTS_FIELDS
from autowin.calculation.probability import (
    FALLBACK_MATCH_SD,
    MIN_POOLED_ESTIMATES,
    TWO_MATCH_SD_FACTOR,
)


class AppSettings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    # Statistics services
    statbotics_base_url: HttpUrl = Field(
        "https://api.statbotics.io/v3", description="Base URL of the Statbotics API."
    )
    tba_base_url: HttpUrl = Field(
        "https://www.thebluealliance.com/api/v3",
        description="Base URL of The Blue Alliance read API.",
    )
    tba_auth_key: Optional[str] = Field(
        None, description="Read API key sent as X-TBA-Auth-Key."
    )

    # HTTP behaviour
    request_timeout: Optional[float] = Field(
        None,
        gt=0,
        description="Per-request timeout in seconds (None keeps the httpx default).",
    )
    request_attempts: int = Field(
        1, ge=1, description="Total attempts per request (1 disables retries)."
    )

    # Model settings
    canary_team: int = Field(
        254,
        gt=0,
        description="Team probed to decide whether current-season ratings exist.",
    )
    auto_points_fields: List[str] = Field(
        default_factory=lambda: list(AUTO_POINTS_FIELDS),
        description="Score breakdown field names holding alliance auto points, in priority order.",
    )
    two_match_sd_factor: float = Field(
        TWO_MATCH_SD_FACTOR,
        gt=0,
        description="Std dev proxy (fraction of the first score) when only two event matches exist.",
    )
    fallback_match_sd: float = Field(
        FALLBACK_MATCH_SD,
        gt=0,
        description="Match differential std dev used when too few teams have variance data.",
    )
    min_pooled_estimates: int = Field(
        MIN_POOLED_ESTIMATES, ge=1, description="Variance estimates needed before pooling them."
    )

    # Logging Configuration
    log_level: str = Field(
        "INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."
    )

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def statbotics_url(self) -> str:
        return str(self.statbotics_base_url).rstrip("/")

    @property
    def tba_url(self) -> str:
        return str(self.tba_base_url).rstrip("/")


def load_settings() -> AppSettings:
    """Loads and validates application settings."""
    try:
        settings = AppSettings()
        log_level_upper = settings.log_level.upper()
        # Validate log_level even if loaded from .env
        if log_level_upper not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            logging.warning(
                f"Invalid LOG_LEVEL '{settings.log_level}' found in .env or default. Using INFO."
            )
            settings.log_level = "INFO"
        else:
            settings.log_level = log_level_upper
        return settings
    except Exception as e:
        logging.exception(f"Error loading application settings: {e}")
        raise SystemExit("Failed to load application settings. Exiting.")


settings: AppSettings = load_settings()
