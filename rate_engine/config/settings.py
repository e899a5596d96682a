"""Application settings and configuration management."""
from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingSettings(BaseSettings):
    """Pricing and booking defaults."""

    consolidated_adjustment_label: str = "Seasonal/Weekend Adjustments"
    booking_id_prefix: str = "BK-"

    model_config = SettingsConfigDict(env_prefix="PRICING_")


class RemoteConfigSettings(BaseSettings):
    """Remote site configuration document (merged over the defaults)."""

    url: str = ""  # Empty disables the remote fetch
    api_key: Optional[str] = None
    request_timeout: int = 10
    max_retries: int = 3

    model_config = SettingsConfigDict(env_prefix="REMOTE_CONFIG_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class Settings(BaseSettings):
    """Main application settings."""

    # Sub-settings
    pricing: PricingSettings = PricingSettings()
    remote_config: RemoteConfigSettings = RemoteConfigSettings()
    logging: LoggingSettings = LoggingSettings()

    # Snapshot file used by the CLI when --snapshot is not given
    snapshot_path: str = ""

    # Feature flags
    dry_run: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
