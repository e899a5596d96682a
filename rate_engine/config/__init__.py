"""Configuration package."""

from rate_engine.config.logging import configure_logging, get_logger
from rate_engine.config.settings import Settings, settings

__all__ = ["settings", "Settings", "configure_logging", "get_logger"]
