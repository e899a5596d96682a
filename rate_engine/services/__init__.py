"""Business services package."""

from rate_engine.services.booking_orchestrator import (
    BookingOrchestrator,
    OrchestrationError,
)
from rate_engine.services.site_config_builder import (
    DEFAULT_SITE_CONFIG,
    ConfigAssemblyError,
    SiteConfigBuilder,
    load_site_config,
)
from rate_engine.services.store_snapshot import StoreSnapshot

__all__ = [
    "BookingOrchestrator",
    "OrchestrationError",
    "DEFAULT_SITE_CONFIG",
    "ConfigAssemblyError",
    "SiteConfigBuilder",
    "StoreSnapshot",
    "load_site_config",
]
