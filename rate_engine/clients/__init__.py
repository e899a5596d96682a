"""API clients package."""

from rate_engine.clients.remote_config_client import (
    RemoteConfigClient,
    RemoteConfigError,
    RemoteConfigNotFoundError,
    RemoteConfigServerError,
)

__all__ = [
    "RemoteConfigClient",
    "RemoteConfigError",
    "RemoteConfigNotFoundError",
    "RemoteConfigServerError",
]
