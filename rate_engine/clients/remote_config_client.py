"""Client for the remote site configuration document."""

import time
from typing import Any, Optional

import httpx
from structlog import get_logger

from rate_engine.config import settings

logger = get_logger(__name__)


class RemoteConfigError(Exception):
    """Base exception for remote config client errors."""

    pass


class RemoteConfigNotFoundError(RemoteConfigError):
    """Raised when the remote config document does not exist."""

    pass


class RemoteConfigServerError(RemoteConfigError):
    """Raised when the config backend returns a server error."""

    pass


class RemoteConfigClient:
    """Fetches the admin-edited site configuration over HTTP."""

    def __init__(
        self,
        url: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client with settings.

        Args:
            url: Config document URL; defaults to REMOTE_CONFIG_URL
            transport: Optional httpx transport (used by tests)
        """
        self.url = (url if url is not None else settings.remote_config.url).strip()
        self.api_key = settings.remote_config.api_key
        self.timeout = settings.remote_config.request_timeout
        self.max_retries = settings.remote_config.max_retries
        self.retry_backoff_base = 2
        self.transport = transport

    def _get_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": "HotelRateEngine/1.0",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _retry_or_raise(self, attempt: int, message: str, **log_fields: Any) -> None:
        """Sleep before the next attempt, or raise when attempts are exhausted."""
        if attempt < self.max_retries - 1:
            wait_time = self.retry_backoff_base ** attempt
            logger.warning(
                f"{message}, retrying",
                url=self.url,
                attempt=attempt + 1,
                max_retries=self.max_retries,
                wait_seconds=wait_time,
                **log_fields,
            )
            time.sleep(wait_time)
            return
        logger.error(f"{message}, max retries exceeded", url=self.url, **log_fields)
        raise RemoteConfigServerError(f"{message} at {self.url}")

    def _make_request(self) -> dict[str, Any]:
        """GET the config document with retry on server errors and timeouts.

        Returns:
            JSON response as a dictionary

        Raises:
            RemoteConfigNotFoundError: If the document does not exist
            RemoteConfigServerError: If retries are exhausted
            RemoteConfigError: For other errors
        """
        for attempt in range(self.max_retries):
            try:
                with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                    response = client.get(self.url, headers=self._get_headers())
            except httpx.TimeoutException:
                self._retry_or_raise(attempt, "Remote config request timeout")
                continue
            except httpx.RequestError as e:
                self._retry_or_raise(attempt, "Remote config request error", error=str(e))
                continue

            if response.status_code == 404:
                logger.warning("Remote config not found", url=self.url)
                raise RemoteConfigNotFoundError(f"Config document not found: {self.url}")

            if response.status_code >= 500:
                self._retry_or_raise(
                    attempt, "Remote config server error", status_code=response.status_code
                )
                continue

            if response.status_code >= 400:
                logger.error(
                    "Remote config client error",
                    url=self.url,
                    status_code=response.status_code,
                    response_text=response.text[:200],
                )
                raise RemoteConfigError(
                    f"Client error fetching config: {response.status_code} {response.text}"
                )

            if not response.text:
                return {}
            try:
                payload = response.json()
            except ValueError as e:
                raise RemoteConfigError(f"Config document is not valid JSON: {e}") from e
            if not isinstance(payload, dict):
                raise RemoteConfigError("Config document must be a JSON object")
            return payload

        raise RemoteConfigError(f"Failed to complete request to {self.url}")

    def fetch_site_config(self) -> dict[str, Any]:
        """Fetch the remote site configuration overrides.

        Returns:
            Raw config document, or an empty dict when no URL is configured

        Raises:
            RemoteConfigError: If the request fails
        """
        if not self.url:
            logger.debug("No remote config URL configured, using defaults")
            return {}

        logger.info("Fetching remote site config", url=self.url)
        config = self._make_request()
        logger.info("Fetched remote site config", url=self.url, fields=sorted(config))
        return config
