"""Assembly of the immutable site configuration from defaults and overrides."""

import copy
from typing import Any, Optional

from pydantic import ValidationError
from structlog import get_logger

from rate_engine.clients import RemoteConfigClient, RemoteConfigError
from rate_engine.models.pricing_rule import PricingRule, is_active_document
from rate_engine.models.site_config import SiteConfig

logger = get_logger(__name__)

DEFAULT_SITE_CONFIG: dict[str, Any] = {
    "brand": {
        "name": "C1002 Quarters",
        "tagline": "Accra's Best Place to Stay",
        "primaryColor": "#137fec",
        "accentColor": "#C5A059",
    },
    "navLinks": [
        {"id": "1", "label": "About", "path": "/about"},
        {"id": "2", "label": "Rooms", "path": "/rooms"},
        {"id": "3", "label": "Contact", "path": "/contact"},
    ],
    "categories": ["Deluxe", "Executive", "Presidential", "Villa"],
    "pricingRules": [],
    "currencySymbol": "GH₵",
}

# List fields merged entry-by-entry on a key instead of being replaced
KEYED_LIST_FIELDS = {"navLinks": "id"}


class ConfigAssemblyError(Exception):
    """Raised when the merged configuration does not validate."""

    pass


def merge_keyed_list(base: list[dict[str, Any]], overrides: list[dict[str, Any]], key: str) -> list[dict[str, Any]]:
    """Merge two lists of dicts on ``key``.

    Entries sharing a key are merged field-by-field, keeping the base
    position; new keys are appended in override order. Entries without the
    key are appended unchanged.
    """
    merged = [copy.deepcopy(entry) for entry in base]
    positions = {entry.get(key): index for index, entry in enumerate(merged) if key in entry}

    for entry in overrides:
        entry_key = entry.get(key)
        if entry_key is not None and entry_key in positions:
            index = positions[entry_key]
            merged[index] = merge_config(merged[index], entry)
        else:
            merged.append(copy.deepcopy(entry))
            if entry_key is not None:
                positions[entry_key] = len(merged) - 1

    return merged


def merge_config(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """Merge overrides into a copy of ``base``.

    Nested dicts merge recursively, keyed lists merge by key, ``None``
    leaves the base value in place and anything else replaces it.
    """
    merged = copy.deepcopy(base)
    for field, value in overrides.items():
        if value is None:
            continue
        current = merged.get(field)
        if field in KEYED_LIST_FIELDS and isinstance(current, list) and isinstance(value, list):
            merged[field] = merge_keyed_list(current, value, KEYED_LIST_FIELDS[field])
        elif isinstance(current, dict) and isinstance(value, dict):
            merged[field] = merge_config(current, value)
        else:
            merged[field] = copy.deepcopy(value)
    return merged


class SiteConfigBuilder:
    """Builds a ``SiteConfig`` from defaults plus successive override layers."""

    def __init__(self, defaults: Optional[dict[str, Any]] = None):
        """Start from ``defaults`` (the built-in defaults when omitted)."""
        self._data = copy.deepcopy(defaults if defaults is not None else DEFAULT_SITE_CONFIG)

    def with_overrides(self, overrides: Optional[dict[str, Any]]) -> "SiteConfigBuilder":
        """Layer an override document on top.

        Returns:
            Self for method chaining
        """
        if overrides:
            self._data = merge_config(self._data, overrides)
        return self

    @staticmethod
    def _keep_rule(rule: Any) -> bool:
        """Drop inactive rules that do not validate; everything else is kept."""
        if not isinstance(rule, dict) or is_active_document(rule):
            return True
        try:
            PricingRule.model_validate(rule)
        except ValidationError as e:
            logger.warning("Skipping invalid inactive pricing rule", rule_id=rule.get("id"), error=str(e))
            return False
        return True

    def build(self) -> SiteConfig:
        """Validate the merged document.

        Inactive pricing rules that fail validation are dropped with a
        warning. An invalid active rule fails the whole build.

        Raises:
            ConfigAssemblyError: If the merged config is invalid
        """
        data = dict(self._data)
        rules = data.get("pricingRules")
        if isinstance(rules, list):
            data["pricingRules"] = [rule for rule in rules if self._keep_rule(rule)]
        try:
            return SiteConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigAssemblyError(f"Invalid site config: {e}") from e


def load_site_config(
    client: Optional[RemoteConfigClient] = None,
    local_overrides: Optional[dict[str, Any]] = None,
) -> SiteConfig:
    """Assemble the startup configuration.

    Layers, lowest first: built-in defaults, ``local_overrides`` (e.g. the
    snapshot's config document), then the remote document. A failed remote
    fetch is logged and the remaining layers are used.
    """
    builder = SiteConfigBuilder().with_overrides(local_overrides)

    if client is not None:
        try:
            builder.with_overrides(client.fetch_site_config())
        except RemoteConfigError as e:
            logger.warning("Remote config unavailable, using local config", error=str(e))

    config = builder.build()
    logger.info(
        "Site config assembled",
        nav_links=len(config.nav_links),
        pricing_rules=len(config.pricing_rules),
    )
    return config
