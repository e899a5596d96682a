"""Immutable site configuration assembled at startup."""

from pydantic import BaseModel, ConfigDict, Field

from rate_engine.models.pricing_rule import PricingRule


class NavLink(BaseModel):
    """Navigation entry. Entries are merged by ``id``."""

    id: str
    label: str
    path: str

    model_config = ConfigDict(frozen=True, extra="allow")


class Brand(BaseModel):
    """Brand identity block."""

    name: str = ""
    tagline: str = ""
    primary_color: str = Field(default="", alias="primaryColor")
    accent_color: str = Field(default="", alias="accentColor")

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class SiteConfig(BaseModel):
    """Site configuration consumed by the booking flows.

    Presentation-only sections (hero slides, footer, about page, ...) are
    carried as extra fields and never interpreted here.
    """

    brand: Brand = Field(default_factory=Brand)
    nav_links: tuple[NavLink, ...] = Field(default=(), alias="navLinks")
    categories: tuple[str, ...] = ()
    pricing_rules: tuple[PricingRule, ...] = Field(default=(), alias="pricingRules")
    currency_symbol: str = Field(default="GH₵", alias="currencySymbol")

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    def active_pricing_rules(self) -> list[PricingRule]:
        """Rules with ``isActive`` set, in stored order."""
        return [rule for rule in self.pricing_rules if rule.is_active]
