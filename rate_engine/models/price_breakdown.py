"""Computed price breakdown returned by the pricing engine."""

from pydantic import BaseModel, ConfigDict, Field


class PriceAdjustment(BaseModel):
    """One named, signed line of the breakdown."""

    rule_name: str = Field(alias="ruleName")
    amount: float

    model_config = ConfigDict(populate_by_name=True)


class PriceBreakdown(BaseModel):
    """Result of a price calculation.

    ``subtotal`` is the sum of the nightly prices after seasonal, weekend,
    custom and last-minute adjustments: the amount long-stay rules are
    applied to. ``base_total`` is the same sum before any adjustment.
    """

    base_price: float = Field(alias="basePrice")
    total_nights: int = Field(alias="totalNights")
    base_total: float = Field(alias="baseTotal")
    subtotal: float
    adjustments: list[PriceAdjustment] = Field(default_factory=list)
    final_total: float = Field(alias="finalTotal")
    average_nightly_rate: float = Field(alias="averageNightlyRate")

    model_config = ConfigDict(populate_by_name=True)

    @property
    def total_adjustment(self) -> float:
        """Signed sum of all breakdown lines."""
        return sum(adjustment.amount for adjustment in self.adjustments)

    def format_lines(self, currency_symbol: str) -> list[str]:
        """Render the breakdown as display lines for checkout and admin forms."""
        nights_label = "night" if self.total_nights == 1 else "nights"
        lines = [
            f"{currency_symbol}{self.base_price:,.2f} x {self.total_nights} {nights_label}"
            f" = {currency_symbol}{self.base_total:,.2f}"
        ]
        for adjustment in self.adjustments:
            sign = "-" if adjustment.amount < 0 else "+"
            lines.append(
                f"{adjustment.rule_name}: {sign}{currency_symbol}{abs(adjustment.amount):,.2f}"
            )
        lines.append(f"Total: {currency_symbol}{self.final_total:,.2f}")
        return lines
