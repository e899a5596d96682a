"""Step to price the requested stay."""

from rate_engine.engines import PricingEngine, PricingError
from rate_engine.services.pipeline import BookingContext, PipelineStep


class CalculatePriceStep(PipelineStep):
    """Run the pricing engine over the loaded room and rules."""

    def __init__(self):
        super().__init__("CalculatePrice")

    async def execute(self, context: BookingContext) -> bool:
        """Compute the price breakdown.

        Args:
            context: Pipeline context

        Returns:
            True if the stay was priced
        """
        if context.room is None:
            context.add_error(self.name, "No room loaded")
            return False

        try:
            context.breakdown = PricingEngine.calculate_price(
                context.room,
                context.request.check_in,
                context.request.check_out,
                context.rules,
            )
        except PricingError as e:
            context.add_error(self.name, str(e))
            return False

        context.stats["price"] = {
            "nights": context.breakdown.total_nights,
            "total_adjustment": context.breakdown.total_adjustment,
            "final_total": context.breakdown.final_total,
        }
        return True
