"""Step to gate a booking on room availability."""

from rate_engine.engines import AvailabilityChecker, PricingError
from rate_engine.services.pipeline import BookingContext, PipelineStep


class CheckAvailabilityStep(PipelineStep):
    """Fail the pipeline when the requested stay overlaps an active booking."""

    def __init__(self):
        super().__init__("CheckAvailability")

    async def execute(self, context: BookingContext) -> bool:
        """Look for conflicting bookings.

        Args:
            context: Pipeline context

        Returns:
            True if the room is free for the whole stay
        """
        try:
            context.conflicts = AvailabilityChecker.find_conflicts(
                context.room_id,
                context.request.check_in,
                context.request.check_out,
                context.bookings,
            )
        except PricingError as e:
            context.add_error(self.name, str(e))
            return False

        if context.conflicts:
            conflict_ids = [booking.id for booking in context.conflicts]
            self.logger.info(
                "Room not available",
                room_id=context.room_id,
                conflicts=conflict_ids,
            )
            context.add_error(
                self.name,
                f"Room {context.room_id} is not available: overlaps {', '.join(conflict_ids)}",
            )
            return False

        return True
