"""Step to load the room, bookings and pricing rules for a request."""

from rate_engine.engines import PricingError
from rate_engine.services.pipeline import BookingContext, PipelineStep
from rate_engine.services.store_snapshot import StoreSnapshot


class LoadSnapshotStep(PipelineStep):
    """Copy the current snapshot into the context."""

    def __init__(self, snapshot: StoreSnapshot):
        """Initialize the step.

        Args:
            snapshot: Live store snapshot
        """
        super().__init__("LoadSnapshot")
        self.snapshot = snapshot

    async def execute(self, context: BookingContext) -> bool:
        """Resolve the requested room and capture bookings and active rules.

        Args:
            context: Pipeline context

        Returns:
            False when the room does not exist or the stored config is invalid
        """
        context.room = self.snapshot.find_room(context.room_id)
        if context.room is None:
            self.logger.warning("Unknown room requested", room_id=context.room_id)
            context.add_error(self.name, f"Unknown room: {context.room_id}")
            return False

        try:
            context.rules = self.snapshot.config.active_pricing_rules()
        except PricingError as e:
            context.add_error(self.name, str(e))
            return False
        context.bookings = self.snapshot.bookings

        context.stats["snapshot"] = {
            "bookings": len(context.bookings),
            "active_rules": len(context.rules),
        }
        return True
