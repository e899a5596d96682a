"""Pipeline context for sharing data between booking steps."""

from datetime import datetime, timezone
from typing import Any, Optional

from rate_engine.models.booking import Booking
from rate_engine.models.booking_request import BookingRequest
from rate_engine.models.price_breakdown import PriceBreakdown
from rate_engine.models.pricing_rule import PricingRule
from rate_engine.models.room import Room


class BookingContext:
    """Context object passed through the booking pipeline.

    Each step reads what earlier steps produced and adds its own results.
    """

    def __init__(self, request: BookingRequest):
        """Initialize pipeline context.

        Args:
            request: Stay being quoted or booked
        """
        self.request = request
        self.room_id = request.room_id
        self.start_time = datetime.now(timezone.utc)

        # Snapshot data
        self.room: Optional[Room] = None
        self.bookings: list[Booking] = []
        self.rules: list[PricingRule] = []

        # Results
        self.conflicts: list[Booking] = []
        self.breakdown: Optional[PriceBreakdown] = None
        self.booking: Optional[Booking] = None

        # Processing statistics
        self.stats: dict[str, Any] = {}

        # Errors encountered during processing
        self.errors: list[dict[str, str]] = []

        self.success: bool = False

    def add_error(self, step_name: str, error_message: str) -> None:
        """Add an error to the context.

        Args:
            step_name: Name of the step where error occurred
            error_message: Error message
        """
        self.errors.append({
            "step": step_name,
            "message": error_message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    def has_errors(self) -> bool:
        """Check if any errors were encountered."""
        return len(self.errors) > 0

    def get_results(self) -> dict[str, Any]:
        """Get final results dictionary.

        Returns:
            JSON-serializable results with camelCase record fields
        """
        end_time = datetime.now(timezone.utc)
        duration = (end_time - self.start_time).total_seconds()

        return {
            "room_id": self.room_id,
            "success": self.success,
            "duration_seconds": duration,
            "errors": self.errors,
            "stats": self.stats,
            "conflicts": [booking.id for booking in self.conflicts],
            "breakdown": (
                self.breakdown.model_dump(by_alias=True, mode="json")
                if self.breakdown is not None
                else None
            ),
            "booking": (
                self.booking.model_dump(by_alias=True, mode="json", exclude_none=True)
                if self.booking is not None
                else None
            ),
        }
