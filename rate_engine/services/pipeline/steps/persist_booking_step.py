"""Step to write the new booking to the store."""

import time
from datetime import date, datetime, timezone

from rate_engine.config import settings
from rate_engine.models.booking import Booking, BookingStatus, PaymentStatus
from rate_engine.services.pipeline import BookingContext, PipelineStep
from rate_engine.store import BOOKINGS, DocumentStore

HUMAN_DATE_FORMAT = "%b %d, %Y"


def format_human_date(value: date) -> str:
    """Display form stored alongside the ISO date, e.g. ``Jun 10, 2024``."""
    return value.strftime(HUMAN_DATE_FORMAT)


class PersistBookingStep(PipelineStep):
    """Create the booking record.

    The availability check that precedes this step and this write are not
    atomic: two concurrent requests for the same room and dates can both
    get here. A store with conditional inserts is needed to rule that out.
    """

    def __init__(self, store: DocumentStore):
        """Initialize the step.

        Args:
            store: Document store receiving the booking
        """
        super().__init__("PersistBooking")
        self.store = store

    def _new_booking_id(self) -> str:
        """``BK-<epoch millis>``, bumped past ids already in the store."""
        millis = int(time.time() * 1000)
        while self.store.get(BOOKINGS, f"{settings.pricing.booking_id_prefix}{millis}") is not None:
            millis += 1
        return f"{settings.pricing.booking_id_prefix}{millis}"

    async def execute(self, context: BookingContext) -> bool:
        """Build the booking from the request and price, then store it.

        Args:
            context: Pipeline context

        Returns:
            True if the booking was written (or skipped in dry-run mode)
        """
        if context.room is None or context.breakdown is None:
            context.add_error(self.name, "Nothing to persist: room or price missing")
            return False

        request = context.request
        context.booking = Booking(
            id=self._new_booking_id(),
            room_id=context.room.id,
            room_name=context.room.name,
            guest_name=request.guest_name,
            guest_email=request.guest_email,
            guest_phone=request.guest_phone,
            total_price=context.breakdown.final_total,
            nights=context.breakdown.total_nights,
            date=datetime.now(timezone.utc).isoformat(),
            check_in_date=format_human_date(request.check_in),
            check_out_date=format_human_date(request.check_out),
            iso_check_in=request.check_in.isoformat(),
            iso_check_out=request.check_out.isoformat(),
            payment_status=PaymentStatus.PENDING,
            payment_method=request.payment_method,
            status=BookingStatus.PENDING,
            hasGymAccess=request.has_gym_access,
            adminNotes=request.admin_notes,
        )

        if settings.dry_run:
            self.logger.info("Dry run, booking not stored", room_id=context.room_id, booking_id=context.booking.id)
            return True

        self.store.put(BOOKINGS, context.booking.id, context.booking)
        self.logger.info(
            "Booking stored",
            room_id=context.room_id,
            booking_id=context.booking.id,
            total_price=context.booking.total_price,
        )
        return True
