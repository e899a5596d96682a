"""Booking orchestrator: availability gate, pricing and booking write."""

from datetime import date
from typing import Any, Optional

from structlog import get_logger

from rate_engine.engines import AvailabilityChecker
from rate_engine.models.booking_request import BookingRequest
from rate_engine.models.site_config import SiteConfig
from rate_engine.services.pipeline import BookingContext, Pipeline
from rate_engine.services.pipeline.steps import (
    CalculatePriceStep,
    CheckAvailabilityStep,
    LoadSnapshotStep,
    PersistBookingStep,
)
from rate_engine.services.store_snapshot import StoreSnapshot
from rate_engine.store import DocumentStore

logger = get_logger(__name__)


class OrchestrationError(Exception):
    """Raised when a request cannot be processed at all."""

    pass


class BookingOrchestrator:
    """Runs the quote and booking flows against a document store.

    Rooms, bookings and pricing rules come from a live ``StoreSnapshot``;
    the engines only ever see those snapshots. ``create_booking`` checks
    availability and then writes, which is not atomic. See
    ``PersistBookingStep``.
    """

    def __init__(self, store: DocumentStore, config: Optional[SiteConfig] = None):
        """Initialize the orchestrator.

        Args:
            store: Document store holding rooms, bookings and config
            config: Fixed site config; defaults to the store's config document
        """
        self.store = store
        self.snapshot = StoreSnapshot(store, config)

        self.quote_pipeline = Pipeline(
            name="quote",
            steps=[LoadSnapshotStep(self.snapshot), CalculatePriceStep()],
        )
        self.booking_pipeline = Pipeline(
            name="create-booking",
            steps=[
                LoadSnapshotStep(self.snapshot),
                CheckAvailabilityStep(),
                CalculatePriceStep(),
                PersistBookingStep(store),
            ],
        )

    @staticmethod
    def _to_request(request: BookingRequest | dict[str, Any]) -> BookingRequest:
        if isinstance(request, BookingRequest):
            return request
        try:
            return BookingRequest.model_validate(request)
        except ValueError as e:
            raise OrchestrationError(f"Invalid booking request: {e}") from e

    async def quote(self, request: BookingRequest | dict[str, Any]) -> dict[str, Any]:
        """Price a stay without checking availability or writing anything.

        Raises:
            OrchestrationError: If the request itself is invalid
        """
        context = BookingContext(self._to_request(request))
        await self.quote_pipeline.execute(context)
        return context.get_results()

    async def create_booking(self, request: BookingRequest | dict[str, Any]) -> dict[str, Any]:
        """Check availability, price the stay and store a new pending booking.

        Returns:
            Results dictionary; ``success`` is False and ``conflicts`` lists
            the overlapping booking ids when the room is taken

        Raises:
            OrchestrationError: If the request itself is invalid
        """
        context = BookingContext(self._to_request(request))
        await self.booking_pipeline.execute(context)

        if context.success:
            logger.info(
                "Booking created",
                room_id=context.room_id,
                booking_id=context.booking.id,
            )
        return context.get_results()

    def check_availability(
        self,
        room_id: str,
        check_in: date | str,
        check_out: date | str,
    ) -> dict[str, Any]:
        """Availability of one room against the current bookings snapshot.

        Raises:
            OrchestrationError: If the room does not exist
            InvalidDateRange: If the dates are invalid
        """
        if self.snapshot.find_room(room_id) is None:
            raise OrchestrationError(f"Unknown room: {room_id}")

        conflicts = AvailabilityChecker.find_conflicts(
            room_id, check_in, check_out, self.snapshot.bookings
        )
        return {
            "room_id": room_id,
            "available": not conflicts,
            "conflicts": [booking.id for booking in conflicts],
        }

    def available_rooms(self, check_in: date | str, check_out: date | str) -> list[str]:
        """Ids of the rooms free for the whole range."""
        rooms = AvailabilityChecker.available_rooms(
            self.snapshot.rooms, check_in, check_out, self.snapshot.bookings
        )
        return [room.id for room in rooms]

    def close(self) -> None:
        """Release store subscriptions."""
        self.snapshot.close()
