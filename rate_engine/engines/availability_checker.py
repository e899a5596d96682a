"""Availability checker: half-open interval overlap against existing bookings."""

from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Any, Optional

from dateutil import parser as date_parser
from pydantic import ValidationError
from structlog import get_logger

from rate_engine.engines.errors import InvalidDateRange
from rate_engine.models.booking import Booking
from rate_engine.models.room import Room

logger = get_logger(__name__)


class AvailabilityChecker:
    """Decides whether a room can be booked for a date range.

    A stay occupies ``[check_in, check_out)``: a guest checking out on the
    day another checks in does not conflict. Cancelled bookings never
    conflict.

    Bookings whose dates cannot be resolved (no usable ISO fields and an
    unparseable human-formatted date) are logged and left out of the
    overlap test, so a corrupt record can hide a real conflict.

    The check reads a snapshot and writes nothing. Two requests for the same
    room can both pass before either booking is stored; callers that need
    exclusivity must serialize the write (conditional or transactional
    insert) in the persistence layer.
    """

    @staticmethod
    def parse_candidate_date(value: date | datetime | str) -> date:
        """Parse a requested stay date (date, datetime or YYYY-MM-DD).

        Raises:
            InvalidDateRange: If a string is not an ISO date
        """
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(value[:10])
        except (TypeError, ValueError) as e:
            raise InvalidDateRange(f"Invalid date: {value!r}") from e

    @staticmethod
    def _parse_iso(value: Optional[str]) -> Optional[date]:
        if not value:
            return None
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None

    @staticmethod
    def _parse_human(value: Optional[str]) -> Optional[date]:
        if not value:
            return None
        try:
            return date_parser.parse(value).date()
        except (ValueError, OverflowError):
            return None

    @staticmethod
    def resolve_stay(booking: Booking) -> Optional[tuple[date, date]]:
        """Resolve a booking's stay interval.

        ISO fields win; legacy human-formatted fields are the fallback. When
        only the check-in resolves, the check-out is derived from ``nights``.

        Args:
            booking: Booking record

        Returns:
            (check_in, check_out) or None when the dates cannot be resolved
        """
        check_in = AvailabilityChecker._parse_iso(booking.iso_check_in)
        check_out = AvailabilityChecker._parse_iso(booking.iso_check_out)

        if check_in is None:
            check_in = AvailabilityChecker._parse_human(booking.check_in_date)
        if check_out is None:
            check_out = AvailabilityChecker._parse_human(booking.check_out_date)
        if check_out is None and check_in is not None and (booking.nights or 0) > 0:
            check_out = check_in + timedelta(days=booking.nights)

        if check_in is None or check_out is None or check_out <= check_in:
            return None
        return check_in, check_out

    @staticmethod
    def _coerce_bookings(bookings: Iterable[Booking | dict[str, Any]]) -> list[Booking]:
        coerced = []
        for booking in bookings:
            if isinstance(booking, Booking):
                coerced.append(booking)
                continue
            try:
                coerced.append(Booking.from_document(booking))
            except ValidationError as e:
                logger.warning(
                    "Booking record invalid, ignoring for availability",
                    booking_id=booking.get("id"),
                    error=str(e),
                )
        return coerced

    @staticmethod
    def _candidate_range(
        check_in: date | datetime | str,
        check_out: date | datetime | str,
    ) -> tuple[date, date]:
        start = AvailabilityChecker.parse_candidate_date(check_in)
        end = AvailabilityChecker.parse_candidate_date(check_out)
        if end <= start:
            raise InvalidDateRange(f"Check-out {end} must be after check-in {start}")
        return start, end

    @staticmethod
    def find_conflicts(
        room_id: str,
        check_in: date | datetime | str,
        check_out: date | datetime | str,
        bookings: Iterable[Booking | dict[str, Any]],
    ) -> list[Booking]:
        """List the non-cancelled bookings of a room that overlap the range.

        Raises:
            InvalidDateRange: If the requested range is empty or unparseable
        """
        start, end = AvailabilityChecker._candidate_range(check_in, check_out)

        conflicts = []
        for booking in AvailabilityChecker._coerce_bookings(bookings):
            if booking.room_id != room_id or booking.is_cancelled:
                continue

            stay = AvailabilityChecker.resolve_stay(booking)
            if stay is None:
                logger.warning(
                    "Booking dates unresolvable, ignoring for availability",
                    room_id=room_id,
                    booking_id=booking.id,
                    iso_check_in=booking.iso_check_in,
                    iso_check_out=booking.iso_check_out,
                    check_in_date=booking.check_in_date,
                    check_out_date=booking.check_out_date,
                )
                continue

            booked_in, booked_out = stay
            if start < booked_out and end > booked_in:
                conflicts.append(booking)

        return conflicts

    @staticmethod
    def is_room_available(
        room_id: str,
        check_in: date | datetime | str,
        check_out: date | datetime | str,
        bookings: Iterable[Booking | dict[str, Any]],
    ) -> bool:
        """True when no active booking of the room overlaps ``[check_in, check_out)``.

        This does not reserve anything; see the class docstring.

        Raises:
            InvalidDateRange: If the requested range is empty or unparseable
        """
        conflicts = AvailabilityChecker.find_conflicts(room_id, check_in, check_out, bookings)
        if conflicts:
            logger.debug(
                "Room unavailable",
                room_id=room_id,
                conflicting_bookings=[booking.id for booking in conflicts],
            )
        return not conflicts

    @staticmethod
    def get_booking_for_date(
        room_id: str,
        night: date | datetime | str,
        bookings: Iterable[Booking | dict[str, Any]],
    ) -> Optional[Booking]:
        """Return the active booking occupying the room on a given night, if any.

        Used by the occupancy calendar: a booking covers ``night`` when
        ``check_in <= night < check_out``.
        """
        target = AvailabilityChecker.parse_candidate_date(night)
        for booking in AvailabilityChecker._coerce_bookings(bookings):
            if booking.room_id != room_id or booking.is_cancelled:
                continue
            stay = AvailabilityChecker.resolve_stay(booking)
            if stay is not None and stay[0] <= target < stay[1]:
                return booking
        return None

    @staticmethod
    def available_rooms(
        rooms: Iterable[Room | dict[str, Any]],
        check_in: date | datetime | str,
        check_out: date | datetime | str,
        bookings: Iterable[Booking | dict[str, Any]],
    ) -> list[Room]:
        """Filter rooms down to those free for the whole range."""
        booking_list = AvailabilityChecker._coerce_bookings(bookings)
        available = []
        for room in rooms:
            room = room if isinstance(room, Room) else Room.model_validate(room)
            if AvailabilityChecker.is_room_available(room.id, check_in, check_out, booking_list):
                available.append(room)
        return available
