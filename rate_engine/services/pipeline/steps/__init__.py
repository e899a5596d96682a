"""Booking pipeline step implementations."""

from .calculate_price_step import CalculatePriceStep
from .check_availability_step import CheckAvailabilityStep
from .load_snapshot_step import LoadSnapshotStep
from .persist_booking_step import PersistBookingStep

__all__ = [
    "CalculatePriceStep",
    "CheckAvailabilityStep",
    "LoadSnapshotStep",
    "PersistBookingStep",
]
