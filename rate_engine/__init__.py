"""Dynamic pricing and availability engine for hotel bookings."""

__version__ = "1.0.0"
