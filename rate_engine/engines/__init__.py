"""Pricing and availability engines."""

from rate_engine.engines.availability_checker import AvailabilityChecker
from rate_engine.engines.errors import (
    InvalidDateRange,
    InvalidPricingRuleError,
    InvalidRoomError,
    PricingError,
    UnknownRoom,
)
from rate_engine.engines.pricing_engine import PricingEngine

__all__ = [
    "AvailabilityChecker",
    "PricingEngine",
    "PricingError",
    "InvalidDateRange",
    "InvalidPricingRuleError",
    "InvalidRoomError",
    "UnknownRoom",
]
