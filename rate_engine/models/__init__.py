"""Domain models for rooms, bookings, pricing rules and site config."""

from rate_engine.models.booking import Booking, BookingStatus, PaymentStatus
from rate_engine.models.booking_request import BookingRequest
from rate_engine.models.price_breakdown import PriceAdjustment, PriceBreakdown
from rate_engine.models.pricing_rule import (
    ALL_CATEGORIES,
    AdjustmentType,
    PricingRule,
    RuleType,
)
from rate_engine.models.room import Room
from rate_engine.models.site_config import Brand, NavLink, SiteConfig

__all__ = [
    "ALL_CATEGORIES",
    "AdjustmentType",
    "Booking",
    "BookingRequest",
    "BookingStatus",
    "Brand",
    "NavLink",
    "PaymentStatus",
    "PriceAdjustment",
    "PriceBreakdown",
    "PricingRule",
    "Room",
    "RuleType",
    "SiteConfig",
]
