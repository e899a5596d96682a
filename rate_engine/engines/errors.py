"""Exceptions raised by the pricing and availability engines."""


class PricingError(Exception):
    """Base exception for pricing and availability errors."""

    pass


class InvalidDateRange(PricingError):
    """Raised when check-out is not after check-in, or a date cannot be parsed."""

    pass


class UnknownRoom(PricingError):
    """Raised when a room id is not present in the supplied rooms."""

    def __init__(self, room_id: str):
        super().__init__(f"Unknown room: {room_id}")
        self.room_id = room_id


class InvalidRoomError(PricingError):
    """Raised when a room record fails validation (e.g. non-numeric price)."""

    pass


class InvalidPricingRuleError(PricingError):
    """Raised when a pricing rule fails validation (e.g. malformed dates)."""

    pass
