"""Pydantic models for booking records."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

# Fields that decide whether a booking blocks a room
STAY_FIELDS = (
    "id",
    "roomId",
    "status",
    "isoCheckIn",
    "isoCheckOut",
    "checkInDate",
    "checkOutDate",
    "nights",
)


class BookingStatus(str, Enum):
    """Stay lifecycle status. A missing status is treated as active."""

    PENDING = "pending"
    ARRIVED = "arrived"
    CHECKED_OUT = "checked-out"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment state reported by the payment provider."""

    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class Booking(BaseModel):
    """Booking from the bookings collection.

    Stay dates are kept as the raw strings found in the store. Newer records
    carry ``isoCheckIn``/``isoCheckOut`` (YYYY-MM-DD, half-open stay);
    legacy records only have the human-formatted ``checkInDate``/
    ``checkOutDate``. Resolving them is the availability checker's job, so
    a malformed legacy record still loads.

    Statuses outside the known enums are kept as plain strings; any status
    other than ``cancelled`` keeps the room blocked.
    """

    id: str
    room_id: str = Field(alias="roomId")
    room_name: Optional[str] = Field(None, alias="roomName")
    guest_name: Optional[str] = Field(None, alias="guestName")
    guest_email: Optional[str] = Field(None, alias="guestEmail")
    guest_phone: Optional[str] = Field(None, alias="guestPhone")
    total_price: Optional[float] = Field(default=0.0, alias="totalPrice")
    nights: Optional[int] = 0
    date: Optional[str] = None  # Creation timestamp
    check_in_date: Optional[str] = Field(None, alias="checkInDate")
    check_out_date: Optional[str] = Field(None, alias="checkOutDate")
    iso_check_in: Optional[str] = Field(None, alias="isoCheckIn")
    iso_check_out: Optional[str] = Field(None, alias="isoCheckOut")
    payment_status: Optional[PaymentStatus | str] = Field(
        default=PaymentStatus.PENDING, alias="paymentStatus", union_mode="left_to_right"
    )
    payment_method: Optional[str] = Field(None, alias="paymentMethod")
    payment_reference: Optional[str] = Field(None, alias="paymentReference")
    status: Optional[BookingStatus | str] = Field(None, union_mode="left_to_right")

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "Booking":
        """Validate a stored booking, falling back to its stay fields.

        A record whose price, guest or payment fields are broken still
        takes part in availability as long as its stay fields validate.

        Raises:
            ValidationError: If even the stay fields are invalid
        """
        try:
            return cls.model_validate(document)
        except ValidationError:
            stay = {field: document[field] for field in STAY_FIELDS if field in document}
            return cls.model_validate(stay)

    @property
    def is_cancelled(self) -> bool:
        """Cancelled bookings never block a room."""
        return self.status == BookingStatus.CANCELLED
