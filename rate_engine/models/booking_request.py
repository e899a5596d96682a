"""Pydantic model for an incoming booking or quote request."""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class BookingRequest(BaseModel):
    """Stay requested from checkout or the admin booking form."""

    room_id: str = Field(alias="roomId")
    check_in: date = Field(alias="checkIn")
    check_out: date = Field(alias="checkOut")
    guest_name: str = Field(default="", alias="guestName")
    guest_email: str = Field(default="", alias="guestEmail")
    guest_phone: Optional[str] = Field(None, alias="guestPhone")
    payment_method: Literal["cash", "paystack"] = Field(default="cash", alias="paymentMethod")
    has_gym_access: bool = Field(default=False, alias="hasGymAccess")
    admin_notes: Optional[str] = Field(None, alias="adminNotes")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def check_stay_length(self):
        """A stay needs at least one night."""
        if self.check_out <= self.check_in:
            raise ValueError("checkOut must be after checkIn")
        return self
