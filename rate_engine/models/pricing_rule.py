"""Pydantic models for dynamic pricing rules."""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from rate_engine.models.room import Room

ALL_CATEGORIES = "all"


class RuleType(str, Enum):
    """Rule family; decides which gate a rule passes through."""

    SEASONAL = "seasonal"
    WEEKEND = "weekend"
    LONG_STAY = "long-stay"
    LAST_MINUTE = "last-minute"
    CUSTOM = "custom"


class AdjustmentType(str, Enum):
    """How ``value`` is applied."""

    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"


class PricingRule(BaseModel):
    """Pricing rule as edited in the admin back office.

    ``value`` is signed: -10 is a discount, 10 a surcharge. ``priority`` is
    stored but never consulted when evaluating rules.
    """

    id: str
    name: str = ""
    type: RuleType
    adjustment_type: AdjustmentType = Field(alias="adjustmentType")
    value: float
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")
    days_of_week: Optional[list[int]] = Field(None, alias="daysOfWeek")  # 0=Sunday
    min_nights: Optional[int] = Field(None, alias="minNights")
    room_categories: list[str] = Field(default_factory=list, alias="roomCategories")
    priority: float = 0
    is_active: bool = Field(True, alias="isActive")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_rule_date(cls, v):
        """Accept YYYY-MM-DD as well as full ISO timestamps from the date pickers."""
        if v == "":
            return None
        if isinstance(v, str) and len(v) > 10:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        return v

    @field_validator("days_of_week")
    @classmethod
    def check_weekdays(cls, v):
        """Weekday indices must be 0 (Sunday) to 6 (Saturday)."""
        if v is not None:
            for day in v:
                if not 0 <= day <= 6:
                    raise ValueError(f"Weekday index out of range: {day}")
        return v

    @property
    def is_date_bounded(self) -> bool:
        """True when both date bounds are set."""
        return self.start_date is not None and self.end_date is not None

    def applies_to_room(self, room: Room) -> bool:
        """Check the category filter against a room.

        An empty filter or one containing ``all`` matches every room;
        otherwise the room's category or id must be listed.
        """
        if not self.room_categories or ALL_CATEGORIES in self.room_categories:
            return True
        return room.category in self.room_categories or room.id in self.room_categories


def is_active_document(document: dict) -> bool:
    """Read the ``isActive`` flag of a raw rule document without validating it.

    Inactive rules are excluded before validation, so a malformed rule that
    is switched off never blocks pricing.
    """
    value = document.get("isActive", document.get("is_active", True))
    return value not in (False, "false", "False")
