"""Dynamic pricing engine: per-night rule evaluation plus long-stay discounts."""

import math
from collections.abc import Iterable
from datetime import date, datetime, time, timedelta
from typing import Any

from pydantic import ValidationError
from structlog import get_logger

from rate_engine.config import settings
from rate_engine.engines.errors import (
    InvalidDateRange,
    InvalidPricingRuleError,
    InvalidRoomError,
    UnknownRoom,
)
from rate_engine.models.price_breakdown import PriceAdjustment, PriceBreakdown
from rate_engine.models.pricing_rule import (
    AdjustmentType,
    PricingRule,
    RuleType,
    is_active_document,
)
from rate_engine.models.room import Room

logger = get_logger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60

DATE_BOUNDED_TYPES = (RuleType.SEASONAL, RuleType.CUSTOM)


class PricingEngine:
    """Computes the price of a stay from a room's base rate and pricing rules.

    The calculation is pure: identical inputs always give the same
    breakdown, and nothing is read from or written to the store.
    """

    @staticmethod
    def _as_datetime(value: date | datetime) -> datetime:
        """Promote a calendar date to midnight so it can be mixed with datetimes."""
        if isinstance(value, datetime):
            return value
        return datetime.combine(value, time.min)

    @staticmethod
    def count_nights(check_in: date | datetime, check_out: date | datetime) -> int:
        """Number of nights in the stay, rounding partial days up.

        Args:
            check_in: Arrival date (or datetime)
            check_out: Departure date (or datetime)

        Returns:
            Night count; zero or negative when check-out is not after check-in
        """
        delta = PricingEngine._as_datetime(check_out) - PricingEngine._as_datetime(check_in)
        return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)

    @staticmethod
    def _coerce_room(room: Room | dict[str, Any]) -> Room:
        if isinstance(room, Room):
            return room
        try:
            return Room.model_validate(room)
        except ValidationError as e:
            raise InvalidRoomError(f"Invalid room record: {e}") from e

    @staticmethod
    def _coerce_rules(rules: Iterable[PricingRule | dict[str, Any]] | None) -> list[PricingRule]:
        """Validate the active rules, dropping inactive ones unvalidated."""
        coerced = []
        for rule in rules or []:
            if isinstance(rule, PricingRule):
                if rule.is_active:
                    coerced.append(rule)
                continue
            if not is_active_document(rule):
                continue
            try:
                validated = PricingRule.model_validate(rule)
            except ValidationError as e:
                raise InvalidPricingRuleError(
                    f"Invalid pricing rule {rule.get('id', '?')}: {e}"
                ) from e
            if validated.is_active:
                coerced.append(validated)
        return coerced

    @staticmethod
    def weekday_index(night: date) -> int:
        """Weekday with Sunday as 0 and Saturday as 6."""
        return (night.weekday() + 1) % 7

    @staticmethod
    def _applies_to_night(rule: PricingRule, night: date) -> bool:
        """Check the date gate of a nightly rule."""
        if rule.type in DATE_BOUNDED_TYPES and rule.is_date_bounded:
            if night < rule.start_date or night > rule.end_date:
                return False

        if rule.type == RuleType.WEEKEND and rule.days_of_week is not None:
            if PricingEngine.weekday_index(night) not in rule.days_of_week:
                return False

        return True

    @staticmethod
    def calculate_price(
        room: Room | dict[str, Any],
        check_in: date | datetime,
        check_out: date | datetime,
        rules: Iterable[PricingRule | dict[str, Any]] | None = None,
    ) -> PriceBreakdown:
        """Calculate the price breakdown of a stay.

        Nightly rules (seasonal, weekend, custom, last-minute) are summed per
        night: percentages add up before being applied to the base rate, fixed
        amounts add up as-is. Long-stay rules are then each applied once to the
        resulting subtotal. Rule order only affects display order.

        Args:
            room: Room record (model or raw document)
            check_in: Arrival date
            check_out: Departure date
            rules: Pricing rules in stored order; inactive ones are ignored

        Returns:
            Price breakdown with a final total floored at zero

        Raises:
            InvalidDateRange: If the stay has no nights
            InvalidRoomError: If the room record is invalid
            InvalidPricingRuleError: If an active rule record is invalid
        """
        room = PricingEngine._coerce_room(room)
        active_rules = PricingEngine._coerce_rules(rules)

        nights = PricingEngine.count_nights(check_in, check_out)
        if nights <= 0:
            raise InvalidDateRange(
                f"Check-out {check_out} must be after check-in {check_in}"
            )

        room_rules = [rule for rule in active_rules if rule.applies_to_room(room)]
        nightly_rules = [rule for rule in room_rules if rule.type != RuleType.LONG_STAY]
        first_night = PricingEngine._as_datetime(check_in)

        total_base_price = 0.0
        total_adjustments = 0.0

        for i in range(nights):
            night = (first_night + timedelta(days=i)).date()
            night_base_price = room.price
            total_base_price += night_base_price

            night_percent = 0.0
            night_fixed = 0.0
            for rule in nightly_rules:
                if not PricingEngine._applies_to_night(rule, night):
                    continue
                if rule.adjustment_type == AdjustmentType.PERCENTAGE:
                    night_percent += rule.value
                else:
                    night_fixed += rule.value

            total_adjustments += night_base_price * (night_percent / 100) + night_fixed

        subtotal = total_base_price + total_adjustments

        adjustments: list[PriceAdjustment] = []
        long_stay_adjustment = 0.0
        for rule in room_rules:
            if rule.type != RuleType.LONG_STAY:
                continue
            if not rule.min_nights or nights < rule.min_nights:
                continue
            if rule.adjustment_type == AdjustmentType.PERCENTAGE:
                amount = subtotal * (rule.value / 100)
            else:
                amount = rule.value
            long_stay_adjustment += amount
            adjustments.append(PriceAdjustment(rule_name=rule.name, amount=amount))

        if total_adjustments != 0:
            adjustments.insert(
                0,
                PriceAdjustment(
                    rule_name=settings.pricing.consolidated_adjustment_label,
                    amount=total_adjustments,
                ),
            )

        final_total = max(0.0, subtotal + long_stay_adjustment)

        logger.debug(
            "Price calculated",
            room_id=room.id,
            nights=nights,
            active_rules=len(active_rules),
            subtotal=subtotal,
            final_total=final_total,
        )

        return PriceBreakdown(
            base_price=room.price,
            total_nights=nights,
            base_total=total_base_price,
            subtotal=subtotal,
            adjustments=adjustments,
            final_total=final_total,
            average_nightly_rate=final_total / nights,
        )

    @staticmethod
    def quote(
        room_id: str,
        rooms: Iterable[Room | dict[str, Any]],
        check_in: date | datetime,
        check_out: date | datetime,
        rules: Iterable[PricingRule | dict[str, Any]] | None = None,
    ) -> PriceBreakdown:
        """Look a room up by id and price the stay.

        Raises:
            UnknownRoom: If no room in ``rooms`` has ``room_id``
        """
        for candidate in rooms:
            candidate_id = candidate.id if isinstance(candidate, Room) else candidate.get("id")
            if candidate_id == room_id:
                return PricingEngine.calculate_price(candidate, check_in, check_out, rules)

        logger.warning("Quote requested for unknown room", room_id=room_id)
        raise UnknownRoom(room_id)
