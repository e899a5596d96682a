"""Tests for the booking orchestrator and its pipeline."""

import pytest

from rate_engine.config import settings
from rate_engine.engines import InvalidDateRange, InvalidPricingRuleError
from rate_engine.services import BookingOrchestrator, OrchestrationError, StoreSnapshot
from rate_engine.services.pipeline import BookingContext, Pipeline, PipelineStep
from rate_engine.models import BookingRequest
from rate_engine.store import BOOKINGS, CONFIG, SITE_CONFIG_ID


@pytest.fixture
def orchestrator(store):
    orchestrator = BookingOrchestrator(store)
    yield orchestrator
    orchestrator.close()


def stay(room_id, check_in, check_out, **extra):
    request = {"roomId": room_id, "checkIn": check_in, "checkOut": check_out}
    request.update(extra)
    return request


class TestQuote:
    """Tests for quoting without booking."""

    @pytest.mark.asyncio
    async def test_weekday_stay_at_base_rate(self, orchestrator):
        """Test quoting a weekday stay with no rule hits."""
        result = await orchestrator.quote(stay("room-deluxe", "2024-06-03", "2024-06-06"))

        assert result["success"]
        assert result["breakdown"]["finalTotal"] == 900.0
        assert result["booking"] is None

    @pytest.mark.asyncio
    async def test_rules_come_from_store_config(self, orchestrator):
        """Test that quotes use the pricing rules stored in the config document."""
        # Mon 3 to Mon 10 June: Friday and Saturday surcharged, long-stay applies
        result = await orchestrator.quote(stay("room-deluxe", "2024-06-03", "2024-06-10"))

        breakdown = result["breakdown"]
        assert breakdown["subtotal"] == pytest.approx(2220.0)
        assert [line["ruleName"] for line in breakdown["adjustments"]] == [
            "Seasonal/Weekend Adjustments",
            "Long Stay Discount",
        ]
        assert breakdown["finalTotal"] == pytest.approx(1998.0)
        assert result["stats"]["price"]["total_adjustment"] == pytest.approx(-102.0)

    @pytest.mark.asyncio
    async def test_quote_ignores_existing_bookings(self, orchestrator):
        """Test that quoting does not check availability."""
        result = await orchestrator.quote(stay("room-deluxe", "2024-06-11", "2024-06-12"))

        assert result["success"]

    @pytest.mark.asyncio
    async def test_unknown_room(self, orchestrator):
        """Test quoting a room that does not exist."""
        result = await orchestrator.quote(stay("room-missing", "2024-06-03", "2024-06-06"))

        assert not result["success"]
        assert result["errors"][0]["step"] == "LoadSnapshot"
        assert result["breakdown"] is None

    @pytest.mark.asyncio
    async def test_invalid_request(self, orchestrator):
        """Test that a zero-night request is rejected up front."""
        with pytest.raises(OrchestrationError):
            await orchestrator.quote(stay("room-deluxe", "2024-06-06", "2024-06-06"))


class TestCreateBooking:
    """Tests for the availability-gated booking flow."""

    @pytest.mark.asyncio
    async def test_creates_pending_booking(self, orchestrator, store):
        """Test the stored record of a new booking."""
        request = stay(
            "room-deluxe",
            "2024-06-08",
            "2024-06-11",
            guestName="Abena Darko",
            guestEmail="abena@example.com",
        )

        result = await orchestrator.create_booking(request)

        assert result["success"]
        booking_id = result["booking"]["id"]
        assert booking_id.startswith("BK-")

        stored = store.get(BOOKINGS, booking_id)
        assert stored["roomId"] == "room-deluxe"
        assert stored["roomName"] == "Deluxe Suite"
        assert stored["isoCheckIn"] == "2024-06-08"
        assert stored["isoCheckOut"] == "2024-06-11"
        assert stored["checkInDate"] == "Jun 08, 2024"
        assert stored["nights"] == 3
        # Saturday surcharge only
        assert stored["totalPrice"] == pytest.approx(960.0)
        assert stored["status"] == "pending"
        assert stored["paymentStatus"] == "pending"
        assert stored["paymentMethod"] == "cash"

    @pytest.mark.asyncio
    async def test_overlap_rejected(self, orchestrator, store):
        """Test that an overlapping request writes nothing."""
        before = len(store.list(BOOKINGS))

        result = await orchestrator.create_booking(stay("room-deluxe", "2024-06-10", "2024-06-12"))

        assert not result["success"]
        assert result["conflicts"] == ["BK-1"]
        assert result["errors"][0]["step"] == "CheckAvailability"
        assert result["booking"] is None
        assert len(store.list(BOOKINGS)) == before

    @pytest.mark.asyncio
    async def test_cancelled_booking_does_not_block(self, orchestrator):
        """Test booking over a cancelled stay."""
        result = await orchestrator.create_booking(stay("room-deluxe", "2024-06-20", "2024-06-22"))

        assert result["success"]

    @pytest.mark.asyncio
    async def test_legacy_booking_blocks(self, orchestrator):
        """Test that a booking with only human-formatted dates blocks."""
        result = await orchestrator.create_booking(stay("room-villa", "2024-06-13", "2024-06-16"))

        assert result["conflicts"] == ["BK-3"]

    @pytest.mark.asyncio
    async def test_unresolvable_booking_does_not_block(self, orchestrator):
        """Test booking a room whose only booking has unusable dates."""
        result = await orchestrator.create_booking(stay("room-exec", "2024-06-13", "2024-06-16"))

        assert result["success"]

    @pytest.mark.asyncio
    async def test_new_booking_blocks_next_request(self, orchestrator):
        """Test that a stored booking is seen by the next request."""
        first = await orchestrator.create_booking(stay("room-exec", "2024-07-01", "2024-07-04"))
        second = await orchestrator.create_booking(stay("room-exec", "2024-07-03", "2024-07-05"))
        third = await orchestrator.create_booking(stay("room-exec", "2024-07-04", "2024-07-05"))

        assert first["success"]
        assert second["conflicts"] == [first["booking"]["id"]]
        assert third["success"]
        assert third["booking"]["id"] != first["booking"]["id"]

    @pytest.mark.asyncio
    async def test_dry_run_does_not_write(self, orchestrator, store, monkeypatch):
        """Test that dry-run mode skips the write."""
        monkeypatch.setattr(settings, "dry_run", True)
        before = len(store.list(BOOKINGS))

        result = await orchestrator.create_booking(stay("room-exec", "2024-08-01", "2024-08-02"))

        assert result["success"]
        assert len(store.list(BOOKINGS)) == before

    @pytest.mark.asyncio
    async def test_accepts_request_model(self, orchestrator):
        """Test passing a BookingRequest instead of a dict."""
        request = BookingRequest(room_id="room-villa", check_in="2024-09-01", check_out="2024-09-03")

        result = await orchestrator.create_booking(request)

        assert result["breakdown"]["finalTotal"] == 1600.0


class TestAvailability:
    """Tests for the synchronous availability helpers."""

    def test_check_availability(self, orchestrator):
        """Test the availability summary for taken and free ranges."""
        assert orchestrator.check_availability("room-deluxe", "2024-06-10", "2024-06-12") == {
            "room_id": "room-deluxe",
            "available": False,
            "conflicts": ["BK-1"],
        }
        assert orchestrator.check_availability("room-deluxe", "2024-06-15", "2024-06-18")["available"]

    def test_check_availability_unknown_room(self, orchestrator):
        """Test availability of a room that does not exist."""
        with pytest.raises(OrchestrationError):
            orchestrator.check_availability("room-missing", "2024-06-10", "2024-06-12")

    def test_check_availability_bad_range(self, orchestrator):
        """Test availability with check-out before check-in."""
        with pytest.raises(InvalidDateRange):
            orchestrator.check_availability("room-deluxe", "2024-06-12", "2024-06-10")

    def test_available_rooms(self, orchestrator):
        """Test listing free room ids."""
        assert orchestrator.available_rooms("2024-06-12", "2024-06-13") == ["room-exec"]

    @pytest.mark.asyncio
    async def test_config_changes_are_picked_up(self, orchestrator, store):
        """Test that config writes reach later quotes."""
        config = store.get(CONFIG, SITE_CONFIG_ID)
        config["pricingRules"] = []
        store.put(CONFIG, SITE_CONFIG_ID, config)

        result = await orchestrator.quote(stay("room-deluxe", "2024-06-03", "2024-06-10"))

        assert result["breakdown"]["finalTotal"] == 2100.0


class TestPipeline:
    """Tests for the pipeline executor."""

    class FailingStep(PipelineStep):
        def __init__(self, required):
            super().__init__("Failing")
            self.required = required

        async def execute(self, context):
            raise RuntimeError("boom")

        def is_required(self):
            return self.required

    class RecordingStep(PipelineStep):
        def __init__(self):
            super().__init__("Recording")
            self.ran = False

        async def execute(self, context):
            self.ran = True
            return True

    def make_context(self):
        return BookingContext(
            BookingRequest(room_id="room-deluxe", check_in="2024-06-03", check_out="2024-06-04")
        )

    @pytest.mark.asyncio
    async def test_required_failure_stops(self):
        """Test that a failing required step stops the pipeline."""
        recorder = self.RecordingStep()
        pipeline = Pipeline("test", [self.FailingStep(required=True), recorder])

        context = await pipeline.execute(self.make_context())

        assert not context.success
        assert not recorder.ran
        assert context.errors[0]["message"] == "boom"
        assert context.stats["pipeline"]["failed_steps"] == 1
        assert context.stats["steps"]["Failing"]["success"] is False
        assert "Recording" not in context.stats["steps"]

    @pytest.mark.asyncio
    async def test_optional_failure_continues(self):
        """Test that a failing optional step lets the pipeline continue."""
        recorder = self.RecordingStep()
        pipeline = Pipeline("test", [self.FailingStep(required=False)]).add_step(recorder)

        context = await pipeline.execute(self.make_context())

        assert recorder.ran
        assert not context.success
        assert pipeline.get_step_names() == ["Failing", "Recording"]


class TestStoredDataQuality:
    """Tests for bookings and rules with partly invalid stored data."""

    @pytest.mark.asyncio
    async def test_booking_with_broken_fields_still_blocks(self, orchestrator, store):
        """Test that a stored stay with null price and nights blocks new bookings."""
        store.put(
            BOOKINGS,
            "BK-legacy",
            {
                "id": "BK-legacy",
                "roomId": "room-deluxe",
                "isoCheckIn": "2025-03-01",
                "isoCheckOut": "2025-03-05",
                "nights": None,
                "totalPrice": None,
                "paymentStatus": "refunded",
            },
        )
        before = len(store.list(BOOKINGS))

        result = await orchestrator.create_booking(stay("room-deluxe", "2025-03-02", "2025-03-03"))

        assert not result["success"]
        assert result["conflicts"] == ["BK-legacy"]
        assert len(store.list(BOOKINGS)) == before

    @pytest.mark.asyncio
    async def test_invalid_inactive_rule_keeps_other_rules(self, orchestrator, store):
        """Test that a malformed switched-off rule does not drop the weekend surcharge."""
        config = store.get(CONFIG, SITE_CONFIG_ID)
        config["pricingRules"].append(
            {
                "id": "bad",
                "name": "Bad",
                "type": "seasonal",
                "adjustmentType": "percentage",
                "value": 5,
                "startDate": "not-a-date",
                "endDate": "2025-01-05",
                "isActive": False,
            }
        )
        store.put(CONFIG, SITE_CONFIG_ID, config)

        # Fri 7, Sat 8 and Sun 9 June
        result = await orchestrator.quote(stay("room-deluxe", "2024-06-07", "2024-06-10"))

        assert result["success"]
        assert result["breakdown"]["finalTotal"] == pytest.approx(1020.0)
        assert result["stats"]["snapshot"]["active_rules"] == 3

    @pytest.mark.asyncio
    async def test_invalid_active_rule_fails_pricing(self, orchestrator, store):
        """Test that a malformed active rule fails quotes and bookings instead of pricing at base rate."""
        config = store.get(CONFIG, SITE_CONFIG_ID)
        good_rules = list(config["pricingRules"])
        config["pricingRules"].append(
            {
                "id": "bad",
                "name": "Bad",
                "type": "seasonal",
                "adjustmentType": "percentage",
                "value": 5,
                "startDate": "31/12/2024",
                "endDate": "2025-01-05",
                "isActive": True,
            }
        )
        store.put(CONFIG, SITE_CONFIG_ID, config)
        before = len(store.list(BOOKINGS))

        quote = await orchestrator.quote(stay("room-deluxe", "2024-06-07", "2024-06-10"))
        booking = await orchestrator.create_booking(stay("room-deluxe", "2024-07-07", "2024-07-10"))

        assert not quote["success"]
        assert quote["breakdown"] is None
        assert quote["errors"][0]["step"] == "LoadSnapshot"
        assert "Stored site config invalid" in quote["errors"][0]["message"]
        assert not booking["success"]
        assert len(store.list(BOOKINGS)) == before

        config["pricingRules"] = good_rules
        store.put(CONFIG, SITE_CONFIG_ID, config)

        recovered = await orchestrator.quote(stay("room-deluxe", "2024-06-07", "2024-06-10"))

        assert recovered["breakdown"]["finalTotal"] == pytest.approx(1020.0)

    def test_invalid_config_raises_typed_error(self, store):
        """Test that the snapshot reports an invalid stored config as a pricing rule error."""
        store.put(
            CONFIG,
            SITE_CONFIG_ID,
            {"pricingRules": [{"id": "bad", "type": "custom", "value": "lots"}]},
        )

        snapshot = StoreSnapshot(store)

        with pytest.raises(InvalidPricingRuleError):
            snapshot.config
        snapshot.close()
