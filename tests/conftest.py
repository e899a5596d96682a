import json
from pathlib import Path

import pytest

from rate_engine.models import Room
from rate_engine.store import InMemoryDocumentStore

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def snapshot_path():
    """Path of the store snapshot fixture."""
    return FIXTURES_DIR / "snapshot.json"


@pytest.fixture
def snapshot_data(snapshot_path):
    """Load the store snapshot fixture."""
    with open(snapshot_path) as f:
        return json.load(f)


@pytest.fixture
def store(snapshot_path):
    """In-memory store populated from the snapshot fixture."""
    return InMemoryDocumentStore.from_snapshot(snapshot_path)


@pytest.fixture
def deluxe_room():
    """A 300-a-night Deluxe room."""
    return Room(id="room-deluxe", name="Deluxe Suite", price=300.0, category="Deluxe")


@pytest.fixture
def make_rule():
    """Factory for pricing rule documents with sensible defaults."""

    def _make_rule(**overrides):
        rule = {
            "id": "rule",
            "name": "Rule",
            "type": "custom",
            "adjustmentType": "percentage",
            "value": 0,
            "roomCategories": ["all"],
            "isActive": True,
        }
        rule.update(overrides)
        return rule

    return _make_rule


@pytest.fixture
def make_booking():
    """Factory for booking documents with sensible defaults."""

    def _make_booking(**overrides):
        booking = {
            "id": "BK-test",
            "roomId": "room-deluxe",
            "isoCheckIn": "2024-06-11",
            "isoCheckOut": "2024-06-15",
            "totalPrice": 1200,
            "nights": 4,
            "paymentStatus": "pending",
            "status": "pending",
        }
        booking.update(overrides)
        return booking

    return _make_booking
