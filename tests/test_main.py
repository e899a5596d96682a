"""Tests for the command line entry point."""

import json
import shutil

import pytest

from rate_engine.main import build_parser, main


@pytest.fixture
def snapshot_copy(snapshot_path, tmp_path):
    """Writable copy of the snapshot fixture."""
    path = tmp_path / "snapshot.json"
    shutil.copy(snapshot_path, path)
    return path


def bookings_in(path):
    with open(path, encoding="utf-8") as f:
        return json.load(f)["bookings"]


class TestMain:
    """Tests for main()."""

    @pytest.mark.asyncio
    async def test_quote(self, snapshot_copy, capsys):
        """Test the quote command."""
        exit_code = await main(
            ["--snapshot", str(snapshot_copy), "quote", "--room", "room-deluxe",
             "--check-in", "2024-06-03", "--check-out", "2024-06-06"]
        )

        assert exit_code == 0
        assert "Total: GH₵900.00" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_availability_taken(self, snapshot_copy):
        """Test the availability command for a booked range."""
        exit_code = await main(
            ["--snapshot", str(snapshot_copy), "availability", "--room", "room-deluxe",
             "--check-in", "2024-06-10", "--check-out", "2024-06-12"]
        )

        assert exit_code == 1

    @pytest.mark.asyncio
    async def test_availability_free(self, snapshot_copy):
        """Test the availability command for a free range."""
        exit_code = await main(
            ["--snapshot", str(snapshot_copy), "availability", "--room", "room-deluxe",
             "--check-in", "2024-06-15", "--check-out", "2024-06-17"]
        )

        assert exit_code == 0

    @pytest.mark.asyncio
    async def test_book_with_save_writes_snapshot(self, snapshot_copy):
        """Test that book --save writes the new booking to the snapshot file."""
        exit_code = await main(
            ["--snapshot", str(snapshot_copy), "book", "--room", "room-villa",
             "--check-in", "2024-07-01", "--check-out", "2024-07-03",
             "--guest-name", "Akosua Frimpong", "--payment-method", "paystack", "--save"]
        )

        assert exit_code == 0
        bookings = bookings_in(snapshot_copy)
        assert len(bookings) == 5
        assert bookings[-1]["guestName"] == "Akosua Frimpong"
        assert bookings[-1]["paymentMethod"] == "paystack"
        assert bookings[-1]["totalPrice"] == 1600.0

    @pytest.mark.asyncio
    async def test_book_without_save_leaves_snapshot(self, snapshot_copy):
        """Test that book without --save leaves the file alone."""
        exit_code = await main(
            ["--snapshot", str(snapshot_copy), "book", "--room", "room-villa",
             "--check-in", "2024-07-01", "--check-out", "2024-07-03"]
        )

        assert exit_code == 0
        assert len(bookings_in(snapshot_copy)) == 4

    @pytest.mark.asyncio
    async def test_conflicting_booking_fails(self, snapshot_copy):
        """Test booking an occupied room."""
        exit_code = await main(
            ["--snapshot", str(snapshot_copy), "book", "--room", "room-deluxe",
             "--check-in", "2024-06-12", "--check-out", "2024-06-13", "--save"]
        )

        assert exit_code == 1
        assert len(bookings_in(snapshot_copy)) == 4

    @pytest.mark.asyncio
    async def test_invalid_dates_fail(self, snapshot_copy):
        """Test quoting with reversed dates."""
        exit_code = await main(
            ["--snapshot", str(snapshot_copy), "quote", "--room", "room-deluxe",
             "--check-in", "2024-06-06", "--check-out", "2024-06-03"]
        )

        assert exit_code == 1

    @pytest.mark.asyncio
    async def test_missing_snapshot_fails(self, tmp_path):
        """Test running against a snapshot file that does not exist."""
        exit_code = await main(
            ["--snapshot", str(tmp_path / "missing.json"), "quote", "--room", "room-deluxe",
             "--check-in", "2024-06-03", "--check-out", "2024-06-06"]
        )

        assert exit_code == 1


class TestParser:
    """Tests for argument parsing."""

    def test_command_required(self):
        """Test that a subcommand is required."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--snapshot", "x.json"])

    def test_payment_method_restricted(self):
        """Test that only cash and paystack are accepted."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                ["book", "--room", "r", "--check-in", "2024-06-03",
                 "--check-out", "2024-06-04", "--payment-method", "card"]
            )
