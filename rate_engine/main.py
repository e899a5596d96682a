"""Command line entry point for quoting, availability checks and bookings."""

import argparse
import asyncio
import json
import sys
from typing import Any, Optional

from rate_engine.clients import RemoteConfigClient
from rate_engine.config import configure_logging, get_logger, settings
from rate_engine.engines import PricingError
from rate_engine.models.price_breakdown import PriceBreakdown
from rate_engine.services import (
    BookingOrchestrator,
    ConfigAssemblyError,
    OrchestrationError,
    load_site_config,
)
from rate_engine.store import CONFIG, SITE_CONFIG_ID, DocumentStoreError, InMemoryDocumentStore

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="rate-engine",
        description="Price stays and check room availability against a store snapshot.",
    )
    parser.add_argument(
        "--snapshot",
        default=settings.snapshot_path,
        help="JSON snapshot with rooms, bookings and config (default: SNAPSHOT_PATH)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_stay_arguments(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--room", required=True, help="Room id")
        sub.add_argument("--check-in", required=True, help="Arrival date (YYYY-MM-DD)")
        sub.add_argument("--check-out", required=True, help="Departure date (YYYY-MM-DD)")

    add_stay_arguments(subparsers.add_parser("quote", help="Price a stay"))
    add_stay_arguments(subparsers.add_parser("availability", help="Check whether a room is free"))

    book = subparsers.add_parser("book", help="Create a booking")
    add_stay_arguments(book)
    book.add_argument("--guest-name", default="")
    book.add_argument("--guest-email", default="")
    book.add_argument("--guest-phone", default=None)
    book.add_argument("--payment-method", choices=["cash", "paystack"], default="cash")
    book.add_argument(
        "--save",
        action="store_true",
        help="Write the updated snapshot back to the snapshot file",
    )
    return parser


def _print_breakdown(breakdown: Optional[dict[str, Any]], currency_symbol: str) -> None:
    if not breakdown:
        return
    for line in PriceBreakdown.model_validate(breakdown).format_lines(currency_symbol):
        print(line, file=sys.stderr)


async def main(argv: Optional[list[str]] = None) -> int:
    """Run one CLI command.

    Returns:
        Exit code: 0 on success, 1 otherwise
    """
    args = build_parser().parse_args(argv)

    if not args.snapshot:
        logger.error("No snapshot file given")
        print(json.dumps({"success": False, "error": "Missing --snapshot or SNAPSHOT_PATH"}))
        return 1

    try:
        store = InMemoryDocumentStore.from_snapshot(args.snapshot)
        config = load_site_config(
            client=RemoteConfigClient() if settings.remote_config.url else None,
            local_overrides=store.get(CONFIG, SITE_CONFIG_ID),
        )
        orchestrator = BookingOrchestrator(store, config)
    except (DocumentStoreError, ConfigAssemblyError) as e:
        logger.error("Failed to initialise", error=str(e))
        print(json.dumps({"success": False, "error": str(e)}))
        return 1

    request = {"roomId": args.room, "checkIn": args.check_in, "checkOut": args.check_out}

    try:
        if args.command == "availability":
            result = orchestrator.check_availability(args.room, args.check_in, args.check_out)
            result["success"] = True
        elif args.command == "quote":
            result = await orchestrator.quote(request)
            _print_breakdown(result["breakdown"], config.currency_symbol)
        else:
            request.update(
                guestName=args.guest_name,
                guestEmail=args.guest_email,
                guestPhone=args.guest_phone,
                paymentMethod=args.payment_method,
            )
            result = await orchestrator.create_booking(request)
            _print_breakdown(result["breakdown"], config.currency_symbol)
            if result["success"] and args.save:
                store.dump(args.snapshot)
                logger.info("Snapshot saved", path=args.snapshot)
    except (OrchestrationError, PricingError) as e:
        logger.error("Command failed", command=args.command, error=str(e))
        print(json.dumps({"success": False, "error": str(e)}))
        return 1
    finally:
        orchestrator.close()

    print(json.dumps(result, indent=2, default=str, ensure_ascii=False))
    return 0 if result["success"] else 1


def run_sync() -> int:
    """Run the async main function synchronously.

    Returns:
        Exit code from main()
    """
    return asyncio.run(main())


def cli() -> None:
    """Console script entry point."""
    configure_logging()
    sys.exit(run_sync())


if __name__ == "__main__":
    cli()
