"""Live snapshot of rooms, bookings and site config kept current by store subscriptions."""

from typing import Any, Optional

from pydantic import ValidationError
from structlog import get_logger

from rate_engine.engines import InvalidPricingRuleError
from rate_engine.models.booking import Booking
from rate_engine.models.room import Room
from rate_engine.models.site_config import SiteConfig
from rate_engine.services.site_config_builder import ConfigAssemblyError, SiteConfigBuilder
from rate_engine.store import BOOKINGS, CONFIG, ROOMS, SITE_CONFIG_ID, DocumentStore

logger = get_logger(__name__)


class StoreSnapshot:
    """Keeps validated copies of the store collections the booking flows read.

    The snapshot subscribes once and replaces its lists wholesale on every
    notification, so readers always see a consistent collection. Room
    documents that fail validation are skipped with a warning. Booking
    documents fall back to their stay fields when other fields are invalid;
    bad stay dates are handled by the availability checker. An invalid
    config document makes ``config`` raise until it is fixed.
    """

    def __init__(self, store: DocumentStore, config: Optional[SiteConfig] = None):
        """Load the initial snapshot and subscribe for changes.

        Args:
            store: Document store to mirror
            config: Fixed site config; when omitted it is built from the
                store's config document and rebuilt when that changes
        """
        self.store = store
        self._fixed_config = config
        self._rooms: list[Room] = []
        self._bookings: list[Booking] = []
        self._config: SiteConfig = config or SiteConfigBuilder().build()
        self._config_error: Optional[str] = None

        self._on_rooms(store.list(ROOMS))
        self._on_bookings(store.list(BOOKINGS))
        self._on_config(store.list(CONFIG))

        self._unsubscribers = [
            store.subscribe(ROOMS, self._on_rooms),
            store.subscribe(BOOKINGS, self._on_bookings),
            store.subscribe(CONFIG, self._on_config),
        ]

    @property
    def rooms(self) -> list[Room]:
        return list(self._rooms)

    @property
    def bookings(self) -> list[Booking]:
        return list(self._bookings)

    @property
    def config(self) -> SiteConfig:
        """Current site config.

        Raises:
            InvalidPricingRuleError: If the stored config document is invalid
        """
        if self._config_error is not None:
            raise InvalidPricingRuleError(f"Stored site config invalid: {self._config_error}")
        return self._config

    def find_room(self, room_id: str) -> Optional[Room]:
        """Room with the given id, or None."""
        for room in self._rooms:
            if room.id == room_id:
                return room
        return None

    def close(self) -> None:
        """Drop the store subscriptions."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_rooms(self, documents: list[dict[str, Any]]) -> None:
        rooms = []
        for document in documents:
            try:
                rooms.append(Room.model_validate(document))
            except ValidationError as e:
                logger.warning("Skipping invalid room record", room_id=document.get("id"), error=str(e))
        self._rooms = rooms

    def _on_bookings(self, documents: list[dict[str, Any]]) -> None:
        bookings = []
        for document in documents:
            try:
                bookings.append(Booking.from_document(document))
            except ValidationError as e:
                logger.warning("Skipping invalid booking record", booking_id=document.get("id"), error=str(e))
        self._bookings = bookings

    def _on_config(self, documents: list[dict[str, Any]]) -> None:
        if self._fixed_config is not None:
            return
        site_document = next((doc for doc in documents if doc.get("id", SITE_CONFIG_ID) == SITE_CONFIG_ID), None)
        try:
            self._config = SiteConfigBuilder().with_overrides(site_document).build()
        except ConfigAssemblyError as e:
            logger.error("Stored site config invalid, pricing disabled until fixed", error=str(e))
            self._config_error = str(e)
            return
        self._config_error = None
