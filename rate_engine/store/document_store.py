"""Document store interface used by the booking flows."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, Optional

ROOMS = "rooms"
BOOKINGS = "bookings"
CONFIG = "config"

Document = dict[str, Any]
Listener = Callable[[list[Document]], None]
Unsubscribe = Callable[[], None]


class DocumentStoreError(Exception):
    """Base exception for document store errors."""

    pass


class DocumentStore(ABC):
    """Abstract reactive document store.

    Collections hold JSON-like documents keyed by ``id``. Subscribers receive
    the full collection after every change. The engines never talk to a
    store; they are handed snapshots taken from it.
    """

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Fetch one document, or None when absent."""
        pass

    @abstractmethod
    def list(self, collection: str) -> list[Document]:
        """Fetch every document of a collection."""
        pass

    @abstractmethod
    def put(self, collection: str, doc_id: str, document: Document) -> None:
        """Create or replace a document."""
        pass

    @abstractmethod
    def subscribe(self, collection: str, listener: Listener) -> Unsubscribe:
        """Register for change notifications on a collection.

        Args:
            collection: Collection name
            listener: Called with the collection contents after each change

        Returns:
            Callable that removes the subscription
        """
        pass
