"""Document store package."""

from rate_engine.store.document_store import (
    BOOKINGS,
    CONFIG,
    ROOMS,
    DocumentStore,
    DocumentStoreError,
)
from rate_engine.store.memory_store import SITE_CONFIG_ID, InMemoryDocumentStore

__all__ = [
    "BOOKINGS",
    "CONFIG",
    "ROOMS",
    "SITE_CONFIG_ID",
    "DocumentStore",
    "DocumentStoreError",
    "InMemoryDocumentStore",
]
