"""In-memory document store backed by an optional JSON snapshot file."""

import copy
import json
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel
from structlog import get_logger

from rate_engine.store.document_store import (
    CONFIG,
    Document,
    DocumentStore,
    DocumentStoreError,
    Listener,
    Unsubscribe,
)

logger = get_logger(__name__)

SITE_CONFIG_ID = "site"


class InMemoryDocumentStore(DocumentStore):
    """Dict-backed store with synchronous change notifications.

    Snapshot files look like::

        {"rooms": [...], "bookings": [...], "config": {...}}

    List collections are keyed by each document's ``id``; the ``config``
    object is stored as the single document ``config/site``.
    """

    def __init__(self):
        """Initialize an empty store."""
        self._collections: dict[str, dict[str, Document]] = {}
        self._listeners: dict[str, list[Listener]] = {}

    @classmethod
    def from_snapshot(cls, path: str | Path) -> "InMemoryDocumentStore":
        """Load a store from a JSON snapshot file.

        Args:
            path: Snapshot file path

        Returns:
            Populated store

        Raises:
            DocumentStoreError: If the file is missing or not valid JSON
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DocumentStoreError(f"Cannot load snapshot {path}: {e}") from e

        store = cls()
        store.load(data)
        logger.info(
            "Loaded snapshot",
            path=str(path),
            collections={name: len(docs) for name, docs in store._collections.items()},
        )
        return store

    def load(self, data: dict[str, Any]) -> None:
        """Replace the store contents with snapshot data."""
        self._collections.clear()
        for name, value in data.items():
            if name == CONFIG and isinstance(value, dict):
                self._collections[CONFIG] = {SITE_CONFIG_ID: copy.deepcopy(value)}
                continue
            if not isinstance(value, list):
                raise DocumentStoreError(f"Collection {name} must be a list")
            docs: dict[str, Document] = {}
            for document in value:
                if "id" not in document:
                    raise DocumentStoreError(f"Document without id in collection {name}")
                docs[str(document["id"])] = copy.deepcopy(document)
            self._collections[name] = docs

    def to_snapshot(self) -> dict[str, Any]:
        """Export the store contents in snapshot format."""
        data: dict[str, Any] = {}
        for name, docs in self._collections.items():
            if name == CONFIG:
                data[CONFIG] = copy.deepcopy(docs.get(SITE_CONFIG_ID, {}))
            else:
                data[name] = [copy.deepcopy(doc) for doc in docs.values()]
        return data

    def dump(self, path: str | Path) -> None:
        """Write the store contents to a JSON snapshot file."""
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_snapshot(), f, indent=2, default=str, ensure_ascii=False)

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        """Fetch one document, or None when absent."""
        document = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(document) if document is not None else None

    def list(self, collection: str) -> list[Document]:
        """Fetch every document of a collection."""
        return [copy.deepcopy(doc) for doc in self._collections.get(collection, {}).values()]

    def put(self, collection: str, doc_id: str, document: Document | BaseModel) -> None:
        """Create or replace a document and notify subscribers."""
        if isinstance(document, BaseModel):
            document = document.model_dump(by_alias=True, mode="json", exclude_none=True)
        self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(document)
        self._notify(collection)

    def subscribe(self, collection: str, listener: Listener) -> Unsubscribe:
        """Register for change notifications on a collection."""
        self._listeners.setdefault(collection, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(collection, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def _notify(self, collection: str) -> None:
        listeners = list(self._listeners.get(collection, []))
        if not listeners:
            return
        snapshot = self.list(collection)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(
                    "Store listener failed",
                    collection=collection,
                    error=str(e),
                    exc_info=True,
                )
