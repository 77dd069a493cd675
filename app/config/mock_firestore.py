"""
In-memory stand-in for the Firestore client.

Mirrors the subset of the google-cloud-firestore surface used by the
services: collection/document references, where/order_by/limit queries,
stream/get, set/update/delete and on_snapshot listeners. When a path is
given, documents are loaded from and written back to a JSON file so local
development data survives restarts.
"""

import copy
import json
import logging
import operator
import os
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"

_OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
    "in": lambda field_value, values: field_value in values,
    "not-in": lambda field_value, values: field_value not in values,
    "array_contains": lambda field_value, value: isinstance(field_value, list) and value in field_value,
}


class MockNotFound(Exception):
    """Raised by update() on a missing document, like google.api_core NotFound."""


class MockDocumentSnapshot:
    def __init__(self, reference: "MockDocumentReference", data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data) if data is not None else None

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data) if self._data is not None else None


class MockWatch:
    """Handle returned by on_snapshot(); unsubscribe() is idempotent."""

    def __init__(self, store: "MockFirestore", listener_id: int):
        self._store = store
        self._listener_id = listener_id

    def unsubscribe(self) -> None:
        self._store._remove_listener(self._listener_id)


class MockDocumentReference:
    def __init__(self, store: "MockFirestore", collection_name: str, document_id: str):
        self._store = store
        self._collection = collection_name
        self.id = document_id

    @property
    def path(self) -> str:
        return f"{self._collection}/{self.id}"

    def get(self) -> MockDocumentSnapshot:
        return MockDocumentSnapshot(self, self._store._read(self._collection, self.id))

    def set(self, document_data: Dict[str, Any], merge: bool = False) -> None:
        self._store._write(self._collection, self.id, document_data, merge=merge)

    def update(self, field_updates: Dict[str, Any]) -> None:
        if self._store._read(self._collection, self.id) is None:
            raise MockNotFound(f"No document to update: {self.path}")
        self._store._write(self._collection, self.id, field_updates, merge=True)

    def delete(self) -> None:
        self._store._delete(self._collection, self.id)

    def on_snapshot(self, callback: Callable) -> MockWatch:
        return self._store._add_listener(lambda: [self.get()], callback)


class MockQuery:
    def __init__(
        self,
        store: "MockFirestore",
        collection_name: str,
        filters: Tuple = (),
        orders: Tuple = (),
        limit_count: Optional[int] = None,
    ):
        self._store = store
        self._collection = collection_name
        self._filters = filters
        self._orders = orders
        self._limit = limit_count

    def where(self, field_path: str, op_string: str, value: Any) -> "MockQuery":
        if op_string not in _OPERATORS:
            raise ValueError(f"Unsupported operator: {op_string}")
        return MockQuery(
            self._store, self._collection,
            self._filters + ((field_path, op_string, value),), self._orders, self._limit,
        )

    def order_by(self, field_path: str, direction: str = ASCENDING) -> "MockQuery":
        return MockQuery(
            self._store, self._collection,
            self._filters, self._orders + ((field_path, direction),), self._limit,
        )

    def limit(self, count: int) -> "MockQuery":
        return MockQuery(self._store, self._collection, self._filters, self._orders, count)

    def stream(self):
        return iter(self._run())

    def get(self) -> List[MockDocumentSnapshot]:
        return self._run()

    def on_snapshot(self, callback: Callable) -> MockWatch:
        return self._store._add_listener(self._run, callback)

    def _run(self) -> List[MockDocumentSnapshot]:
        items = [
            (doc_id, data)
            for doc_id, data in self._store._documents(self._collection)
            if all(_matches(data, flt) for flt in self._filters)
        ]

        # Firestore drops documents that lack an ordered field
        for field_path, _ in self._orders:
            items = [item for item in items if field_path in item[1]]
        for field_path, direction in reversed(self._orders):
            items.sort(key=lambda item: item[1][field_path], reverse=direction == DESCENDING)

        if self._limit is not None:
            items = items[: self._limit]

        return [
            MockDocumentSnapshot(MockDocumentReference(self._store, self._collection, doc_id), data)
            for doc_id, data in items
        ]


class MockCollectionReference(MockQuery):
    def __init__(self, store: "MockFirestore", name: str):
        super().__init__(store, name)
        self.id = name

    def document(self, document_id: Optional[str] = None) -> MockDocumentReference:
        return MockDocumentReference(self._store, self._collection, document_id or uuid.uuid4().hex[:20])


def _matches(data: Dict[str, Any], flt: Tuple[str, str, Any]) -> bool:
    field_path, op_string, value = flt
    if field_path not in data:
        return False
    try:
        return bool(_OPERATORS[op_string](data[field_path], value))
    except TypeError:
        return False


class MockFirestore:
    """Thread-safe in-memory document store with change listeners."""

    def __init__(self, path: Optional[str] = None):
        self._lock = threading.RLock()
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._listeners: Dict[int, Dict[str, Any]] = {}
        self._next_listener_id = 0
        self._path = path
        if path and os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                self._collections = json.load(f)
            logger.info("[MOCK FIRESTORE] Loaded %d collection(s) from %s", len(self._collections), path)

    def collection(self, name: str) -> MockCollectionReference:
        return MockCollectionReference(self, name)

    def collections(self) -> List[MockCollectionReference]:
        with self._lock:
            names = list(self._collections)
        return [MockCollectionReference(self, name) for name in names]

    def _read(self, collection_name: str, document_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            data = self._collections.get(collection_name, {}).get(document_id)
            return copy.deepcopy(data) if data is not None else None

    def _documents(self, collection_name: str) -> List[Tuple[str, Dict[str, Any]]]:
        with self._lock:
            docs = self._collections.get(collection_name, {})
            return [(doc_id, copy.deepcopy(data)) for doc_id, data in docs.items()]

    def _write(self, collection_name: str, document_id: str, data: Dict[str, Any], merge: bool) -> None:
        with self._lock:
            docs = self._collections.setdefault(collection_name, {})
            if merge and document_id in docs:
                docs[document_id].update(copy.deepcopy(data))
            else:
                docs[document_id] = copy.deepcopy(data)
            self._persist()
        self._notify()

    def _delete(self, collection_name: str, document_id: str) -> None:
        with self._lock:
            self._collections.get(collection_name, {}).pop(document_id, None)
            self._persist()
        self._notify()

    def _persist(self) -> None:
        if not self._path:
            return
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(self._collections, f, ensure_ascii=False, indent=2, default=str)

    def _add_listener(self, fetch: Callable[[], List[MockDocumentSnapshot]], callback: Callable) -> MockWatch:
        with self._lock:
            listener_id = self._next_listener_id
            self._next_listener_id += 1
            self._listeners[listener_id] = {"fetch": fetch, "callback": callback, "last": None}
        self._fire(listener_id)
        return MockWatch(self, listener_id)

    def _remove_listener(self, listener_id: int) -> None:
        with self._lock:
            self._listeners.pop(listener_id, None)

    def _notify(self) -> None:
        with self._lock:
            listener_ids = list(self._listeners)
        for listener_id in listener_ids:
            self._fire(listener_id)

    def _fire(self, listener_id: int) -> None:
        with self._lock:
            listener = self._listeners.get(listener_id)
            if listener is None:
                return
            docs = listener["fetch"]()
            state = [(doc.id, doc.to_dict()) for doc in docs]
            # Only result changes are delivered, as with real listeners
            if state == listener["last"]:
                return
            listener["last"] = state
            callback = listener["callback"]

        try:
            callback(docs, [], datetime.now(timezone.utc))
        except Exception as e:
            logger.error("[MOCK FIRESTORE] Snapshot listener failed: %s", e, exc_info=True)


def get_mock_db(path: Optional[str] = None) -> MockFirestore:
    return MockFirestore(path)
