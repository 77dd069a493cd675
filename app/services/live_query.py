"""
Live query subscriptions on top of Firestore's on_snapshot listeners.

A LiveSubscription owns one listener. Its lifetime is tied to the view that
created it: the view calls unsubscribe() when it is torn down. Snapshot
callbacks arrive on the SDK's background threads.
"""

import logging
import threading
from typing import Any, Callable, Dict, List

from app.utils.firestore_helpers import snapshot_to_dict

logger = logging.getLogger(__name__)

SnapshotHandler = Callable[[List[Dict[str, Any]]], None]


class LiveSubscription:
    """
    Subscribe a handler to a query or document reference.

    The handler receives the full current result (a list of dicts with "id")
    on every notification, never a delta.
    """

    def __init__(self, target, handler: SnapshotHandler, name: str = "query"):
        self._target = target
        self._handler = handler
        self._name = name
        self._lock = threading.Lock()
        self._watch = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def subscribe(self) -> "LiveSubscription":
        with self._lock:
            if self._active:
                return self
            self._active = True
        # Listener registration may deliver the first snapshot synchronously
        watch = self._target.on_snapshot(self._on_snapshot)
        with self._lock:
            if self._active:
                self._watch = watch
                watch = None
        if watch is not None:
            # unsubscribe() raced with registration
            watch.unsubscribe()
        logger.debug("Live subscription attached: %s", self._name)
        return self

    def unsubscribe(self) -> None:
        with self._lock:
            watch, self._watch = self._watch, None
            self._active = False
        if watch is not None:
            watch.unsubscribe()
            logger.debug("Live subscription detached: %s", self._name)

    def _on_snapshot(self, docs, changes, read_time) -> None:
        if not self._active:
            return
        records = [data for data in (snapshot_to_dict(doc) for doc in docs) if data is not None]
        try:
            self._handler(records)
        except Exception as e:
            logger.error("Live subscription handler failed (%s): %s", self._name, e, exc_info=True)
