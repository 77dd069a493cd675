"""
Reminder Service - personal clearance reminders in Firestore.

Writes are fire-and-forget: create and delete never touch a view's list.
Open views learn about changes from their live subscription, which replaces
the whole list on every notification.
"""

from app.config.firebase import get_db
from app.core.errors import NotFound
from app.models.reminder import ReminderCreate, ReminderResponse
from app.services.identity_service import Session
from app.services.live_query import LiveSubscription
from app.utils.firestore_helpers import snapshot_to_dict, utc_now_iso, where_filter
from datetime import datetime, timezone
from pydantic import ValidationError
from typing import Callable, Dict, List, Optional
import logging
import threading

logger = logging.getLogger(__name__)


def _due_key(reminder: ReminderResponse):
    """Sort key: due time ascending, unparseable dates last."""
    try:
        due = datetime.fromisoformat(reminder.date.replace("Z", "+00:00"))
    except ValueError:
        return (1, datetime.max.replace(tzinfo=timezone.utc), reminder.id)
    if due.tzinfo is None:
        due = due.replace(tzinfo=timezone.utc)
    return (0, due, reminder.id)


def sort_by_due_date(records: List[Dict]) -> List[ReminderResponse]:
    """Validate and order stored reminders; malformed documents are skipped."""
    reminders = []
    for data in records:
        try:
            reminders.append(ReminderResponse(**data))
        except ValidationError as e:
            logger.warning(f"Skipping malformed reminder {data.get('id')}: {e.error_count()} error(s)")
    return sorted(reminders, key=_due_key)


class ReminderListView:
    """
    A user's reminders, kept current by a live query.

    attach() subscribes, detach() cancels; the owning view calls detach()
    when it goes away. on_change receives the new full list.
    """

    def __init__(self, query, owner_id: str, on_change: Optional[Callable[[List[ReminderResponse]], None]] = None):
        self.owner_id = owner_id
        self._on_change = on_change
        self._lock = threading.Lock()
        self._reminders: List[ReminderResponse] = []
        self._subscription = LiveSubscription(query, self._on_snapshot, name=f"reminders:{owner_id}")

    @property
    def reminders(self) -> List[ReminderResponse]:
        with self._lock:
            return list(self._reminders)

    @property
    def attached(self) -> bool:
        return self._subscription.active

    def attach(self) -> "ReminderListView":
        self._subscription.subscribe()
        return self

    def detach(self) -> None:
        self._subscription.unsubscribe()

    def _on_snapshot(self, records: List[Dict]) -> None:
        reminders = sort_by_due_date(records)
        with self._lock:
            self._reminders = reminders
        if self._on_change is not None:
            self._on_change(list(reminders))

    def __enter__(self) -> "ReminderListView":
        return self.attach()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.detach()


class ReminderService:
    """Service for reminder CRUD and live reminder views."""

    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    def _owner_query(self, uid: str):
        # Ordered client-side: where + order_by on another field needs a composite index
        return where_filter(self.db.collection("reminders"), "userId", "==", uid)

    def open_view(self, uid: str, on_change=None) -> ReminderListView:
        """Create and attach a live reminder list for uid."""
        return ReminderListView(self._owner_query(uid), uid, on_change).attach()

    def list_reminders(self, uid: str) -> List[ReminderResponse]:
        """One-shot read of uid's reminders, due date ascending."""
        return sort_by_due_date([snapshot_to_dict(doc) for doc in self._owner_query(uid).stream()])

    def create_reminder(self, session: Session, reminder: ReminderCreate) -> str:
        reminder_ref = self.db.collection("reminders").document()
        reminder_ref.set({
            "title": reminder.title,
            "date": reminder.date.isoformat(),
            "description": reminder.description,
            "userId": session.uid,
            "createdAt": utc_now_iso(),
        })
        logger.info(f"Reminder created: {reminder_ref.id} for {session.uid}")
        return reminder_ref.id

    def delete_reminder(self, session: Session, reminder_id: str) -> None:
        """
        Delete one reminder by id.

        Reminders owned by someone else are reported as missing.
        """
        reminder_ref = self.db.collection("reminders").document(reminder_id)
        doc = reminder_ref.get()
        if not doc.exists or (doc.to_dict() or {}).get("userId") != session.uid:
            raise NotFound("Reminder not found")
        reminder_ref.delete()
        logger.info(f"Reminder deleted: {reminder_id}")


# Global service instance
_reminder_service = None


def get_reminder_service() -> ReminderService:
    """Get or create ReminderService singleton."""
    global _reminder_service
    if _reminder_service is None:
        _reminder_service = ReminderService()
    return _reminder_service
