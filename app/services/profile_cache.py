"""
Profile Cache - last observed profile per signed-in user.

Each tracked user has a live subscription on users/{uid}; every notification
overwrites the cached entry (last write wins). Entries live until the user
signs out, when the subscription is detached and the entry dropped.
"""

import logging
import threading
from typing import Callable, Dict, Optional

from app.config.firebase import get_db
from app.models.user import UserProfile
from app.services.identity_service import get_identity_service
from app.services.live_query import LiveSubscription

logger = logging.getLogger(__name__)


class ProfileCache:
    def __init__(self, db=None):
        self.db = db if db is not None else get_db()
        self._lock = threading.Lock()
        self._profiles: Dict[str, UserProfile] = {}
        self._subscriptions: Dict[str, LiveSubscription] = {}

    def get(self, uid: str) -> Optional[UserProfile]:
        with self._lock:
            return self._profiles.get(uid)

    def put(self, profile: UserProfile) -> None:
        with self._lock:
            self._profiles[profile.uid] = profile

    def put_if_absent(self, profile: UserProfile) -> UserProfile:
        """Store profile unless an entry already exists; returns the entry kept."""
        with self._lock:
            return self._profiles.setdefault(profile.uid, profile)

    def get_or_load(self, uid: str, loader: Callable[[str], Optional[UserProfile]]) -> Optional[UserProfile]:
        """
        Cached profile, falling back to loader(uid) on a miss.

        A notification that lands while the loader runs wins over the
        loaded value. Also makes sure uid is tracked, so later reads see
        live updates.
        """
        profile = self.get(uid)
        if profile is None:
            profile = loader(uid)
            if profile is not None:
                profile = self.put_if_absent(profile)
        self.track(uid)
        return profile

    def is_tracking(self, uid: str) -> bool:
        with self._lock:
            return uid in self._subscriptions

    def track(self, uid: str) -> None:
        """Attach the live profile subscription for uid (no-op when attached)."""
        with self._lock:
            if uid in self._subscriptions:
                return
            subscription = LiveSubscription(
                self.db.collection("users").document(uid),
                lambda records: self._on_profile(uid, records),
                name=f"profile:{uid}",
            )
            self._subscriptions[uid] = subscription
        subscription.subscribe()

    def invalidate(self, uid: str) -> None:
        with self._lock:
            subscription = self._subscriptions.pop(uid, None)
            self._profiles.pop(uid, None)
        if subscription is not None:
            subscription.unsubscribe()
        logger.info(f"Profile cache invalidated: {uid}")

    def clear(self) -> None:
        with self._lock:
            uids = list(self._subscriptions)
        for uid in uids:
            self.invalidate(uid)

    def handle_auth_state(self, uid: str, session) -> None:
        """Auth-state listener: track on sign-in, invalidate on sign-out."""
        if session is None:
            self.invalidate(uid)
        else:
            self.track(uid)

    def _on_profile(self, uid: str, records) -> None:
        with self._lock:
            if uid not in self._subscriptions:
                return
            if not records:
                self._profiles.pop(uid, None)
                return
            data = dict(records[0])
            data["uid"] = data.pop("id")
            self._profiles[uid] = UserProfile(**data)
        logger.debug(f"Profile cache refreshed: {uid}")


# Global cache instance
_profile_cache = None


def get_profile_cache() -> ProfileCache:
    """
    Get or create the ProfileCache singleton.

    The cache registers with the identity service on creation, so sign-in
    starts tracking a user and sign-out invalidates their entry.
    """
    global _profile_cache
    if _profile_cache is None:
        _profile_cache = ProfileCache()
        get_identity_service().on_auth_state_changed(_profile_cache.handle_auth_state)
    return _profile_cache
