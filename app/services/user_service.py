"""
User Service - signup and user profiles in Firestore.
"""

from app.config.firebase import get_db
from app.core.errors import ServiceFailure, ValidationFailure
from app.models.user import SignUpRequest, UserProfile
from app.services.identity_service import get_identity_service
from app.utils.firestore_helpers import snapshot_to_dict, utc_now_iso
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class UserService:
    """
    Service for user profiles in Firestore.

    Profiles live at users/{uid}, keyed by the identity reference.
    """

    def __init__(self, db=None, identity=None):
        self.db = db if db is not None else get_db()
        self.identity = identity if identity is not None else get_identity_service()

    def sign_up(self, request: SignUpRequest) -> UserProfile:
        """
        Create an account and its profile document.

        A password/confirmation mismatch is rejected before any account
        creation or profile write.

        Returns:
            The stored profile
        """
        if request.password != request.confirm_password:
            raise ValidationFailure("Passwords do not match")

        uid = self.identity.create_account(request.email, request.password)

        profile = UserProfile(
            uid=uid,
            email=request.email,
            state_code=request.state_code,
            batch=request.batch,
            created_at=utc_now_iso(),
        )
        try:
            self.db.collection("users").document(uid).set(profile.to_document())
        except Exception as e:
            logger.error(f"Failed to write profile for {uid}: {str(e)}", exc_info=True)
            raise ServiceFailure("Account created but the profile could not be saved")

        logger.info(f"User profile created: {uid}")
        return profile

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        """
        Get a profile by identity reference.

        Returns:
            UserProfile or None if the user has no profile document
        """
        doc = self.db.collection("users").document(uid).get()
        if not doc.exists:
            return None
        return self._to_profile(snapshot_to_dict(doc))

    def _to_profile(self, data: dict) -> UserProfile:
        data["uid"] = data.pop("id")
        return UserProfile(**data)


# Global service instance (singleton pattern)
_user_service = None


def get_user_service() -> UserService:
    """
    Get or create UserService singleton instance.

    Returns:
        UserService: The global user service instance
    """
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
