"""
Post Service - community feed posts in Firestore.

Posts are immutable once created. The author's state code and batch are
copied onto the post at creation time and never refreshed.
"""

from firebase_admin import firestore
from app.config.firebase import get_db
from app.core.errors import ValidationFailure
from app.models.post import PostResponse
from app.models.user import UserProfile
from app.services.identity_service import Session
from app.utils.firestore_helpers import snapshot_to_dict, utc_now_iso
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class PostService:
    """Service for the community feed."""

    def __init__(self, db=None):
        self.db = db if db is not None else get_db()

    def list_posts(self) -> List[PostResponse]:
        """
        Get all posts, newest first.

        Returns:
            List of PostResponse
        """
        query = self.db.collection("posts").order_by("createdAt", direction=firestore.Query.DESCENDING)
        return [PostResponse(**snapshot_to_dict(doc)) for doc in query.stream()]

    def create_post(self, session: Session, content: str, profile: Optional[UserProfile]) -> str:
        """
        Add a post tagged with the author's profile fields.

        Args:
            session: The acting user
            content: Post text
            profile: The author's cached profile

        Returns:
            The new post's document id
        """
        content = content.strip()
        if not content:
            raise ValidationFailure("Post content cannot be empty")
        if profile is None:
            raise ValidationFailure("Complete your profile before sharing posts")

        post_ref = self.db.collection("posts").document()
        post_ref.set({
            "content": content,
            "userId": session.uid,
            "userEmail": session.email or profile.email,
            "userStateCode": profile.state_code,
            "userBatch": profile.batch,
            "createdAt": utc_now_iso(),
        })

        logger.info(f"Post created: {post_ref.id} by {session.uid}")
        return post_ref.id


# Global service instance
_post_service = None


def get_post_service() -> PostService:
    """Get or create PostService singleton."""
    global _post_service
    if _post_service is None:
        _post_service = PostService()
    return _post_service
