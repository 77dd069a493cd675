"""
Community feed endpoints - list and share posts.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from app.core.errors import AppError
from app.models.post import FeedResponse, PostCreate
from app.services.identity_service import Session
from app.services.post_service import get_post_service
from app.services.profile_cache import get_profile_cache
from app.services.user_service import get_user_service
from app.utils.security import get_current_session
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/community", tags=["Community"])


@router.get("/posts", response_model=FeedResponse)
def get_posts(session: Session = Depends(get_current_session)):
    """All posts, newest first."""
    try:
        return FeedResponse(posts=get_post_service().list_posts())
    except Exception as e:
        logger.error(f"Error fetching posts: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load posts",
        )


@router.post("/posts", response_model=FeedResponse, status_code=status.HTTP_201_CREATED)
def share_post(post: PostCreate, session: Session = Depends(get_current_session)):
    """
    Share a post, then return the refetched feed.

    The post is tagged with the author's cached profile fields.
    """
    try:
        profile = get_profile_cache().get_or_load(session.uid, get_user_service().get_profile)
        get_post_service().create_post(session, post.content, profile)
    except AppError as e:
        logger.warning(f"Post rejected: {e.message}")
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error creating post: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to share post",
        )

    try:
        posts = get_post_service().list_posts()
    except Exception as e:
        logger.error(f"Error fetching posts: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Post shared, but the feed could not be reloaded",
        )

    return FeedResponse(message="Post shared successfully", posts=posts)
