"""
Dashboard endpoint - welcome data and quick actions for the signed-in user.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from app.core.errors import AppError
from app.services.identity_service import Session
from app.services.profile_cache import get_profile_cache
from app.services.user_service import get_user_service
from app.utils.security import get_current_session
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])

QUICK_ACTIONS = [
    {"key": "ppa_search", "title": "PPA Search", "label": "Find PPAs", "path": "/ppas"},
    {"key": "reminders", "title": "Clearance Reminders", "label": "Set Reminders", "path": "/reminders"},
    {"key": "community", "title": "Community", "label": "Connect", "path": "/community/posts"},
    {"key": "resources", "title": "Resources", "label": "View Resources", "path": "/resources"},
]


@router.get("")
def get_dashboard(session: Session = Depends(get_current_session)):
    """
    Welcome section and quick actions.

    The profile comes from the profile cache when warm, so repeat visits
    render without a database round-trip.
    """
    try:
        profile = get_profile_cache().get_or_load(session.uid, get_user_service().get_profile)
    except AppError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error fetching user data: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load dashboard",
        )

    return {
        "uid": session.uid,
        "welcome": f"Welcome back, {profile.state_code}" if profile else "Welcome back",
        "batch": profile.batch if profile else None,
        "profile": profile.model_dump(by_alias=True) if profile else None,
        "quick_actions": QUICK_ACTIONS,
    }
