"""
PPA directory endpoints - search Primary Place of Assignment records.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.models.ppa import PPASearchResponse, STATES
from app.services.identity_service import Session
from app.services.ppa_service import get_ppa_service
from app.utils.security import get_current_session
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ppas", tags=["PPA Search"])


@router.get("", response_model=PPASearchResponse)
def search_ppas(
    q: str = Query("", max_length=200, description="Name prefix"),
    state: str = Query("", max_length=50, description="Exact state"),
    session: Session = Depends(get_current_session),
):
    """
    Search PPAs by name prefix and state.

    Called without parameters on page load to list everything; each search
    returns the complete result set.
    """
    try:
        results = get_ppa_service().search(q, state)
        return PPASearchResponse(query=q, state=state, count=len(results), results=results)
    except Exception as e:
        logger.error(f"Error searching PPAs: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to search PPAs",
        )


@router.get("/states")
async def list_states():
    """States offered by the search filter."""
    return {"states": STATES}
