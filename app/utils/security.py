"""
Request authentication helpers: bearer token parsing and the
current-session dependency used by protected routes.
"""

import logging
from typing import Optional

from fastapi import Header, HTTPException, status

from app.core.errors import AppError
from app.services.identity_service import Session, get_identity_service

logger = logging.getLogger(__name__)


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Pull the token out of an Authorization header.

    "Bearer abc" → "abc"; anything else → None
    """
    if not authorization or not authorization.strip():
        return None

    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def resolve_session(token: Optional[str]) -> Session:
    """Verify a raw ID token, converting failures into HTTP errors."""
    try:
        return get_identity_service().current_session(token)
    except AppError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Session lookup failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not verify session",
        )


def get_current_session(authorization: Optional[str] = Header(None)) -> Session:
    """FastAPI dependency: the signed-in caller or 401."""
    return resolve_session(extract_bearer_token(authorization))
