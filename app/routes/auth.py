"""
Authentication endpoints - email/password signup and sessions.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from app.core.errors import AppError
from app.models.base import BaseResponse
from app.models.user import AuthResponse, SessionInfo, SignInRequest, SignUpRequest
from app.services.identity_service import Session, get_identity_service
from app.services.profile_cache import get_profile_cache
from app.services.user_service import get_user_service
from app.utils.security import get_current_session
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def sign_up(request: SignUpRequest):
    """
    Create an account and its profile.

    Mismatched password and confirmation are rejected before anything is
    written. The client signs in afterwards to obtain a token.
    """
    try:
        profile = get_user_service().sign_up(request)
        return AuthResponse(
            success=True,
            message="Account created successfully!",
            uid=profile.uid,
            email=profile.email,
        )

    except AppError as e:
        logger.warning(f"Signup rejected: {e.message}")
        raise e.to_http()
    except Exception as e:
        logger.error(f"Signup failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred during sign up",
        )


@router.post("/signin", response_model=AuthResponse)
def sign_in(request: SignInRequest):
    """
    Sign in with email and password.

    Returns the ID token to send as `Authorization: Bearer <token>`.
    """
    try:
        result = get_identity_service().sign_in(request.email, request.password)
        return AuthResponse(
            success=True,
            message="Signed in successfully",
            uid=result["localId"],
            email=result.get("email"),
            token=result["idToken"],
            refresh_token=result.get("refreshToken"),
            expires_in=int(result.get("expiresIn", 3600)),
        )

    except AppError as e:
        logger.warning(f"Sign-in rejected: {e.message}")
        raise e.to_http()
    except Exception as e:
        logger.error(f"Sign-in failed: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An error occurred during sign in",
        )


@router.post("/signout", response_model=BaseResponse)
def sign_out(session: Session = Depends(get_current_session)):
    """Revoke the caller's tokens and drop their cached profile."""
    try:
        get_identity_service().sign_out(session)
        return BaseResponse(success=True, message="Signed out")

    except AppError as e:
        logger.error(f"Sign-out failed: {e.message}")
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error signing out: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error signing out",
        )


@router.get("/me", response_model=SessionInfo)
def get_current_user(session: Session = Depends(get_current_session)):
    """
    Current-session lookup.

    Returns the caller's identity and, when available, their profile.
    """
    try:
        profile = get_profile_cache().get_or_load(session.uid, get_user_service().get_profile)
        return SessionInfo(uid=session.uid, email=session.email, profile=profile)

    except AppError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Failed to get current user: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get current user",
        )
