"""
Identity Service - account creation, sign-in, sign-out and session lookup
against Firebase Authentication.

The Admin SDK covers account creation, ID token verification and token
revocation. Password sign-in is not part of the Admin SDK and goes through
the Identity Toolkit REST API.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import requests
from firebase_admin import auth as firebase_auth
from firebase_admin import exceptions as firebase_exceptions

from app.config.firebase import initialize_firebase_app
from app.core.errors import AuthenticationFailure, ServiceFailure, ValidationFailure
from app.core.settings import settings

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"


@dataclass
class Session:
    """An authenticated caller, resolved from a bearer ID token."""
    uid: str
    email: Optional[str]
    token: str


# listener(uid, session): session is None when the user signed out
AuthStateListener = Callable[[str, Optional[Session]], None]


class FirebaseIdentityProvider:
    """Firebase Authentication through firebase_admin and the REST sign-in endpoint."""

    def __init__(self, api_key: Optional[str] = None, timeout: float = 10.0):
        initialize_firebase_app()
        self.api_key = api_key
        self.timeout = timeout

    def create_user(self, email: str, password: str) -> Dict[str, str]:
        try:
            user = firebase_auth.create_user(email=email, password=password)
        except firebase_auth.EmailAlreadyExistsError:
            raise ValidationFailure("The email address is already in use by another account.")
        except ValueError as e:
            # Admin SDK rejects malformed emails and short passwords locally
            raise ValidationFailure(str(e))
        except firebase_exceptions.FirebaseError as e:
            raise ServiceFailure(f"Account creation failed: {e}")
        return {"uid": user.uid, "email": user.email}

    def sign_in_with_password(self, email: str, password: str) -> Dict[str, str]:
        if not self.api_key:
            raise ServiceFailure("FIREBASE_WEB_API_KEY is not configured; password sign-in is unavailable.")

        try:
            resp = requests.post(
                SIGN_IN_URL,
                params={"key": self.api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ServiceFailure(f"Identity service unreachable: {e}")

        if resp.status_code == 400:
            error = (resp.json().get("error") or {}).get("message", "")
            logger.info("Sign-in rejected: %s", error)
            raise AuthenticationFailure("Invalid email or password")
        if resp.status_code != 200:
            raise ServiceFailure(f"Identity service returned status {resp.status_code}")

        return resp.json()

    def verify_id_token(self, id_token: str) -> Dict[str, str]:
        try:
            claims = firebase_auth.verify_id_token(id_token, check_revoked=True)
        except (firebase_auth.InvalidIdTokenError, firebase_auth.UserDisabledError, ValueError):
            # Expired and revoked tokens are InvalidIdTokenError subclasses
            raise AuthenticationFailure("Session expired or invalid. Please sign in again.")
        except firebase_auth.CertificateFetchError as e:
            raise ServiceFailure(f"Could not verify session: {e}")
        return {"uid": claims["uid"], "email": claims.get("email")}

    def revoke_refresh_tokens(self, uid: str) -> None:
        try:
            firebase_auth.revoke_refresh_tokens(uid)
        except firebase_exceptions.FirebaseError as e:
            raise ServiceFailure(f"Sign-out failed: {e}")


def _build_provider():
    if settings.USE_MOCK_AUTH:
        from app.config.mock_auth import MockIdentityProvider
        logger.info("[AUTH] USING MOCK IDENTITY PROVIDER")
        return MockIdentityProvider()
    return FirebaseIdentityProvider(
        api_key=settings.FIREBASE_WEB_API_KEY,
        timeout=settings.IDENTITY_TIMEOUT_SECONDS,
    )


class IdentityService:
    """
    Wraps an identity provider and publishes auth-state changes.

    Listeners are called synchronously after a successful sign-in or
    sign-out, in registration order.
    """

    def __init__(self, provider=None):
        self.provider = provider or _build_provider()
        self._listeners: List[AuthStateListener] = []
        self._lock = threading.Lock()

    def create_account(self, email: str, password: str) -> str:
        account = self.provider.create_user(email=email, password=password)
        logger.info(f"Account created: {account['uid']}")
        return account["uid"]

    def sign_in(self, email: str, password: str) -> Dict[str, str]:
        result = self.provider.sign_in_with_password(email, password)
        session = Session(uid=result["localId"], email=result.get("email"), token=result["idToken"])
        logger.info(f"User signed in: {session.uid}")
        self._emit(session.uid, session)
        return result

    def sign_out(self, session: Session) -> None:
        self.provider.revoke_refresh_tokens(session.uid)
        logger.info(f"User signed out: {session.uid}")
        self._emit(session.uid, None)

    def current_session(self, token: Optional[str]) -> Session:
        if not token:
            raise AuthenticationFailure("Sign in required")
        claims = self.provider.verify_id_token(token)
        return Session(uid=claims["uid"], email=claims.get("email"), token=token)

    def on_auth_state_changed(self, listener: AuthStateListener) -> Callable[[], None]:
        """Register listener; returns a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, uid: str, session: Optional[Session]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(uid, session)
            except Exception as e:
                logger.error(f"Auth state listener failed: {e}", exc_info=True)


# Global service instance (singleton pattern)
_identity_service = None


def get_identity_service() -> IdentityService:
    """
    Get or create IdentityService singleton instance.

    Returns:
        IdentityService: The global identity service instance
    """
    global _identity_service
    if _identity_service is None:
        _identity_service = IdentityService()
    return _identity_service
