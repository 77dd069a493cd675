"""
In-memory stand-in for Firebase Authentication.

Implements the same provider interface as FirebaseIdentityProvider so the
identity service can run locally and under test without a Firebase project.
Tokens are opaque random strings; revoking a user's tokens invalidates every
token issued to that user.
"""

import hashlib
import logging
import secrets
import threading
import uuid
from typing import Dict

from app.core.errors import AuthenticationFailure, ValidationFailure

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6  # Firebase Authentication's own minimum


class MockIdentityProvider:
    def __init__(self):
        self._lock = threading.Lock()
        self._accounts: Dict[str, Dict[str, str]] = {}
        self._tokens: Dict[str, Dict[str, str]] = {}

    @staticmethod
    def _hash_password(salt: str, password: str) -> str:
        return hashlib.sha256(f"{salt}{password}".encode()).hexdigest()

    def create_user(self, email: str, password: str) -> Dict[str, str]:
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationFailure(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")

        key = email.strip().lower()
        with self._lock:
            if key in self._accounts:
                raise ValidationFailure("The email address is already in use by another account.")
            salt = secrets.token_hex(8)
            account = {
                "uid": uuid.uuid4().hex[:28],
                "email": email.strip(),
                "salt": salt,
                "password_hash": self._hash_password(salt, password),
            }
            self._accounts[key] = account

        logger.info("[MOCK AUTH] Account created: %s", account["uid"])
        return {"uid": account["uid"], "email": account["email"]}

    def sign_in_with_password(self, email: str, password: str) -> Dict[str, str]:
        with self._lock:
            account = self._accounts.get(email.strip().lower())
            if account is None or account["password_hash"] != self._hash_password(account["salt"], password):
                raise AuthenticationFailure("Invalid email or password")

            token = secrets.token_urlsafe(32)
            self._tokens[token] = {"uid": account["uid"], "email": account["email"]}

        return {
            "idToken": token,
            "refreshToken": secrets.token_urlsafe(32),
            "localId": account["uid"],
            "email": account["email"],
            "expiresIn": "3600",
        }

    def verify_id_token(self, id_token: str) -> Dict[str, str]:
        with self._lock:
            claims = self._tokens.get(id_token)
        if claims is None:
            raise AuthenticationFailure("Session expired or invalid. Please sign in again.")
        return dict(claims)

    def revoke_refresh_tokens(self, uid: str) -> None:
        with self._lock:
            self._tokens = {token: claims for token, claims in self._tokens.items() if claims["uid"] != uid}

    def has_account(self, email: str) -> bool:
        with self._lock:
            return email.strip().lower() in self._accounts
