"""
Application error taxonomy.

Services raise these; routes catch them at the call site, log them and turn
them into a one-shot notification (HTTPException detail). Nothing is retried.
"""

from fastapi import HTTPException, status


class AppError(Exception):
    """Base class for failures that carry a user-facing message."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_http(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.message)


class ValidationFailure(AppError):
    """Input rejected before any call to the hosted services."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationFailure(AppError):
    """Missing, invalid or revoked credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ServiceFailure(AppError):
    """The identity service or the document store failed."""

    status_code = status.HTTP_502_BAD_GATEWAY
