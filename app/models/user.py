"""
User models for signup, sign-in and profile data.
"""

from pydantic import BaseModel, Field
from typing import Optional


class SignUpRequest(BaseModel):
    """Signup form. Password and confirmation are compared before any write."""
    email: str = Field(..., min_length=3, max_length=254, description="Email address")
    password: str = Field(..., min_length=1, description="Account password")
    confirm_password: str = Field(..., min_length=1, description="Password confirmation")
    state_code: str = Field(..., min_length=1, max_length=30, description="Service state code, e.g. LA/23A/1234")
    batch: str = Field(..., min_length=1, max_length=30, description="Service batch label")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "ada@example.com",
                "password": "s3cret-pass",
                "confirm_password": "s3cret-pass",
                "state_code": "LA/23A/1234",
                "batch": "2023 Batch A",
            }
        }


class SignInRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)


class UserProfile(BaseModel):
    """
    Profile document stored at users/{uid}.

    Attribute names are snake_case; the stored document keeps the camelCase
    field names shared with the web client.
    """
    uid: str = Field(..., description="Identity reference (Firebase uid)")
    email: str
    state_code: str = Field(..., alias="stateCode")
    batch: str
    created_at: str = Field(..., alias="createdAt", description="ISO-8601 creation time")
    state: Optional[str] = Field(None, description="Deployment state")
    location: Optional[str] = Field(None, description="Deployment location")

    class Config:
        populate_by_name = True

    def to_document(self) -> dict:
        """Firestore document body (uid is the document id, not a field)."""
        return self.model_dump(by_alias=True, exclude={"uid"}, exclude_none=True)


class AuthResponse(BaseModel):
    """Authentication response."""
    success: bool
    message: str
    uid: Optional[str] = None
    email: Optional[str] = None
    token: Optional[str] = None  # Firebase ID token, sent back as a bearer token
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


class SessionInfo(BaseModel):
    """Current-session lookup result."""
    uid: str
    email: Optional[str] = None
    profile: Optional[UserProfile] = None
