"""
Pydantic base models shared by the API responses.
"""

from pydantic import BaseModel
from typing import Optional


class BaseResponse(BaseModel):
    """
    Base response for write actions.
    `message` is the one-shot notification shown to the user.
    """
    success: bool = True
    message: Optional[str] = None


class CreatedResponse(BaseResponse):
    id: str
