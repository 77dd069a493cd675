"""
Pydantic models for community feed posts.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class PostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000, description="Post text")


class PostResponse(BaseModel):
    """
    A feed post.

    Author fields are copied from the author's profile when the post is
    created and are not refreshed afterwards.
    """
    id: str
    content: str
    user_id: str = Field(..., alias="userId")
    user_email: Optional[str] = Field(None, alias="userEmail")
    user_state_code: Optional[str] = Field(None, alias="userStateCode")
    user_batch: Optional[str] = Field(None, alias="userBatch")
    created_at: str = Field(..., alias="createdAt")

    class Config:
        populate_by_name = True


class FeedResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    posts: List[PostResponse] = []
