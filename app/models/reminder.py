"""
Pydantic models for clearance reminders.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class ReminderCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    date: datetime = Field(..., description="When the reminder is due")
    description: str = Field("", max_length=2000)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Monthly clearance",
                "date": "2024-05-20T09:00:00",
                "description": "Bring the signed clearance form to the LGI office.",
            }
        }


class ReminderResponse(BaseModel):
    id: str
    title: str
    date: str = Field(..., description="ISO-8601 due time")
    description: str = ""
    user_id: str = Field(..., alias="userId")
    created_at: Optional[str] = Field(None, alias="createdAt")

    class Config:
        populate_by_name = True


class ReminderListResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    reminders: List[ReminderResponse] = []
