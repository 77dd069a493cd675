"""
Models for the static resources page (sample letters and tips).
"""

from enum import Enum
from pydantic import BaseModel


class ResourceType(str, Enum):
    LETTER = "letter"
    TIP = "tip"


class Resource(BaseModel):
    id: str
    title: str
    description: str
    type: ResourceType
    content: str
