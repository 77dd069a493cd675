"""
Pydantic models for Primary Place of Assignment (PPA) directory records.
PPA documents are populated out-of-band and never written by the API.
"""

from pydantic import BaseModel, Field
from typing import List


# Options offered by the directory's state filter
STATES: List[str] = [
    "Abia", "Adamawa", "Akwa Ibom", "Anambra", "Bauchi", "Bayelsa", "Benue", "Borno",
    "Cross River", "Delta", "Ebonyi", "Edo", "Ekiti", "Enugu", "FCT", "Abuja", "Gombe",
    "Imo", "Jigawa", "Kaduna", "Kano", "Katsina", "Kebbi", "Kogi", "Kwara", "Lagos",
    "Nasarawa", "Niger", "Ogun", "Ondo", "Osun", "Oyo", "Plateau", "Rivers", "Sokoto",
    "Taraba", "Yobe", "Zamfara",
]


class PPAResponse(BaseModel):
    id: str
    name: str
    location: str = ""
    state: str = ""
    rating: float = Field(0.0, ge=0, le=5)
    reviews: int = Field(0, ge=0, description="Number of reviews")
    description: str = ""


class PPASearchResponse(BaseModel):
    query: str = ""
    state: str = ""
    count: int
    results: List[PPAResponse]
