"""
Resource endpoints - sample letters and tips.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import PlainTextResponse

from app.models.resource import Resource, ResourceType
from app.services.resource_service import get_resource, list_resources

router = APIRouter(prefix="/resources", tags=["Resources"])


@router.get("", response_model=List[Resource])
async def get_resources(type: Optional[ResourceType] = None):
    """Sample letters (type=letter), tips (type=tip), or both."""
    return list_resources(type)


@router.get("/{resource_type}/{resource_id}/download", response_class=PlainTextResponse)
async def download_resource(resource_type: ResourceType, resource_id: str):
    """The resource's text as a downloadable <title>.txt file."""
    resource = get_resource(resource_type, resource_id)
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found")

    return PlainTextResponse(
        resource.content,
        headers={"Content-Disposition": f'attachment; filename="{resource.title}.txt"'},
    )
