"""
Location API routes.
"""

from fastapi import APIRouter, Response
import structlog

from models.location import LocationCreate, LocationUpdate, LocationResponse
from services.location_service import get_location_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/locations", tags=["Locations"])


@router.get("", response_model=list[LocationResponse])
async def list_locations():
    """Get all locations."""
    try:
        return get_location_service().get_all()
    except Exception as e:
        return handle_error(e)


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(location_id: int):
    """
    Get a single location.

    Raises:
        404: Location not found
    """
    try:
        return get_location_service().get_by_id(location_id)
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=LocationResponse, status_code=201)
async def create_location(data: LocationCreate):
    """Create a new location."""
    try:
        return get_location_service().create(data)
    except Exception as e:
        return handle_error(e)


@router.patch("/{location_id}", response_model=LocationResponse)
async def update_location(location_id: int, data: LocationUpdate):
    """
    Update a location.

    Only provided fields are updated.

    Raises:
        404: Location not found
    """
    try:
        return get_location_service().update(location_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/{location_id}", status_code=204)
async def delete_location(location_id: int):
    """
    Delete a location.

    Raises:
        404: Location not found
        409: Location still holds stock or conversions
        422: Location is the main warehouse
    """
    try:
        get_location_service().delete(location_id)
        return Response(status_code=204)
    except Exception as e:
        return handle_error(e)
