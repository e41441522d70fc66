"""
Color API routes.
"""

from fastapi import APIRouter, Response
import structlog

from models.color import ColorCreate, ColorUpdate, ColorResponse
from services.color_service import get_color_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/colors", tags=["Colors"])


@router.get("", response_model=list[ColorResponse])
async def list_colors():
    """Get all colors."""
    try:
        return get_color_service().get_all()
    except Exception as e:
        return handle_error(e)


@router.get("/{color_id}", response_model=ColorResponse)
async def get_color(color_id: int):
    """
    Get a single color.

    Raises:
        404: Color not found
    """
    try:
        return get_color_service().get_by_id(color_id)
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=ColorResponse, status_code=201)
async def create_color(data: ColorCreate):
    """Create a new color."""
    try:
        return get_color_service().create(data)
    except Exception as e:
        return handle_error(e)


@router.put("/{color_id}", response_model=ColorResponse)
async def update_color(color_id: int, data: ColorUpdate):
    """
    Rename a color.

    Raises:
        404: Color not found
    """
    try:
        return get_color_service().update(color_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/{color_id}", status_code=204)
async def delete_color(color_id: int):
    """
    Delete a color.

    Raises:
        404: Color not found
        409: Color still used by stock or conversions
    """
    try:
        get_color_service().delete(color_id)
        return Response(status_code=204)
    except Exception as e:
        return handle_error(e)
