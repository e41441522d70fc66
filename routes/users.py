"""
User API routes.
"""

from fastapi import APIRouter, Query, Response
import structlog

from models.user import UserCreate, UserUpdate, UserResponse
from services.user_service import get_user_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    active_only: bool = Query(False, description="Hide deactivated users")
):
    """Get users ordered by name."""
    try:
        return get_user_service().get_all(active_only=active_only)
    except Exception as e:
        return handle_error(e)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int):
    """
    Get a single user.

    Raises:
        404: User not found
    """
    try:
        return get_user_service().get_by_id(user_id)
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(data: UserCreate):
    """
    Create a new user.

    Raises:
        404: Location not found
        409: Email already used
    """
    try:
        return get_user_service().create(data)
    except Exception as e:
        return handle_error(e)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(user_id: int, data: UserUpdate):
    """
    Update a user. Only provided fields change.

    Raises:
        404: User or location not found
        409: Email already used
    """
    try:
        return get_user_service().update(user_id, data)
    except Exception as e:
        return handle_error(e)


@router.delete("/{user_id}", status_code=204)
async def delete_user(user_id: int):
    """
    Deactivate a user. The row is kept.

    Raises:
        404: User not found
    """
    try:
        get_user_service().deactivate(user_id)
        return Response(status_code=204)
    except Exception as e:
        return handle_error(e)
