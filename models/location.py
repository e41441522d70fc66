"""
Location models.

A location is either a warehouse (receives and converts boxes) or a store.
"""

from enum import Enum
from typing import Optional
from pydantic import Field

from models.base import BaseSchema, TimestampMixin


class LocationType(str, Enum):
    """Location types."""
    WAREHOUSE = "Warehouse"
    STORE = "Store"


class LocationCreate(BaseSchema):
    """Create a new location."""

    location_name: str = Field(..., min_length=1, max_length=200, description="Location name")
    location_type: LocationType = Field(LocationType.WAREHOUSE, description="Warehouse or Store")
    address: Optional[str] = Field(None, max_length=500, description="Street address")


class LocationUpdate(BaseSchema):
    """
    Update an existing location.

    All fields optional - only provided fields are updated.
    """

    location_name: Optional[str] = Field(None, min_length=1, max_length=200)
    location_type: Optional[LocationType] = None
    address: Optional[str] = Field(None, max_length=500)


class LocationResponse(BaseSchema, TimestampMixin):
    """Location response with all fields."""

    id: int = Field(..., description="Location ID")
    location_name: str = Field(..., description="Location name")
    location_type: LocationType = Field(..., description="Warehouse or Store")
    address: Optional[str] = Field(None, description="Street address")
