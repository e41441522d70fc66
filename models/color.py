"""
Color models.
"""

from pydantic import Field

from models.base import BaseSchema, TimestampMixin


class ColorCreate(BaseSchema):
    """Create or rename a color."""

    color_name: str = Field(..., min_length=1, max_length=100, description="Color name", examples=["Hitam"])


class ColorUpdate(ColorCreate):
    """Update a color. Only the name is editable."""
    pass


class ColorResponse(BaseSchema, TimestampMixin):
    """Color response with all fields."""

    id: int = Field(..., description="Color ID")
    color_name: str = Field(..., description="Color name")
