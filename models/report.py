"""
Report schemas.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field

from models.base import BaseSchema


class ConversionHistoryItem(BaseSchema):
    """One batch of boxes opened for counting."""

    id: int = Field(..., description="Transaction ID")
    conversion_date: datetime
    location_id: Optional[int] = None
    location_name: str
    product_name: str
    color_name: str
    box_count: int = Field(..., description="Boxes opened in this batch")
    expected_pairs: int = Field(..., description="Pairs expected from this batch")
    actual_pairs: Optional[int] = Field(None, description="Pairs entered so far for the product/color")
    status: str = Field(..., description="'Pending Count' or 'Completed'")
    notes: Optional[str] = None


class ConversionHistoryResponse(BaseSchema):
    """Conversion history list."""

    data: list[ConversionHistoryItem]
    total: int
