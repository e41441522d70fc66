"""
Goods receipt schemas.

A goods receipt records boxes arriving at a warehouse uncounted.
"""

from datetime import date
from typing import Optional
from pydantic import Field

from models.base import BaseSchema, TimestampMixin


class GoodsReceiptCreate(BaseSchema):
    """
    Receive boxes into a location.

    Required: receipt_date, product_id, color_id, location_id, box_count
    Optional: supplier, reference_number
    """

    receipt_date: date = Field(..., description="Date the boxes arrived")
    product_id: int = Field(..., ge=1, description="Product ID")
    color_id: int = Field(..., ge=1, description="Color ID")
    location_id: int = Field(..., ge=1, description="Receiving location ID")
    box_count: int = Field(..., gt=0, description="Number of boxes received")
    supplier: Optional[str] = Field(None, max_length=200, description="Supplier name")
    reference_number: Optional[str] = Field(None, max_length=100, description="Delivery note or invoice number")


class GoodsReceiptResponse(BaseSchema, TimestampMixin):
    """Goods receipt as stored."""

    id: int = Field(..., description="Receipt ID")
    receipt_date: date
    product_id: int
    color_id: int
    location_id: int
    box_count: int
    supplier: Optional[str] = None
    reference_number: Optional[str] = None


class GoodsReceiptHistoryItem(BaseSchema):
    """Goods receipt with resolved display names."""

    id: int
    receipt_date: date
    reference_number: Optional[str] = None
    supplier: Optional[str] = None
    location_name: str = "Main Warehouse"
    product_name: Optional[str] = None
    color_name: Optional[str] = None
    box_count: int
