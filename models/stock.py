"""
Stock view schemas.

Box ("dus") stock is tracked per (location, product, color);
pair ("pasang") stock per (location, product, color, size).
"""

from typing import Optional
from pydantic import Field

from models.base import BaseSchema


class BoxStockItem(BaseSchema):
    """Boxes on hand for one product/color at a location."""

    product_id: int
    product_sku: str
    product_name: str
    color_id: int
    color_name: str
    box_count: int = Field(..., description="Boxes in stock")
    pairs_per_box: Optional[int] = Field(None, description="Standard box contents")
    category: Optional[str] = None


class BoxStockItemWithLocation(BoxStockItem):
    """Box stock row for the all-locations report."""

    location_id: int
    location_name: str


class PairStockItem(BaseSchema):
    """Pairs on hand for one product/color/size at a location."""

    product_id: int
    product_sku: str
    product_name: str
    color_id: int
    color_name: str
    size_id: int
    size_name: str
    pair_count: int = Field(..., description="Pairs in stock")
    variant_sku: Optional[str] = None
    category: str = "Unknown"
