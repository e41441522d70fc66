"""
Sales history schemas.

Sales are written by the store point of sale; this backend only reads
them back per store.
"""

from datetime import datetime
from decimal import Decimal
from pydantic import Field

from models.base import BaseSchema


class SalesHistoryItem(BaseSchema):
    """One sales order as listed on the store's history screen."""

    id: int
    order_number: str = Field(..., description="Receipt number, e.g. SO-1712345678")
    sale_date: datetime
    location_id: int
    item_count: int = Field(0, description="Number of order lines")
    total_amount: Decimal = Field(..., description="Order total")
    customer_name: str = Field("Walk-in Customer", description="Customer, if one was noted")
