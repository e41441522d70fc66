"""
Box-to-pair conversion schemas.

A ConversionItem tracks, per (location, product, color), how many boxes
are waiting to be counted, how many pairs those boxes should yield and
how many pairs have actually been entered from physical counts.
"""

from enum import Enum
from datetime import datetime
from typing import Optional

from pydantic import Field, computed_field

from models.base import BaseSchema


class TransactionType(str, Enum):
    """Inventory movement types written to inventory_transactions."""
    GOODS_RECEIPT = "GOODS_RECEIPT"
    CONVERSION_BOXES_OPENED = "CONVERSION_BOXES_OPENED"
    CONVERSION_PAIRS_COUNTED = "CONVERSION_PAIRS_COUNTED"


class ConversionItem(BaseSchema):
    """
    One row of tracked conversion state.

    remaining_uncounted may go negative when more pairs were entered than
    expected; count_exceeds_expected flags that case instead of hiding it.
    """

    id: int = Field(..., description="Conversion row ID")
    location_id: int
    product_id: int
    color_id: int
    product_sku: str = ""
    product_name: str = ""
    color_name: str = ""
    ready_box_count: int = Field(..., ge=0, description="Boxes not yet counted")
    expected_pairs: int = Field(..., ge=0, description="Pairs anticipated from tracked boxes")
    actual_pairs_entered: int = Field(..., ge=0, description="Pairs confirmed by manual counts")
    pairs_per_box: int = Field(0, ge=0, description="Standard box contents of the product")
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def remaining_uncounted(self) -> int:
        """Expected pairs not yet entered (negative if over-entered)."""
        return self.expected_pairs - self.actual_pairs_entered

    @computed_field
    @property
    def count_exceeds_expected(self) -> bool:
        """True when more pairs were entered than expected."""
        return self.actual_pairs_entered > self.expected_pairs


class OpenBoxesRequest(BaseSchema):
    """Move boxes from box stock into counting."""

    location_id: Optional[int] = Field(None, ge=1, description="Defaults to the main warehouse")
    product_id: int = Field(..., ge=1)
    color_id: int = Field(..., ge=1)
    box_count: int = Field(..., gt=0, description="Boxes to open")


class PairCountEntry(BaseSchema):
    """Pairs counted for one size."""

    size_id: int = Field(..., ge=1)
    pair_count: int = Field(..., description="Pairs counted for this size")


class PairCountRequest(BaseSchema):
    """Physical count entered for a conversion item."""

    counts: list[PairCountEntry] = Field(..., description="Counts per size")
    count_date: Optional[datetime] = Field(None, description="When the count happened (defaults to now)")
