"""
Stock view API routes.
"""

from fastapi import APIRouter, Query
from typing import Optional
import structlog

from models.stock import BoxStockItem, BoxStockItemWithLocation, PairStockItem
from services.stock_service import get_stock_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/stock", tags=["Stock"])


@router.get("/boxes", response_model=list[BoxStockItem])
async def box_stock(
    location_id: Optional[int] = Query(None, ge=1, description="Location (defaults to main warehouse)")
):
    """Box stock at one location."""
    try:
        return get_stock_service().get_box_stock(location_id)
    except Exception as e:
        return handle_error(e)


@router.get("/boxes/all", response_model=list[BoxStockItemWithLocation])
async def all_box_stock(
    location_id: Optional[int] = Query(None, ge=1, description="Restrict to one location")
):
    """Box stock across locations."""
    try:
        return get_stock_service().get_all_box_stock(location_id)
    except Exception as e:
        return handle_error(e)


@router.get("/pairs", response_model=list[PairStockItem])
async def pair_stock(
    location_id: Optional[int] = Query(None, ge=1, description="Location (defaults to main warehouse)")
):
    """Pair stock at one location (sizes with pairs on hand)."""
    try:
        return get_stock_service().get_pair_stock(location_id)
    except Exception as e:
        return handle_error(e)
