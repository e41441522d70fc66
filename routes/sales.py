"""
Sales history API routes.
"""

from datetime import date
from fastapi import APIRouter, Query
from typing import Optional
import structlog

from models.sale import SalesHistoryItem
from services.sales_service import get_sales_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/sales", tags=["Sales"])


@router.get("/history", response_model=list[SalesHistoryItem])
async def sales_history(
    location_id: int = Query(..., ge=1, description="Store location ID"),
    start_date: Optional[date] = Query(None, description="From date (inclusive)"),
    end_date: Optional[date] = Query(None, description="To date (inclusive)")
):
    """A store's sales, newest first, with order line counts."""
    try:
        return get_sales_service().get_history(
            location_id=location_id,
            start_date=start_date,
            end_date=end_date,
        )
    except Exception as e:
        return handle_error(e)
