"""
Goods receipt API routes.
"""

from datetime import date
from fastapi import APIRouter, Query
from typing import Optional
import structlog

from models.goods_receipt import (
    GoodsReceiptCreate,
    GoodsReceiptResponse,
    GoodsReceiptHistoryItem,
)
from services.goods_receipt_service import get_goods_receipt_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/goods-receipts", tags=["Goods Receipts"])


@router.get("", response_model=list[GoodsReceiptResponse])
async def list_goods_receipts():
    """Get all receipts, newest first."""
    try:
        return get_goods_receipt_service().get_all()
    except Exception as e:
        return handle_error(e)


@router.post("", response_model=GoodsReceiptResponse, status_code=201)
async def create_goods_receipt(data: GoodsReceiptCreate):
    """
    Receive boxes into a location.

    Adds the boxes to box stock and logs the movement.

    Raises:
        409: Box stock changed while receiving, retry
    """
    try:
        return get_goods_receipt_service().create(data)
    except Exception as e:
        return handle_error(e)


@router.get("/history", response_model=list[GoodsReceiptHistoryItem])
async def goods_receipt_history(
    start_date: Optional[date] = Query(None, description="From date (inclusive)"),
    end_date: Optional[date] = Query(None, description="To date (inclusive)"),
    supplier: Optional[str] = Query(None, description="Supplier contains (case-insensitive)")
):
    """Receipt history with product, color and location names."""
    try:
        return get_goods_receipt_service().get_history(
            start_date=start_date,
            end_date=end_date,
            supplier=supplier,
        )
    except Exception as e:
        return handle_error(e)


@router.get("/{receipt_id}", response_model=GoodsReceiptResponse)
async def get_goods_receipt(receipt_id: int):
    """
    Get a single receipt.

    Raises:
        404: Receipt not found
    """
    try:
        return get_goods_receipt_service().get_by_id(receipt_id)
    except Exception as e:
        return handle_error(e)
