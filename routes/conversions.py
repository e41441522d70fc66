"""
Box-to-pair conversion API routes.

Clients re-fetch GET /ready after every successful write; the write
endpoints also return the updated item.
"""

from fastapi import APIRouter, Query
from typing import Optional
import structlog

from models.conversion import ConversionItem, OpenBoxesRequest, PairCountRequest
from services.conversion_service import get_conversion_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/conversions", tags=["Conversions"])


@router.get("/ready", response_model=list[ConversionItem])
async def list_ready_to_count(
    location_id: Optional[int] = Query(None, ge=1, description="Location (defaults to main warehouse)")
):
    """
    List items with boxes waiting to be counted.

    Raises:
        500: Retrieval failed (no partial list)
    """
    try:
        return get_conversion_service().list_ready_to_count(location_id)
    except Exception as e:
        return handle_error(e)


@router.post("/open-boxes", response_model=ConversionItem, status_code=201)
async def open_boxes(data: OpenBoxesRequest):
    """
    Move boxes from box stock into counting.

    Raises:
        404: Product not found
        409: Stock changed concurrently
        422: Insufficient box stock
    """
    try:
        return get_conversion_service().open_boxes(
            product_id=data.product_id,
            color_id=data.color_id,
            box_count=data.box_count,
            location_id=data.location_id,
        )
    except Exception as e:
        return handle_error(e)


@router.get("/{item_id}", response_model=ConversionItem)
async def get_conversion_item(item_id: int):
    """
    Get a single conversion item.

    Raises:
        404: Item not found
    """
    try:
        return get_conversion_service().get_by_id(item_id)
    except Exception as e:
        return handle_error(e)


@router.post("/{item_id}/finish-box", response_model=ConversionItem)
async def finish_one_box(item_id: int):
    """
    Mark one box as finished counting.

    Raises:
        404: Item not found
        409: No boxes left, or item changed concurrently
    """
    try:
        return get_conversion_service().finish_one_box(item_id)
    except Exception as e:
        return handle_error(e)


@router.post("/{item_id}/pair-counts", response_model=ConversionItem)
async def record_pair_count(item_id: int, data: PairCountRequest):
    """
    Enter physically counted pairs per size.

    Raises:
        404: Item not found
        409: Item changed concurrently
        422: Empty or non-positive counts
    """
    try:
        return get_conversion_service().record_pair_count(
            item_id,
            data.counts,
            count_date=data.count_date,
        )
    except Exception as e:
        return handle_error(e)
