"""
Report API routes.
"""

from datetime import date
from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse
from typing import Optional
import structlog

from models.report import ConversionHistoryResponse
from services.report_service import get_report_service
from services.export_service import get_export_service
from routes.errors import handle_error

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/conversion-history", response_model=ConversionHistoryResponse)
async def conversion_history(
    start_date: Optional[date] = Query(None, description="From date (inclusive)"),
    end_date: Optional[date] = Query(None, description="To date (inclusive)"),
    location_id: Optional[int] = Query(None, ge=1, description="Restrict to one location")
):
    """Batches of boxes opened for counting, newest first."""
    try:
        rows = get_report_service().get_conversion_history(
            start_date=start_date,
            end_date=end_date,
            location_id=location_id,
        )
        return ConversionHistoryResponse(data=rows, total=len(rows))
    except Exception as e:
        return handle_error(e)


@router.get("/conversion-history/export")
async def export_conversion_history(
    start_date: Optional[date] = Query(None, description="From date (inclusive)"),
    end_date: Optional[date] = Query(None, description="To date (inclusive)"),
    location_id: Optional[int] = Query(None, ge=1, description="Restrict to one location")
):
    """Download the conversion history as an Excel workbook."""
    try:
        rows = get_report_service().get_conversion_history(
            start_date=start_date,
            end_date=end_date,
            location_id=location_id,
        )
        output = get_export_service().conversion_history_excel(rows)
        filename = f"conversion_history_{date.today().isoformat()}.xlsx"

        return StreamingResponse(
            output,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'}
        )
    except Exception as e:
        return handle_error(e)
