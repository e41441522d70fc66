"""
Report service - conversion history.

Built from CONVERSION_BOXES_OPENED movements joined to the conversion
tracker for current counting status.
"""

from datetime import date, datetime, time
from typing import Optional
import structlog

from config import get_supabase_client
from models.conversion import TransactionType
from models.report import ConversionHistoryItem
from exceptions import DatabaseError
from services.lookup import fetch_by_ids

logger = structlog.get_logger(__name__)

STATUS_PENDING = "Pending Count"
STATUS_COMPLETED = "Completed"


class ReportService:
    """
    Reporting queries.
    """

    def __init__(self):
        self.db = get_supabase_client()

    def get_conversion_history(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        location_id: Optional[int] = None,
    ) -> list[ConversionHistoryItem]:
        """
        Get batches of boxes opened for counting, newest first.

        Args:
            start_date: Include batches on or after this date
            end_date: Include batches on or before this date (whole day)
            location_id: Restrict to one location

        Returns:
            List of ConversionHistoryItem
        """
        logger.info(
            "getting_conversion_history",
            start_date=str(start_date) if start_date else None,
            end_date=str(end_date) if end_date else None,
            location_id=location_id
        )

        try:
            query = (
                self.db.table("inventory_transactions")
                .select("*")
                .eq("type", TransactionType.CONVERSION_BOXES_OPENED.value)
            )
            if start_date:
                query = query.gte("transaction_date", datetime.combine(start_date, time.min).isoformat())
            if end_date:
                query = query.lte("transaction_date", datetime.combine(end_date, time.max).isoformat())
            if location_id:
                query = query.eq("location_id", location_id)

            rows = query.order("transaction_date", desc=True).execute().data or []
            if not rows:
                return []

            products = fetch_by_ids(
                self.db, "products", (r["product_id"] for r in rows), "id, product_name"
            )
            colors = fetch_by_ids(
                self.db, "colors", (r["color_id"] for r in rows), "id, color_name"
            )
            locations = fetch_by_ids(
                self.db, "locations", (r["location_id"] for r in rows), "id, location_name"
            )

            tracker_query = self.db.table("box_conversions").select(
                "location_id, product_id, color_id, ready_box_count, actual_pairs_entered"
            )
            if location_id:
                tracker_query = tracker_query.eq("location_id", location_id)
            tracker = {
                (t["location_id"], t["product_id"], t["color_id"]): t
                for t in (tracker_query.execute().data or [])
            }

        except Exception as e:
            logger.error("get_conversion_history_failed", error=str(e))
            raise DatabaseError("select", str(e))

        items = []
        for row in rows:
            key = (row["location_id"], row["product_id"], row["color_id"])
            tracked = tracker.get(key)
            pending = bool(tracked and tracked["ready_box_count"] > 0)

            items.append(ConversionHistoryItem(
                id=row["id"],
                conversion_date=row["transaction_date"],
                location_id=row["location_id"],
                location_name=locations.get(row["location_id"], {}).get("location_name") or f"Location {row['location_id']}",
                product_name=products.get(row["product_id"], {}).get("product_name") or f"Product {row['product_id']}",
                color_name=colors.get(row["color_id"], {}).get("color_name") or f"Color {row['color_id']}",
                box_count=row.get("box_qty") or 0,
                expected_pairs=row.get("pair_qty") or 0,
                actual_pairs=tracked["actual_pairs_entered"] if tracked else None,
                status=STATUS_PENDING if pending else STATUS_COMPLETED,
                notes=row.get("notes"),
            ))

        logger.info("conversion_history_retrieved", count=len(items))
        return items


# Singleton instance
_report_service: Optional[ReportService] = None


def get_report_service() -> ReportService:
    """Get or create ReportService instance."""
    global _report_service
    if _report_service is None:
        _report_service = ReportService()
    return _report_service
