"""
Sales history service.

Read-only view of the orders a store's point of sale recorded.
"""

from collections import Counter
from datetime import date, timedelta
from typing import Optional
import structlog

from config import get_supabase_client
from models.sale import SalesHistoryItem
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


class SalesService:
    """
    Sales history queries.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "sales_orders"

    def get_history(
        self,
        location_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[SalesHistoryItem]:
        """
        Get a store's sales, newest first.

        Args:
            location_id: Store location ID
            start_date: Include sales on or after this day
            end_date: Include sales on or before this day

        Returns:
            List of SalesHistoryItem with the number of order lines
        """
        logger.info(
            "getting_sales_history",
            location_id=location_id,
            start_date=str(start_date) if start_date else None,
            end_date=str(end_date) if end_date else None
        )

        try:
            query = (
                self.db.table(self.table)
                .select("*")
                .eq("location_id", location_id)
            )
            if start_date:
                query = query.gte("sale_date", start_date.isoformat())
            if end_date:
                # sale_date is a timestamp; the whole end day is included
                query = query.lt("sale_date", (end_date + timedelta(days=1)).isoformat())

            orders = query.order("sale_date", desc=True).execute().data or []

            line_counts: Counter = Counter()
            if orders:
                lines = (
                    self.db.table("sales_order_items")
                    .select("id, sales_order_id")
                    .in_("sales_order_id", [o["id"] for o in orders])
                    .execute()
                )
                line_counts.update(line["sales_order_id"] for line in lines.data or [])

        except Exception as e:
            logger.error("get_sales_history_failed", location_id=location_id, error=str(e))
            raise DatabaseError("select", str(e))

        logger.info("sales_history_retrieved", location_id=location_id, count=len(orders))

        return [
            SalesHistoryItem(
                id=order["id"],
                order_number=order["order_number"],
                sale_date=order["sale_date"],
                location_id=order["location_id"],
                item_count=line_counts[order["id"]],
                total_amount=order["total_amount"],
                customer_name=order.get("customer_name") or "Walk-in Customer",
            )
            for order in orders
        ]


# Singleton instance
_sales_service: Optional[SalesService] = None


def get_sales_service() -> SalesService:
    """Get or create SalesService instance."""
    global _sales_service
    if _sales_service is None:
        _sales_service = SalesService()
    return _sales_service
