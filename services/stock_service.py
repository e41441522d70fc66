"""
Stock service for box and pair stock views.

Read-only views over box_stock and pair_stock, joined to products,
colors, sizes and locations for display.
"""

from typing import Optional
import structlog

from config import get_supabase_client, settings
from models.stock import BoxStockItem, BoxStockItemWithLocation, PairStockItem
from exceptions import DatabaseError
from services.lookup import fetch_by_ids

logger = structlog.get_logger(__name__)


class StockService:
    """
    Stock view logic.

    Missing product/color/size rows fall back to placeholder names so a
    dangling foreign key never hides stock.
    """

    def __init__(self):
        self.db = get_supabase_client()

    def get_box_stock(self, location_id: Optional[int] = None) -> list[BoxStockItem]:
        """
        Get box stock for a location.

        Args:
            location_id: Location ID (defaults to the main warehouse)

        Returns:
            List of BoxStockItem
        """
        location_id = location_id or settings.main_warehouse_id
        logger.info("getting_box_stock", location_id=location_id)

        try:
            result = (
                self.db.table("box_stock")
                .select("id, box_count, product_id, color_id")
                .eq("location_id", location_id)
                .execute()
            )
            rows = result.data or []
            if not rows:
                return []

            products = fetch_by_ids(
                self.db, "products", (r["product_id"] for r in rows),
                "id, product_name, product_sku, pairs_per_box, category"
            )
            colors = fetch_by_ids(
                self.db, "colors", (r["color_id"] for r in rows), "id, color_name"
            )

        except Exception as e:
            logger.error("get_box_stock_failed", location_id=location_id, error=str(e))
            raise DatabaseError("select", str(e))

        items = []
        for row in rows:
            product = products.get(row["product_id"], {})
            color = colors.get(row["color_id"], {})
            items.append(BoxStockItem(
                product_id=row["product_id"],
                product_sku=product.get("product_sku") or f"SKU-{row['product_id']}",
                product_name=product.get("product_name") or f"Product {row['product_id']}",
                color_id=row["color_id"],
                color_name=color.get("color_name") or f"Color {row['color_id']}",
                box_count=row["box_count"],
                pairs_per_box=product.get("pairs_per_box"),
                category=product.get("category"),
            ))

        logger.info("box_stock_retrieved", location_id=location_id, count=len(items))
        return items

    def get_pair_stock(self, location_id: Optional[int] = None) -> list[PairStockItem]:
        """
        Get pair stock for a location (only sizes with pairs on hand).

        Args:
            location_id: Location ID (defaults to the main warehouse)

        Returns:
            List of PairStockItem
        """
        location_id = location_id or settings.main_warehouse_id
        logger.info("getting_pair_stock", location_id=location_id)

        try:
            result = (
                self.db.table("pair_stock")
                .select("id, pair_count, variant_sku, product_id, color_id, size_id")
                .eq("location_id", location_id)
                .gt("pair_count", 0)
                .execute()
            )
            rows = result.data or []
            if not rows:
                return []

            products = fetch_by_ids(
                self.db, "products", (r["product_id"] for r in rows),
                "id, product_name, product_sku, category"
            )
            colors = fetch_by_ids(
                self.db, "colors", (r["color_id"] for r in rows), "id, color_name"
            )
            sizes = fetch_by_ids(
                self.db, "sizes", (r["size_id"] for r in rows), "id, size_name"
            )

        except Exception as e:
            logger.error("get_pair_stock_failed", location_id=location_id, error=str(e))
            raise DatabaseError("select", str(e))

        items = []
        for row in rows:
            product = products.get(row["product_id"], {})
            color = colors.get(row["color_id"], {})
            size = sizes.get(row["size_id"], {})
            items.append(PairStockItem(
                product_id=row["product_id"],
                product_sku=product.get("product_sku") or f"SKU-{row['product_id']}",
                product_name=product.get("product_name") or f"Product {row['product_id']}",
                color_id=row["color_id"],
                color_name=color.get("color_name") or f"Color {row['color_id']}",
                size_id=row["size_id"],
                size_name=size.get("size_name") or f"Size {row['size_id']}",
                pair_count=row["pair_count"],
                variant_sku=row.get("variant_sku"),
                category=product.get("category") or "Unknown",
            ))

        logger.info("pair_stock_retrieved", location_id=location_id, count=len(items))
        return items

    def get_all_box_stock(
        self,
        location_id: Optional[int] = None
    ) -> list[BoxStockItemWithLocation]:
        """
        Get box stock across every location, or one location.

        Args:
            location_id: Restrict to this location

        Returns:
            List of BoxStockItemWithLocation
        """
        logger.info("getting_all_box_stock", location_id=location_id)

        try:
            query = self.db.table("locations").select("id, location_name").order("id")
            if location_id:
                query = query.eq("id", location_id)
            locations = query.execute().data or []

        except Exception as e:
            logger.error("get_all_box_stock_failed", error=str(e))
            raise DatabaseError("select", str(e))

        items = []
        for location in locations:
            for item in self.get_box_stock(location["id"]):
                items.append(BoxStockItemWithLocation(
                    **item.model_dump(),
                    location_id=location["id"],
                    location_name=location["location_name"],
                ))

        return items


# Singleton instance
_stock_service: Optional[StockService] = None


def get_stock_service() -> StockService:
    """Get or create StockService instance."""
    global _stock_service
    if _stock_service is None:
        _stock_service = StockService()
    return _stock_service
