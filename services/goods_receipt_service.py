"""
Goods receipt service.

Receiving boxes adds them to box stock at the receiving location, logs
a GOODS_RECEIPT movement and stores the receipt. The stock increment is
guarded like the conversion writes, so it cannot overwrite boxes that
were opened for counting in between.
"""

from datetime import date
from typing import Optional
import structlog

from config import get_supabase_client
from models.conversion import TransactionType
from models.goods_receipt import (
    GoodsReceiptCreate,
    GoodsReceiptResponse,
    GoodsReceiptHistoryItem,
)
from exceptions import AppError, GoodsReceiptNotFoundError, DatabaseError
from services.lookup import fetch_by_ids
from services.transaction_service import record_transaction
from services.store_writes import UndoStep, guarded_update, undo_insert, rollback

logger = structlog.get_logger(__name__)


class GoodsReceiptService:
    """
    Goods receipt business logic.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "goods_receipts"

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create(self, data: GoodsReceiptCreate) -> GoodsReceiptResponse:
        """
        Receive boxes.

        Steps:
        1. Add to box stock (guarded on the count that was read)
        2. Log GOODS_RECEIPT
        3. Store the receipt

        Completed steps are undone in reverse order if a later one fails.

        Args:
            data: Receipt data

        Returns:
            Created GoodsReceiptResponse

        Raises:
            ConcurrentConversionError: If box stock changed under us
            DatabaseError: If any step fails
        """
        logger.info(
            "creating_goods_receipt",
            location_id=data.location_id,
            product_id=data.product_id,
            color_id=data.color_id,
            box_count=data.box_count
        )

        undo: list[UndoStep] = []

        try:
            # 1. Add to box stock
            existing = (
                self.db.table("box_stock")
                .select("id, box_count")
                .eq("location_id", data.location_id)
                .eq("product_id", data.product_id)
                .eq("color_id", data.color_id)
                .limit(1)
                .execute()
            )

            if existing.data:
                stock = existing.data[0]
                before = stock["box_count"]
                after = before + data.box_count
                guarded_update(
                    self.db, "box_stock", stock["id"],
                    {"box_count": after},
                    guard=("box_count", before),
                    resource="Box stock",
                )
                undo.append(lambda: guarded_update(
                    self.db, "box_stock", stock["id"],
                    {"box_count": before},
                    guard=("box_count", after),
                    resource="Box stock",
                ))
            else:
                inserted = (
                    self.db.table("box_stock")
                    .insert({
                        "location_id": data.location_id,
                        "product_id": data.product_id,
                        "color_id": data.color_id,
                        "box_count": data.box_count,
                    })
                    .execute()
                )
                undo.append(undo_insert(self.db, "box_stock", inserted.data[0]["id"]))

            # 2. Movement log
            movement = record_transaction(
                self.db,
                TransactionType.GOODS_RECEIPT,
                location_id=data.location_id,
                product_id=data.product_id,
                color_id=data.color_id,
                box_qty=data.box_count,
                transaction_date=data.receipt_date,
                notes=f"Receipt from {data.supplier or '-'} ({data.reference_number or '-'})",
            )
            undo.append(undo_insert(self.db, "inventory_transactions", movement["id"]))

            # 3. Receipt
            result = (
                self.db.table(self.table)
                .insert(data.model_dump(mode="json"))
                .execute()
            )

            if not result.data:
                raise DatabaseError("insert", "No data returned")

        except Exception as e:
            rollback(undo, "create_goods_receipt")
            if isinstance(e, AppError):
                logger.warning("create_goods_receipt_rejected", code=e.code)
                raise
            logger.error("create_goods_receipt_failed", error=str(e))
            raise DatabaseError("insert", str(e))

        receipt = GoodsReceiptResponse(**result.data[0])
        logger.info("goods_receipt_created", receipt_id=receipt.id, box_count=receipt.box_count)
        return receipt

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(self) -> list[GoodsReceiptResponse]:
        """Get all receipts, newest first."""
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .order("receipt_date", desc=True)
                .execute()
            )
            return [GoodsReceiptResponse(**row) for row in result.data]

        except Exception as e:
            logger.error("get_goods_receipts_failed", error=str(e))
            raise DatabaseError("select", str(e))

    def get_by_id(self, receipt_id: int) -> GoodsReceiptResponse:
        """
        Get a single receipt.

        Raises:
            GoodsReceiptNotFoundError: If receipt doesn't exist
        """
        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", receipt_id)
                .limit(1)
                .execute()
            )

            if not result.data:
                raise GoodsReceiptNotFoundError(receipt_id)

            return GoodsReceiptResponse(**result.data[0])

        except GoodsReceiptNotFoundError:
            raise
        except Exception as e:
            logger.error("get_goods_receipt_failed", receipt_id=receipt_id, error=str(e))
            raise DatabaseError("select", str(e))

    def get_history(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        supplier: Optional[str] = None,
    ) -> list[GoodsReceiptHistoryItem]:
        """
        Get receipt history with display names.

        Args:
            start_date: Include receipts on or after this date
            end_date: Include receipts on or before this date
            supplier: Case-insensitive substring match on supplier

        Returns:
            List of GoodsReceiptHistoryItem, newest first
        """
        logger.info(
            "getting_goods_receipt_history",
            start_date=str(start_date) if start_date else None,
            end_date=str(end_date) if end_date else None,
            supplier=supplier
        )

        try:
            query = self.db.table(self.table).select("*")
            if start_date:
                query = query.gte("receipt_date", start_date.isoformat())
            if end_date:
                query = query.lte("receipt_date", end_date.isoformat())
            if supplier:
                query = query.ilike("supplier", f"%{supplier}%")

            rows = query.order("receipt_date", desc=True).execute().data or []

            products = fetch_by_ids(
                self.db, "products", (r["product_id"] for r in rows),
                "id, product_name, product_sku"
            )
            colors = fetch_by_ids(
                self.db, "colors", (r["color_id"] for r in rows), "id, color_name"
            )
            locations = fetch_by_ids(
                self.db, "locations", (r["location_id"] for r in rows), "id, location_name"
            )

        except Exception as e:
            logger.error("get_goods_receipt_history_failed", error=str(e))
            raise DatabaseError("select", str(e))

        return [
            GoodsReceiptHistoryItem(
                id=row["id"],
                receipt_date=row["receipt_date"],
                reference_number=row.get("reference_number"),
                supplier=row.get("supplier"),
                location_name=locations.get(row["location_id"], {}).get("location_name") or "Main Warehouse",
                product_name=products.get(row["product_id"], {}).get("product_name"),
                color_name=colors.get(row["color_id"], {}).get("color_name"),
                box_count=row["box_count"],
            )
            for row in rows
        ]


# Singleton instance
_goods_receipt_service: Optional[GoodsReceiptService] = None


def get_goods_receipt_service() -> GoodsReceiptService:
    """Get or create GoodsReceiptService instance."""
    global _goods_receipt_service
    if _goods_receipt_service is None:
        _goods_receipt_service = GoodsReceiptService()
    return _goods_receipt_service
