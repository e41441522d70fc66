"""
Conversion service - box ("dus") to pair ("pasang") counting workflow.

Tracks, per (location, product, color), boxes that were opened for
counting and how many pairs they should and did yield.

Core methods:
- list_ready_to_count: Items with boxes still waiting to be counted
- finish_one_box: Guarded decrement of one item's ready-box count
- open_boxes: Move boxes from box stock into counting
- record_pair_count: Enter physically counted pairs per size

Writes use compare-and-set updates: the UPDATE is filtered on the value
that was read, so a concurrent writer makes it match zero rows instead
of silently overwriting. Multi-step writes undo completed steps when a
later step fails.
"""

from datetime import datetime, timezone
from typing import Optional
import structlog

from config import get_supabase_client, settings
from models.conversion import ConversionItem, PairCountEntry, TransactionType
from exceptions import (
    AppError,
    ConversionRetrievalError,
    ConversionOperationError,
    ConversionItemNotFoundError,
    NoBoxesRemainingError,
    ConcurrentConversionError,
    InsufficientBoxStockError,
    ProductNotFoundError,
    ValidationError,
    DatabaseError,
)
from services.lookup import fetch_by_ids
from services.transaction_service import record_transaction
from services.store_writes import UndoStep, guarded_update, undo_insert, rollback

logger = structlog.get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ConversionService:
    """
    Conversion tracker and operations.
    """

    def __init__(self):
        self.db = get_supabase_client()
        self.table = "box_conversions"

    # ===================
    # READ OPERATIONS
    # ===================

    def list_ready_to_count(self, location_id: Optional[int] = None) -> list[ConversionItem]:
        """
        Get items with at least one box waiting to be counted.

        Args:
            location_id: Location ID (defaults to the main warehouse)

        Returns:
            List of ConversionItem, in store order

        Raises:
            ConversionRetrievalError: If any query fails (no partial list)
        """
        location_id = location_id or settings.main_warehouse_id
        logger.info("listing_ready_to_count", location_id=location_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("location_id", location_id)
                .gt("ready_box_count", 0)
                .execute()
            )
            rows = result.data or []
            products, colors = self._lookup_display(rows)

        except Exception as e:
            logger.error("list_ready_to_count_failed", location_id=location_id, error=str(e))
            raise ConversionRetrievalError(location_id, str(e))

        items = [self._row_to_item(row, products, colors) for row in rows]

        flagged = [item.id for item in items if item.count_exceeds_expected]
        if flagged:
            logger.warning("conversion_count_exceeds_expected", item_ids=flagged)

        logger.info("ready_to_count_retrieved", location_id=location_id, count=len(items))
        return items

    def get_by_id(self, item_id: int) -> ConversionItem:
        """
        Get a single conversion item.

        Raises:
            ConversionItemNotFoundError: If item doesn't exist
        """
        try:
            row = self._get_row(item_id)
            products, colors = self._lookup_display([row])
        except ConversionItemNotFoundError:
            raise
        except Exception as e:
            logger.error("get_conversion_item_failed", item_id=item_id, error=str(e))
            raise DatabaseError("select", str(e))

        return self._row_to_item(row, products, colors)

    # ===================
    # WRITE OPERATIONS
    # ===================

    def finish_one_box(self, item_id: int) -> ConversionItem:
        """
        Mark one box of an item as finished counting.

        Decrements ready_box_count by exactly one; expected and actual pair
        totals are left alone (pairs are entered via record_pair_count).

        Args:
            item_id: Conversion item ID

        Returns:
            The updated ConversionItem

        Raises:
            ConversionItemNotFoundError: If item doesn't exist
            NoBoxesRemainingError: If ready_box_count is already 0
            ConcurrentConversionError: If the row changed under us
            DatabaseError: If the store fails
        """
        logger.info("finishing_box", item_id=item_id)

        try:
            row = self._get_row(item_id)
            current = row["ready_box_count"]

            if current <= 0:
                raise NoBoxesRemainingError(item_id)

            # Resolve display data before writing so a lookup failure
            # cannot follow a committed decrement
            products, colors = self._lookup_display([row])

            result = (
                self.db.table(self.table)
                .update({
                    "ready_box_count": current - 1,
                    "updated_at": _now(),
                })
                .eq("id", item_id)
                .eq("ready_box_count", current)
                .execute()
            )

            if not result.data:
                raise ConcurrentConversionError("Conversion item", item_id, current)

            updated = result.data[0]

        except ConversionOperationError as e:
            logger.warning("finish_box_rejected", item_id=item_id, code=e.code)
            raise
        except Exception as e:
            logger.error("finish_box_failed", item_id=item_id, error=str(e))
            raise DatabaseError("update", str(e), details={"id": item_id})

        logger.info(
            "box_finished",
            item_id=item_id,
            ready_box_count=updated["ready_box_count"]
        )
        return self._row_to_item(updated, products, colors)

    def open_boxes(
        self,
        product_id: int,
        color_id: int,
        box_count: int,
        location_id: Optional[int] = None,
    ) -> ConversionItem:
        """
        Move boxes from box stock into counting.

        Algorithm:
        1. Check box stock >= box_count
        2. expected pairs = box_count * product.pairs_per_box
        3. Guarded decrement of box_stock
        4. Add to (or create) the conversion row
        5. Log CONVERSION_BOXES_OPENED

        Steps 3-5 are undone in reverse order if a later one fails.

        Raises:
            ValidationError: If box_count <= 0
            InsufficientBoxStockError: If not enough boxes in stock
            ProductNotFoundError: If product doesn't exist
            ConcurrentConversionError: If stock or item changed under us
            DatabaseError: If the store fails
        """
        location_id = location_id or settings.main_warehouse_id

        if box_count <= 0:
            raise ValidationError(
                code="BOX_COUNT_INVALID",
                message="Box count must be greater than zero",
                details={"box_count": box_count}
            )

        logger.info(
            "opening_boxes",
            location_id=location_id,
            product_id=product_id,
            color_id=color_id,
            box_count=box_count
        )

        undo: list[UndoStep] = []

        try:
            # 1. Check stock
            stock_result = (
                self.db.table("box_stock")
                .select("id, box_count")
                .eq("location_id", location_id)
                .eq("product_id", product_id)
                .eq("color_id", color_id)
                .limit(1)
                .execute()
            )
            stock = stock_result.data[0] if stock_result.data else None
            available = stock["box_count"] if stock else 0

            if available < box_count:
                raise InsufficientBoxStockError(box_count, available)

            # 2. Expected pairs
            products = fetch_by_ids(
                self.db, "products", [product_id],
                "id, product_name, product_sku, pairs_per_box"
            )
            if product_id not in products:
                raise ProductNotFoundError(product_id)
            colors = fetch_by_ids(self.db, "colors", [color_id], "id, color_name")

            pairs_per_box = products[product_id].get("pairs_per_box") or 0
            expected = box_count * pairs_per_box

            # 3. Decrement box stock
            remaining = available - box_count
            self._guarded_update(
                "box_stock", stock["id"],
                {"box_count": remaining},
                guard=("box_count", available),
                resource="Box stock",
            )
            undo.append(lambda: self._guarded_update(
                "box_stock", stock["id"],
                {"box_count": available},
                guard=("box_count", remaining),
                resource="Box stock",
            ))

            # 4. Add to conversion row
            existing_result = (
                self.db.table(self.table)
                .select("*")
                .eq("location_id", location_id)
                .eq("product_id", product_id)
                .eq("color_id", color_id)
                .limit(1)
                .execute()
            )

            if existing_result.data:
                existing = existing_result.data[0]
                row = self._guarded_update(
                    self.table, existing["id"],
                    {
                        "ready_box_count": existing["ready_box_count"] + box_count,
                        "expected_pairs": existing["expected_pairs"] + expected,
                        "updated_at": _now(),
                    },
                    guard=("ready_box_count", existing["ready_box_count"]),
                    resource="Conversion item",
                )
                undo.append(lambda: self._guarded_update(
                    self.table, existing["id"],
                    {
                        "ready_box_count": existing["ready_box_count"],
                        "expected_pairs": existing["expected_pairs"],
                        "updated_at": _now(),
                    },
                    guard=("ready_box_count", row["ready_box_count"]),
                    resource="Conversion item",
                ))
            else:
                now = _now()
                insert_result = (
                    self.db.table(self.table)
                    .insert({
                        "location_id": location_id,
                        "product_id": product_id,
                        "color_id": color_id,
                        "ready_box_count": box_count,
                        "expected_pairs": expected,
                        "actual_pairs_entered": 0,
                        "created_at": now,
                        "updated_at": now,
                    })
                    .execute()
                )
                row = insert_result.data[0]
                undo.append(undo_insert(self.db, self.table, row["id"]))

            # 5. Movement log
            record_transaction(
                self.db,
                TransactionType.CONVERSION_BOXES_OPENED,
                location_id=location_id,
                product_id=product_id,
                color_id=color_id,
                box_qty=box_count,
                pair_qty=expected,
                notes=f"Opened {box_count} boxes for counting ({expected} expected pairs)",
            )

        except Exception as e:
            rollback(undo, "open_boxes")
            if isinstance(e, AppError):
                logger.warning("open_boxes_rejected", code=e.code, details=e.details)
                raise
            logger.error("open_boxes_failed", error=str(e))
            raise DatabaseError("update", str(e))

        logger.info(
            "boxes_opened",
            item_id=row["id"],
            box_count=box_count,
            expected_pairs=expected,
            ready_box_count=row["ready_box_count"]
        )
        return self._row_to_item(row, products, colors)

    def record_pair_count(
        self,
        item_id: int,
        counts: list[PairCountEntry],
        count_date: Optional[datetime] = None,
    ) -> ConversionItem:
        """
        Enter a physical pair count for a conversion item.

        Adds each size's pairs to pair stock, logs one
        CONVERSION_PAIRS_COUNTED movement per size and adds the total to
        actual_pairs_entered. Entering more than expected is allowed but
        flagged on the returned item.

        Raises:
            ValidationError: If counts is empty or any count <= 0
            ConversionItemNotFoundError: If item doesn't exist
            ConcurrentConversionError: If the item changed under us
            DatabaseError: If the store fails
        """
        if not counts:
            raise ValidationError(
                code="PAIR_COUNT_EMPTY",
                message="At least one size count is required"
            )
        for entry in counts:
            if entry.pair_count <= 0:
                raise ValidationError(
                    code="PAIR_COUNT_INVALID",
                    message="Pair count must be greater than zero",
                    details={"size_id": entry.size_id, "pair_count": entry.pair_count}
                )

        total = sum(entry.pair_count for entry in counts)
        logger.info("recording_pair_count", item_id=item_id, sizes=len(counts), total_pairs=total)

        undo: list[UndoStep] = []

        try:
            row = self._get_row(item_id)
            products, colors = self._lookup_display([row])

            current_actual = row["actual_pairs_entered"]
            updated = self._guarded_update(
                self.table, item_id,
                {
                    "actual_pairs_entered": current_actual + total,
                    "updated_at": _now(),
                },
                guard=("actual_pairs_entered", current_actual),
                resource="Conversion item",
            )
            undo.append(lambda: self._guarded_update(
                self.table, item_id,
                {"actual_pairs_entered": current_actual, "updated_at": _now()},
                guard=("actual_pairs_entered", current_actual + total),
                resource="Conversion item",
            ))

            for entry in counts:
                self._add_pair_stock(row, entry, undo)
                movement = record_transaction(
                    self.db,
                    TransactionType.CONVERSION_PAIRS_COUNTED,
                    location_id=row["location_id"],
                    product_id=row["product_id"],
                    color_id=row["color_id"],
                    size_id=entry.size_id,
                    pair_qty=entry.pair_count,
                    transaction_date=count_date,
                    notes=f"Counted {entry.pair_count} pairs from opened boxes",
                )
                undo.append(undo_insert(self.db, "inventory_transactions", movement["id"]))

        except Exception as e:
            rollback(undo, "record_pair_count")
            if isinstance(e, AppError):
                logger.warning("record_pair_count_rejected", item_id=item_id, code=e.code)
                raise
            logger.error("record_pair_count_failed", item_id=item_id, error=str(e))
            raise DatabaseError("update", str(e), details={"id": item_id})

        item = self._row_to_item(updated, products, colors)
        if item.count_exceeds_expected:
            logger.warning(
                "pair_count_exceeds_expected",
                item_id=item_id,
                expected_pairs=item.expected_pairs,
                actual_pairs_entered=item.actual_pairs_entered
            )

        logger.info(
            "pair_count_recorded",
            item_id=item_id,
            actual_pairs_entered=item.actual_pairs_entered,
            remaining_uncounted=item.remaining_uncounted
        )
        return item

    # ===================
    # HELPERS
    # ===================

    def _get_row(self, item_id: int) -> dict:
        """Fetch a raw conversion row or raise ConversionItemNotFoundError."""
        result = (
            self.db.table(self.table)
            .select("*")
            .eq("id", item_id)
            .limit(1)
            .execute()
        )
        if not result.data:
            raise ConversionItemNotFoundError(item_id)
        return result.data[0]

    def _guarded_update(
        self,
        table: str,
        row_id: int,
        values: dict,
        guard: tuple[str, int],
        resource: str,
    ) -> dict:
        """Guarded update on this service's client."""
        return guarded_update(self.db, table, row_id, values, guard, resource)

    def _add_pair_stock(self, row: dict, entry: PairCountEntry, undo: list[UndoStep]) -> None:
        """Add counted pairs to pair_stock, creating the size row if needed."""
        existing = (
            self.db.table("pair_stock")
            .select("id, pair_count")
            .eq("location_id", row["location_id"])
            .eq("product_id", row["product_id"])
            .eq("color_id", row["color_id"])
            .eq("size_id", entry.size_id)
            .limit(1)
            .execute()
        )

        if existing.data:
            stock = existing.data[0]
            new_count = stock["pair_count"] + entry.pair_count
            self._guarded_update(
                "pair_stock", stock["id"],
                {"pair_count": new_count},
                guard=("pair_count", stock["pair_count"]),
                resource="Pair stock",
            )
            undo.append(lambda: self._guarded_update(
                "pair_stock", stock["id"],
                {"pair_count": stock["pair_count"]},
                guard=("pair_count", new_count),
                resource="Pair stock",
            ))
        else:
            inserted = (
                self.db.table("pair_stock")
                .insert({
                    "location_id": row["location_id"],
                    "product_id": row["product_id"],
                    "color_id": row["color_id"],
                    "size_id": entry.size_id,
                    "pair_count": entry.pair_count,
                })
                .execute()
            )
            undo.append(undo_insert(self.db, "pair_stock", inserted.data[0]["id"]))

    def _lookup_display(self, rows: list[dict]) -> tuple[dict, dict]:
        """Fetch products and colors referenced by rows."""
        if not rows:
            return {}, {}
        products = fetch_by_ids(
            self.db, "products", (r["product_id"] for r in rows),
            "id, product_name, product_sku, pairs_per_box"
        )
        colors = fetch_by_ids(
            self.db, "colors", (r["color_id"] for r in rows), "id, color_name"
        )
        return products, colors

    def _row_to_item(self, row: dict, products: dict, colors: dict) -> ConversionItem:
        """Convert database row to ConversionItem."""
        product = products.get(row["product_id"], {})
        color = colors.get(row["color_id"], {})
        return ConversionItem(
            id=row["id"],
            location_id=row["location_id"],
            product_id=row["product_id"],
            color_id=row["color_id"],
            product_sku=product.get("product_sku") or "",
            product_name=product.get("product_name") or "",
            color_name=color.get("color_name") or "",
            ready_box_count=row["ready_box_count"],
            expected_pairs=row["expected_pairs"],
            actual_pairs_entered=row["actual_pairs_entered"],
            pairs_per_box=product.get("pairs_per_box") or 0,
            updated_at=row.get("updated_at"),
        )


# Singleton instance
_conversion_service: Optional[ConversionService] = None


def get_conversion_service() -> ConversionService:
    """Get or create ConversionService instance."""
    global _conversion_service
    if _conversion_service is None:
        _conversion_service = ConversionService()
    return _conversion_service
