"""
Append-only inventory movement log.
"""

from datetime import date, datetime, timezone
from typing import Optional
import structlog

from models.conversion import TransactionType
from exceptions import DatabaseError

logger = structlog.get_logger(__name__)


def record_transaction(
    db,
    transaction_type: TransactionType,
    location_id: int,
    product_id: int,
    color_id: int,
    box_qty: Optional[int] = None,
    pair_qty: Optional[int] = None,
    size_id: Optional[int] = None,
    transaction_date: Optional[date] = None,
    notes: Optional[str] = None,
) -> dict:
    """
    Insert one row into inventory_transactions.

    Client failures propagate; callers wrap them in DatabaseError.

    Returns:
        The inserted row, including its id

    Raises:
        DatabaseError: If the insert returned no row
    """
    row = {
        "type": transaction_type.value,
        "location_id": location_id,
        "product_id": product_id,
        "color_id": color_id,
        "size_id": size_id,
        "box_qty": box_qty,
        "pair_qty": pair_qty,
        "transaction_date": (transaction_date or datetime.now(timezone.utc)).isoformat(),
        "notes": notes,
    }
    result = db.table("inventory_transactions").insert(row).execute()
    if not result.data:
        raise DatabaseError("insert", "No data returned", details={"table": "inventory_transactions"})

    logger.debug(
        "inventory_transaction_recorded",
        type=transaction_type.value,
        location_id=location_id,
        product_id=product_id,
        color_id=color_id,
    )
    return result.data[0]
