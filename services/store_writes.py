"""
Write helpers shared by services that touch stock in several steps.

A guarded update filters on the value that was read, so a concurrent
writer makes it match zero rows instead of being overwritten. Each
completed step registers an undo callable; on failure the steps are
run newest first.
"""

from typing import Callable
import structlog

from exceptions import ConcurrentConversionError

logger = structlog.get_logger(__name__)

UndoStep = Callable[[], None]


def guarded_update(
    db,
    table: str,
    row_id: int,
    values: dict,
    guard: tuple[str, int],
    resource: str,
) -> dict:
    """
    UPDATE ... WHERE id = row_id AND guard_column = guard_value.

    Raises:
        ConcurrentConversionError: If no row matched
    """
    column, expected_value = guard
    result = (
        db.table(table)
        .update(values)
        .eq("id", row_id)
        .eq(column, expected_value)
        .execute()
    )
    if not result.data:
        raise ConcurrentConversionError(resource, row_id, expected_value)
    return result.data[0]


def undo_insert(db, table: str, row_id: int) -> UndoStep:
    """Undo step that deletes an inserted row."""
    return lambda: db.table(table).delete().eq("id", row_id).execute()


def rollback(undo: list[UndoStep], operation: str) -> None:
    """Run undo steps newest first; a failing step is logged and skipped."""
    for step in reversed(undo):
        try:
            step()
        except Exception as e:
            logger.error("rollback_step_failed", operation=operation, error=str(e))
    if undo:
        logger.info("rollback_complete", operation=operation, steps=len(undo))
