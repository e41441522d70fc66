"""
Batch lookups for display attributes.

Stock and conversion rows only carry foreign keys; these helpers fetch
the referenced products, colors, sizes and locations in one query per
table and return them keyed by ID.
"""

from typing import Iterable


def fetch_by_ids(db, table: str, ids: Iterable, columns: str = "*") -> dict:
    """
    Fetch rows of `table` whose id is in `ids`.

    Args:
        db: Supabase client
        table: Table name
        ids: IDs to fetch (duplicates and None are ignored)
        columns: Column list for the select

    Returns:
        Dict of id -> row
    """
    unique_ids = sorted({i for i in ids if i is not None})
    if not unique_ids:
        return {}

    result = (
        db.table(table)
        .select(columns)
        .in_("id", unique_ids)
        .execute()
    )
    return {row["id"]: row for row in (result.data or [])}


def referencing_tables(db, column: str, value, tables: Iterable[str]) -> list[str]:
    """
    Names of `tables` holding at least one row with column == value.

    Used before deleting master data that stock rows point at.
    """
    found = []
    for table in tables:
        result = db.table(table).select("id").eq(column, value).limit(1).execute()
        if result.data:
            found.append(table)
    return found
