"""
Shared test fixtures.

The Supabase double keeps rows per table in memory and honors the
filters the services use, so guarded updates and stock arithmetic are
observable in assertions.
"""

import os
import re
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import patch
from datetime import datetime
from typing import Generator

# ===================
# MOCK SUPABASE CLIENT
# ===================

SERVICE_MODULES = [
    "services.color_service",
    "services.location_service",
    "services.stock_service",
    "services.goods_receipt_service",
    "services.conversion_service",
    "services.report_service",
    "services.user_service",
    "services.sales_service",
]


class MockSupabaseError(Exception):
    """Raised by the mock when a failure is injected."""
    pass


class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, client: "MockSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._operation = "select"
        self._payload = None
        self._filters = []
        self._order = []
        self._limit = None
        self._range = None

    # Operations

    def select(self, *args, **kwargs):
        self._operation = "select"
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = data
        return self

    def update(self, data):
        self._operation = "update"
        self._payload = data
        return self

    def delete(self):
        self._operation = "delete"
        return self

    # Filters

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def gt(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) > value)
        return self

    def gte(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and str(row.get(column)) >= str(value))
        return self

    def lt(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and row.get(column) < value)
        return self

    def lte(self, column, value):
        self._filters.append(lambda row: row.get(column) is not None and str(row.get(column)) <= str(value))
        return self

    def in_(self, column, values):
        values = list(values)
        self._filters.append(lambda row: row.get(column) in values)
        return self

    def ilike(self, column, pattern):
        regex = re.compile(
            "^" + ".*".join(re.escape(part) for part in pattern.split("%")) + "$",
            re.IGNORECASE
        )
        self._filters.append(lambda row: row.get(column) is not None and bool(regex.match(str(row.get(column)))))
        return self

    # Modifiers

    def order(self, column, desc: bool = False, **kwargs):
        self._order.append((column, desc))
        return self

    def limit(self, count):
        self._limit = count
        return self

    def range(self, start, end):
        self._range = (start, end)
        return self

    # Execution

    def _matches(self, row: dict) -> bool:
        return all(f(row) for f in self._filters)

    def execute(self) -> MockSupabaseResponse:
        self._client.calls.append((self._table, self._operation))
        if (self._table, self._operation) in self._client.failures:
            raise MockSupabaseError(f"injected {self._operation} failure on {self._table}")

        rows = self._client.tables.setdefault(self._table, [])

        if self._operation == "insert":
            payload = self._payload if isinstance(self._payload, list) else [self._payload]
            inserted = []
            for item in payload:
                row = dict(item)
                row.setdefault("id", self._client.next_id(self._table))
                now = datetime.utcnow().isoformat() + "Z"
                row.setdefault("created_at", now)
                row.setdefault("updated_at", now)
                rows.append(row)
                inserted.append(dict(row))
            return MockSupabaseResponse(data=inserted)

        if self._operation == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self._payload)
                    updated.append(dict(row))
            return MockSupabaseResponse(data=updated)

        if self._operation == "delete":
            deleted = [dict(r) for r in rows if self._matches(r)]
            self._client.tables[self._table] = [r for r in rows if not self._matches(r)]
            return MockSupabaseResponse(data=deleted)

        result = [dict(r) for r in rows if self._matches(r)]
        for column, desc in reversed(self._order):
            result.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=desc)
        count = len(result)
        if self._range:
            result = result[self._range[0]:self._range[1] + 1]
        if self._limit is not None:
            result = result[:self._limit]
        return MockSupabaseResponse(data=result, count=count)


class MockSupabaseClient:
    """Mock Supabase client backed by in-memory tables."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.failures: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []

    def set_table_data(self, table_name: str, data: list):
        """Configure rows for a table (copied)."""
        self.tables[table_name] = [dict(row) for row in data]

    def rows(self, table_name: str) -> list[dict]:
        """Current rows of a table."""
        return self.tables.get(table_name, [])

    def fail_on(self, table_name: str, operation: str):
        """Make every `operation` on `table_name` raise."""
        self.failures.add((table_name, operation))

    def next_id(self, table_name: str) -> int:
        ids = [r["id"] for r in self.tables.get(table_name, []) if isinstance(r.get("id"), int)]
        return max(ids, default=0) + 1

    def table(self, name: str) -> MockSupabaseQuery:
        """Get query builder for a table."""
        return MockSupabaseQuery(self, name)


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("colors", [
                {"id": 1, "color_name": "Hitam"}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch every service's database client with the mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("box_conversions", [...])
            service = ConversionService()
    """
    patches = [
        patch(f"{module}.get_supabase_client", return_value=mock_supabase)
        for module in SERVICE_MODULES
    ]
    patches.append(patch("config.database.get_supabase_client", return_value=mock_supabase))
    for p in patches:
        p.start()
    try:
        yield mock_supabase
    finally:
        for p in reversed(patches):
            p.stop()


@pytest.fixture
def seeded_catalog(mock_supabase) -> MockSupabaseClient:
    """Products, colors, sizes and locations shared by most tests."""
    from tests.factories import CatalogFactory

    for table, rows in CatalogFactory.create().items():
        mock_supabase.set_table_data(table, rows)
    return mock_supabase


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_db, mock_supabase):
    """
    Create FastAPI test client with mocked database.

    Service singletons are reset so each test builds services on the mock.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("colors", [...])
            response = test_client_with_mock_db.get("/api/colors")
    """
    import importlib
    from fastapi.testclient import TestClient
    from main import app

    singleton_patches = []
    for module_name in SERVICE_MODULES:
        module = importlib.import_module(module_name)
        for attr in dir(module):
            if attr.startswith("_") and attr.endswith("_service"):
                singleton_patches.append(patch.object(module, attr, None))

    for p in singleton_patches:
        p.start()
    try:
        yield TestClient(app)
    finally:
        for p in reversed(singleton_patches):
            p.stop()
