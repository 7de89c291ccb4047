"""
Shared test fixtures.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings require Supabase credentials at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import copy
import pytest
from unittest.mock import patch
from datetime import datetime, timezone
from typing import Any, Callable, Generator
from uuid import uuid4


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_datetime(value: Any) -> datetime:
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: Any = None, count: int = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else (len(self.data) if isinstance(self.data, list) else 1)


class MockSupabaseQuery:
    """
    Mock Supabase query builder with chainable methods.

    Operates on the table's row list, so inserts and updates are visible
    to later queries in the same test.
    """

    def __init__(self, rows: list):
        self._rows = rows
        self._operation = "select"
        self._payload = None
        self._filters: list[Callable[[dict], bool]] = []
        self._order = None
        self._limit = None
        self._is_single = False

    def select(self, *args, **kwargs):
        self._operation = "select"
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = data if isinstance(data, list) else [data]
        return self

    def update(self, data):
        self._operation = "update"
        self._payload = data
        return self

    def delete(self):
        self._operation = "delete"
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def gte(self, column, value):
        bound = _as_datetime(value)
        self._filters.append(
            lambda row: row.get(column) is not None and _as_datetime(row[column]) >= bound
        )
        return self

    def ilike(self, column, pattern):
        needle = pattern.strip("%").lower()
        self._filters.append(lambda row: needle in str(row.get(column, "")).lower())
        return self

    def single(self):
        self._is_single = True
        return self

    def order(self, column, desc: bool = False, **kwargs):
        self._order = (column, desc)
        return self

    def range(self, start, end):
        return self

    def limit(self, count):
        self._limit = count
        return self

    def _matching(self) -> list:
        return [row for row in self._rows if all(f(row) for f in self._filters)]

    def execute(self) -> MockSupabaseResponse:
        if self._operation == "insert":
            inserted = []
            for item in self._payload:
                row = copy.deepcopy(item)
                row.setdefault("id", str(uuid4()))
                row.setdefault("created_at", _now_iso())
                row.setdefault("updated_at", row["created_at"])
                self._rows.append(row)
                inserted.append(copy.deepcopy(row))
            return MockSupabaseResponse(data=inserted)

        if self._operation == "update":
            updated = []
            for row in self._matching():
                row.update(copy.deepcopy(self._payload))
                updated.append(copy.deepcopy(row))
            return MockSupabaseResponse(data=updated)

        if self._operation == "delete":
            removed = self._matching()
            for row in removed:
                self._rows.remove(row)
            return MockSupabaseResponse(data=copy.deepcopy(removed))

        data = copy.deepcopy(self._matching())
        if self._order:
            column, desc = self._order
            data.sort(key=lambda row: str(row.get(column) or ""), reverse=desc)
        if self._limit is not None:
            data = data[:self._limit]

        if self._is_single:
            # Return first item or None for single()
            first = data[0] if data else None
            return MockSupabaseResponse(data=first, count=1 if first else 0)
        return MockSupabaseResponse(data=data)


class MockSupabaseTable:
    """Mock Supabase table backed by a shared row list."""

    def __init__(self, rows: list):
        self._rows = rows

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self._rows).select(*args, **kwargs)

    def insert(self, data):
        return MockSupabaseQuery(self._rows).insert(data)

    def update(self, data):
        return MockSupabaseQuery(self._rows).update(data)

    def delete(self):
        return MockSupabaseQuery(self._rows).delete()


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables: dict[str, list] = {}

    def set_table_data(self, table_name: str, data: list):
        """Configure mock data for a table."""
        self._tables[table_name] = copy.deepcopy(data)

    def get_table_data(self, table_name: str) -> list:
        """Current rows of a table (after any writes)."""
        return self._tables.get(table_name, [])

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        return MockSupabaseTable(self._tables.setdefault(name, []))


# ===================
# FIXTURES
# ===================

SERVICE_MODULES = (
    "services.inventory_service",
    "services.invoice_service",
    "services.dashboard_service",
)


def _reset_singletons():
    import services.inventory_service as inventory_module
    import services.invoice_service as invoice_module
    import services.dashboard_service as dashboard_module
    import services.bom_service as bom_module
    import services.text_extraction_service as extraction_module

    inventory_module._inventory_service = None
    invoice_module._invoice_service = None
    dashboard_module._dashboard_service = None
    bom_module._bom_service = None
    extraction_module._text_extractor = None


@pytest.fixture(autouse=True)
def clear_bom_sessions():
    """Every test starts without open upload sessions."""
    from services import bom_session_service

    bom_session_service.clear_sessions()
    yield
    bom_session_service.clear_sessions()


@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("inventory_items", [
                InventoryItemFactory.create(name="Blue Jeans")
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Service singletons are reset so they pick up the mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("inventory_items", [...])
            # Now any service built afterwards uses the mock
    """
    _reset_singletons()
    patches = [patch("config.database.get_supabase_client", return_value=mock_supabase)]
    patches += [
        patch(f"{module}.get_supabase_client", return_value=mock_supabase)
        for module in SERVICE_MODULES
    ]
    for p in patches:
        p.start()
    try:
        yield mock_supabase
    finally:
        for p in reversed(patches):
            p.stop()
        _reset_singletons()


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_db):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("inventory_items", [...])
            response = test_client_with_mock_db.get("/api/inventory")
    """
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
