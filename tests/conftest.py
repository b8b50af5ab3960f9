"""Shared test fixtures for the invoicedesk test suite."""

import copy
from datetime import date, timedelta
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env file BEFORE any other imports that might use env vars
# override=True ensures .env takes precedence over shell env vars
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

# Reset vault client singleton to pick up env vars
import clients.vault_client as vault_module
vault_module._vault_client_instance = None
vault_module._secret_cache.clear()

from clients.record_store import (
    ColumnMissingError,
    PersistenceError,
    RecordStore,
    SchemaMissingError,
    table_for,
)
from core.config import BillingConfig
from core.event_bus import EventBus


# =============================================================================
# TEST CONSTANTS
# =============================================================================

# Frozen business day for every date-sensitive test
TODAY = date(2026, 3, 10)


# =============================================================================
# IN-MEMORY RECORD STORE
# =============================================================================


class InMemoryRecordStore(RecordStore):
    """
    RecordStore over plain dicts, with switches for the failure modes the
    Postgres adapter reports.

    Attributes:
        missing_tables: Entity types whose table "does not exist"
        missing_columns: entity type -> columns an update may not reference
        failing: (operation, entity type) pairs that raise PersistenceError
        calls: Log of (operation, entity type, id, payload) tuples
    """

    _ORDERING = {
        "invoice": ("date_issued", True),
        "product": ("name", False),
        "customer": ("name", False),
    }

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.missing_tables: set[str] = set()
        self.missing_columns: dict[str, set[str]] = {}
        self.failing: set[tuple[str, str]] = set()
        self.calls: list[tuple] = []

    def seed(self, entity_type: str, records: list[dict]) -> None:
        self.tables.setdefault(entity_type, []).extend(copy.deepcopy(records))

    def records(self, entity_type: str) -> list[dict]:
        return self.tables.get(entity_type, [])

    def record(self, entity_type: str, record_id: str) -> dict | None:
        return next((r for r in self.records(entity_type) if r["id"] == record_id), None)

    def _check(self, operation: str, entity_type: str) -> None:
        table = table_for(entity_type)
        if entity_type in self.missing_tables:
            raise SchemaMissingError(f"Table '{table}' does not exist", entity_type)
        if (operation, entity_type) in self.failing:
            raise PersistenceError(f"{operation} on '{entity_type}' failed", entity_type)

    def _check_columns(self, entity_type: str, fields: dict) -> None:
        absent = self.missing_columns.get(entity_type, set())
        for column in fields:
            if column in absent:
                raise ColumnMissingError(
                    f"Column missing on '{table_for(entity_type)}': {column}",
                    entity_type,
                    column=column,
                    fields=tuple(fields),
                )

    def get(self, entity_type):
        self.calls.append(("get", entity_type, None, None))
        self._check("get", entity_type)
        rows = copy.deepcopy(self.records(entity_type))
        ordering = self._ORDERING.get(entity_type)
        if ordering:
            column, descending = ordering
            rows.sort(key=lambda r: r.get(column) or "", reverse=descending)
        return rows

    def insert(self, entity_type, record):
        self.calls.append(("insert", entity_type, record.get("id"), copy.deepcopy(record)))
        self._check("insert", entity_type)
        self._check_columns(entity_type, record)
        self.tables.setdefault(entity_type, []).append(copy.deepcopy(record))

    def update(self, entity_type, record_id, fields):
        self.calls.append(("update", entity_type, record_id, copy.deepcopy(fields)))
        self._check("update", entity_type)
        self._check_columns(entity_type, fields)
        row = self.record(entity_type, record_id)
        if row is not None:
            row.update(copy.deepcopy(fields))

    def delete(self, entity_type, record_id):
        self.calls.append(("delete", entity_type, record_id, None))
        self._check("delete", entity_type)
        self.tables[entity_type] = [
            r for r in self.records(entity_type) if r["id"] != record_id
        ]

    def updates(self, entity_type: str) -> list[tuple[str, dict]]:
        """(id, fields) for every update attempted on an entity type."""
        return [(c[2], c[3]) for c in self.calls if c[0] == "update" and c[1] == entity_type]


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def today() -> date:
    """The frozen business day."""
    return TODAY


@pytest.fixture
def clock(today):
    """Clock callable handed to services in place of the real calendar."""
    return lambda: today


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def config() -> BillingConfig:
    return BillingConfig()


@pytest.fixture
def published(event_bus):
    """Every event published on the bus, in order."""
    events = []
    original = event_bus.publish

    def recording_publish(event):
        events.append(event)
        original(event)

    event_bus.publish = recording_publish
    return events


@pytest.fixture
def invoice_record(today):
    """
    Factory for stored invoice rows (snake_case, JSON-safe).

    Default: two lines 2 x 10.00 and 1 x 5.00 at 23% VAT, total 30.75,
    due in 14 days, nothing paid.
    """

    def make(invoice_id: str = "inv-1", **overrides) -> dict:
        record = {
            "id": invoice_id,
            "invoice_number": f"INV-{invoice_id.upper()}",
            "customer_id": "cust-1",
            "customer_name": "Mary Walsh",
            "customer_email": None,
            "customer_phone": "+353 52 612 3456",
            "customer_address": "12 Main St, Clonmel",
            "company": "clonmel",
            "items": [
                {"id": "line-1", "product_id": "06P", "description": "6MM CLEAR POLISHED",
                 "quantity": "2", "unit_price": "10.00", "unit": "sqm"},
                {"id": "line-2", "product_id": None, "description": "Fitting",
                 "quantity": "1", "unit_price": "5.00", "unit": "pcs"},
            ],
            "tax_rate": "23",
            "amount_paid": "0",
            "status": "UNPAID",
            "date_issued": TODAY.isoformat(),
            "due_date": (TODAY + timedelta(days=14)).isoformat(),
            "notes": None,
            "created_by": "admin",
            "last_reminder_sent": None,
        }
        record.update(overrides)
        return record

    return make


@pytest.fixture
def seeded_store(store, invoice_record):
    """Store holding a single default invoice, id 'inv-1'."""
    store.seed("invoice", [invoice_record("inv-1")])
    return store
