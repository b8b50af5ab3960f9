"""
Record store adapter: generic get/insert/update/delete per entity type.

The domain layer talks to storage only through RecordStore. Failures come
back as a small tagged hierarchy so callers can tell "the table is not
there", "that column is not there" and "something else went wrong" apart
without looking at driver error text:

    StoreError
    ├── SchemaMissingError   whole table absent
    ├── ColumnMissingError   update referenced a column the schema lacks
    └── PersistenceError     anything else (network, constraints, ...)

Records are plain dicts keyed by snake_case column name.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List

import psycopg2
import psycopg2.errors
import psycopg2.extras
from psycopg2 import sql

from clients.postgres_client import PostgresClient

logger = logging.getLogger(__name__)


ENTITY_TABLES: Dict[str, str] = {
    "product": "products",
    "invoice": "invoices",
    "user": "users",
    "customer": "customers",
    "job": "jobs",
    "quote": "quotes",
}

# Default read ordering per entity (column, descending)
_ORDERING: Dict[str, tuple[str, bool]] = {
    "invoice": ("date_issued", True),
    "product": ("name", False),
    "customer": ("name", False),
}

_COLUMN_IN_MESSAGE = re.compile(r'column "(?P<column>[^"]+)"')


# === Errors ===


class StoreError(Exception):
    """Base class for record store failures."""

    def __init__(self, message: str, entity_type: str | None = None):
        self.entity_type = entity_type
        super().__init__(message)


class SchemaMissingError(StoreError):
    """The table backing an entity type does not exist."""


class ColumnMissingError(StoreError):
    """
    An update referenced a column the table does not have.

    Attributes:
        column: Offending column when the backend names it, else None
        fields: Columns that were in the failed update payload
    """

    def __init__(
        self,
        message: str,
        entity_type: str | None = None,
        column: str | None = None,
        fields: tuple[str, ...] = (),
    ):
        self.column = column
        self.fields = fields
        super().__init__(message, entity_type)


class PersistenceError(StoreError):
    """Generic storage failure. Callers keep their prior state."""


def table_for(entity_type: str) -> str:
    """
    Table name for an entity type.

    Raises:
        ValueError: If the entity type is unknown
    """
    try:
        return ENTITY_TABLES[entity_type]
    except KeyError:
        raise ValueError(
            f"Unknown entity type '{entity_type}'. "
            f"Valid types: {', '.join(sorted(ENTITY_TABLES))}"
        )


# === Interface ===


class RecordStore(ABC):
    """Generic persistence contract consumed by the services."""

    @abstractmethod
    def get(self, entity_type: str) -> List[Dict[str, Any]]:
        """All records of a type. Raises SchemaMissingError if the table is absent."""

    @abstractmethod
    def insert(self, entity_type: str, record: Dict[str, Any]) -> None:
        """Insert one record."""

    @abstractmethod
    def update(self, entity_type: str, record_id: str, fields: Dict[str, Any]) -> None:
        """Apply a partial-field update. Only the given columns are written."""

    @abstractmethod
    def delete(self, entity_type: str, record_id: str) -> None:
        """Hard-delete one record."""


# === Postgres implementation ===


class PostgresRecordStore(RecordStore):
    """
    RecordStore over PostgreSQL.

    Driver exceptions are classified by type (UndefinedTable,
    UndefinedColumn), never by message, and re-raised as StoreError
    subclasses with the driver error chained.
    """

    def __init__(self, postgres: PostgresClient):
        self.postgres = postgres

    def get(self, entity_type: str) -> List[Dict[str, Any]]:
        table = table_for(entity_type)
        query = sql.SQL("SELECT * FROM {}").format(sql.Identifier(table))

        ordering = _ORDERING.get(entity_type)
        if ordering is not None:
            column, descending = ordering
            query = query + sql.SQL(" ORDER BY {} {}").format(
                sql.Identifier(column), sql.SQL("DESC" if descending else "ASC")
            )

        try:
            return self.postgres.execute(query)
        except psycopg2.Error as e:
            raise self._translate(e, entity_type) from e

    def insert(self, entity_type: str, record: Dict[str, Any]) -> None:
        table = table_for(entity_type)
        columns = list(record.keys())
        query = sql.SQL("INSERT INTO {} ({}) VALUES ({})").format(
            sql.Identifier(table),
            sql.SQL(", ").join(sql.Identifier(c) for c in columns),
            sql.SQL(", ").join(sql.Placeholder() for _ in columns),
        )

        try:
            self.postgres.execute(query, tuple(self._adapt(record[c]) for c in columns))
        except psycopg2.Error as e:
            raise self._translate(e, entity_type, tuple(columns)) from e

    def update(self, entity_type: str, record_id: str, fields: Dict[str, Any]) -> None:
        if not fields:
            return

        table = table_for(entity_type)
        columns = list(fields.keys())
        query = sql.SQL("UPDATE {} SET {} WHERE id = %s").format(
            sql.Identifier(table),
            sql.SQL(", ").join(
                sql.SQL("{} = %s").format(sql.Identifier(c)) for c in columns
            ),
        )
        params = tuple(self._adapt(fields[c]) for c in columns) + (str(record_id),)

        try:
            self.postgres.execute(query, params)
        except psycopg2.Error as e:
            raise self._translate(e, entity_type, tuple(columns)) from e

    def delete(self, entity_type: str, record_id: str) -> None:
        table = table_for(entity_type)
        query = sql.SQL("DELETE FROM {} WHERE id = %s").format(sql.Identifier(table))

        try:
            self.postgres.execute(query, (str(record_id),))
        except psycopg2.Error as e:
            raise self._translate(e, entity_type) from e

    # === Private ===

    def _adapt(self, value: Any) -> Any:
        """Wrap list/dict values for JSON columns (items, tags)."""
        if isinstance(value, (list, dict)):
            return psycopg2.extras.Json(value)
        return value

    def _translate(
        self,
        error: psycopg2.Error,
        entity_type: str,
        fields: tuple[str, ...] = (),
    ) -> StoreError:
        """Map a driver error onto the store error hierarchy."""
        if isinstance(error, psycopg2.errors.UndefinedTable):
            logger.error(f"Table for '{entity_type}' is missing: {error}")
            return SchemaMissingError(
                f"Table '{table_for(entity_type)}' does not exist", entity_type
            )

        if isinstance(error, psycopg2.errors.UndefinedColumn):
            column = self._column_name(error)
            logger.error(f"Column missing on '{entity_type}' ({column or 'unknown'}): {error}")
            return ColumnMissingError(
                f"Column missing on '{table_for(entity_type)}': {column or 'unknown'}",
                entity_type,
                column=column,
                fields=fields,
            )

        logger.error(f"Store operation on '{entity_type}' failed: {error}")
        return PersistenceError(f"Store operation on '{entity_type}' failed: {error}", entity_type)

    def _column_name(self, error: psycopg2.Error) -> str | None:
        """Best-effort column name from diagnostics or the server message."""
        diag = getattr(error, "diag", None)
        column = getattr(diag, "column_name", None)
        if column:
            return column

        match = _COLUMN_IN_MESSAGE.search(str(error))
        return match.group("column") if match else None
