"""SQLite-backed row store.

This module maps each schema domain onto one table with a TEXT column
per content field and an auto-increment ``id`` column.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from core.constants import DEFAULT_TABLE_PREFIX, ID_COLUMN_NAME
from core.errors import BulkSyncStoreError
from core.logging_config import get_logger
from core.types import Record, SchemaDescriptor

_LOGGER = get_logger(__name__)


class SqliteRowStore:
    """Row store over a local SQLite database file.

    Tables are created on first use. Writes issued outside
    ``transaction()`` commit immediately.
    """

    def __init__(self, database_path: Path, table_prefix: str = DEFAULT_TABLE_PREFIX) -> None:
        """Open the database, creating its parent directory if needed.

        Args:
            database_path: SQLite file path, or ``:memory:``.
            table_prefix: Prefix prepended to every table name.

        Raises:
            BulkSyncStoreError: If the database cannot be opened.
        """
        self._table_prefix = table_prefix
        self._created_tables: set[str] = set()
        self._transaction_depth = 0
        if str(database_path) != ":memory:":
            database_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._connection = sqlite3.connect(str(database_path))
        except sqlite3.Error as error:
            raise BulkSyncStoreError(
                f"Failed to open database at {database_path}: {error}. "
                "Check BULKSYNC_DATABASE_PATH and file permissions."
            ) from error

    def table_name(self, schema: SchemaDescriptor) -> str:
        """Return the prefixed table name for a schema."""
        return f"{self._table_prefix}{schema.table_name}"

    def list_rows(self, schema: SchemaDescriptor) -> list[Record]:
        table = self._ensure_table(schema)
        columns = ", ".join(_quote(name) for name in (ID_COLUMN_NAME, *schema.field_names))
        sql = f"SELECT {columns} FROM {_quote(table)} ORDER BY {_quote(ID_COLUMN_NAME)}"
        rows = self._execute(sql, ()).fetchall()
        return [
            Record(
                field_names=schema.field_names,
                values=tuple("" if value is None else str(value) for value in row[1:]),
                record_id=int(row[0]),
            )
            for row in rows
        ]

    def insert_row(self, schema: SchemaDescriptor, record: Record) -> int:
        table = self._ensure_table(schema)
        if len(record.values) != schema.field_count:
            raise BulkSyncStoreError(
                f"Cannot insert into {table}: expected {schema.field_count} values, "
                f"got {len(record.values)}."
            )
        columns = ", ".join(_quote(name) for name in schema.field_names)
        placeholders = ", ".join("?" for _ in schema.field_names)
        sql = f"INSERT INTO {_quote(table)} ({columns}) VALUES ({placeholders})"
        cursor = self._execute(sql, tuple(record.values))
        self._commit_if_idle()
        return int(cursor.lastrowid)

    def delete_row(self, schema: SchemaDescriptor, record_id: int) -> None:
        table = self._ensure_table(schema)
        sql = f"DELETE FROM {_quote(table)} WHERE {_quote(ID_COLUMN_NAME)} = ?"
        cursor = self._execute(sql, (record_id,))
        if cursor.rowcount == 0:
            raise BulkSyncStoreError(
                f"Cannot delete row {record_id} from {table}: row does not exist. "
                "Re-render the table and resubmit."
            )
        self._commit_if_idle()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Commit the block's writes together or roll all of them back."""
        if self._transaction_depth:
            yield
            return
        self._transaction_depth += 1
        try:
            yield
        except BaseException:
            self._connection.rollback()
            self._created_tables.clear()
            raise
        else:
            self._connection.commit()
        finally:
            self._transaction_depth -= 1

    def close(self) -> None:
        """Close the underlying connection."""
        self._connection.close()

    def __enter__(self) -> "SqliteRowStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _ensure_table(self, schema: SchemaDescriptor) -> str:
        table = self.table_name(schema)
        if table in self._created_tables:
            return table
        columns = ", ".join(f"{_quote(name)} TEXT NOT NULL" for name in schema.field_names)
        sql = (
            f"CREATE TABLE IF NOT EXISTS {_quote(table)} "
            f"({_quote(ID_COLUMN_NAME)} INTEGER PRIMARY KEY AUTOINCREMENT, {columns})"
        )
        self._execute(sql, ())
        self._commit_if_idle()
        self._created_tables.add(table)
        _LOGGER.debug("table_ready", table=table, domain=schema.domain)
        return table

    def _execute(self, sql: str, parameters: tuple[object, ...]) -> sqlite3.Cursor:
        try:
            return self._connection.execute(sql, parameters)
        except sqlite3.Error as error:
            raise BulkSyncStoreError(
                f"SQLite statement failed: {error}. Statement: {sql}"
            ) from error

    def _commit_if_idle(self) -> None:
        if not self._transaction_depth:
            self._connection.commit()


def _quote(identifier: str) -> str:
    """Quote a SQL identifier; field names include reserved words."""
    return '"' + identifier.replace('"', '""') + '"'
