"""Row repository interface and in-memory implementation.

The reconciliation engine depends only on ``RowStore``. The in-memory
store backs tests and dry runs.
"""

from __future__ import annotations

import copy
from contextlib import contextmanager
from typing import ContextManager, Iterator, Protocol

from core.errors import BulkSyncStoreError
from core.types import Record, SchemaDescriptor


class RowStore(Protocol):
    """Repository over the lookup tables of every schema domain."""

    def list_rows(self, schema: SchemaDescriptor) -> list[Record]:
        """Return stored rows with ids, ordered by id."""

    def insert_row(self, schema: SchemaDescriptor, record: Record) -> int:
        """Insert one record and return its store-assigned id."""

    def delete_row(self, schema: SchemaDescriptor, record_id: int) -> None:
        """Delete one row by id."""

    def transaction(self) -> ContextManager[None]:
        """Context manager that commits on success and rolls back on error."""


class InMemoryRowStore:
    """Dict-backed row store with auto-increment ids."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[int, tuple[str, ...]]] = {}
        self._next_ids: dict[str, int] = {}
        self._transaction_depth = 0

    def list_rows(self, schema: SchemaDescriptor) -> list[Record]:
        table = self._tables.get(schema.domain, {})
        return [
            Record(field_names=schema.field_names, values=values, record_id=record_id)
            for record_id, values in sorted(table.items())
        ]

    def insert_row(self, schema: SchemaDescriptor, record: Record) -> int:
        _validate_width(schema, record)
        table = self._tables.setdefault(schema.domain, {})
        record_id = self._next_ids.get(schema.domain, 1)
        self._next_ids[schema.domain] = record_id + 1
        table[record_id] = tuple(record.values)
        return record_id

    def delete_row(self, schema: SchemaDescriptor, record_id: int) -> None:
        table = self._tables.get(schema.domain, {})
        if record_id not in table:
            raise BulkSyncStoreError(
                f"Cannot delete row {record_id} from domain '{schema.domain}': "
                "row does not exist. Re-render the table and resubmit."
            )
        del table[record_id]

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Restore the pre-transaction tables if the block raises."""
        if self._transaction_depth:
            yield
            return
        saved_tables = copy.deepcopy(self._tables)
        saved_next_ids = dict(self._next_ids)
        self._transaction_depth += 1
        try:
            yield
        except BaseException:
            self._tables = saved_tables
            self._next_ids = saved_next_ids
            raise
        finally:
            self._transaction_depth -= 1

    def seed(self, schema: SchemaDescriptor, rows: list[tuple[str, ...]]) -> list[int]:
        """Insert raw value tuples and return their ids."""
        return [
            self.insert_row(schema, Record(field_names=schema.field_names, values=values))
            for values in rows
        ]


def _validate_width(schema: SchemaDescriptor, record: Record) -> None:
    if len(record.values) != schema.field_count:
        raise BulkSyncStoreError(
            f"Cannot insert into domain '{schema.domain}': expected "
            f"{schema.field_count} values, got {len(record.values)}."
        )
