"""Python SDK for bulk lookup table edits.

This module exposes high-level APIs to render a table as bulk text,
submit edited text, and run batch sync specs against one row store.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from core.config import BulkSyncConfig
from core.schema_registry import describe, registered_domains
from core.sync_spec_execution import execute_sync_spec_file
from core.types import RenderedTable, SchemaDescriptor, SyncOptions, SyncOutcome
from store.row_store import RowStore
from store.sqlite_row_store import SqliteRowStore
from sync.reconciliation import ReconciliationEngine


class SyncClient:
    """Primary SDK entry point for submit-and-sync workflows."""

    def __init__(
        self,
        config: BulkSyncConfig | None = None,
        store: RowStore | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            store: Optional row store; a SQLite store at the configured
                path is opened when omitted.
        """
        self._config = config or BulkSyncConfig.from_env()
        self._owned_store: SqliteRowStore | None = None
        if store is None:
            self._owned_store = SqliteRowStore(
                self._config.database_path, self._config.table_prefix
            )
            store = self._owned_store
        self._store = store
        self._engine = ReconciliationEngine(self._store)

    @property
    def collapse_duplicates(self) -> bool:
        """Return the configured duplicate-collapse default."""
        return self._config.collapse_duplicates

    def domains(self) -> tuple[SchemaDescriptor, ...]:
        """Return every registered schema descriptor."""
        return tuple(describe(domain) for domain in registered_domains())

    def render(self, domain: str) -> RenderedTable:
        """Render a domain's current rows as bulk text.

        Args:
            domain: Registered schema domain.

        Returns:
            Rendered text plus snapshot token for stale-submit checks.
        """
        return self._engine.render(domain)

    def submit(
        self,
        domain: str,
        text: str,
        options: SyncOptions | None = None,
    ) -> SyncOutcome:
        """Resynchronize a domain's table to the submitted text.

        Args:
            domain: Registered schema domain.
            text: Edited bulk text.
            options: Optional options; defaults follow the config.

        Returns:
            Computed patch and apply result.

        Raises:
            UnknownDomainError: If the domain is not registered.
            BulkSyncConflictError: If an expected token is stale.
            BulkSyncStoreError: If the store rejects the patch.
        """
        if options is None:
            options = SyncOptions(collapse_duplicates=self._config.collapse_duplicates)
        return self._engine.sync(domain, text, options)

    def with_database(self, database_path: str) -> "SyncClient":
        """Clone the client against a different SQLite database.

        Args:
            database_path: New database file path.

        Returns:
            New SDK client instance; the caller closes it.
        """
        resolved_path = Path(database_path).expanduser().resolve()
        return SyncClient(replace(self._config, database_path=resolved_path))

    def close(self) -> None:
        """Close the SQLite store this client opened; injected stores stay open."""
        if self._owned_store is not None:
            self._owned_store.close()
            self._owned_store = None

    def __enter__(self) -> "SyncClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML sync-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML sync-spec file.

        Returns:
            Ordered summary lines.
        """
        return execute_sync_spec_file(self, spec_file)
