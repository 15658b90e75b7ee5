"""Bulk text reconciliation engine.

This module computes the minimal insert/delete patch that makes a
lookup table contain exactly the submitted records, matching rows by
content fingerprint, and applies it inside one store transaction.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from core.errors import BulkSyncConflictError, BulkSyncStoreError
from core.logging_config import get_logger
from core.schema_registry import describe
from core.types import (
    ApplyResult,
    Record,
    RenderedTable,
    SchemaDescriptor,
    SyncOptions,
    SyncOutcome,
    SyncPatch,
)
from ingest.bulk_text_parser import parse_bulk_text
from ingest.bulk_text_renderer import render_records
from store.row_store import RowStore
from transforms.fingerprint import build_snapshot, build_snapshot_token, fingerprint_record

_LOGGER = get_logger(__name__)


class ReconciliationEngine:
    """Generic submit-and-sync engine parameterized by schema descriptor."""

    def __init__(self, store: RowStore) -> None:
        """Create an engine over an explicit row store.

        Args:
            store: Repository holding the lookup tables.
        """
        self._store = store

    def render(self, domain: str) -> RenderedTable:
        """Render a domain's table as bulk text with its snapshot token.

        Args:
            domain: Registered schema domain.

        Returns:
            Rendered text and the token of the rows it was built from.

        Raises:
            UnknownDomainError: If the domain is not registered.
        """
        schema = describe(domain)
        rows = self._store.list_rows(schema)
        return RenderedTable(
            domain=domain,
            text=render_records(schema, rows),
            snapshot_token=build_snapshot_token(schema, rows),
        )

    def reconcile(
        self,
        schema: SchemaDescriptor,
        snapshot_rows: Sequence[Record],
        submitted_text: str,
        options: SyncOptions | None = None,
    ) -> SyncPatch:
        """Diff submitted text against stored rows.

        Each submitted record consumes at most one stored row with the same
        fingerprint. Identical submitted lines beyond the stored count become
        extra inserts unless ``collapse_duplicates`` is set. Empty or wholly
        malformed text deletes every stored row.

        Args:
            schema: Schema descriptor for the table.
            snapshot_rows: Stored rows, with ids, read before the submit.
            submitted_text: Raw bulk text.
            options: Optional reconciliation options.

        Returns:
            Patch of inserts, orphan deletes, and retained ids.
        """
        options = options or SyncOptions()
        existing = build_snapshot(schema, snapshot_rows)
        parse_result = parse_bulk_text(submitted_text, schema)
        candidates: Iterable[Record] = parse_result.records
        if options.collapse_duplicates:
            candidates = collapse_duplicate_records(parse_result.records)
        inserts: list[Record] = []
        retained: list[int] = []
        for candidate in candidates:
            matching_ids = existing.get(fingerprint_record(candidate))
            if not matching_ids:
                inserts.append(candidate)
                continue
            retained.append(matching_ids.pop(0))
        deletes = sorted(record_id for ids in existing.values() for record_id in ids)
        patch = SyncPatch(
            domain=schema.domain,
            inserts=tuple(inserts),
            deletes=tuple(deletes),
            retained=tuple(retained),
            skipped_lines=parse_result.skipped_lines,
        )
        _log_patch_planned(patch, len(snapshot_rows))
        return patch

    def apply(self, patch: SyncPatch) -> ApplyResult:
        """Apply a patch atomically: all inserts, then all deletes.

        Args:
            patch: Patch computed by ``reconcile``.

        Returns:
            Ids assigned to inserted rows and ids deleted.

        Raises:
            UnknownDomainError: If the patch domain is not registered.
            BulkSyncStoreError: If any statement fails; nothing is applied.
        """
        schema = describe(patch.domain)
        try:
            with self._store.transaction():
                inserted_ids = [self._store.insert_row(schema, record) for record in patch.inserts]
                for record_id in patch.deletes:
                    self._store.delete_row(schema, record_id)
        except BulkSyncStoreError as error:
            _log_patch_failed(patch, error)
            raise
        except Exception as error:
            _log_patch_failed(patch, error)
            raise BulkSyncStoreError(
                f"Failed to apply patch to domain '{patch.domain}': {error}. "
                "The table was rolled back to its state before the submit."
            ) from error
        result = ApplyResult(
            domain=patch.domain,
            inserted_ids=tuple(inserted_ids),
            deleted_ids=patch.deletes,
        )
        _LOGGER.info(
            "patch_applied",
            domain=patch.domain,
            inserted_count=len(result.inserted_ids),
            deleted_count=len(result.deleted_ids),
        )
        return result

    def sync(
        self,
        domain: str,
        submitted_text: str,
        options: SyncOptions | None = None,
    ) -> SyncOutcome:
        """Run one submit-and-sync cycle for a domain.

        Args:
            domain: Registered schema domain.
            submitted_text: Raw bulk text.
            options: Optional reconciliation options.

        Returns:
            The computed patch and, unless dry-running, its apply result.

        Raises:
            UnknownDomainError: If the domain is not registered.
            BulkSyncConflictError: If ``expected_token`` no longer matches.
            BulkSyncStoreError: If reading or applying fails.
        """
        options = options or SyncOptions()
        schema = describe(domain)
        rows = self._store.list_rows(schema)
        if options.expected_token is not None:
            _check_snapshot_token(schema, rows, options.expected_token)
        patch = self.reconcile(schema, rows, submitted_text, options)
        if options.dry_run:
            return SyncOutcome(patch=patch, applied=None)
        return SyncOutcome(patch=patch, applied=self.apply(patch))


def collapse_duplicate_records(records: Iterable[Record]) -> list[Record]:
    """Keep the first record of each fingerprint, preserving order."""
    unique_records: list[Record] = []
    seen_fingerprints: set[str] = set()
    for record in records:
        fingerprint = fingerprint_record(record)
        if fingerprint in seen_fingerprints:
            continue
        seen_fingerprints.add(fingerprint)
        unique_records.append(record)
    return unique_records


def _check_snapshot_token(
    schema: SchemaDescriptor,
    rows: Sequence[Record],
    expected_token: str,
) -> None:
    current_token = build_snapshot_token(schema, rows)
    if current_token == expected_token:
        return
    _LOGGER.warning(
        "snapshot_conflict",
        domain=schema.domain,
        expected_token=expected_token,
        current_token=current_token,
    )
    raise BulkSyncConflictError(
        f"Table for domain '{schema.domain}' changed since it was rendered. "
        "Render it again, reapply your edits, and resubmit."
    )


def _log_patch_planned(patch: SyncPatch, snapshot_count: int) -> None:
    _LOGGER.info(
        "patch_planned",
        domain=patch.domain,
        snapshot_count=snapshot_count,
        insert_count=len(patch.inserts),
        delete_count=len(patch.deletes),
        retained_count=len(patch.retained),
        skipped_count=len(patch.skipped_lines),
    )


def _log_patch_failed(patch: SyncPatch, error: Exception) -> None:
    _LOGGER.error(
        "patch_apply_failed",
        domain=patch.domain,
        insert_count=len(patch.inserts),
        delete_count=len(patch.deletes),
        error=str(error),
    )
