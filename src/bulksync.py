"""Public SDK surface for bulksync.

This module provides a stable import path for SDK users.
It re-exports the primary client, engine and typed models.
"""

from __future__ import annotations

from core.config import BulkSyncConfig
from core.schema_registry import describe, registered_domains
from core.types import (
    ApplyResult,
    ParseResult,
    Record,
    RenderedTable,
    SchemaDescriptor,
    SyncOptions,
    SyncOutcome,
    SyncPatch,
)
from ingest.bulk_text_parser import parse_bulk_text
from ingest.bulk_text_renderer import render_records
from store.row_store import InMemoryRowStore, RowStore
from store.sqlite_row_store import SqliteRowStore
from store.sync_client import SyncClient
from sync.reconciliation import ReconciliationEngine
from transforms.fingerprint import fingerprint_record

__all__ = [
    "ApplyResult",
    "BulkSyncConfig",
    "InMemoryRowStore",
    "ParseResult",
    "Record",
    "ReconciliationEngine",
    "RenderedTable",
    "RowStore",
    "SchemaDescriptor",
    "SqliteRowStore",
    "SyncClient",
    "SyncOptions",
    "SyncOutcome",
    "SyncPatch",
    "describe",
    "fingerprint_record",
    "parse_bulk_text",
    "registered_domains",
    "render_records",
]
