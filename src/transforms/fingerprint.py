"""Content fingerprints for lookup records.

This module derives record identity from field values alone. The bulk
text format has no room for a stable key, so fingerprints are the only
way submitted lines are matched to stored rows.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import replace
from typing import Iterable

from core.constants import (
    FINGERPRINT_HASH_ALGORITHM,
    FINGERPRINT_SEPARATOR,
    LINE_BREAK_PATTERN,
    SNAPSHOT_TOKEN_HASH_ALGORITHM,
)
from core.errors import BulkSyncStoreError
from core.types import Record, SchemaDescriptor

_LINE_BREAK_RE = re.compile(LINE_BREAK_PATTERN)


def fingerprint_record(record: Record) -> str:
    """Compute the content fingerprint of a record.

    The surrogate id never participates. Distinct value tuples that
    collide are treated as the same record.

    Args:
        record: Parsed or stored record.

    Returns:
        Hex digest over the ordered field values.
    """
    joined_values = FINGERPRINT_SEPARATOR.join(str(value) for value in record.values)
    return _hash_text(joined_values, FINGERPRINT_HASH_ALGORITHM)


def build_snapshot(schema: SchemaDescriptor, rows: Iterable[Record]) -> dict[str, list[int]]:
    """Build the fingerprint to ids map for stored rows.

    Stored rows sharing a fingerprint are kept in id order so that each
    identical submitted line can claim one of them.

    Args:
        schema: Schema descriptor for the rows' domain.
        rows: Rows read from the store.

    Returns:
        Mapping from fingerprint to surrogate ids.

    Raises:
        BulkSyncStoreError: If a row carries no id.
    """
    snapshot: dict[str, list[int]] = {}
    for row in rows:
        if row.record_id is None:
            raise BulkSyncStoreError(
                f"Stored row in domain '{schema.domain}' has no id. "
                "Rows passed as a snapshot must come from the store."
            )
        normalized = normalize_stored_record(schema, row)
        snapshot.setdefault(fingerprint_record(normalized.without_id()), []).append(row.record_id)
    for record_ids in snapshot.values():
        record_ids.sort()
    return snapshot


def build_snapshot_token(schema: SchemaDescriptor, rows: Iterable[Record]) -> str:
    """Digest the current table state for stale-submit detection.

    Args:
        schema: Schema descriptor for the rows' domain.
        rows: Rows read from the store.

    Returns:
        Hex digest over sorted ``(id, fingerprint)`` pairs.
    """
    pairs = sorted((row.record_id or 0, fingerprint_record(row)) for row in rows)
    seed = "\n".join(f"{record_id}:{fingerprint}" for record_id, fingerprint in pairs)
    return _hash_text(f"{schema.domain}\n{seed}", SNAPSHOT_TOKEN_HASH_ALGORITHM)


def normalize_stored_record(schema: SchemaDescriptor, record: Record) -> Record:
    """Normalize a stored row the way the parser normalizes submitted lines.

    Single-line fields lose their line breaks, every value is trimmed, and
    case-normalized domains are lower-cased, so rendering a table and
    submitting the text unchanged always matches every row.

    Args:
        schema: Schema descriptor for the row's domain.
        record: Stored record.

    Returns:
        Normalized copy of the record, id preserved.
    """
    flattened = flatten_single_line_fields(schema, record)
    values = tuple(value.strip() for value in flattened.values)
    if schema.case_normalize:
        values = tuple(value.lower() for value in values)
    return replace(flattened, values=values)


def flatten_single_line_fields(schema: SchemaDescriptor, record: Record) -> Record:
    """Remove line breaks from the schema's single-line fields.

    Args:
        schema: Schema descriptor naming the single-line fields.
        record: Stored record.

    Returns:
        Record whose single-line fields contain no line breaks.
    """
    if not schema.single_line_fields:
        return record
    values = tuple(
        _LINE_BREAK_RE.sub("", value) if name in schema.single_line_fields else value
        for name, value in zip(record.field_names, record.values)
    )
    return replace(record, values=values)


def _hash_text(text: str, algorithm: str) -> str:
    """Hash a string using the given digest algorithm.

    Args:
        text: Input text.
        algorithm: hashlib algorithm name.

    Returns:
        Hex digest string.
    """
    hasher = hashlib.new(algorithm)
    hasher.update(text.encode("utf-8"))
    return hasher.hexdigest()
