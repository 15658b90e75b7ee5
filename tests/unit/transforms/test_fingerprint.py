"""Unit tests for record fingerprints and snapshots."""

from __future__ import annotations

import hashlib

import pytest

from core.errors import BulkSyncStoreError
from core.schema_registry import describe
from core.types import Record
from transforms.fingerprint import (
    build_snapshot,
    build_snapshot_token,
    fingerprint_record,
    normalize_stored_record,
)

_PAIRS = describe("moderator_assistants")
_CCGROUPS = describe("ccgroups")
_PRIVILEGES = describe("privileges")


def _row(schema, values: tuple[str, ...], record_id: int | None = None) -> Record:
    return Record(field_names=schema.field_names, values=values, record_id=record_id)


def test_fingerprint_record_hashes_double_underscore_join() -> None:
    """Fingerprint should be the SHA-1 of values joined by '__'."""
    expected = hashlib.sha1("alice__bob".encode("utf-8")).hexdigest()

    assert fingerprint_record(_row(_PAIRS, ("alice", "bob"))) == expected


def test_fingerprint_record_ignores_record_id() -> None:
    """Stored and parsed copies of a row should share a fingerprint."""
    stored = _row(_PAIRS, ("alice", "bob"), record_id=12)
    parsed = _row(_PAIRS, ("alice", "bob"))

    assert fingerprint_record(stored) == fingerprint_record(parsed)


def test_fingerprint_record_is_order_sensitive() -> None:
    """Swapping field values should change the fingerprint."""
    forward = fingerprint_record(_row(_PAIRS, ("alice", "bob")))
    reverse = fingerprint_record(_row(_PAIRS, ("bob", "alice")))

    assert forward != reverse


def test_build_snapshot_keeps_every_id_of_duplicate_rows() -> None:
    """Identical stored rows should all be reachable from one fingerprint."""
    rows = [_row(_PAIRS, ("alice", "bob"), 7), _row(_PAIRS, ("alice", "bob"), 3)]

    snapshot = build_snapshot(_PAIRS, rows)

    assert list(snapshot.values()) == [[3, 7]]


def test_build_snapshot_raises_for_row_without_id() -> None:
    """Snapshot rows must come from the store."""
    with pytest.raises(BulkSyncStoreError):
        build_snapshot(_PAIRS, [_row(_PAIRS, ("alice", "bob"))])


def test_normalize_stored_record_lowercases_case_normalized_domains() -> None:
    """Stored rows should match what the parser produces for their text."""
    row = _row(_CCGROUPS, ("Course", "7MATH", "student", "1", "Line\r\nBreak", " g1 "), 4)

    normalized = normalize_stored_record(_CCGROUPS, row)

    assert normalized.values == ("course", "7math", "student", "1", "linebreak", "g1")


def test_normalize_stored_record_keeps_case_for_privileges() -> None:
    """Privilege rules are compared case-sensitively."""
    values = ("course", "7MATH", "student", "and", "0", "Maths", "none", "", "0", "0", "0",
              "Admin", "1", "1")

    normalized = normalize_stored_record(_PRIVILEGES, _row(_PRIVILEGES, values, 1))

    assert normalized.value("modusername") == "Admin"


def test_build_snapshot_token_changes_when_rows_change() -> None:
    """Removing a row should produce a different token."""
    rows = [_row(_PAIRS, ("alice", "bob"), 1), _row(_PAIRS, ("alice", "carol"), 2)]

    before = build_snapshot_token(_PAIRS, rows)
    after = build_snapshot_token(_PAIRS, rows[:1])

    assert before != after


def test_build_snapshot_token_ignores_row_order() -> None:
    """Token should depend on table contents, not listing order."""
    rows = [_row(_PAIRS, ("alice", "bob"), 1), _row(_PAIRS, ("alice", "carol"), 2)]

    assert build_snapshot_token(_PAIRS, rows) == build_snapshot_token(_PAIRS, rows[::-1])
