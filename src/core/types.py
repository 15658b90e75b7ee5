"""Shared typed models.

This module defines immutable data models used by the parser,
fingerprinting, store, and reconciliation layers to keep interfaces
explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SchemaDescriptor:
    """Static description of one bulk-editable lookup table.

    Attributes:
        domain: Registry key for the configuration domain.
        table_name: Table name without the configured prefix.
        field_names: Ordered content fields, identifier excluded.
        delimiter: Token delimiter used in the bulk text format.
        minimum_field_count: Token count below which a line is dropped.
        case_normalize: Lower-case the whole submitted text before parsing.
        single_line_fields: Fields whose stored values are stripped of line breaks.
    """

    domain: str
    table_name: str
    field_names: tuple[str, ...]
    delimiter: str
    minimum_field_count: int
    case_normalize: bool
    single_line_fields: tuple[str, ...] = ()

    @property
    def field_count(self) -> int:
        """Return the number of content fields."""
        return len(self.field_names)


@dataclass(frozen=True)
class Record:
    """One lookup row as ordered field values.

    Attributes:
        field_names: Field names in schema order.
        values: Field values aligned with ``field_names``.
        record_id: Store-assigned surrogate id, ``None`` for parsed records.
    """

    field_names: tuple[str, ...]
    values: tuple[str, ...]
    record_id: int | None = None

    def as_mapping(self) -> dict[str, str]:
        """Return an ordered field-name to value mapping."""
        return dict(zip(self.field_names, self.values))

    def value(self, field_name: str) -> str:
        """Return the value of one named field."""
        return self.values[self.field_names.index(field_name)]

    def without_id(self) -> "Record":
        """Return a copy with the surrogate id removed."""
        return replace(self, record_id=None)


@dataclass(frozen=True)
class ParseResult:
    """Parsed bulk text.

    Attributes:
        records: Records built from well-formed lines, in input order.
        skipped_lines: One-based numbers of non-blank lines dropped as malformed.
    """

    records: tuple[Record, ...]
    skipped_lines: tuple[int, ...] = ()


@dataclass(frozen=True)
class SyncPatch:
    """Insert and delete sets that bring a table in line with submitted text.

    Attributes:
        domain: Schema domain the patch targets.
        inserts: Submitted records with no stored counterpart.
        deletes: Ids of stored rows not reproduced in the submitted text.
        retained: Ids of stored rows matched unchanged.
        skipped_lines: Malformed submitted lines that were ignored.
    """

    domain: str
    inserts: tuple[Record, ...]
    deletes: tuple[int, ...]
    retained: tuple[int, ...] = ()
    skipped_lines: tuple[int, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Return whether applying the patch would change nothing."""
        return not self.inserts and not self.deletes


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of applying a patch.

    Attributes:
        domain: Schema domain the patch targeted.
        inserted_ids: Ids assigned to inserted rows, in insert order.
        deleted_ids: Ids of deleted rows.
    """

    domain: str
    inserted_ids: tuple[int, ...]
    deleted_ids: tuple[int, ...]


@dataclass(frozen=True)
class SyncOptions:
    """Per-submit reconciliation options.

    Attributes:
        collapse_duplicates: Keep only the first of identical submitted lines.
        dry_run: Compute the patch without applying it.
        expected_token: Snapshot token captured at render time, if any.
    """

    collapse_duplicates: bool = False
    dry_run: bool = False
    expected_token: str | None = None


@dataclass(frozen=True)
class SyncOutcome:
    """Result of one submit-and-sync cycle.

    Attributes:
        patch: Computed patch.
        applied: Apply result, ``None`` for dry runs.
    """

    patch: SyncPatch
    applied: ApplyResult | None


@dataclass(frozen=True)
class RenderedTable:
    """Bulk text view of one table.

    Attributes:
        domain: Schema domain.
        text: Rendered bulk text.
        snapshot_token: Digest of the rows the text was rendered from.
    """

    domain: str
    text: str
    snapshot_token: str
