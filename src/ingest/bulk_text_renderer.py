"""Bulk text rendering for stored lookup rows."""

from __future__ import annotations

from typing import Iterable

from core.constants import RENDERED_LINE_SEPARATOR
from core.types import Record, SchemaDescriptor
from transforms.fingerprint import flatten_single_line_fields


def render_records(schema: SchemaDescriptor, rows: Iterable[Record]) -> str:
    """Render stored rows as editable bulk text.

    Args:
        schema: Schema descriptor for the rows' domain.
        rows: Stored rows in display order.

    Returns:
        Content fields joined by the domain delimiter, one row per line,
        lines separated by ``\\r\\n``. Identifiers are never rendered.
    """
    lines = [
        schema.delimiter.join(flatten_single_line_fields(schema, row).values) for row in rows
    ]
    return RENDERED_LINE_SEPARATOR.join(lines)
