"""Bulk text parser for lookup table domains.

This module splits a pasted text blob into records for one schema.
Malformed lines are dropped and reported by line number, never raised.
"""

from __future__ import annotations

import re

from core.constants import LINE_BREAK_PATTERN
from core.logging_config import get_logger
from core.types import ParseResult, Record, SchemaDescriptor

_LOGGER = get_logger(__name__)
_LINE_BREAK_RE = re.compile(LINE_BREAK_PATTERN)


def parse_bulk_text(text: str, schema: SchemaDescriptor) -> ParseResult:
    """Parse a bulk text blob into records.

    Case normalization, when the schema asks for it, is applied once to
    the whole blob, so free-text fields in that domain are lower-cased too.

    Args:
        text: Raw submitted text, any line-ending convention.
        schema: Schema descriptor for the target domain.

    Returns:
        Parsed records in input order and the malformed line numbers.
    """
    normalized_text = text.lower() if schema.case_normalize else text
    records: list[Record] = []
    skipped_lines: list[int] = []
    for line_number, line in enumerate(split_lines(normalized_text), 1):
        if not line.strip():
            continue
        record = parse_line(line, schema)
        if record is None:
            skipped_lines.append(line_number)
            continue
        records.append(record)
    _log_parse_result(schema, len(records), skipped_lines)
    return ParseResult(records=tuple(records), skipped_lines=tuple(skipped_lines))


def parse_line(line: str, schema: SchemaDescriptor) -> Record | None:
    """Parse one delimited line.

    Args:
        line: Single line without its line break.
        schema: Schema descriptor for the target domain.

    Returns:
        A record built from the first ``field_count`` trimmed tokens, or
        ``None`` when the line has fewer tokens than the schema minimum.
    """
    tokens = [token.strip() for token in line.split(schema.delimiter)]
    if len(tokens) < schema.minimum_field_count:
        return None
    values = tuple(tokens[: schema.field_count])
    if len(values) < schema.field_count:
        values = values + ("",) * (schema.field_count - len(values))
    return Record(field_names=schema.field_names, values=values)


def split_lines(text: str) -> list[str]:
    """Split text on ``\\r\\n``, bare ``\\n`` or bare ``\\r``."""
    return _LINE_BREAK_RE.split(text)


def _log_parse_result(
    schema: SchemaDescriptor,
    record_count: int,
    skipped_lines: list[int],
) -> None:
    _LOGGER.info(
        "bulk_text_parsed",
        domain=schema.domain,
        record_count=record_count,
        skipped_count=len(skipped_lines),
    )
    if skipped_lines:
        _LOGGER.warning(
            "malformed_lines_skipped",
            domain=schema.domain,
            minimum_field_count=schema.minimum_field_count,
            line_numbers=skipped_lines,
        )
