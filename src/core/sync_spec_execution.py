"""Shared sync-spec execution engine for CLI and SDK workflows.

This module maps validated sync-spec steps onto client submissions so
batch runs from either entry point follow one path.
"""

from __future__ import annotations

from typing import Any, Protocol

from core.errors import BulkSyncSpecError
from core.logging_config import get_logger
from core.sync_spec import SyncSpec, SyncSpecStep, load_sync_spec
from core.types import SyncOptions, SyncOutcome

_LOGGER = get_logger(__name__)


class SyncSpecClient(Protocol):
    """Client API contract required by sync-spec execution."""

    @property
    def collapse_duplicates(self) -> bool: ...

    def with_database(self, database_path: str) -> Any: ...

    def submit(self, domain: str, text: str, options: SyncOptions | None = None) -> SyncOutcome: ...

    def close(self) -> None: ...


def execute_sync_spec_file(client: SyncSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load a sync-spec file and run its steps in order.

    Args:
        client: Client used for submissions.
        spec_file: Path to YAML sync-spec file.

    Returns:
        One summary line per step.
    """
    return execute_sync_spec(client, load_sync_spec(spec_file))


def execute_sync_spec(client: SyncSpecClient, spec: SyncSpec) -> tuple[str, ...]:
    """Run validated sync-spec steps in order.

    A failing step stops the run. Steps already applied stay applied.

    Args:
        client: Client used for submissions.
        spec: Validated sync spec.

    Returns:
        One summary line per step.
    """
    if not spec.defaults.database_path:
        return _execute_steps(client, spec)
    spec_client = client.with_database(spec.defaults.database_path)
    try:
        return _execute_steps(spec_client, spec)
    finally:
        spec_client.close()


def _execute_steps(client: SyncSpecClient, spec: SyncSpec) -> tuple[str, ...]:
    collapse_duplicates = spec.defaults.collapse_duplicates
    if collapse_duplicates is None:
        collapse_duplicates = client.collapse_duplicates
    output_lines: list[str] = []
    for index, step in enumerate(spec.steps, 1):
        outcome = client.submit(
            step.domain,
            _read_step_text(step),
            SyncOptions(
                collapse_duplicates=collapse_duplicates,
                dry_run=step.dry_run,
                expected_token=step.expected_token,
            ),
        )
        line = f"step={index} domain={step.domain} {format_outcome(outcome)}"
        _LOGGER.info("sync_spec_step_completed", step=index, domain=step.domain)
        output_lines.append(line)
    return tuple(output_lines)


def format_outcome(outcome: SyncOutcome) -> str:
    """Render a one-line patch summary."""
    patch = outcome.patch
    skipped = ",".join(str(line_number) for line_number in patch.skipped_lines) or "-"
    return (
        f"inserted={len(patch.inserts)} "
        f"deleted={len(patch.deletes)} "
        f"retained={len(patch.retained)} "
        f"skipped_lines={skipped} "
        f"applied={'no' if outcome.applied is None else 'yes'}"
    )


def _read_step_text(step: SyncSpecStep) -> str:
    try:
        return step.text_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise BulkSyncSpecError(
            f"Failed to read text file {step.text_file} for domain '{step.domain}': {error}."
        ) from error
