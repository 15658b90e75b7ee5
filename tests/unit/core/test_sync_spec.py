"""Unit tests for sync-spec parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.errors import BulkSyncSpecError
from core.sync_spec import load_sync_spec
from tests.fixture_paths import fixture_path


def test_load_sync_spec_valid_batch_parses_steps() -> None:
    """Valid sync-spec should parse steps in file order."""
    spec = load_sync_spec(str(fixture_path("sync_spec/valid_batch.yaml")))

    assert tuple(step.domain for step in spec.steps) == ("moderator_assistants", "ccgroups")


def test_load_sync_spec_resolves_text_file_relative_to_spec() -> None:
    """Relative text paths should resolve against the spec directory."""
    spec = load_sync_spec(str(fixture_path("sync_spec/valid_batch.yaml")))

    assert spec.steps[0].text_file == fixture_path("bulk_text/moderator_assistants.txt").resolve()


def test_load_sync_spec_reads_step_dry_run_flag() -> None:
    """Per-step dry_run should default to false and honor explicit true."""
    spec = load_sync_spec(str(fixture_path("sync_spec/valid_batch.yaml")))

    assert tuple(step.dry_run for step in spec.steps) == (False, True)


def test_load_sync_spec_unknown_domain_raises_error() -> None:
    """Unregistered domain should be rejected at load time."""
    with pytest.raises(BulkSyncSpecError):
        load_sync_spec(str(fixture_path("sync_spec/invalid_domain.yaml")))


def test_load_sync_spec_invalid_defaults_key_raises_error() -> None:
    """Unknown defaults field should be rejected."""
    with pytest.raises(BulkSyncSpecError):
        load_sync_spec(str(fixture_path("sync_spec/invalid_defaults_key.yaml")))


def test_load_sync_spec_missing_text_file_raises_error() -> None:
    """Steps must point at an existing text file."""
    with pytest.raises(BulkSyncSpecError):
        load_sync_spec(str(fixture_path("sync_spec/missing_text_file.yaml")))


def test_load_sync_spec_unsupported_version_raises_error(tmp_path: Path) -> None:
    """Only version 1 sync-specs are accepted."""
    spec_path = tmp_path / "spec.yaml"
    spec_path.write_text("version: 2\nsteps: []\n", encoding="utf-8")

    with pytest.raises(BulkSyncSpecError):
        load_sync_spec(str(spec_path))


def test_load_sync_spec_empty_steps_raises_error(tmp_path: Path) -> None:
    """A spec without steps has nothing to run."""
    spec_path = tmp_path / "spec.yaml"
    spec_path.write_text("version: 1\nsteps: []\n", encoding="utf-8")

    with pytest.raises(BulkSyncSpecError):
        load_sync_spec(str(spec_path))


def test_load_sync_spec_missing_file_raises_error(tmp_path: Path) -> None:
    """Missing spec file should raise a sync-spec error."""
    with pytest.raises(BulkSyncSpecError):
        load_sync_spec(str(tmp_path / "absent.yaml"))


def test_load_sync_spec_resolves_database_path_relative_to_spec(tmp_path: Path) -> None:
    """Relative database paths should resolve like text files, against the spec."""
    (tmp_path / "pairs.txt").write_text("alice,bob\n", encoding="utf-8")
    spec_path = tmp_path / "spec.yaml"
    spec_path.write_text(
        "version: 1\n"
        "defaults:\n"
        "  database_path: ./lookups.sqlite3\n"
        "steps:\n"
        "  - domain: moderator_assistants\n"
        "    text_file: pairs.txt\n",
        encoding="utf-8",
    )

    spec = load_sync_spec(str(spec_path))

    assert spec.defaults.database_path == str((tmp_path / "lookups.sqlite3").resolve())
