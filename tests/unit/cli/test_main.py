"""Unit tests for CLI command handling."""

from __future__ import annotations

from cli.main import main
from tests.fixture_paths import fixture_path


def _sync_args(database: str, text_file: str, *extra: str) -> list[str]:
    return [
        "--database",
        database,
        "sync",
        "--domain",
        "moderator_assistants",
        "--text-file",
        text_file,
        *extra,
    ]


def test_cli_sync_prints_patch_summary(tmp_path, capsys) -> None:
    """CLI sync should apply the text and print counts."""
    database = str(tmp_path / "lookups.sqlite3")
    text_file = str(fixture_path("bulk_text/moderator_assistants.txt"))

    exit_code = main(_sync_args(database, text_file))
    output = capsys.readouterr().out

    assert exit_code == 0 and "inserted=3 deleted=0 retained=0" in output


def test_cli_render_prints_synced_rows(tmp_path, capsys) -> None:
    """CLI render should print the table as bulk text."""
    database = str(tmp_path / "lookups.sqlite3")
    main(_sync_args(database, str(fixture_path("bulk_text/moderator_assistants.txt"))))
    capsys.readouterr()

    exit_code = main(["--database", database, "render", "--domain", "moderator_assistants"])
    output = capsys.readouterr().out

    assert exit_code == 0 and output == "alice,bob\r\nalice,carol\r\ndave,erin\n"


def test_cli_sync_dry_run_reports_without_applying(tmp_path, capsys) -> None:
    """Dry-run output should mark the patch as not applied."""
    database = str(tmp_path / "lookups.sqlite3")
    text_file = str(fixture_path("bulk_text/moderator_assistants.txt"))

    main(_sync_args(database, text_file, "--dry-run"))
    output = capsys.readouterr().out

    assert "applied=no" in output


def test_cli_sync_stale_token_exits_with_error(tmp_path, capsys) -> None:
    """A mismatched snapshot token should fail with exit code 1."""
    database = str(tmp_path / "lookups.sqlite3")
    text_file = str(fixture_path("bulk_text/moderator_assistants.txt"))

    exit_code = main(_sync_args(database, text_file, "--expect-token", "stale"))
    error_output = capsys.readouterr().err

    assert exit_code == 1 and "error=" in error_output


def test_cli_domains_lists_registered_domains(capsys, tmp_path) -> None:
    """CLI domains should print one line per domain."""
    exit_code = main(["--database", str(tmp_path / "lookups.sqlite3"), "domains"])
    output = capsys.readouterr().out

    assert exit_code == 0 and output.count("\n") == 3


def test_cli_run_spec_prints_step_lines(tmp_path, capsys) -> None:
    """CLI run-spec should print one summary line per step."""
    database = str(tmp_path / "lookups.sqlite3")
    spec_file = str(fixture_path("sync_spec/valid_batch.yaml"))

    exit_code = main(["--database", database, "run-spec", spec_file])
    output = capsys.readouterr().out

    assert exit_code == 0 and "step=2 domain=ccgroups" in output


def test_cli_sync_invalid_utf8_exits_with_error(tmp_path, capsys) -> None:
    """Undecodable bulk text should fail with exit code 1, not a traceback."""
    database = str(tmp_path / "lookups.sqlite3")
    text_path = tmp_path / "bad.txt"
    text_path.write_bytes(b"alice,b\xffob")

    exit_code = main(_sync_args(database, str(text_path)))
    error_output = capsys.readouterr().err

    assert exit_code == 1 and "error=" in error_output
