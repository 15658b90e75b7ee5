"""Bulksync CLI entry points.
This module exposes commands to list domains, render tables as bulk
text, and submit edited text. It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.sync_spec_command import add_run_spec_command, run_run_spec_command
from core.config import BulkSyncConfig
from core.errors import BulkSyncError
from core.schema_registry import registered_domains
from core.sync_spec_execution import format_outcome
from core.types import SyncOptions
from store.sync_client import SyncClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="bulksync", description="Bulk lookup table editor")
    parser.add_argument("--database", help="Override BULKSYNC_DATABASE_PATH for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_domains_command(subparsers)
    _add_render_command(subparsers)
    _add_sync_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the bulksync CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        with _build_client(args.database) as client:
            return _dispatch(parser, client, args)
    except BulkSyncError as error:
        print(f"error={error}", file=sys.stderr)
        return 1


def _dispatch(
    parser: argparse.ArgumentParser,
    client: SyncClient,
    args: argparse.Namespace,
) -> int:
    if args.command == "domains":
        return _run_domains_command(client)
    if args.command == "render":
        return _run_render_command(client, args)
    if args.command == "sync":
        return _run_sync_command(client, args)
    if args.command == "run-spec":
        return run_run_spec_command(client, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(database: str | None) -> SyncClient:
    """Build SDK client with optional database override.

    Args:
        database: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = BulkSyncConfig.from_env()
    if database:
        config = replace(config, database_path=Path(database).expanduser().resolve())
    return SyncClient(config)


def _run_domains_command(client: SyncClient) -> int:
    """Handle domains command."""
    for schema in client.domains():
        print(
            f"{schema.domain}\t"
            f"{schema.delimiter}\t"
            f"{'lower' if schema.case_normalize else 'as-is'}\t"
            f"{','.join(schema.field_names)}"
        )
    return 0


def _run_render_command(client: SyncClient, args: argparse.Namespace) -> int:
    """Handle render command.

    The text goes to stdout unchanged; the snapshot token goes to stderr.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    rendered = client.render(args.domain)
    sys.stdout.write(rendered.text)
    if rendered.text:
        sys.stdout.write("\n")
    print(f"snapshot_token={rendered.snapshot_token}", file=sys.stderr)
    return 0


def _run_sync_command(client: SyncClient, args: argparse.Namespace) -> int:
    """Handle sync command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    text = _read_submitted_text(args.text_file)
    options = SyncOptions(
        collapse_duplicates=args.collapse_duplicates or client.collapse_duplicates,
        dry_run=args.dry_run,
        expected_token=args.expect_token,
    )
    outcome = client.submit(args.domain, text, options)
    print(format_outcome(outcome))
    return 0


def _read_submitted_text(text_file: str | None) -> str:
    if text_file is None or text_file == "-":
        return sys.stdin.read()
    path = Path(text_file).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise BulkSyncError(
            f"Failed to read bulk text at {path}: {error}. Provide a readable UTF-8 text file."
        ) from error


def _add_domains_command(subparsers: Any) -> None:
    """Register domains subcommand."""
    subparsers.add_parser("domains", help="List registered schema domains")


def _add_render_command(subparsers: Any) -> None:
    """Register render subcommand."""
    parser = subparsers.add_parser("render", help="Print a table as editable bulk text")
    parser.add_argument("--domain", required=True, choices=registered_domains())


def _add_sync_command(subparsers: Any) -> None:
    """Register sync subcommand."""
    parser = subparsers.add_parser("sync", help="Resynchronize a table to submitted bulk text")
    parser.add_argument("--domain", required=True, choices=registered_domains())
    parser.add_argument("--text-file", help="Bulk text file, '-' or omitted for stdin")
    parser.add_argument("--dry-run", action="store_true", help="Compute the patch only")
    parser.add_argument(
        "--collapse-duplicates",
        action="store_true",
        help="Keep only the first of identical submitted lines",
    )
    parser.add_argument(
        "--expect-token",
        help="Snapshot token printed by render; refuse to sync if the table changed",
    )
