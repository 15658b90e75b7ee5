"""Sync-spec CLI command wiring.

This module registers the run-spec subcommand and delegates execution to
the shared sync-spec engine used by CLI and SDK entry points.
"""

from __future__ import annotations

import argparse
from typing import Any

from store.sync_client import SyncClient


def add_run_spec_command(subparsers: Any) -> None:
    """Register run-spec subcommand."""
    parser = subparsers.add_parser(
        "run-spec",
        help="Run a declarative YAML batch sync spec",
    )
    parser.add_argument("spec_file", help="Path to YAML sync-spec file")


def run_run_spec_command(client: SyncClient, args: argparse.Namespace) -> int:
    """Handle run-spec command invocation."""
    output_lines = client.run_spec(args.spec_file)
    for line in output_lines:
        print(line)
    return 0
