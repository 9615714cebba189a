"""``entropybeacon show`` — display the current record."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from entropybeacon.cli.render import print_failure, print_record_json, print_record_summary
from entropybeacon.config import load_config
from entropybeacon.core.record_store import RecordStore
from entropybeacon.errors import BeaconError

console = Console()


def show_cmd(
    record_path: Path = typer.Option(
        None, "--record", "-r", help="Record file (default: configured record path)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw record document."),
) -> None:
    """Show the current record and its payload file digests."""
    try:
        config = load_config()
        path = record_path or config.record_path
        record = RecordStore(path, config.previous_record_path).load_current()
    except BeaconError as exc:
        print_failure(console, exc)
        raise typer.Exit(code=1)
    if record is None:
        console.print(f"[bold red]Record not found:[/bold red] {path}")
        raise typer.Exit(code=1)
    if as_json:
        print_record_json(console, record)
    else:
        print_record_summary(console, record)
