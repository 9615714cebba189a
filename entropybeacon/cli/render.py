"""Rich rendering of beacon records and run results."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from entropybeacon.errors import (
    BeaconError,
    InvalidSignatureError,
    KeyUnavailableError,
    MissingRecordError,
    RecordMismatchError,
)
from entropybeacon.models.records import EntropyRecord
from entropybeacon.models.sources import SourceOutcome

_FAILURE_TITLES: dict[type[BeaconError], str] = {
    MissingRecordError: "Missing record file",
    KeyUnavailableError: "Public key unavailable",
    InvalidSignatureError: "Bad signature",
    RecordMismatchError: "Hash mismatch",
}


def failure_title(exc: BaseException) -> str:
    for exc_type, title in _FAILURE_TITLES.items():
        if isinstance(exc, exc_type):
            return title
    if isinstance(exc, OSError):
        return "I/O error"
    return type(exc).__name__


def print_record_json(console: Console, record: EntropyRecord) -> None:
    """Print the record document exactly as it is persisted."""
    console.print_json(data=record.to_document())


def print_record_summary(console: Console, record: EntropyRecord) -> None:
    table = Table(title="Payload files")
    table.add_column("Name", style="cyan")
    table.add_column("SHA-256", style="green")
    for f in record.files:
        table.add_row(f.name, f.digest_hex)
    console.print(table)
    console.print(
        Panel(
            "\n".join([
                f"[bold]Hash:[/bold]       {record.commitment_hash}",
                f"[bold]Prev hash:[/bold]  {record.prev_hash or '[dim]none[/dim]'}",
                f"[bold]Iterations:[/bold] {record.hash_iterations} x {record.hash_type}",
                f"[bold]Created:[/bold]    {record.created_at or '[dim]unknown[/dim]'}",
                f"[bold]Signed:[/bold]     {'yes' if record.signature else '[red]no[/red]'}",
            ]),
            title="[bold]Entropy record[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )


def print_outcomes(console: Console, outcomes: list[SourceOutcome]) -> None:
    table = Table(title="Collected sources")
    table.add_column("Source", style="cyan")
    table.add_column("File")
    table.add_column("Status", justify="center")
    for o in outcomes:
        status = "[green]ok[/green]" if o.ok else f"[red]failed[/red] [dim]{o.error}[/dim]"
        table.add_row(o.name, o.filename, status)
    console.print(table)


def print_failure(console: Console, exc: BaseException) -> None:
    console.print(f"[bold red]{failure_title(exc)}:[/bold red] {escape(str(exc))}")
