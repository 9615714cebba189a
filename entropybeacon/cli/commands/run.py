"""``entropybeacon run`` — run one or more pipeline phases.

Flags are independent; the selected phases always run in the order
clean, collect, generate, verify, index, upload.  Any fatal error stops
the run with exit status 1.  A non-essential source that fails to collect
does not.
"""

from __future__ import annotations

import logging

import httpx
import typer
from rich.console import Console

from entropybeacon.cli.render import (
    print_failure,
    print_outcomes,
    print_record_json,
)
from entropybeacon.config import load_config
from entropybeacon.core.pipeline import RunContext, run_phases
from entropybeacon.errors import BeaconError
from entropybeacon.models.phases import Phase
from entropybeacon.sources import DEFAULT_SOURCES

logger = logging.getLogger(__name__)

console = Console()


def select_phases(
    *,
    clean: bool = False,
    collect_sources: list[str] | None = None,
    generate: bool = False,
    verify: bool = False,
    index: bool = False,
    upload: bool = False,
) -> list[Phase]:
    phases: list[Phase] = []
    if clean:
        phases.append(Phase.CLEAN)
    if collect_sources:
        phases.append(Phase.COLLECT)
    if generate:
        phases.append(Phase.GENERATE)
    if verify:
        phases.append(Phase.VERIFY)
    if index:
        phases.append(Phase.INDEX)
    if upload:
        phases.append(Phase.UPLOAD)
    return phases


def run_cmd(
    clean: bool = typer.Option(False, "--clean", help="Remove collected payload files."),
    collect: bool = typer.Option(False, "--collect", help="Collect every entropy source."),
    collect_timestamp: bool = typer.Option(False, "--collect-timestamp"),
    collect_bitcoin: bool = typer.Option(False, "--collect-bitcoin"),
    collect_ethereum: bool = typer.Option(False, "--collect-ethereum"),
    collect_nist: bool = typer.Option(False, "--collect-nist"),
    collect_user_entropy: bool = typer.Option(False, "--collect-user-entropy"),
    collect_stellar: bool = typer.Option(False, "--collect-stellar"),
    collect_drand: bool = typer.Option(False, "--collect-drand"),
    collect_hn: bool = typer.Option(False, "--collect-hn"),
    entropy_generate: bool = typer.Option(
        False, "--entropy-generate", help="Generate and sign a new record."
    ),
    entropy_verify: bool = typer.Option(
        False, "--entropy-verify", help="Verify the current record."
    ),
    entropy_index: bool = typer.Option(
        False, "--entropy-index", help="Index the previous record by parent commit id."
    ),
    entropy_upload_kv: bool = typer.Option(
        False, "--entropy-upload-kv", help="Publish the current record to KV."
    ),
) -> None:
    """Run the selected pipeline phases."""
    requested = {
        "timestamp": collect or collect_timestamp,
        "bitcoin": collect or collect_bitcoin,
        "ethereum": collect or collect_ethereum,
        "nist-beacon": collect or collect_nist,
        "user-entropy": collect or collect_user_entropy,
        "stellar": collect or collect_stellar,
        "drand-beacon": collect or collect_drand,
        "hacker-news": collect or collect_hn,
    }
    sources = [s for s in DEFAULT_SOURCES if requested.get(s.name)]
    phases = select_phases(
        clean=clean,
        collect_sources=[s.name for s in sources],
        generate=entropy_generate,
        verify=entropy_verify,
        index=entropy_index,
        upload=entropy_upload_kv,
    )
    if not phases:
        console.print("[yellow]No phase selected.[/yellow] See --help.")
        raise typer.Exit(code=0)

    try:
        config = load_config()
        with httpx.Client(follow_redirects=True) as client:
            ctx = RunContext(config=config, client=client, sources=sources)
            result = run_phases(phases, ctx)
    except (BeaconError, OSError) as exc:
        logger.debug("run failed", exc_info=True)
        print_failure(console, exc)
        raise typer.Exit(code=1)

    if result.outcomes:
        print_outcomes(console, result.outcomes)
    if result.generated is not None:
        print_record_json(console, result.generated)
        console.print("[bold green]entropy : generated[/bold green]")
    if result.verified is not None:
        print_record_json(console, result.verified)
        console.print("[bold green]entropy : verified[/bold green]")
    if result.index_entry is not None:
        console.print(
            f"[bold green]entropy-index :[/bold green] "
            f"{result.index_entry.keyed_by} -> {result.index_entry.external_id}"
        )
    if result.published is False:
        console.print("[yellow]entropy-upload-kv : not published[/yellow]")
