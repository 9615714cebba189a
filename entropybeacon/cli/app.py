"""Main Typer application — imports and registers all CLI commands.

Entry point: ``entropybeacon`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from entropybeacon.cli.commands.keygen import keygen_cmd
from entropybeacon.cli.commands.run import run_cmd
from entropybeacon.cli.commands.show import show_cmd
from entropybeacon.config import load_config
from entropybeacon.errors import ConfigurationError

app = typer.Typer(
    name="entropybeacon",
    help="Entropy beacon: collect, commit, sign, verify and publish entropy records.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def configure_logging(level: str) -> None:
    """Route log records through Rich at *level* (once per process)."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
) -> None:
    """Entropy beacon."""
    if verbose:
        configure_logging("DEBUG")
        return
    try:
        level = load_config().log_level
    except ConfigurationError:
        # reported by the command that needs the config
        level = "INFO"
    configure_logging(level)


# Register subcommands
app.command(name="run", help="Run pipeline phases (collect, generate, verify, ...).")(run_cmd)
app.command(name="keygen", help="Generate an Ed25519 signing key-pair.")(keygen_cmd)
app.command(name="show", help="Show the current entropy record.")(show_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
