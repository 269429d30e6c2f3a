"""
Root of the ``connectq`` command.

Commands:
    connectq search "QUERY"           rank companies for a project request
    connectq embed all|company|remove maintain company vectors
    connectq manage status|list|cleanup-orphans

Global options are handled in the callback before any command builds its
orchestrator, so ``--env-file`` affects the settings every command reads.
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

from connectq import __version__
from connectq.cli.embed import embed_app
from connectq.cli.manage import manage_app
from connectq.cli.search import search
from connectq.config import reload_settings
from connectq.core.logging import configure_logging, suppress_third_party_loggers

console = Console()

app = typer.Typer(
    name="connectq",
    help="Search ConnectQ companies and maintain their vector index.",
    no_args_is_help=True,
)


def _show_version(value: bool) -> None:
    if value:
        console.print(f"connectq {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    _version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=_show_version,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Log pipeline steps at DEBUG level.",
    ),
    env_file: Optional[Path] = typer.Option(
        None,
        "--env-file",
        help="Load settings from this file instead of ./.env.",
        exists=True,
        dir_okay=False,
    ),
) -> None:
    """Search ConnectQ companies and maintain their vector index."""
    if env_file is not None:
        load_dotenv(env_file, override=True)
        reload_settings()
    if verbose:
        configure_logging(level=logging.DEBUG)
    suppress_third_party_loggers()


app.add_typer(embed_app, name="embed", help="Write or remove company vectors.")
app.add_typer(manage_app, name="manage", help="Inspect the index and clean up drift.")
app.command(name="search")(search)
