"""Embedding subcommands (all, company, remove)."""

from typing import Annotated

import typer
from rich.console import Console

from connectq.core import ConnectQError, EmbedResult, NotFoundError
from connectq.search import SearchOrchestrator

console = Console()

embed_app = typer.Typer(no_args_is_help=True)


def _print_error(
    label: str,
    message: str,
    *,
    details: str | None = None,
    hint: str | None = None,
) -> None:
    """Print a consistently formatted error with optional details and hint."""
    console.print(f"[red]{label}:[/red] {message}")
    if details:
        console.print(f"  [dim]{details}[/dim]")
    if hint:
        console.print(f"  [dim italic]Hint: {hint}[/dim italic]")


def _load_orchestrator() -> SearchOrchestrator:
    try:
        return SearchOrchestrator.from_settings()
    except ConnectQError as e:
        _print_error(
            "Initialisation failed",
            e.message,
            details=e.details,
            hint="Check EMBEDDING_PROVIDER, GEMINI_API_KEY and the data directory.",
        )
        raise typer.Exit(code=1) from None


def _report(result: EmbedResult) -> None:
    if not result.success:
        _print_error(
            "Embedding failed",
            result.message,
            hint="Nothing was indexed for the failed batch; re-run once the provider is reachable.",
        )
        raise typer.Exit(code=1)
    console.print(f"[green]Done:[/green] {result.message}")


@embed_app.command("all")
def embed_all() -> None:
    """Re-embed every company and refresh the vector index."""
    orchestrator = _load_orchestrator()
    with console.status("Embedding all companies..."):
        result = orchestrator.embed_and_store_all()
    _report(result)


@embed_app.command("company")
def embed_company(
    company_id: Annotated[str, typer.Argument(help="ID of the company to re-embed.")],
) -> None:
    """Re-embed a single company."""
    orchestrator = _load_orchestrator()
    try:
        with console.status(f"Embedding company {company_id}..."):
            result = orchestrator.embed_single(company_id)
    except NotFoundError as e:
        _print_error(
            "Not found",
            e.message,
            hint="Run 'connectq manage list' to see company IDs.",
        )
        raise typer.Exit(code=1) from None
    _report(result)


@embed_app.command("remove")
def remove(
    company_id: Annotated[str, typer.Argument(help="ID of the company whose vector to delete.")],
) -> None:
    """Delete a company's vector from the index."""
    orchestrator = _load_orchestrator()
    _report(orchestrator.remove_embedding(company_id))
