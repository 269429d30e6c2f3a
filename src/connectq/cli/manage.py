"""Index management subcommands (status, list, cleanup-orphans)."""

from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from connectq.core import ConnectQError
from connectq.database import CompanyRepository
from connectq.search import SearchOrchestrator

console = Console()

manage_app = typer.Typer(no_args_is_help=True)


def _load_orchestrator() -> SearchOrchestrator:
    try:
        return SearchOrchestrator.from_settings()
    except ConnectQError as e:
        console.print(f"[red]Initialisation failed:[/red] {e.message}")
        if e.details:
            console.print(f"  [dim]{e.details}[/dim]")
        raise typer.Exit(code=1) from None


@manage_app.command("status")
def status() -> None:
    """Show company and vector counts and the embedding provider."""
    orchestrator = _load_orchestrator()
    try:
        info = orchestrator.status()
    except ConnectQError as e:
        console.print(f"[red]Status failed:[/red] {e.message}")
        raise typer.Exit(code=1) from None

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Key", style="bold")
    table.add_column("Value")

    company_count = info["company_count"]
    vector_count = info["vector_count"]
    table.add_row(
        "Companies",
        Text(str(company_count), style="green" if company_count else "dim"),
    )
    in_sync = company_count == vector_count
    table.add_row(
        "Vectors",
        Text(str(vector_count), style="green" if in_sync else "yellow"),
    )
    table.add_row("Provider", Text(info["provider"], style="cyan"))
    table.add_row("Index", Text(f"{info['collection']} @ {info['location']}", style="dim"))

    console.print(Panel(table, title="[bold]Index Status[/bold]", expand=False))
    if not in_sync:
        console.print(
            "[dim italic]Hint: Counts differ; run 'connectq embed all' or "
            "'connectq manage cleanup-orphans'.[/dim italic]"
        )


@manage_app.command("list")
def list_companies() -> None:
    """List all companies in the relational store."""
    try:
        companies = CompanyRepository().list_all()
    except ConnectQError as e:
        console.print(f"[red]Database error:[/red] {e.message}")
        if e.details:
            console.print(f"  [dim]{e.details}[/dim]")
        raise typer.Exit(code=1) from None

    if not companies:
        console.print("[yellow]No companies found.[/yellow]")
        return

    table = Table(
        title="[bold]Companies[/bold]",
        border_style="dim",
        header_style="bold",
    )
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Industry", style="green")
    table.add_column("Location")
    table.add_column("Services", max_width=40)

    for c in companies:
        table.add_row(
            c.id,
            c.name,
            c.industry or "",
            c.location or "",
            ", ".join(c.services),
        )

    console.print(table)


@manage_app.command("cleanup-orphans")
def cleanup_orphans(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Delete vectors whose company no longer exists."""
    if not yes:
        confirmed = typer.confirm("Delete vectors of deleted companies?")
        if not confirmed:
            console.print("[dim]Cancelled.[/dim]")
            raise typer.Exit(code=0)

    orchestrator = _load_orchestrator()
    result = orchestrator.cleanup_orphans()
    if not result.success:
        console.print(f"[red]Cleanup failed:[/red] {result.message}")
        raise typer.Exit(code=1)
    console.print(f"[green]Done:[/green] {result.message}")
