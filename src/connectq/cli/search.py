"""Search command for ranking companies against a project description."""

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from connectq.core import ConnectQError, ValidationError
from connectq.search import SearchOrchestrator

console = Console()

_DESCRIPTION_PREVIEW_LIMIT = 300


def _score_text(score: float) -> Text:
    """
    Return a colour-coded similarity percentage.

    Green for >= 70%, yellow for >= 50%, dim otherwise.
    """
    pct = f"{score:.1%}"
    if score >= 0.70:
        return Text(pct, style="bold green")
    if score >= 0.50:
        return Text(pct, style="yellow")
    return Text(pct, style="dim")


def search(
    query: Annotated[str, typer.Argument(help="Free-text project description.")],
    top: Annotated[
        Optional[int],
        typer.Option("--top", "-t", help="Number of companies to return (1-100)."),
    ] = None,
) -> None:
    """
    Find the companies best matching a project description.

    Examples:

        connectq search "React Native app for a healthcare startup"

        connectq search "data pipeline on AWS" -t 5
    """
    with console.status("Searching..."):
        try:
            orchestrator = SearchOrchestrator.from_settings()
            outcome = orchestrator.search(query, top_k=top)
        except ValidationError as e:
            console.print(f"[red]Invalid search:[/red] {e.message}")
            if e.details:
                console.print(f"  [dim]{e.details}[/dim]")
            raise typer.Exit(code=1) from None
        except ConnectQError as e:
            console.print(f"[red]Search failed:[/red] {e.message}")
            if e.details:
                console.print(f"  [dim]{e.details}[/dim]")
            raise typer.Exit(code=1) from None

    if not outcome.success:
        console.print(f"[red]Search failed:[/red] {outcome.message}")
        console.print(
            "  [dim italic]Hint: Check the embedding provider credentials and "
            "run 'connectq manage status'.[/dim italic]"
        )
        raise typer.Exit(code=1)

    if not outcome.matches:
        console.print("[yellow]No matching companies found.[/yellow]")
        console.print(
            "[dim italic]Hint: Companies may not be embedded yet; run "
            "'connectq embed all'.[/dim italic]"
        )
        return

    console.print(
        f"\n[bold]Found {outcome.count} compan{'y' if outcome.count == 1 else 'ies'}[/bold]"
        f" for: [italic]{query}[/italic]\n"
    )

    table = Table(show_lines=True, expand=True, border_style="dim")
    table.add_column("#", style="bold", width=3, justify="right")
    table.add_column("Score", width=8, justify="right")
    table.add_column("Company", style="cyan", width=24)
    table.add_column("Industry / Location", style="dim", max_width=30)
    table.add_column("Description")

    for i, match in enumerate(outcome.matches, 1):
        company = match.company
        if company is None:
            table.add_row(
                str(i),
                _score_text(match.score),
                Text(match.id, style="dim"),
                "",
                Text("(company no longer exists)", style="dim italic"),
            )
            continue

        where = " / ".join(v for v in (company.industry, company.location) if v)
        description = company.description or ""
        if len(description) > _DESCRIPTION_PREVIEW_LIMIT:
            description = description[:_DESCRIPTION_PREVIEW_LIMIT] + "..."

        table.add_row(str(i), _score_text(match.score), company.name, where, description)

    console.print(table)
