"""
FILE: corkboard/cli/commands/system.py
PURPOSE: System commands (version, keys, palette)
"""

import json

import typer
from rich.table import Table

from ..main import app, console, error_console, load_bindings
from ... import __version__
from ...core import service
from ...core.exceptions import CorkboardError
from ...palette import CommandPaletteEngine, allot_rows


@app.command()
def version():
    """Show Corkboard version."""
    console.print(f"Corkboard v{__version__}")


@app.command()
def keys(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the active key bindings.

    Exits with code 1 (listing every conflict) if two actions share a key.

    Example:
        corkboard keys
        corkboard --config ./config.json keys --json
    """
    table = load_bindings(ctx.obj)

    if json_output:
        console.print(json.dumps(table.to_config(), indent=2))
        return

    output = Table(title="Key Bindings")
    output.add_column("Action", style="cyan")
    output.add_column("Keys", style="yellow")
    for action, chords in table.items():
        output.add_row(action.label, ", ".join(str(c) for c in chords))
    console.print(output)


@app.command()
def palette(
    ctx: typer.Context,
    query: str = typer.Argument(..., help="Text typed into the command palette"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show what the command palette would list for QUERY.

    Example:
        corkboard palette "new"
        corkboard palette "groceries" --json
    """
    try:
        boards = service.list_boards()
    except CorkboardError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)

    engine = CommandPaletteEngine()
    results = engine.search(
        query,
        lambda q: service.rank_cards(q, boards),
        lambda q: service.rank_boards(q, boards),
    )

    if json_output:
        data = {
            "commands": [c.label for c in results.commands],
            "cards": [{"name": h.label, "board_id": h.board_id, "card_id": h.card_id} for h in results.cards],
            "boards": [{"name": h.label, "board_id": h.board_id} for h in results.boards],
        }
        console.print(json.dumps(data, indent=2))
        return

    sections = (
        ("Commands", [c.label for c in results.commands]),
        ("Cards", [h.label for h in results.cards]),
        ("Boards", [h.label for h in results.boards]),
    )
    rows = allot_rows([len(items) for _, items in sections], ctx.obj.palette_row_budget)
    for (title, items), limit in zip(sections, rows):
        console.print(f"[bold cyan]{title}[/bold cyan]")
        if not items:
            console.print("  [dim](none)[/dim]")
        for label in items[:limit]:
            console.print(f"  {label}")
        if len(items) > limit:
            console.print(f"  [dim]... {len(items) - limit} more[/dim]")
