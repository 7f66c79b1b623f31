"""
FILE: corkboard/cli/commands/boards.py
PURPOSE: Board, card and save commands (board add/ls, card add, saves)
"""

import json
from typing import Optional

import typer
from rich.table import Table

from ..main import app, board_app, card_app, console, error_console
from ...core import service
from ...core.exceptions import (
    BoardNotFoundError,
    CorkboardError,
    InvalidInputError,
)


@board_app.command("add")
def board_add(
    name: str = typer.Argument(..., help="Board name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Board description"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Create a new board.

    Example:
        corkboard board add "Groceries"
        corkboard board add "Work" -d "Day job" --json
    """
    try:
        board = service.create_board(name, description)

        if json_output:
            console.print(board.to_json())
        else:
            console.print(f"[green]✓[/green] Created board {board.id}: {board.name}")

    except InvalidInputError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except CorkboardError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@board_app.command("ls")
def board_ls(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List all boards with their card counts.

    Example:
        corkboard board ls
    """
    try:
        boards = service.list_boards()

        if json_output:
            console.print(json.dumps(service.snapshot(boards), indent=2))
            return

        if not boards:
            console.print("[dim]No boards found[/dim]")
            return

        table = Table(title="Boards")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Cards", style="yellow", justify="right")
        table.add_column("Created", style="dim")

        for board in boards:
            created_display = board.created_at.split("T")[0] if board.created_at else ""
            table.add_row(str(board.id), board.name, str(len(board.cards)), created_display)

        console.print(table)
        console.print(f"\n[dim]Total: {len(boards)} board(s)[/dim]")

    except CorkboardError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@card_app.command("add")
def card_add(
    board_id: int = typer.Argument(..., help="Board ID"),
    name: str = typer.Argument(..., help="Card name"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Card description"),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)"),
    tags: Optional[str] = typer.Option(None, "--tags", help="Comma-separated tags"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Create a card on a board.

    Example:
        corkboard card add 1 "Buy milk"
        corkboard card add 1 "Taxes" --due 2026-04-15 --tags home,money
    """
    try:
        card = service.create_card(
            board_id,
            name,
            description=description,
            due_date=due,
            tags=tags.split(",") if tags else None,
        )

        if json_output:
            console.print(card.to_json())
        else:
            console.print(f"[green]✓[/green] Created card {card.id}: {card.name}")

    except (BoardNotFoundError, InvalidInputError) as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except CorkboardError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def saves(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List local saves, newest first.

    Example:
        corkboard saves
    """
    try:
        all_saves = service.list_saves()
    except CorkboardError as e:
        error_console.print(f"[red]Unexpected error:[/red] {e}")
        raise typer.Exit(1)

    if json_output:
        console.print(json.dumps([{"name": s.name, "created_at": s.created_at} for s in all_saves], indent=2))
        return

    if not all_saves:
        console.print("[dim]No saves found[/dim]")
        return

    for save in all_saves:
        console.print(f"  [cyan]{save.name}[/cyan]  [dim]{save.created_at or ''}[/dim]")
