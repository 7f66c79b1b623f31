"""
FILE: corkboard/cli/main.py
PURPOSE: Typer-based CLI - launches the board UI and offers one-shot commands
EXPORTS:
  - app (Typer application)
  - main() (entry point)
  - default_command() - Load config, launch the TUI when no command is given
  - version() - Show version
  - keys() - Show the active key bindings (exit 1 on conflicts)
  - palette() - Rank commands/cards/boards for a query
  - board_add() / board_ls() - Board commands
  - card_add() - Create a card
  - saves() - List local saves
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output, RichHandler for --verbose)
  - corkboard.config (load_config, build_binding_table)
  - corkboard.tui (interactive mode)
NOTES:
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - The loaded AppConfig is passed to commands through ctx.obj
"""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__
from ..config import AppConfig, build_binding_table, load_config
from ..core import repository
from ..core.exceptions import ConfigError, InvalidKeyChordError, KeyBindingConflictError
from ..nav.bindings import KeyBindingTable

# Typer app setup
app = typer.Typer(
    name="corkboard",
    help="Keyboard-driven kanban boards in the terminal",
    add_completion=False,
)

# Board and card sub-command groups
board_app = typer.Typer(name="board", help="Board management commands")
card_app = typer.Typer(name="card", help="Card management commands")
app.add_typer(board_app, name="board")
app.add_typer(card_app, name="card")

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    """Send corkboard log records to stderr through rich when verbose."""
    if not verbose:
        return
    logger = logging.getLogger("corkboard")
    logger.setLevel(logging.DEBUG)
    logger.addHandler(RichHandler(console=error_console, show_path=False))


def use_database(config: AppConfig) -> None:
    if config.db_path:
        repository.DB_PATH = Path(config.db_path)
        repository.DB_DIR = repository.DB_PATH.parent


def load_bindings(config: AppConfig) -> KeyBindingTable:
    """
    Build the binding table or exit 1 after printing every problem.
    """
    try:
        return build_binding_table(config)
    except KeyBindingConflictError as e:
        error_console.print("[red]Error:[/red] conflicting key bindings")
        for conflict in e.conflicts:
            error_console.print(f"  [yellow]•[/yellow] {conflict.describe()}")
        raise typer.Exit(1)
    except InvalidKeyChordError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.callback(invoke_without_command=True)
def default_command(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Config file (default ~/.corkboard/config.json)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
):
    """
    Default callback - launches the board UI when no command is specified.

    Config is loaded for every command so they all see the same database.
    """
    configure_logging(verbose)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    use_database(config)
    ctx.obj = config

    if ctx.invoked_subcommand is None:
        bindings = load_bindings(config)
        from ..tui import run_tui
        try:
            run_tui(config, bindings)
        except OSError as e:
            error_console.print(f"[red]Error starting board UI:[/red] {e}")
            raise typer.Exit(1)


# Import command modules to register commands with app
from .commands import (
    version,
    keys,
    palette,
    board_add,
    board_ls,
    card_add,
    saves,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
