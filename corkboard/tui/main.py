"""
FILE: corkboard/tui/main.py
PURPOSE: Event loop - read raw keys, feed the App, redraw every tick
EXPORTS:
  - run_tui(config, bindings) -> None
DEPENDENCIES:
  - prompt_toolkit (create_input, raw mode key reading)
  - rich (Live full-screen rendering)
  - corkboard.nav.app (App)
NOTES:
  - Single thread: each key is fully handled before the next is read
  - read_keys() never blocks; a lone Escape is flushed on the next empty read
  - Only the Quit action (or Ctrl+C outside raw mode) ends the loop
  - The IO worker and log capture are released however startup or the loop ends
"""

import logging
import time
from typing import Optional

from prompt_toolkit.input import create_input
from rich.console import Console
from rich.live import Live

from ..config import AppConfig
from ..core import service
from ..nav.app import App, AppReturn
from ..nav.bindings import KeyBindingTable
from .input import translate
from .render import render

logger = logging.getLogger(__name__)

console = Console()


def run_tui(config: AppConfig, bindings: Optional[KeyBindingTable] = None) -> None:
    """Run the interactive board until the user quits."""
    app = App(config, bindings=bindings, boards=service.list_boards())
    tick = config.tickrate_ms / 1000
    terminal_input = None
    try:
        app.start()
        logger.info("Corkboard started in %s", app.ui_mode)
        terminal_input = create_input()
        with terminal_input.raw_mode(), Live(
            render(app), console=console, screen=True, auto_refresh=False
        ) as live:
            while True:
                key_presses = terminal_input.read_keys() or terminal_input.flush_keys()
                for chord in translate(key_presses):
                    if app.handle_key(chord) is AppReturn.EXIT:
                        return
                app.tick()
                live.update(render(app), refresh=True)
                time.sleep(tick)
    finally:
        app.close()
        if terminal_input is not None:
            terminal_input.close()
