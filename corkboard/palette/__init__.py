"""
FILE: corkboard/palette/__init__.py
PURPOSE: Command palette - n-gram index, command vocabulary and ranking engine
EXPORTS:
  - CommandPaletteEngine, CommandPaletteState, allot_rows (from palette.engine)
  - PaletteCommand (from palette.commands)
"""

from .commands import PaletteCommand
from .engine import CommandPaletteEngine, CommandPaletteState, PaletteResults, allot_rows

__all__ = [
    "CommandPaletteEngine",
    "CommandPaletteState",
    "PaletteCommand",
    "PaletteResults",
    "allot_rows",
]
