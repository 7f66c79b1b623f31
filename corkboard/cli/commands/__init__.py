"""
FILE: corkboard/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

from .system import (
    version,
    keys,
    palette,
)
from .boards import (
    board_add,
    board_ls,
    card_add,
    saves,
)

__all__ = [
    "version",
    "keys",
    "palette",
    "board_add",
    "board_ls",
    "card_add",
    "saves",
]
