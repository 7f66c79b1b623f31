"""
FILE: corkboard/nav/actions.py
PURPOSE: The closed vocabulary of semantic user actions
EXPORTS:
  - Action (Enum) - label and default chords per variant
  - default_bindings() -> Dict[Action, Tuple[str, ...]]
NOTES:
  - Declaration order is significant: chord resolution walks actions in this order
  - Default chords are config notation (see nav.keys); the user config may override them
"""

from enum import Enum
from typing import Dict, Tuple


_DIGITS = tuple(str(n) for n in range(1, 9))


class Action(Enum):
    QUIT = ("Quit", ("ctrl+c", "q"))
    FOCUS_NEXT = ("Focus next", ("tab",))
    FOCUS_PREV = ("Focus previous", ("shift+tab",))
    SET_UI_MODE = ("Set UI mode", _DIGITS)
    TOGGLE_CONFIG = ("Open config menu", ("c",))
    GO_UP = ("Go up", ("up",))
    GO_DOWN = ("Go down", ("down",))
    GO_LEFT = ("Go left", ("left",))
    GO_RIGHT = ("Go right", ("right",))
    ENTER_INPUT = ("Enter input mode", ("i",))
    ESCAPE = ("Go to previous mode", ("esc",))
    ACCEPT = ("Accept", ("enter",))
    DELETE = ("Delete", ("d",))
    NEW_BOARD = ("New board", ("b",))
    NEW_CARD = ("New card", ("n",))
    OPEN_COMMAND_PALETTE = ("Open command palette", ("ctrl+p",))
    CHANGE_CARD_STATUS = ("Change card status", ("s",))
    CHANGE_UI_MODE = ("Change UI mode", ("u",))
    OPEN_HELP_MENU = ("Open help menu", ("h",))
    SAVE_STATE = ("Save state", ("ctrl+s",))

    def __init__(self, label: str, default_keys: Tuple[str, ...]):
        self.label = label
        self.default_keys = default_keys

    @classmethod
    def from_name(cls, name: str) -> "Action":
        """Look an action up by enum name, case-insensitively ("go_up", "GO_UP")."""
        return cls[name.strip().upper()]

    def __str__(self) -> str:
        return self.label


def default_bindings() -> Dict[Action, Tuple[str, ...]]:
    return {action: action.default_keys for action in Action}
