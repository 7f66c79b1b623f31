"""
FILE: corkboard/nav/modes.py
PURPOSE: Named screen layouts (UiMode) and overlay states (PopupMode)
EXPORTS:
  - ModeKind (view / menu / transient)
  - UiMode (Enum) - label, available tabs and kind per variant
  - PopupMode (Enum) - label and available tabs per variant
NOTES:
  - View modes are numbered 1..8 in declaration order (digit keys)
  - Unrecognized numbers fall back to UiMode.TITLE instead of failing
  - Transient forms declare which modes they may be opened from
"""

import logging
from enum import Enum
from typing import List, Tuple

from .focus import Focus

logger = logging.getLogger(__name__)


class ModeKind(Enum):
    VIEW = "view"
    MENU = "menu"
    TRANSIENT = "transient"


class UiMode(Enum):
    ZEN = ("Zen", (Focus.BODY,), ModeKind.VIEW)
    TITLE = ("Title", (Focus.TITLE, Focus.BODY), ModeKind.VIEW)
    HELP = ("Help", (Focus.BODY, Focus.HELP), ModeKind.VIEW)
    LOG = ("Log", (Focus.BODY, Focus.LOG), ModeKind.VIEW)
    TITLE_HELP = ("Title and Help", (Focus.TITLE, Focus.BODY, Focus.HELP), ModeKind.VIEW)
    TITLE_LOG = ("Title and Log", (Focus.TITLE, Focus.BODY, Focus.LOG), ModeKind.VIEW)
    HELP_LOG = ("Help and Log", (Focus.BODY, Focus.HELP, Focus.LOG), ModeKind.VIEW)
    TITLE_HELP_LOG = (
        "Title, Help and Log",
        (Focus.TITLE, Focus.BODY, Focus.HELP, Focus.LOG),
        ModeKind.VIEW,
    )
    CONFIG = ("Config", (Focus.CONFIG_TABLE, Focus.LOG), ModeKind.MENU)
    MAIN_MENU = ("Main Menu", (Focus.MAIN_MENU, Focus.HELP, Focus.LOG), ModeKind.MENU)
    HELP_MENU = ("Help Menu", (Focus.HELP, Focus.LOG), ModeKind.MENU)
    LOAD_SAVE = ("Load a Save", (Focus.LOAD_SAVE,), ModeKind.MENU)
    NEW_BOARD = (
        "New Board",
        (Focus.NEW_BOARD_NAME, Focus.NEW_BOARD_DESCRIPTION, Focus.SUBMIT_BUTTON),
        ModeKind.TRANSIENT,
    )
    NEW_CARD = (
        "New Card",
        (Focus.CARD_NAME, Focus.CARD_DESCRIPTION, Focus.CARD_DUE_DATE, Focus.CARD_TAGS, Focus.SUBMIT_BUTTON),
        ModeKind.TRANSIENT,
    )
    EDIT_KEYBINDINGS = (
        "Edit Keybindings",
        (Focus.EDIT_KEYBINDINGS_TABLE, Focus.SUBMIT_BUTTON),
        ModeKind.TRANSIENT,
    )

    def __init__(self, label: str, available_tabs: Tuple[Focus, ...], kind: ModeKind):
        self.label = label
        self.available_tabs = available_tabs
        self.kind = kind

    @property
    def is_view(self) -> bool:
        return self.kind is ModeKind.VIEW

    @property
    def is_menu(self) -> bool:
        return self.kind is ModeKind.MENU

    @property
    def is_transient(self) -> bool:
        return self.kind is ModeKind.TRANSIENT

    def can_open_from(self, origin: "UiMode") -> bool:
        """Whether this transient form may be entered while `origin` is active."""
        if self is UiMode.EDIT_KEYBINDINGS:
            return origin is UiMode.CONFIG
        return origin.is_view

    @classmethod
    def view_modes(cls) -> List["UiMode"]:
        return [mode for mode in cls if mode.is_view]

    @classmethod
    def from_number(cls, n: int) -> "UiMode":
        """Map digit keys 1..8 to view modes; anything else falls back to TITLE."""
        views = cls.view_modes()
        if 1 <= n <= len(views):
            return views[n - 1]
        logger.debug("Invalid UiMode number: %s", n)
        return cls.TITLE

    @classmethod
    def from_name(cls, name: str) -> "UiMode":
        """Look a mode up by enum name or label, case-insensitively."""
        key = name.strip()
        for mode in cls:
            if key.upper() == mode.name or key.lower() == mode.label.lower():
                return mode
        raise KeyError(name)

    def __str__(self) -> str:
        return self.label


class PopupMode(Enum):
    COMMAND_PALETTE = (
        "Command Palette",
        (Focus.COMMAND_PALETTE_COMMAND, Focus.COMMAND_PALETTE_CARD, Focus.COMMAND_PALETTE_BOARD),
    )
    CHANGE_UI_MODE = ("Change UI Mode", (Focus.CHANGE_UI_MODE_POPUP,))
    CHANGE_CARD_STATUS = ("Change Card Status", (Focus.CHANGE_CARD_STATUS_POPUP,))
    SELECT_DEFAULT_VIEW = ("Select Default View", (Focus.SELECT_DEFAULT_VIEW,))
    EDIT_KEYBINDING = ("Edit Keybinding", (Focus.EDIT_KEYBINDING_POPUP,))
    CONFIRM_DISCARD = ("Discard Changes?", (Focus.SUBMIT_BUTTON, Focus.CANCEL_BUTTON))

    def __init__(self, label: str, available_tabs: Tuple[Focus, ...]):
        self.label = label
        self.available_tabs = available_tabs

    def __str__(self) -> str:
        return self.label
