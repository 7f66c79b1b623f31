"""
FILE: corkboard/nav/focus.py
PURPOSE: Focusable UI regions and cyclic focus traversal
EXPORTS:
  - Focus (Enum)
  - FocusGraph
      next(focus, available) -> Focus
      prev(focus, available) -> Focus
      resync(focus, available) -> Focus
      tabs(ui_mode, popup) -> Tuple[Focus, ...]
DEPENDENCIES:
  - enum (stdlib)
NOTES:
  - A focus missing from `available` is treated as index 0 (self-healing)
  - resync() is the only place focus gets corrected after a mode change
"""

import logging
from enum import Enum
from typing import Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class Focus(Enum):
    TITLE = "Title"
    BODY = "Body"
    HELP = "Help"
    LOG = "Log"
    CONFIG_TABLE = "Config"
    MAIN_MENU = "Main Menu"
    LOAD_SAVE = "Load Save"
    EDIT_KEYBINDINGS_TABLE = "Edit Keybindings"
    NEW_BOARD_NAME = "Board Name"
    NEW_BOARD_DESCRIPTION = "Board Description"
    CARD_NAME = "Card Name"
    CARD_DESCRIPTION = "Card Description"
    CARD_DUE_DATE = "Card Due Date"
    CARD_TAGS = "Card Tags"
    SUBMIT_BUTTON = "Submit"
    CANCEL_BUTTON = "Cancel"
    COMMAND_PALETTE_COMMAND = "Command Palette Commands"
    COMMAND_PALETTE_CARD = "Command Palette Cards"
    COMMAND_PALETTE_BOARD = "Command Palette Boards"
    CHANGE_UI_MODE_POPUP = "Change UI Mode"
    CHANGE_CARD_STATUS_POPUP = "Change Card Status"
    SELECT_DEFAULT_VIEW = "Select Default View"
    EDIT_KEYBINDING_POPUP = "Edit Keybinding"

    @property
    def label(self) -> str:
        return self.value

    @property
    def is_text_field(self) -> bool:
        """Regions that take free text when the user presses Accept/Enter-input."""
        return self in _TEXT_FIELDS

    def __str__(self) -> str:
        return self.value


_TEXT_FIELDS = frozenset({
    Focus.NEW_BOARD_NAME,
    Focus.NEW_BOARD_DESCRIPTION,
    Focus.CARD_NAME,
    Focus.CARD_DESCRIPTION,
    Focus.CARD_DUE_DATE,
    Focus.CARD_TAGS,
})


class FocusGraph:
    """Cyclic traversal over an ordered list of focusable regions."""

    @staticmethod
    def _index(focus: Focus, available: Sequence[Focus]) -> int:
        try:
            return list(available).index(focus)
        except ValueError:
            return 0

    @classmethod
    def next(cls, focus: Focus, available: Sequence[Focus]) -> Focus:
        """Focus after `focus`, wrapping at the end."""
        if not available:
            return focus
        index = cls._index(focus, available)
        return available[(index + 1) % len(available)]

    @classmethod
    def prev(cls, focus: Focus, available: Sequence[Focus]) -> Focus:
        """Focus before `focus`, wrapping at the start."""
        if not available:
            return focus
        index = cls._index(focus, available)
        return available[(index - 1 + len(available)) % len(available)]

    @staticmethod
    def is_legal(focus: Optional[Focus], available: Sequence[Focus]) -> bool:
        return focus in available

    @staticmethod
    def resync(focus: Focus, available: Sequence[Focus]) -> Focus:
        """Keep focus if legal, otherwise fall back to the first available region."""
        if not available or focus in available:
            return focus
        logger.debug("Focus %s not available, resetting to %s", focus, available[0])
        return available[0]

    @staticmethod
    def tabs(ui_mode, popup=None) -> Tuple[Focus, ...]:
        """Active focus list: the popup's while one is open, else the UiMode's."""
        if popup is not None:
            return popup.available_tabs
        return ui_mode.available_tabs
