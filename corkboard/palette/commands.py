"""
FILE: corkboard/palette/commands.py
PURPOSE: Fixed vocabulary of commands offered by the command palette
EXPORTS:
  - PaletteCommand (Enum)
"""

from enum import Enum


class PaletteCommand(Enum):
    EXPORT_TO_JSON = "Export to JSON"
    OPEN_CONFIG_MENU = "Open Config Menu"
    SAVE_KANBAN_STATE = "Save Kanban State"
    LOAD_A_SAVE = "Load a Save"
    NEW_BOARD = "New Board"
    NEW_CARD = "New Card"
    RESET_UI = "Reset UI"
    OPEN_MAIN_MENU = "Open Main Menu"
    OPEN_HELP_MENU = "Open Help Menu"
    CHANGE_UI_MODE = "Change UI Mode"
    CHANGE_CURRENT_CARD_STATUS = "Change Current Card Status"
    QUIT = "Quit"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> "PaletteCommand":
        for command in cls:
            if command.value.lower() == label.strip().lower():
                return command
        raise KeyError(label)

    def __str__(self) -> str:
        return self.value
