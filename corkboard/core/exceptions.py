"""
FILE: corkboard/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - CorkboardError (base exception)
  - BindingConflict (record of one chord bound to several actions)
  - KeyBindingConflictError
  - InvalidKeyChordError
  - InvalidTransitionError
  - DispatchError
  - BoardNotFoundError
  - CardNotFoundError
  - InvalidInputError
  - ConfigError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from CorkboardError for easy catching
  - Exceptions include context (IDs, chords) for helpful error messages
  - Core layers raise these, UI layers catch and display
"""

from dataclasses import dataclass
from itertools import combinations
from typing import Any, Tuple


class CorkboardError(Exception):
    """Base exception for all Corkboard errors."""
    pass


@dataclass(frozen=True)
class BindingConflict:
    """A single chord claimed by more than one action."""

    chord: Any
    actions: Tuple[Any, ...]

    @property
    def pairs(self):
        """Every (action, action) pair competing for the chord."""
        return list(combinations(self.actions, 2))

    def describe(self) -> str:
        names = ", ".join(str(action) for action in self.actions)
        return f"Conflict key {self.chord} with actions {names}"


class KeyBindingConflictError(CorkboardError):
    """Two or more actions share a key chord."""

    def __init__(self, conflicts):
        self.conflicts = list(conflicts)
        super().__init__("; ".join(c.describe() for c in self.conflicts))


class InvalidKeyChordError(CorkboardError):
    """Chord text could not be parsed."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(f"Invalid key chord '{text}'")


class InvalidTransitionError(CorkboardError):
    """A UiMode or popup transition is not legal from the current state."""

    def __init__(self, message: str):
        super().__init__(message)


class DispatchError(CorkboardError):
    """The IO dispatch channel rejected an intent (full or closed)."""

    def __init__(self, message: str):
        super().__init__(message)


class BoardNotFoundError(CorkboardError):
    """Board with given ID doesn't exist."""

    def __init__(self, board_id: int):
        self.board_id = board_id
        super().__init__(f"Board {board_id} not found")


class CardNotFoundError(CorkboardError):
    """Card with given ID doesn't exist."""

    def __init__(self, card_id: int):
        self.card_id = card_id
        super().__init__(f"Card {card_id} not found")


class InvalidInputError(CorkboardError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class ConfigError(CorkboardError):
    """Configuration file is unreadable or holds invalid values."""

    def __init__(self, message: str):
        super().__init__(message)
