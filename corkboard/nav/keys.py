"""
FILE: corkboard/nav/keys.py
PURPOSE: Physical key chords and their text notation
EXPORTS:
  - KeyChord (frozen dataclass)
  - NAMED_KEYS
DEPENDENCIES:
  - corkboard.core.exceptions (InvalidKeyChordError)
NOTES:
  - Notation is "ctrl+c", "shift+tab", "alt+x", "enter", "q", "Q"
  - Named keys are case-insensitive; single characters are case-sensitive
  - "shift+<char>" normalizes to the upper-case character without the shift flag
  - Equality is exact (modifiers included)
"""

from dataclasses import dataclass
from typing import Optional

from ..core.exceptions import InvalidKeyChordError


NAMED_KEYS = (
    "tab", "enter", "esc", "backspace", "delete", "insert",
    "up", "down", "left", "right", "home", "end", "pageup", "pagedown",
    "f1", "f2", "f3", "f4", "f5", "f6", "f7", "f8", "f9", "f10", "f11", "f12",
)

_ALIASES = {
    "escape": "esc",
    "return": "enter",
    "del": "delete",
    "ins": "insert",
    "pgup": "pageup",
    "pgdn": "pagedown",
    "space": " ",
}

_MODIFIERS = ("ctrl", "alt", "shift")


@dataclass(frozen=True)
class KeyChord:
    """A key plus optional modifiers."""

    key: str
    ctrl: bool = False
    alt: bool = False
    shift: bool = False

    @classmethod
    def parse(cls, text: str) -> "KeyChord":
        """
        Parse chord notation.

        Examples:
            >>> KeyChord.parse("ctrl+c")
            KeyChord(key='c', ctrl=True, alt=False, shift=False)
            >>> KeyChord.parse("Shift+Tab")
            KeyChord(key='tab', ctrl=False, alt=False, shift=True)
            >>> KeyChord.parse("+")
            KeyChord(key='+', ctrl=False, alt=False, shift=False)

        Raises:
            InvalidKeyChordError: On empty text, unknown names or unknown modifiers
        """
        if not text:
            raise InvalidKeyChordError(text)

        # A trailing "+" is the plus key itself ("+" or "ctrl++")
        if text.endswith("+"):
            head, key = text[:-1], "+"
            parts = [p for p in head.split("+")] if head else []
            if parts and parts[-1] == "":
                parts = parts[:-1]
        else:
            *parts, key = text.split("+")

        modifiers = set()
        for part in parts:
            name = part.strip().lower()
            if name not in _MODIFIERS:
                raise InvalidKeyChordError(text)
            modifiers.add(name)

        if len(key) > 1:
            key = key.strip().lower()
            key = _ALIASES.get(key, key)
            if key == "backtab":
                key = "tab"
                modifiers.add("shift")
            if len(key) > 1 and key not in NAMED_KEYS:
                raise InvalidKeyChordError(text)

        if len(key) == 1 and "shift" in modifiers and key.isalpha():
            key = key.upper()
            modifiers.discard("shift")

        return cls(
            key=key,
            ctrl="ctrl" in modifiers,
            alt="alt" in modifiers,
            shift="shift" in modifiers,
        )

    @classmethod
    def char(cls, c: str) -> "KeyChord":
        return cls(key=c)

    @property
    def is_printable(self) -> bool:
        """True for a plain character that can be typed into a text field."""
        return len(self.key) == 1 and not self.ctrl and not self.alt

    def digit(self) -> Optional[int]:
        """The numeric value of a plain digit key, else None."""
        if self.is_printable and self.key.isdigit():
            return int(self.key)
        return None

    def notation(self) -> str:
        """Round-trippable config notation (inverse of parse)."""
        parts = [m for m in _MODIFIERS if getattr(self, m)]
        key = "space" if self.key == " " else self.key
        return "+".join(parts + [key])

    def __str__(self) -> str:
        parts = [m.capitalize() for m in _MODIFIERS if getattr(self, m)]
        if self.key == " ":
            key = "Space"
        elif len(self.key) > 1:
            key = self.key.capitalize()
        else:
            key = self.key
        return "+".join(parts + [key])
