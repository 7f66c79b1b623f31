"""
FILE: corkboard/tui/input.py
PURPOSE: Translate prompt_toolkit key presses into KeyChords
EXPORTS:
  - to_chord(key) -> Optional[KeyChord]
  - translate(key_presses) -> List[KeyChord]
DEPENDENCIES:
  - prompt_toolkit (KeyPress / Keys values)
  - corkboard.nav.keys (KeyChord)
NOTES:
  - prompt_toolkit reports Tab as c-i, Enter as c-m, Backspace as c-h
  - Alt+x arrives as Escape followed by x in the same read; translate()
    folds the pair into one chord
  - Internal pseudo keys ("<cursor-position-response>", "<sigint>", ...)
    are dropped
"""

from typing import Iterable, List, Optional

from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys

from ..nav.keys import NAMED_KEYS, KeyChord

_SPECIAL = {
    Keys.ControlI.value: KeyChord("tab"),
    Keys.ControlM.value: KeyChord("enter"),
    Keys.ControlJ.value: KeyChord("enter"),
    Keys.ControlH.value: KeyChord("backspace"),
    Keys.Escape.value: KeyChord("esc"),
    Keys.BackTab.value: KeyChord("tab", shift=True),
}


def to_chord(key) -> Optional[KeyChord]:
    """Map a single prompt_toolkit key (Keys member or character) to a chord."""
    name = getattr(key, "value", key)
    if not name:
        return None
    if name in _SPECIAL:
        return _SPECIAL[name]
    if len(name) == 1:
        if name == "\x7f":
            return KeyChord("backspace")
        if name.isprintable():
            return KeyChord.char(name)
        return None
    if name.startswith("<"):
        return None

    ctrl = shift = False
    if name.startswith("c-s-"):
        ctrl, shift, name = True, True, name[4:]
    elif name.startswith("c-"):
        ctrl, name = True, name[2:]
    elif name.startswith("s-"):
        shift, name = True, name[2:]

    if len(name) == 1:
        return KeyChord(name.lower(), ctrl=ctrl, shift=shift)
    if name in NAMED_KEYS:
        return KeyChord(name, ctrl=ctrl, shift=shift)
    return None


def translate(key_presses: Iterable[KeyPress]) -> List[KeyChord]:
    chords: List[KeyChord] = []
    pending_escape = False
    for key_press in key_presses:
        chord = to_chord(key_press.key)
        if chord is None:
            continue
        if pending_escape:
            pending_escape = False
            if chord.is_printable:
                chords[-1] = KeyChord(chord.key, alt=True)
                continue
        if chord == _SPECIAL[Keys.Escape.value]:
            pending_escape = True
        chords.append(chord)
    return chords
