"""
FILE: corkboard/nav/bindings.py
PURPOSE: Validated Action -> KeyChord table and contextual action sets
EXPORTS:
  - find_conflicts(bindings) -> List[BindingConflict]
  - KeyBindingTable
      build(bindings) -> KeyBindingTable       (raises KeyBindingConflictError)
      defaults() -> KeyBindingTable
      resolve(chord, context) -> Optional[Action]
      rebind(action, chords) -> KeyBindingTable
  - ContextualActionSet
DEPENDENCIES:
  - corkboard.nav.actions (Action)
  - corkboard.nav.keys (KeyChord)
  - corkboard.core.exceptions (BindingConflict, KeyBindingConflictError)
NOTES:
  - A chord bound to more than one action is a construction error; every
    conflict is reported, not just the first
  - Resolution walks Action in declaration order, never insertion order
  - Tables are immutable; rebinding builds a new table
"""

from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from ..core.exceptions import BindingConflict, KeyBindingConflictError
from .actions import Action
from .keys import KeyChord


def _as_chord(chord) -> KeyChord:
    return chord if isinstance(chord, KeyChord) else KeyChord.parse(chord)


def find_conflicts(bindings: Mapping[Action, Iterable[KeyChord]]) -> List[BindingConflict]:
    """
    Collect every chord claimed by two or more actions.

    Conflicts are listed in the order their chord first appears when walking
    actions in declaration order.
    """
    claimed: Dict[KeyChord, List[Action]] = {}
    for action in Action:
        if action not in bindings:
            continue
        for chord in bindings[action]:
            owners = claimed.setdefault(chord, [])
            if action not in owners:
                owners.append(action)

    return [
        BindingConflict(chord, tuple(owners))
        for chord, owners in claimed.items()
        if len(owners) > 1
    ]


class KeyBindingTable:
    """
    Immutable mapping of Action to its bound chords.

    Use KeyBindingTable.build() (or defaults()) rather than the constructor.
    """

    def __init__(self, bindings: Dict[Action, Tuple[KeyChord, ...]]):
        self._bindings = bindings

    @classmethod
    def build(cls, bindings: Mapping[Action, Iterable]) -> "KeyBindingTable":
        """
        Build a table from Action -> chords (KeyChord objects or notation strings).

        Raises:
            InvalidKeyChordError: If a chord string can't be parsed
            KeyBindingConflictError: If any chord is bound to more than one action
        """
        normalized: Dict[Action, Tuple[KeyChord, ...]] = {}
        for action in Action:
            if action not in bindings:
                continue
            chords: List[KeyChord] = []
            for chord in bindings[action]:
                chord = _as_chord(chord)
                if chord not in chords:
                    chords.append(chord)
            normalized[action] = tuple(chords)

        conflicts = find_conflicts(normalized)
        if conflicts:
            raise KeyBindingConflictError(conflicts)

        return cls(normalized)

    @classmethod
    def defaults(cls) -> "KeyBindingTable":
        return cls.build({action: action.default_keys for action in Action})

    def chords_for(self, action: Action) -> Tuple[KeyChord, ...]:
        return self._bindings.get(action, ())

    def first_chord(self, action: Action) -> Optional[KeyChord]:
        chords = self.chords_for(action)
        return chords[0] if chords else None

    def resolve(self, chord: KeyChord, context: Iterable[Action]) -> Optional[Action]:
        """
        Find the action in context bound to chord.

        Returns:
            The first matching Action in declaration order, or None if unbound
        """
        allowed = set(context)
        for action in Action:
            if action in allowed and chord in self.chords_for(action):
                return action
        return None

    def rebind(self, action: Action, chords: Iterable) -> "KeyBindingTable":
        """Return a new table with action bound to chords (validated like build)."""
        bindings = dict(self._bindings)
        bindings[action] = tuple(chords)
        return KeyBindingTable.build(bindings)

    def items(self):
        """(Action, chords) pairs in declaration order."""
        return [(action, self._bindings[action]) for action in Action if action in self._bindings]

    def to_config(self) -> Dict[str, List[str]]:
        """Serializable {action name: [notation, ...]} mapping."""
        return {action.name.lower(): [c.notation() for c in chords] for action, chords in self.items()}


class ContextualActionSet:
    """
    Ordered set of actions legal in the current context.

    Construction fails if two member actions share a chord in the given table.
    Iteration follows Action declaration order.
    """

    def __init__(self, actions: Iterable[Action], table: KeyBindingTable):
        members = set(actions)
        self._actions = tuple(a for a in Action if a in members)
        self._table = table

        conflicts = find_conflicts({a: table.chords_for(a) for a in self._actions})
        if conflicts:
            raise KeyBindingConflictError(conflicts)

    def find(self, chord: KeyChord) -> Optional[Action]:
        return self._table.resolve(chord, self._actions)

    def actions(self) -> Tuple[Action, ...]:
        return self._actions

    def __contains__(self, action) -> bool:
        return action in self._actions

    def __iter__(self):
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)
