"""
FILE: corkboard/nav/selection.py
PURPOSE: Reusable "selectable list" - items plus an optional cursor
EXPORTS:
  - SelectableList
NOTES:
  - The cursor is either None or a valid index into items
  - Replacing items clears a cursor that now points past the end; a focused,
    non-empty list with no cursor gets cursor 0
"""

from typing import Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


class SelectableList(Generic[T]):
    def __init__(self, items: Iterable[T] = ()):
        self._items: List[T] = list(items)
        self.selected: Optional[int] = None

    @property
    def items(self) -> List[T]:
        return self._items

    def set_items(self, items: Iterable[T], focused: bool = False) -> None:
        self._items = list(items)
        if self.selected is not None and self.selected >= len(self._items):
            self.selected = None
        if focused:
            self.ensure_selection()

    def ensure_selection(self) -> None:
        if self.selected is None and self._items:
            self.selected = 0

    def select(self, index: Optional[int]) -> Optional[int]:
        """Select index if it is in range, otherwise clear the cursor."""
        if index is not None and 0 <= index < len(self._items):
            self.selected = index
        else:
            self.selected = None
        return self.selected

    def select_item(self, item: T) -> Optional[int]:
        try:
            return self.select(self._items.index(item))
        except ValueError:
            return self.select(None)

    def reset(self) -> None:
        """Cursor back to the first item (or None when empty)."""
        self.selected = 0 if self._items else None

    def next(self) -> Optional[int]:
        if not self._items:
            self.selected = None
        elif self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected + 1) % len(self._items)
        return self.selected

    def prev(self) -> Optional[int]:
        if not self._items:
            self.selected = None
        elif self.selected is None:
            self.selected = len(self._items) - 1
        else:
            self.selected = (self.selected - 1 + len(self._items)) % len(self._items)
        return self.selected

    def current(self) -> Optional[T]:
        if self.selected is None:
            return None
        return self._items[self.selected]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)
