"""
FILE: corkboard/nav/machine.py
PURPOSE: Finite state machine over UiModes with "return to previous mode" snapshots
EXPORTS:
  - Snapshot (frozen dataclass: ui_mode + focus)
  - UiModeMachine
DEPENDENCIES:
  - corkboard.nav.modes (UiMode)
  - corkboard.nav.focus (Focus, FocusGraph)
  - corkboard.core.exceptions (InvalidTransitionError)
NOTES:
  - Every mode change goes through _switch(), which resyncs focus
  - Menu modes (Config, Main Menu, Help Menu, Load a Save) push the mode they
    were opened from; leaving a menu pops exactly that entry. Re-opening a menu
    already on the stack unwinds back to it instead of growing the stack
  - Transient forms record their own snapshot; a second transient while one
    is active is rejected, never queued
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.exceptions import InvalidTransitionError
from .focus import Focus, FocusGraph
from .modes import UiMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    ui_mode: UiMode
    focus: Focus


class UiModeMachine:
    """
    Owns the active UiMode and the focus within it.

    Attributes:
        ui_mode: Active screen layout
        focus: Active region, always one of ui_mode.available_tabs
    """

    def __init__(self, ui_mode: UiMode = UiMode.TITLE_HELP_LOG, focus: Optional[Focus] = None):
        self.ui_mode = ui_mode
        self.focus = FocusGraph.resync(focus or Focus.BODY, ui_mode.available_tabs)
        self._menu_returns: List[Snapshot] = []
        self._transient_return: Optional[Snapshot] = None

    @property
    def available_tabs(self) -> Tuple[Focus, ...]:
        return self.ui_mode.available_tabs

    @property
    def in_transient(self) -> bool:
        return self._transient_return is not None

    @property
    def in_menu(self) -> bool:
        return bool(self._menu_returns)

    def snapshot(self) -> Snapshot:
        return Snapshot(self.ui_mode, self.focus)

    def restore(self, snapshot: Snapshot) -> None:
        """Put mode and focus back exactly as recorded."""
        self._switch(snapshot.ui_mode, snapshot.focus)

    def _switch(self, ui_mode: UiMode, focus: Optional[Focus] = None) -> None:
        if ui_mode is not self.ui_mode:
            logger.debug("Setting ui_mode to %s", ui_mode)
        self.ui_mode = ui_mode
        self.focus = FocusGraph.resync(focus or self.focus, ui_mode.available_tabs)

    # --- Focus ---

    def set_focus(self, focus: Focus) -> bool:
        """Adopt focus if it is legal in the current mode."""
        if not FocusGraph.is_legal(focus, self.available_tabs):
            return False
        self.focus = focus
        return True

    def focus_next(self) -> Focus:
        self.focus = FocusGraph.next(self.focus, self.available_tabs)
        return self.focus

    def focus_prev(self) -> Focus:
        self.focus = FocusGraph.prev(self.focus, self.available_tabs)
        return self.focus

    # --- View modes ---

    def set_ui_mode(self, n: int) -> UiMode:
        """Switch to the view mode bound to digit n (unknown digits fall back to Title)."""
        mode = UiMode.from_number(n)
        self.set_view(mode)
        return mode

    def set_view(self, mode: UiMode) -> None:
        """
        Switch to a view mode, leaving any menu.

        Raises:
            InvalidTransitionError: If mode is not a view mode or a form is open
        """
        if not mode.is_view:
            raise InvalidTransitionError(f"{mode} is not a view mode")
        if self.in_transient:
            raise InvalidTransitionError(f"Cannot switch to {mode} while {self.ui_mode} is open")
        self._menu_returns.clear()
        self._switch(mode)

    def reset(self, mode: UiMode) -> None:
        """Drop every return snapshot and show mode (used by Reset UI)."""
        self._menu_returns.clear()
        self._transient_return = None
        self._switch(mode, mode.available_tabs[0])

    # --- Menus ---

    def enter_menu(self, mode: UiMode) -> None:
        """
        Open a menu mode, remembering the mode and focus it was opened from.

        Raises:
            InvalidTransitionError: If mode isn't a menu or a form is open
        """
        if not mode.is_menu:
            raise InvalidTransitionError(f"{mode} is not a menu")
        if self.in_transient:
            raise InvalidTransitionError(f"Cannot open {mode} while {self.ui_mode} is open")
        if mode is self.ui_mode:
            self._switch(mode, mode.available_tabs[0])
            return

        for depth, snapshot in enumerate(self._menu_returns):
            if snapshot.ui_mode is mode:
                # Already open further down: unwind to it
                del self._menu_returns[depth:]
                self._switch(mode, snapshot.focus)
                return

        self._menu_returns.append(self.snapshot())
        self._switch(mode, mode.available_tabs[0])

    def return_from_menu(self) -> bool:
        """Restore the mode/focus active immediately before this menu was opened."""
        if not self.in_menu or self.in_transient:
            return False
        self.restore(self._menu_returns.pop())
        return True

    def leave_menus(self) -> bool:
        """Close every open menu, back to the view they were opened from."""
        if not self.in_menu or self.in_transient:
            return False
        snapshot = self._menu_returns[0]
        self._menu_returns.clear()
        self.restore(snapshot)
        return True

    def toggle_config(self) -> bool:
        """
        Enter Config, or leave it if already there.

        Returns:
            True if Config was left, False if it was entered
        """
        if self.ui_mode is UiMode.CONFIG:
            self.return_from_menu()
            return True
        self.enter_menu(UiMode.CONFIG)
        return False

    # --- Transient forms ---

    def enter_transient(self, mode: UiMode) -> None:
        """
        Open a transient form, recording exactly one return snapshot.

        Raises:
            InvalidTransitionError: If a transient is already active or the
                current mode is not a legal origin for mode
        """
        if not mode.is_transient:
            raise InvalidTransitionError(f"{mode} is not a form")
        if self.in_transient:
            raise InvalidTransitionError(
                f"Cannot open {mode} while {self.ui_mode} is still open"
            )
        if not mode.can_open_from(self.ui_mode):
            raise InvalidTransitionError(f"Cannot open {mode} from {self.ui_mode}")
        self._transient_return = self.snapshot()
        self._switch(mode, mode.available_tabs[0])

    def return_from_transient(self) -> bool:
        if self._transient_return is None:
            return False
        snapshot, self._transient_return = self._transient_return, None
        self.restore(snapshot)
        return True

    def go_back(self) -> bool:
        """Leave the innermost transient or menu; False if already in a view."""
        if self.in_transient:
            return self.return_from_transient()
        if self.in_menu:
            return self.return_from_menu()
        return False
