"""
FILE: corkboard/nav/popup.py
PURPOSE: Overlay (popup) state layered on top of the UiMode machine
EXPORTS:
  - PopupController
DEPENDENCIES:
  - corkboard.nav.machine (UiModeMachine, Snapshot)
  - corkboard.nav.modes (PopupMode)
  - corkboard.nav.focus (Focus, FocusGraph)
NOTES:
  - At most one popup is open; opening another replaces it but keeps the
    snapshot taken when the first one opened
  - The popup keeps its own focus, so the machine's mode and focus are
    untouched while it is open; close() restores the snapshot anyway
"""

import logging
from typing import Optional, Tuple

from .focus import Focus, FocusGraph
from .machine import Snapshot, UiModeMachine
from .modes import PopupMode

logger = logging.getLogger(__name__)


class PopupController:
    def __init__(self, machine: UiModeMachine):
        self.machine = machine
        self.popup: Optional[PopupMode] = None
        self.focus: Optional[Focus] = None
        self._restore: Optional[Snapshot] = None

    @property
    def is_open(self) -> bool:
        return self.popup is not None

    @property
    def available_tabs(self) -> Tuple[Focus, ...]:
        return self.popup.available_tabs if self.popup else ()

    def open(self, popup: PopupMode) -> None:
        if self.popup is None:
            self._restore = self.machine.snapshot()
        logger.debug("Opening popup %s over %s", popup, self.machine.ui_mode)
        self.popup = popup
        self.focus = popup.available_tabs[0]

    def close(self) -> Optional[PopupMode]:
        """Close the popup and restore the mode/focus active before it opened."""
        closed = self.popup
        if closed is None:
            return None
        logger.debug("Closing popup %s", closed)
        self.popup = None
        self.focus = None
        if self._restore is not None:
            self.machine.restore(self._restore)
            self._restore = None
        return closed

    def focus_next(self) -> Optional[Focus]:
        if self.popup:
            self.focus = FocusGraph.next(self.focus, self.available_tabs)
        return self.focus

    def focus_prev(self) -> Optional[Focus]:
        if self.popup:
            self.focus = FocusGraph.prev(self.focus, self.available_tabs)
        return self.focus

    def set_focus(self, focus: Focus) -> bool:
        """Adopt focus if it belongs to the open popup."""
        if not self.popup or not FocusGraph.is_legal(focus, self.available_tabs):
            return False
        self.focus = focus
        return True
