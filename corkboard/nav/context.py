"""
FILE: corkboard/nav/context.py
PURPOSE: Which actions are legal for a given (UiMode, PopupMode)
EXPORTS:
  - contextual_actions(ui_mode, popup) -> Tuple[Action, ...]
  - contextual_action_set(ui_mode, popup, table) -> ContextualActionSet
NOTES:
  - Pure lookup, recomputed on demand, so it can't drift from the active mode
  - An open popup suspends the underlying mode's actions entirely
"""

from typing import Dict, Optional, Tuple

from .actions import Action as A
from .bindings import ContextualActionSet, KeyBindingTable
from .modes import PopupMode, UiMode

_VIEW = (
    A.QUIT, A.FOCUS_NEXT, A.FOCUS_PREV, A.SET_UI_MODE, A.TOGGLE_CONFIG,
    A.GO_UP, A.GO_DOWN, A.GO_LEFT, A.GO_RIGHT, A.DELETE, A.NEW_BOARD, A.NEW_CARD,
    A.OPEN_COMMAND_PALETTE, A.CHANGE_CARD_STATUS, A.CHANGE_UI_MODE,
    A.OPEN_HELP_MENU, A.SAVE_STATE,
)
_MENU = (A.QUIT, A.FOCUS_NEXT, A.FOCUS_PREV, A.GO_UP, A.GO_DOWN, A.ACCEPT, A.ESCAPE)
_FORM = (
    A.QUIT, A.FOCUS_NEXT, A.FOCUS_PREV, A.GO_UP, A.GO_DOWN,
    A.ENTER_INPUT, A.ACCEPT, A.ESCAPE,
)
_LIST_POPUP = (A.QUIT, A.GO_UP, A.GO_DOWN, A.ACCEPT, A.ESCAPE)

_MODE_ACTIONS: Dict[UiMode, Tuple[A, ...]] = {
    **{mode: _VIEW for mode in UiMode if mode.is_view},
    UiMode.CONFIG: _MENU + (A.TOGGLE_CONFIG, A.OPEN_COMMAND_PALETTE),
    UiMode.MAIN_MENU: _MENU + (A.TOGGLE_CONFIG, A.OPEN_COMMAND_PALETTE, A.OPEN_HELP_MENU),
    UiMode.HELP_MENU: _MENU + (A.TOGGLE_CONFIG, A.OPEN_COMMAND_PALETTE),
    UiMode.LOAD_SAVE: _MENU,
    UiMode.NEW_BOARD: _FORM,
    UiMode.NEW_CARD: _FORM,
    UiMode.EDIT_KEYBINDINGS: _MENU,
}

_POPUP_ACTIONS: Dict[PopupMode, Tuple[A, ...]] = {
    # Printable keys go to the query, so only non-text actions are listed
    PopupMode.COMMAND_PALETTE: (A.FOCUS_NEXT, A.FOCUS_PREV, A.GO_UP, A.GO_DOWN, A.ACCEPT, A.ESCAPE),
    PopupMode.CHANGE_UI_MODE: _LIST_POPUP,
    PopupMode.CHANGE_CARD_STATUS: _LIST_POPUP,
    PopupMode.SELECT_DEFAULT_VIEW: _LIST_POPUP,
    PopupMode.EDIT_KEYBINDING: (A.ESCAPE,),
    PopupMode.CONFIRM_DISCARD: (
        A.QUIT, A.FOCUS_NEXT, A.FOCUS_PREV, A.GO_LEFT, A.GO_RIGHT, A.ACCEPT, A.ESCAPE,
    ),
}


def contextual_actions(ui_mode: UiMode, popup: Optional[PopupMode] = None) -> Tuple[A, ...]:
    if popup is not None:
        return _POPUP_ACTIONS[popup]
    return _MODE_ACTIONS[ui_mode]


def contextual_action_set(
    ui_mode: UiMode, popup: Optional[PopupMode], table: KeyBindingTable
) -> ContextualActionSet:
    return ContextualActionSet(contextual_actions(ui_mode, popup), table)
