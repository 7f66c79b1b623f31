"""
FILE: corkboard/nav/app.py
PURPOSE: Application state machine - routes key chords to actions and applies them
EXPORTS:
  - App
  - AppReturn (Enum: CONTINUE / EXIT)
  - InputState (Enum: NAVIGATION / TEXT_ENTRY / KEY_CAPTURE)
  - MainMenuItem (Enum)
DEPENDENCIES:
  - corkboard.nav.* (machine, popups, bindings, selection, toasts, dispatch)
  - corkboard.palette (CommandPaletteEngine)
  - corkboard.core.service (lookups, ranking, form validation)
  - corkboard.config (AppConfig)
NOTES:
  - One event is fully handled before the next; nothing here blocks
  - Persistence is only requested through the Dispatcher; results are
    applied in tick() on the event-loop thread
  - CorkboardErrors raised while applying an action become error toasts,
    they never escape handle_key()
"""

import logging
import time
from enum import Enum
from typing import Dict, List, Optional

from ..config import AppConfig, build_binding_table
from ..core import service
from ..core.constants import CARD_STATUSES
from ..core.exceptions import (
    CorkboardError,
    DispatchError,
    InvalidInputError,
    KeyBindingConflictError,
)
from ..core.models import Board, Card, SearchHit
from ..palette import CommandPaletteEngine, CommandPaletteState, PaletteCommand
from .actions import Action
from .bindings import ContextualActionSet, KeyBindingTable
from .context import contextual_action_set
from .dispatch import Dispatcher, IoEvent, IoIntent, IoResult
from .focus import Focus
from .keys import KeyChord
from .logbuffer import LogBuffer
from .machine import UiModeMachine
from .modes import PopupMode, UiMode
from .popup import PopupController
from .selection import SelectableList
from .toast import ToastManager
from .worker import IoWorker

logger = logging.getLogger(__name__)

ENTER = KeyChord("enter")
ESC = KeyChord("esc")
BACKSPACE = KeyChord("backspace")


class AppReturn(Enum):
    CONTINUE = "continue"
    EXIT = "exit"


class InputState(Enum):
    NAVIGATION = "navigation"
    TEXT_ENTRY = "text_entry"
    KEY_CAPTURE = "key_capture"


class MainMenuItem(Enum):
    VIEW_CONFIG = "Configure"
    VIEW_HELP = "Help"
    LOAD_SAVE = "Load a Save"
    QUIT = "Quit"

    def __str__(self) -> str:
        return self.value


# Form fields per transient mode, in tab order
FORM_FIELDS: Dict[UiMode, tuple] = {
    UiMode.NEW_BOARD: (Focus.NEW_BOARD_NAME, Focus.NEW_BOARD_DESCRIPTION),
    UiMode.NEW_CARD: (Focus.CARD_NAME, Focus.CARD_DESCRIPTION, Focus.CARD_DUE_DATE, Focus.CARD_TAGS),
}


class App:
    """
    Everything the terminal front end renders, and the only thing it mutates.

    Feed key chords to handle_key() and call tick() on every frame.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        bindings: Optional[KeyBindingTable] = None,
        dispatcher: Optional[Dispatcher] = None,
        boards: Optional[List[Board]] = None,
        log_buffer: Optional[LogBuffer] = None,
        clock=time.monotonic,
    ):
        self.config = config or AppConfig()
        self.bindings = bindings or build_binding_table(self.config)
        self.machine = UiModeMachine(self.config.default_view)
        self.popups = PopupController(self.machine)
        self.input_state = InputState.NAVIGATION
        self.dispatcher = dispatcher or Dispatcher(IoWorker(self.config))
        self.toasts = ToastManager(clock)
        self.log = (log_buffer or LogBuffer()).attach()

        self.boards: List[Board] = []
        self.board_list: SelectableList[Board] = SelectableList()
        self.card_list: SelectableList[Card] = SelectableList()
        self.config_list: SelectableList = SelectableList(self.config.to_rows())
        self.main_menu_list: SelectableList[MainMenuItem] = SelectableList(MainMenuItem)
        self.help_list: SelectableList[Action] = SelectableList(Action)
        self.save_list: SelectableList = SelectableList()
        self.keybinding_list: SelectableList[Action] = SelectableList(Action)
        self.popup_list: SelectableList = SelectableList()

        self.palette_engine = CommandPaletteEngine()
        self.palette = CommandPaletteState()

        self.form: Dict[Focus, str] = {}
        self.input_buffer = ""
        self.text_target: Optional[Focus] = None

        self.set_boards(boards or [])

    # --- State accessors ---

    @property
    def ui_mode(self) -> UiMode:
        return self.machine.ui_mode

    @property
    def popup(self) -> Optional[PopupMode]:
        return self.popups.popup

    @property
    def focus(self) -> Focus:
        """The single active focus: the popup's while one is open."""
        if self.popups.is_open:
            return self.popups.focus
        return self.machine.focus

    @property
    def is_loading(self) -> bool:
        return self.dispatcher.is_loading

    @property
    def current_board(self) -> Optional[Board]:
        return self.board_list.current()

    @property
    def current_card(self) -> Optional[Card]:
        return self.card_list.current()

    def contextual_actions(self) -> ContextualActionSet:
        return contextual_action_set(self.ui_mode, self.popup, self.bindings)

    # --- Lifecycle ---

    def start(self) -> None:
        self.dispatcher.start()

    def close(self) -> None:
        self.dispatcher.close()
        self.log.detach()

    def tick(self, now: Optional[float] = None) -> None:
        for result in self.dispatcher.poll():
            self._apply_result(result)
        self.toasts.tick(now)

    # --- Board/card selection ---

    def set_boards(self, boards: List[Board]) -> None:
        """Replace the visible boards, keeping the selection where it still exists."""
        board_id = self.current_board.id if self.current_board else None
        card_id = self.current_card.id if self.current_card else None
        self.boards = list(boards)
        self.board_list.set_items(self.boards)
        self._select_board(board_id, card_id)

    def _select_board(self, board_id: Optional[int], card_id: Optional[int] = None) -> None:
        board = service.find_board(self.boards, board_id)
        if board is not None:
            self.board_list.select_item(board)
        else:
            self.board_list.reset()
        self._sync_cards(card_id)

    def _sync_cards(self, card_id: Optional[int] = None) -> None:
        board = self.current_board
        self.card_list.set_items(board.cards if board else [])
        card = service.find_card(board, card_id)
        if card is not None:
            self.card_list.select_item(card)
        else:
            self.card_list.reset()

    def adopt_focus(self, candidate: Focus) -> bool:
        """Take a focus computed by the layout (mouse hover) if it is legal right now."""
        if self.popups.is_open:
            adopted = self.popups.set_focus(candidate)
        else:
            adopted = self.machine.set_focus(candidate)
        if adopted and self.popup is PopupMode.COMMAND_PALETTE:
            self._palette_list().ensure_selection()
        return adopted

    # --- Key routing ---

    def handle_key(self, chord: KeyChord) -> AppReturn:
        """Route one key chord according to the input state."""
        try:
            if self.input_state is InputState.TEXT_ENTRY:
                return self._handle_text_entry(chord)
            if self.input_state is InputState.KEY_CAPTURE:
                return self._handle_key_capture(chord)

            action = self.contextual_actions().find(chord)
            if action is None:
                logger.warning("No action associated to %s", chord)
                return AppReturn.CONTINUE
            return self.do_action(action, chord)
        except CorkboardError as e:
            logger.warning("%s", e)
            self.toasts.error(str(e))
            return AppReturn.CONTINUE

    def do_action(self, action: Action, chord: Optional[KeyChord] = None) -> AppReturn:
        logger.debug("Action %s in %s (focus %s)", action.name, self.ui_mode, self.focus)
        if action is Action.QUIT:
            return AppReturn.EXIT

        if action is Action.FOCUS_NEXT:
            self._move_focus(forward=True)
        elif action is Action.FOCUS_PREV:
            self._move_focus(forward=False)
        elif action is Action.SET_UI_MODE:
            digit = chord.digit() if chord else None
            self.machine.set_ui_mode(digit if digit is not None else 0)
        elif action is Action.TOGGLE_CONFIG:
            self._toggle_config()
        elif action is Action.GO_UP:
            self._move_selection(forward=False)
        elif action is Action.GO_DOWN:
            self._move_selection(forward=True)
        elif action is Action.GO_LEFT:
            self._move_sideways(forward=False)
        elif action is Action.GO_RIGHT:
            self._move_sideways(forward=True)
        elif action is Action.ENTER_INPUT:
            self._begin_text_entry()
        elif action is Action.ESCAPE:
            return self._escape()
        elif action is Action.ACCEPT:
            return self._accept()
        elif action is Action.DELETE:
            self._delete_card()
        elif action is Action.NEW_BOARD:
            self._open_form(UiMode.NEW_BOARD)
        elif action is Action.NEW_CARD:
            self._open_form(UiMode.NEW_CARD)
        elif action is Action.OPEN_COMMAND_PALETTE:
            self._open_palette()
        elif action is Action.CHANGE_CARD_STATUS:
            self._open_card_status_popup()
        elif action is Action.CHANGE_UI_MODE:
            self._open_ui_mode_popup()
        elif action is Action.OPEN_HELP_MENU:
            self._enter_menu(UiMode.HELP_MENU)
        elif action is Action.SAVE_STATE:
            self.dispatch(IoEvent.SAVE_LOCAL_DATA, list(self.boards))
        return AppReturn.CONTINUE

    # --- Text entry ---

    def _handle_text_entry(self, chord: KeyChord) -> AppReturn:
        palette = self.popup is PopupMode.COMMAND_PALETTE
        if chord == ENTER:
            return self._execute_palette_selection() if palette else self._commit_text()
        if chord == ESC:
            if palette:
                self._close_palette()
            else:
                self._leave_text_entry()
            return AppReturn.CONTINUE

        if chord == BACKSPACE:
            self.input_buffer = self.input_buffer[:-1]
        elif chord.is_printable:
            self.input_buffer += chord.key
        elif palette:
            # Tab/arrows still move between and within the result lists
            action = self.contextual_actions().find(chord)
            if action in (Action.FOCUS_NEXT, Action.FOCUS_PREV, Action.GO_UP, Action.GO_DOWN):
                self.do_action(action, chord)
            else:
                logger.debug("Ignoring %s in command palette", chord)
            return AppReturn.CONTINUE
        else:
            logger.debug("Ignoring %s while editing %s", chord, self.text_target)
            return AppReturn.CONTINUE

        if palette:
            self.palette.query = self.input_buffer
            self._refresh_palette()
        return AppReturn.CONTINUE

    def _begin_text_entry(self) -> None:
        if not self.focus.is_text_field:
            logger.debug("%s does not take text", self.focus)
            return
        self.text_target = self.focus
        self.input_buffer = self.form.get(self.focus, "")
        self.input_state = InputState.TEXT_ENTRY

    def _commit_text(self) -> AppReturn:
        self.form[self.text_target] = self.input_buffer
        self._leave_text_entry()
        self.machine.focus_next()
        return AppReturn.CONTINUE

    def _leave_text_entry(self) -> None:
        self.input_state = InputState.NAVIGATION
        self.text_target = None
        self.input_buffer = ""

    # --- Key capture (rebinding) ---

    def _handle_key_capture(self, chord: KeyChord) -> AppReturn:
        action = self.keybinding_list.current()
        self.input_state = InputState.NAVIGATION
        self.popups.close()
        if chord == ESC or action is None:
            logger.debug("Keybinding edit cancelled")
            return AppReturn.CONTINUE

        try:
            table = self.bindings.rebind(action, [chord])
        except KeyBindingConflictError as e:
            logger.warning("Rejected binding %s for %s: %s", chord, action.name, e)
            self.toasts.error(str(e), title="Keybinding conflict")
            return AppReturn.CONTINUE

        self._apply_bindings(table)
        self.toasts.info(f"{action} bound to {chord}")
        return AppReturn.CONTINUE

    def _apply_bindings(self, table: KeyBindingTable) -> None:
        self.bindings = table
        self.config.keybindings = table.to_config()
        self.dispatch(IoEvent.SAVE_CONFIG, self.config)

    # --- Focus and selection movement ---

    def _move_focus(self, forward: bool) -> None:
        if self.popups.is_open:
            self.popups.focus_next() if forward else self.popups.focus_prev()
            if self.popup is PopupMode.COMMAND_PALETTE:
                self._palette_list().ensure_selection()
        else:
            self.machine.focus_next() if forward else self.machine.focus_prev()

    def _palette_list(self) -> SelectableList:
        return self.palette.list_for(self.focus) or self.palette.commands

    def _list_for_focus(self) -> Optional[SelectableList]:
        if self.popups.is_open:
            if self.popup is PopupMode.COMMAND_PALETTE:
                return self._palette_list()
            if self.popup is PopupMode.CONFIRM_DISCARD:
                return None
            return self.popup_list
        return {
            Focus.BODY: self.card_list,
            Focus.HELP: self.help_list,
            Focus.CONFIG_TABLE: self.config_list,
            Focus.MAIN_MENU: self.main_menu_list,
            Focus.LOAD_SAVE: self.save_list,
            Focus.EDIT_KEYBINDINGS_TABLE: self.keybinding_list,
        }.get(self.focus)

    def _move_selection(self, forward: bool) -> None:
        if self.ui_mode in FORM_FIELDS and not self.popups.is_open:
            self._move_focus(forward)
            return
        selectable = self._list_for_focus()
        if selectable is None:
            return
        selectable.next() if forward else selectable.prev()

    def _move_sideways(self, forward: bool) -> None:
        if self.popup is PopupMode.CONFIRM_DISCARD:
            self._move_focus(forward)
            return
        if self.focus is not Focus.BODY:
            return
        self.board_list.next() if forward else self.board_list.prev()
        self._sync_cards()

    # --- Mode changes ---

    def _toggle_config(self) -> None:
        left = self.machine.toggle_config()
        if left:
            self.config_list.reset()
        else:
            self._enter_config()

    def _enter_config(self) -> None:
        self.config_list.set_items(self.config.to_rows())
        self.config_list.reset()

    def _enter_menu(self, mode: UiMode) -> None:
        self.machine.enter_menu(mode)
        if mode is UiMode.CONFIG:
            self._enter_config()
        elif mode is UiMode.MAIN_MENU:
            self.main_menu_list.reset()
        elif mode is UiMode.HELP_MENU:
            self.help_list.reset()
        elif mode is UiMode.LOAD_SAVE:
            self.save_list.set_items([])
            self.dispatch(IoEvent.LIST_SAVES)

    def _open_form(self, mode: UiMode) -> None:
        if mode is UiMode.NEW_CARD and self.current_board is None:
            raise InvalidInputError("No board selected to add a card to")
        self.machine.enter_transient(mode)
        self.form = {field: "" for field in FORM_FIELDS.get(mode, ())}
        if mode is UiMode.EDIT_KEYBINDINGS:
            self.keybinding_list.reset()

    def _close_form(self) -> None:
        self.form = {}
        self.machine.return_from_transient()

    def _has_unsaved_text(self) -> bool:
        return any(value.strip() for value in self.form.values())

    def _escape(self) -> AppReturn:
        if self.popups.is_open:
            if self.popup is PopupMode.COMMAND_PALETTE:
                self._close_palette()
            else:
                self.popups.close()
            return AppReturn.CONTINUE

        if self.ui_mode in FORM_FIELDS and self._has_unsaved_text():
            self.popups.open(PopupMode.CONFIRM_DISCARD)
            return AppReturn.CONTINUE

        if self.machine.in_transient:
            self._close_form()
        elif self.machine.go_back() and self.ui_mode.is_view:
            self.config_list.reset()
        return AppReturn.CONTINUE

    # --- Accept ---

    def _accept(self) -> AppReturn:
        if self.popups.is_open:
            return self._accept_popup()

        focus = self.focus
        if focus.is_text_field:
            self._begin_text_entry()
        elif focus is Focus.SUBMIT_BUTTON:
            self._submit()
        elif focus is Focus.CONFIG_TABLE:
            self._accept_config_row()
        elif focus is Focus.MAIN_MENU:
            return self._accept_main_menu()
        elif focus is Focus.LOAD_SAVE:
            self._accept_load_save()
        elif focus is Focus.EDIT_KEYBINDINGS_TABLE:
            self._begin_key_capture()
        return AppReturn.CONTINUE

    def _accept_popup(self) -> AppReturn:
        popup = self.popup
        choice = self.popup_list.current()

        if popup is PopupMode.COMMAND_PALETTE:
            return self._execute_palette_selection()
        if popup is PopupMode.CONFIRM_DISCARD:
            discard = self.focus is Focus.SUBMIT_BUTTON
            self.popups.close()
            if discard:
                self._close_form()
            return AppReturn.CONTINUE

        self.popups.close()
        if choice is None:
            return AppReturn.CONTINUE
        if popup is PopupMode.CHANGE_UI_MODE:
            self.machine.set_view(choice)
        elif popup is PopupMode.CHANGE_CARD_STATUS:
            card = self.current_card
            if card is not None:
                self.dispatch(IoEvent.SET_CARD_STATUS, (card, choice))
        elif popup is PopupMode.SELECT_DEFAULT_VIEW:
            self.config.default_view = choice
            self.config_list.set_items(self.config.to_rows())
            self.dispatch(IoEvent.SAVE_CONFIG, self.config)
        return AppReturn.CONTINUE

    def _submit(self) -> None:
        mode = self.ui_mode
        # Validation errors propagate and keep the form open; the write itself
        # runs on the IO worker
        if mode is UiMode.NEW_BOARD:
            fields = service.clean_board_fields(
                self.form.get(Focus.NEW_BOARD_NAME, ""),
                self.form.get(Focus.NEW_BOARD_DESCRIPTION),
            )
            if self.dispatch(IoEvent.CREATE_BOARD, fields):
                self._close_form()
        elif mode is UiMode.NEW_CARD:
            board = self.current_board
            if board is None:
                raise InvalidInputError("No board selected to add a card to")
            fields = service.clean_card_fields(
                self.form.get(Focus.CARD_NAME, ""),
                description=self.form.get(Focus.CARD_DESCRIPTION),
                due_date=self.form.get(Focus.CARD_DUE_DATE),
                tags=self.form.get(Focus.CARD_TAGS, "").split(","),
            )
            fields["board_id"] = board.id
            if self.dispatch(IoEvent.CREATE_CARD, fields):
                self._close_form()
        elif mode is UiMode.EDIT_KEYBINDINGS:
            self._apply_bindings(KeyBindingTable.defaults())
            self.toasts.info("Keybindings reset to defaults")

    def _accept_config_row(self) -> None:
        row = self.config_list.current()
        if row is None:
            return
        label = row[0]
        if label == "Default view":
            views = UiMode.view_modes()
            self.popup_list.set_items(views)
            self.popup_list.select_item(self.config.default_view)
            self.popups.open(PopupMode.SELECT_DEFAULT_VIEW)
        elif label == "Edit keybindings":
            self._open_form(UiMode.EDIT_KEYBINDINGS)
        else:
            self.toasts.info(f"Edit '{label}' in {self.config.path or 'the config file'}")

    def _accept_main_menu(self) -> AppReturn:
        item = self.main_menu_list.current()
        if item is MainMenuItem.QUIT:
            return AppReturn.EXIT
        if item is MainMenuItem.VIEW_CONFIG:
            self._enter_menu(UiMode.CONFIG)
        elif item is MainMenuItem.VIEW_HELP:
            self._enter_menu(UiMode.HELP_MENU)
        elif item is MainMenuItem.LOAD_SAVE:
            self._enter_menu(UiMode.LOAD_SAVE)
        return AppReturn.CONTINUE

    def _accept_load_save(self) -> None:
        save = self.save_list.current()
        if save is None:
            self.toasts.warning("No saves found")
            return
        self.dispatch(IoEvent.LOAD_SAVE, save.name)
        self.machine.leave_menus()

    def _begin_key_capture(self) -> None:
        action = self.keybinding_list.current()
        if action is None:
            return
        if action is Action.SET_UI_MODE:
            self.toasts.warning(f"{action} always uses the digit keys")
            return
        self.popups.open(PopupMode.EDIT_KEYBINDING)
        self.input_state = InputState.KEY_CAPTURE

    # --- Body actions ---

    def _delete_card(self) -> None:
        card = self.current_card
        if self.focus is not Focus.BODY or card is None:
            logger.debug("Nothing to delete")
            return
        self.dispatch(IoEvent.DELETE_CARD, card)

    def _open_card_status_popup(self) -> None:
        card = self.current_card
        if card is None:
            raise InvalidInputError("Could not find current card")
        self.popup_list.set_items(CARD_STATUSES)
        self.popup_list.select_item(card.status)
        self.popups.open(PopupMode.CHANGE_CARD_STATUS)

    def _open_ui_mode_popup(self) -> None:
        self.popup_list.set_items(UiMode.view_modes())
        self.popup_list.select_item(self.ui_mode)
        self.popups.open(PopupMode.CHANGE_UI_MODE)

    # --- Command palette ---

    def _open_palette(self) -> None:
        self.palette.reset()
        self.popups.open(PopupMode.COMMAND_PALETTE)
        self.input_state = InputState.TEXT_ENTRY
        self.input_buffer = ""
        self._refresh_palette()

    def _close_palette(self) -> None:
        self.palette.reset()
        self._leave_text_entry()
        if self.popup is PopupMode.COMMAND_PALETTE:
            self.popups.close()

    def _refresh_palette(self) -> None:
        self.palette_engine.refresh(
            self.palette,
            lambda query: service.rank_cards(query, self.boards),
            lambda query: service.rank_boards(query, self.boards),
            focus=self.focus,
        )

    def _execute_palette_selection(self) -> AppReturn:
        selected = self._palette_list().current()
        if selected is None:
            logger.debug("Nothing selected in %s", self.focus)
            return AppReturn.CONTINUE
        if isinstance(selected, SearchHit):
            self._close_palette()
            self.machine.leave_menus()
            self._select_board(selected.board_id, selected.card_id)
            self.machine.set_focus(Focus.BODY)
            return AppReturn.CONTINUE
        return self.run_command(selected)

    def run_command(self, command: PaletteCommand) -> AppReturn:
        """Execute a palette command; the palette is closed first."""
        logger.debug("Running command %s", command)
        self._close_palette()

        if command is PaletteCommand.QUIT:
            return AppReturn.EXIT
        if command is PaletteCommand.EXPORT_TO_JSON:
            self.dispatch(IoEvent.EXPORT_JSON, list(self.boards))
        elif command is PaletteCommand.SAVE_KANBAN_STATE:
            self.dispatch(IoEvent.SAVE_LOCAL_DATA, list(self.boards))
        elif command is PaletteCommand.OPEN_CONFIG_MENU:
            self._enter_menu(UiMode.CONFIG)
        elif command is PaletteCommand.LOAD_A_SAVE:
            self._enter_menu(UiMode.LOAD_SAVE)
        elif command is PaletteCommand.OPEN_MAIN_MENU:
            self._enter_menu(UiMode.MAIN_MENU)
        elif command is PaletteCommand.OPEN_HELP_MENU:
            self._enter_menu(UiMode.HELP_MENU)
        elif command is PaletteCommand.NEW_BOARD:
            self._open_form(UiMode.NEW_BOARD)
        elif command is PaletteCommand.NEW_CARD:
            self._open_form(UiMode.NEW_CARD)
        elif command is PaletteCommand.RESET_UI:
            self.machine.reset(self.config.default_view)
            self.dispatch(IoEvent.RESET_VISIBLE_BOARDS)
        elif command is PaletteCommand.CHANGE_UI_MODE:
            self._open_ui_mode_popup()
        elif command is PaletteCommand.CHANGE_CURRENT_CARD_STATUS:
            self._open_card_status_popup()
        return AppReturn.CONTINUE

    # --- IO ---

    def dispatch(self, event: IoEvent, payload=None) -> bool:
        """Send an IO intent; a failure is reported as a toast, never raised."""
        try:
            self.dispatcher.dispatch(IoIntent(event, payload))
        except DispatchError as e:
            logger.error("%s", e)
            self.toasts.error(str(e))
            return False
        self.toasts.loading(f"{event}...", duration_ms=1000)
        return True

    def _apply_result(self, result: IoResult) -> None:
        if not result.ok:
            self.toasts.error(result.message, title=str(result.intent.event))
            return
        if result.boards is not None:
            self.set_boards(result.boards)
        if result.board_id is not None:
            self._select_board(result.board_id, result.card_id)
        if result.saves is not None:
            self.save_list.set_items(result.saves)
            self.save_list.reset()
        if result.message:
            self.toasts.info(result.message, title=str(result.intent.event))
