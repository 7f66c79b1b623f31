"""
Test the App state machine end to end: key routing, forms, popups,
the command palette and IO results.
"""

# Path setup handled by conftest.py
import pytest

from corkboard.config import AppConfig, load_config
from corkboard.core import repository, service
from corkboard.nav.actions import Action
from corkboard.nav.app import App, AppReturn, InputState, MainMenuItem
from corkboard.nav.dispatch import IoEvent
from corkboard.nav.focus import Focus
from corkboard.nav.keys import KeyChord
from corkboard.nav.modes import PopupMode, UiMode
from corkboard.nav.toast import ToastType
from corkboard.palette import PaletteCommand


@pytest.fixture(autouse=True)
def temp_db(monkeypatch, tmp_path):
    """Use temporary database for all tests."""
    db_path = tmp_path / "test_corkboard.db"
    monkeypatch.setattr(repository, "DB_PATH", db_path)
    monkeypatch.setattr(repository, "DB_DIR", tmp_path)
    yield db_path


@pytest.fixture
def make_app(tmp_path):
    apps = []

    def factory(**kwargs):
        config = AppConfig(path=tmp_path / "config.json", save_dir=tmp_path / "exports")
        app = App(config, boards=service.list_boards(), **kwargs)
        apps.append(app)
        return app

    yield factory
    for app in apps:
        app.close()


@pytest.fixture
def two_boards():
    home = service.create_board("Home")
    service.create_card(home.id, "Fix sink")
    service.create_card(home.id, "Mow lawn")
    shop = service.create_board("Shop")
    service.create_card(shop.id, "Buy milk")
    return home, shop


def press(app, *keys):
    result = AppReturn.CONTINUE
    for key in keys:
        result = app.handle_key(KeyChord.parse(key))
    return result


def type_text(app, text):
    for c in text:
        app.handle_key(KeyChord.char(c))


def finish_io(app):
    app.dispatcher.run_pending()
    app.tick()


def toast_messages(app, toast_type=None):
    return [t.message for t in app.toasts.toasts if toast_type is None or t.toast_type is toast_type]


# --- Basic routing ---


def test_initial_state(make_app):
    app = make_app()
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert app.focus is Focus.BODY
    assert app.input_state is InputState.NAVIGATION
    assert app.popup is None
    assert not app.is_loading


def test_quit(make_app):
    app = make_app()
    assert press(app, "q") is AppReturn.EXIT
    assert press(app, "ctrl+c") is AppReturn.EXIT


def test_unbound_key_is_logged_and_ignored(make_app):
    app = make_app()
    assert press(app, "x") is AppReturn.CONTINUE
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert app.focus is Focus.BODY
    assert any("No action associated to x" in line for line in app.log.lines())
    assert app.toasts.toasts == []


def test_tab_cycles_focus(make_app):
    app = make_app()
    press(app, "tab")
    assert app.focus is Focus.HELP
    press(app, "tab", "tab")
    assert app.focus is Focus.TITLE
    press(app, "shift+tab")
    assert app.focus is Focus.LOG


def test_digits_set_ui_mode(make_app):
    app = make_app()
    press(app, "1")
    assert app.ui_mode is UiMode.ZEN
    assert app.focus is Focus.BODY
    press(app, "8")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG


def test_toggle_config_round_trip(make_app):
    app = make_app()
    press(app, "c")
    assert app.ui_mode is UiMode.CONFIG
    assert app.focus is Focus.CONFIG_TABLE
    assert app.config_list.selected == 0

    press(app, "down", "down")
    assert app.config_list.selected == 2

    press(app, "c")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert app.focus is Focus.BODY
    assert app.config_list.selected == 0


def test_adopt_focus(make_app):
    app = make_app()
    assert app.adopt_focus(Focus.LOG)
    assert app.focus is Focus.LOG
    assert not app.adopt_focus(Focus.CONFIG_TABLE)
    assert app.focus is Focus.LOG


# --- Forms ---


def test_new_board_form(make_app):
    app = make_app()
    press(app, "b")
    assert app.ui_mode is UiMode.NEW_BOARD
    assert app.focus is Focus.NEW_BOARD_NAME

    press(app, "enter")
    assert app.input_state is InputState.TEXT_ENTRY
    type_text(app, "Quilts")  # 'q' is text here, not Quit
    assert app.input_buffer == "Quilts"

    press(app, "enter")
    assert app.input_state is InputState.NAVIGATION
    assert app.form[Focus.NEW_BOARD_NAME] == "Quilts"
    assert app.focus is Focus.NEW_BOARD_DESCRIPTION

    press(app, "tab", "enter")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert app.focus is Focus.BODY
    assert app.is_loading
    assert service.list_boards() == []

    finish_io(app)
    assert not app.is_loading
    assert [b.name for b in app.boards] == ["Quilts"]
    assert app.current_board.name == "Quilts"
    assert "Created board 'Quilts'" in toast_messages(app, ToastType.INFO)


def test_backspace_and_escape_in_text_entry(make_app):
    app = make_app()
    press(app, "b", "enter")
    type_text(app, "abcd")
    press(app, "backspace")
    assert app.input_buffer == "abc"

    press(app, "esc")
    assert app.input_state is InputState.NAVIGATION
    assert app.form[Focus.NEW_BOARD_NAME] == ""
    assert app.ui_mode is UiMode.NEW_BOARD

    press(app, "esc")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG


def test_escape_with_unsaved_text_asks_first(make_app):
    app = make_app()
    press(app, "b", "enter")
    type_text(app, "x")
    press(app, "enter")

    press(app, "esc")
    assert app.popup is PopupMode.CONFIRM_DISCARD
    assert app.focus is Focus.SUBMIT_BUTTON

    # Cancel: back to the form exactly where we were
    press(app, "esc")
    assert app.popup is None
    assert app.ui_mode is UiMode.NEW_BOARD
    assert app.focus is Focus.NEW_BOARD_DESCRIPTION

    # Confirm: discard and return
    press(app, "esc", "enter")
    assert app.popup is None
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert app.form == {}
    assert not app.is_loading
    assert service.list_boards() == []


def test_confirm_discard_keep_editing_button(make_app):
    app = make_app()
    press(app, "b", "enter")
    type_text(app, "x")
    press(app, "enter", "esc", "right")
    assert app.focus is Focus.CANCEL_BUTTON

    press(app, "enter")
    assert app.popup is None
    assert app.ui_mode is UiMode.NEW_BOARD


def test_new_card_needs_a_board(make_app):
    app = make_app()
    press(app, "n")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert any("No board selected" in m for m in toast_messages(app, ToastType.ERROR))


def test_new_card_form(make_app, two_boards):
    home, _ = two_boards
    app = make_app()
    press(app, "n")
    assert app.ui_mode is UiMode.NEW_CARD

    press(app, "enter")
    type_text(app, "Clean gutters")
    press(app, "enter", "tab", "enter")
    type_text(app, "2026-05-01")
    press(app, "enter", "enter")
    type_text(app, "outside, weekend")
    press(app, "enter")
    assert app.focus is Focus.SUBMIT_BUTTON

    press(app, "enter")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert app.is_loading

    finish_io(app)
    card = app.current_card
    assert card.name == "Clean gutters"
    assert card.board_id == home.id
    assert card.due_date == "2026-05-01"
    assert card.tags == ["outside", "weekend"]


def test_invalid_card_keeps_form_open(make_app, two_boards):
    app = make_app()
    press(app, "n", "tab", "tab", "enter")
    type_text(app, "soon")
    press(app, "enter", "tab", "enter")

    assert app.ui_mode is UiMode.NEW_CARD
    errors = toast_messages(app, ToastType.ERROR)
    assert errors and "Card name cannot be empty" in errors[-1]

    press(app, "tab", "enter")
    assert app.focus is Focus.CARD_NAME
    type_text(app, "Milk")
    press(app, "enter", "tab", "tab", "tab", "enter")

    assert app.ui_mode is UiMode.NEW_CARD
    assert "Invalid due date 'soon'" in toast_messages(app, ToastType.ERROR)[-1]
    assert not app.is_loading
    assert [c.name for c in service.list_boards()[0].cards] == ["Fix sink", "Mow lawn"]


# --- Body ---


def test_body_navigation(make_app, two_boards):
    app = make_app()
    assert app.current_board.name == "Home"
    assert app.current_card.name == "Fix sink"

    press(app, "down")
    assert app.current_card.name == "Mow lawn"

    press(app, "right")
    assert app.current_board.name == "Shop"
    assert app.current_card.name == "Buy milk"

    press(app, "right")
    assert app.current_board.name == "Home"


def test_delete_card(make_app, two_boards):
    app = make_app()
    press(app, "d")
    assert app.is_loading
    assert len(app.current_board.cards) == 2

    finish_io(app)
    assert [c.name for c in app.current_board.cards] == ["Mow lawn"]
    assert app.current_card.name == "Mow lawn"


def test_change_card_status(make_app, two_boards):
    app = make_app()
    press(app, "s")
    assert app.popup is PopupMode.CHANGE_CARD_STATUS
    assert app.popup_list.current() == "active"

    press(app, "down", "enter")
    assert app.popup is None
    assert app.focus is Focus.BODY
    assert app.current_card.status == "active"

    finish_io(app)
    assert app.current_card.status == "complete"
    assert "'Fix sink' is now complete" in toast_messages(app, ToastType.INFO)


def test_change_card_status_without_card(make_app):
    app = make_app()
    press(app, "s")
    assert app.popup is None
    assert "Could not find current card" in toast_messages(app, ToastType.ERROR)


def test_change_ui_mode_popup(make_app):
    app = make_app()
    press(app, "u")
    assert app.popup is PopupMode.CHANGE_UI_MODE
    assert app.popup_list.current() is UiMode.TITLE_HELP_LOG

    press(app, "down", "enter")
    assert app.popup is None
    assert app.ui_mode is UiMode.ZEN


# --- Command palette ---


def test_palette_typing_and_quit(make_app):
    app = make_app()
    press(app, "ctrl+p")
    assert app.popup is PopupMode.COMMAND_PALETTE
    assert app.input_state is InputState.TEXT_ENTRY
    assert set(app.palette.commands.items) == set(PaletteCommand)
    assert app.palette.commands.selected == 0

    type_text(app, "quit")
    assert app.palette.query == "quit"
    assert app.palette.commands.current() is PaletteCommand.QUIT

    assert press(app, "enter") is AppReturn.EXIT


def test_palette_escape_restores_focus(make_app):
    app = make_app()
    press(app, "tab")
    press(app, "ctrl+p")
    type_text(app, "ab")
    press(app, "esc")

    assert app.popup is None
    assert app.focus is Focus.HELP
    assert app.input_state is InputState.NAVIGATION
    assert app.palette.query == ""


def test_palette_select_card(make_app, two_boards):
    _, shop = two_boards
    app = make_app()
    press(app, "tab", "ctrl+p")
    type_text(app, "milk")
    assert [h.label for h in app.palette.cards.items] == ["Buy milk"]

    press(app, "tab")
    assert app.focus is Focus.COMMAND_PALETTE_CARD
    assert app.palette.cards.selected == 0

    press(app, "enter")
    assert app.popup is None
    assert app.focus is Focus.BODY
    assert app.current_board.id == shop.id
    assert app.current_card.name == "Buy milk"


def test_palette_select_board(make_app, two_boards):
    _, shop = two_boards
    app = make_app()
    press(app, "ctrl+p")
    type_text(app, "shop")
    press(app, "shift+tab")
    assert app.focus is Focus.COMMAND_PALETTE_BOARD

    press(app, "enter")
    assert app.current_board.id == shop.id


def test_palette_open_config(make_app):
    app = make_app()
    press(app, "ctrl+p")
    type_text(app, "open config")
    assert app.palette.commands.current() is PaletteCommand.OPEN_CONFIG_MENU

    press(app, "enter")
    assert app.popup is None
    assert app.ui_mode is UiMode.CONFIG

    press(app, "c")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert app.focus is Focus.BODY


def test_palette_change_ui_mode_replaces_popup(make_app):
    app = make_app()
    press(app, "ctrl+p")
    app.run_command(PaletteCommand.CHANGE_UI_MODE)
    assert app.popup is PopupMode.CHANGE_UI_MODE
    assert app.input_state is InputState.NAVIGATION

    press(app, "esc")
    assert app.popup is None
    assert app.focus is Focus.BODY


def test_main_menu(make_app):
    app = make_app()
    app.run_command(PaletteCommand.OPEN_MAIN_MENU)
    assert app.ui_mode is UiMode.MAIN_MENU
    assert app.main_menu_list.current() is MainMenuItem.VIEW_CONFIG

    press(app, "enter")
    assert app.ui_mode is UiMode.CONFIG

    press(app, "esc")
    assert app.ui_mode is UiMode.MAIN_MENU
    assert app.focus is Focus.MAIN_MENU

    press(app, "esc")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG

    app.run_command(PaletteCommand.OPEN_MAIN_MENU)
    app.main_menu_list.select_item(MainMenuItem.QUIT)
    assert press(app, "enter") is AppReturn.EXIT


def test_toggle_config_from_main_menu(make_app):
    app = make_app()
    app.run_command(PaletteCommand.OPEN_MAIN_MENU)
    press(app, "c")
    assert app.ui_mode is UiMode.CONFIG

    press(app, "c")
    assert app.ui_mode is UiMode.MAIN_MENU
    assert app.focus is Focus.MAIN_MENU


def test_palette_card_from_config_returns_to_view(make_app, two_boards):
    home, _ = two_boards
    app = make_app()
    press(app, "down", "c", "ctrl+p")
    assert app.ui_mode is UiMode.CONFIG
    type_text(app, "fix sink")
    press(app, "tab")
    assert app.focus is Focus.COMMAND_PALETTE_CARD

    press(app, "enter")
    assert app.popup is None
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert app.focus is Focus.BODY
    assert app.current_board.id == home.id
    assert app.current_card.name == "Fix sink"

    press(app, "esc")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG


def test_form_command_rejected_outside_view(make_app):
    app = make_app()
    press(app, "c")
    app.handle_key(KeyChord("p", ctrl=True))
    type_text(app, "new board")
    press(app, "enter")

    assert app.ui_mode is UiMode.CONFIG
    assert toast_messages(app, ToastType.ERROR)


# --- IO ---


def test_save_state(make_app, two_boards):
    app = make_app()
    press(app, "ctrl+s")
    assert app.is_loading

    finish_io(app)
    assert not app.is_loading
    assert len(service.list_saves()) == 1
    assert any(m.startswith("Saved as corkboard_") for m in toast_messages(app, ToastType.INFO))


def test_dispatch_failure_recovers(make_app):
    app = make_app()
    app.dispatcher.close()
    press(app, "ctrl+s")

    assert not app.is_loading
    assert any("stopped" in m for m in toast_messages(app, ToastType.ERROR))
    assert app.ui_mode is UiMode.TITLE_HELP_LOG


def test_form_stays_open_when_write_cannot_be_sent(make_app):
    app = make_app()
    press(app, "b", "enter")
    type_text(app, "Quilts")
    press(app, "enter")
    app.dispatcher.close()

    press(app, "tab", "enter")
    assert app.ui_mode is UiMode.NEW_BOARD
    assert app.form[Focus.NEW_BOARD_NAME] == "Quilts"
    assert any("stopped" in m for m in toast_messages(app, ToastType.ERROR))


def test_load_save(make_app, two_boards):
    home, _ = two_boards
    service.save_local(service.list_boards())
    service.create_card(home.id, "Paint fence")

    app = make_app()
    assert len(app.current_board.cards) == 3

    app.run_command(PaletteCommand.LOAD_A_SAVE)
    assert app.ui_mode is UiMode.LOAD_SAVE
    assert app.is_loading
    assert len(app.save_list) == 0

    finish_io(app)
    assert len(app.save_list) == 1
    assert app.save_list.selected == 0

    press(app, "enter")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    finish_io(app)
    assert [c.name for c in app.current_board.cards] == ["Fix sink", "Mow lawn"]


def test_reset_ui(make_app, two_boards):
    app = make_app()
    press(app, "1")
    app.run_command(PaletteCommand.RESET_UI)
    assert app.ui_mode is UiMode.TITLE_HELP_LOG
    assert app.focus is Focus.TITLE

    finish_io(app)
    assert [b.name for b in app.boards] == ["Home", "Shop"]


def test_failed_io_shows_error(make_app):
    app = make_app()
    app.run_command(PaletteCommand.EXPORT_TO_JSON)
    app.dispatch(IoEvent.SAVE_CLOUD_DATA)
    finish_io(app)
    assert "Cloud sync not configured" in toast_messages(app, ToastType.ERROR)
    assert any(m.startswith("Exported to") for m in toast_messages(app, ToastType.INFO))


# --- Config screens ---


def test_select_default_view(make_app, tmp_path):
    app = make_app()
    press(app, "c", "down", "enter")
    assert app.popup is PopupMode.SELECT_DEFAULT_VIEW
    assert app.popup_list.current() is UiMode.TITLE_HELP_LOG

    press(app, "up", "enter")
    assert app.popup is None
    assert app.config.default_view is UiMode.HELP_LOG
    assert ("Default view", "Help and Log") in app.config_list.items

    finish_io(app)
    assert load_config(tmp_path / "config.json").default_view is UiMode.HELP_LOG


def open_keybinding_editor(app):
    press(app, "c")
    for _ in range(4):
        press(app, "down")
    press(app, "enter")


def test_rebind_key(make_app, tmp_path):
    app = make_app()
    open_keybinding_editor(app)
    assert app.ui_mode is UiMode.EDIT_KEYBINDINGS
    assert app.focus is Focus.EDIT_KEYBINDINGS_TABLE

    app.keybinding_list.select_item(Action.DELETE)
    press(app, "enter")
    assert app.input_state is InputState.KEY_CAPTURE
    assert app.popup is PopupMode.EDIT_KEYBINDING

    press(app, "x")
    assert app.input_state is InputState.NAVIGATION
    assert app.popup is None
    assert app.bindings.chords_for(Action.DELETE) == (KeyChord("x"),)
    assert app.config.keybindings["delete"] == ["x"]

    finish_io(app)
    assert load_config(tmp_path / "config.json").keybindings["delete"] == ["x"]

    press(app, "esc")
    assert app.ui_mode is UiMode.CONFIG
    press(app, "esc")
    assert app.ui_mode is UiMode.TITLE_HELP_LOG


def test_rebind_conflict_is_rejected(make_app):
    app = make_app()
    open_keybinding_editor(app)
    app.keybinding_list.select_item(Action.DELETE)
    press(app, "enter", "q")

    assert app.bindings.chords_for(Action.DELETE) == (KeyChord("d"),)
    assert any("Conflict key q" in m for m in toast_messages(app, ToastType.ERROR))


def test_rebind_cancel(make_app):
    app = make_app()
    open_keybinding_editor(app)
    app.keybinding_list.select_item(Action.DELETE)
    press(app, "enter", "esc")

    assert app.input_state is InputState.NAVIGATION
    assert app.popup is None
    assert app.bindings.chords_for(Action.DELETE) == (KeyChord("d"),)


def test_set_ui_mode_cannot_be_rebound(make_app):
    app = make_app()
    open_keybinding_editor(app)
    app.keybinding_list.select_item(Action.SET_UI_MODE)
    press(app, "enter")

    assert app.input_state is InputState.NAVIGATION
    assert toast_messages(app, ToastType.WARNING)


def test_close_detaches_log(make_app):
    app = make_app()
    app.close()
    press(app, "x")
    assert not any("No action associated to x" in line for line in app.log.lines())

    print("✓ App state machine works correctly")
