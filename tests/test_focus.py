"""
Test cyclic focus traversal and focus resync.
"""

# Path setup handled by conftest.py
from corkboard.nav.focus import Focus, FocusGraph
from corkboard.nav.modes import PopupMode, UiMode


def test_title_help_log_cycle():
    """Body -> Help -> Log -> Title in TitleHelpLog."""
    tabs = UiMode.TITLE_HELP_LOG.available_tabs
    assert tabs == (Focus.TITLE, Focus.BODY, Focus.HELP, Focus.LOG)

    focus = Focus.BODY
    seen = []
    for _ in range(3):
        focus = FocusGraph.next(focus, tabs)
        seen.append(focus)
    assert seen == [Focus.HELP, Focus.LOG, Focus.TITLE]


def test_prev_wraps_to_end():
    tabs = UiMode.TITLE_HELP_LOG.available_tabs
    assert FocusGraph.prev(Focus.TITLE, tabs) is Focus.LOG


def test_next_prev_round_trip_for_every_mode():
    for mode in UiMode:
        tabs = mode.available_tabs
        for focus in tabs:
            assert FocusGraph.prev(FocusGraph.next(focus, tabs), tabs) is focus
            assert FocusGraph.next(FocusGraph.prev(focus, tabs), tabs) is focus
    for popup in PopupMode:
        tabs = popup.available_tabs
        for focus in tabs:
            assert FocusGraph.prev(FocusGraph.next(focus, tabs), tabs) is focus


def test_missing_focus_counts_as_first():
    tabs = (Focus.BODY, Focus.HELP, Focus.LOG)
    assert FocusGraph.next(Focus.CONFIG_TABLE, tabs) is Focus.HELP
    assert FocusGraph.prev(Focus.CONFIG_TABLE, tabs) is Focus.LOG


def test_single_and_empty_lists():
    assert FocusGraph.next(Focus.BODY, (Focus.BODY,)) is Focus.BODY
    assert FocusGraph.prev(Focus.BODY, ()) is Focus.BODY


def test_resync():
    tabs = UiMode.HELP.available_tabs
    assert FocusGraph.resync(Focus.HELP, tabs) is Focus.HELP
    assert FocusGraph.resync(Focus.TITLE, tabs) is Focus.BODY


def test_tabs_prefers_popup():
    assert FocusGraph.tabs(UiMode.TITLE) == UiMode.TITLE.available_tabs
    assert FocusGraph.tabs(UiMode.TITLE, PopupMode.COMMAND_PALETTE) == (
        Focus.COMMAND_PALETTE_COMMAND,
        Focus.COMMAND_PALETTE_CARD,
        Focus.COMMAND_PALETTE_BOARD,
    )


def test_text_fields():
    assert Focus.CARD_NAME.is_text_field
    assert Focus.NEW_BOARD_DESCRIPTION.is_text_field
    assert not Focus.SUBMIT_BUTTON.is_text_field
    assert not Focus.BODY.is_text_field

    print("✓ Focus traversal works correctly")
