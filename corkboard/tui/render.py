"""
FILE: corkboard/tui/render.py
PURPOSE: Build a rich renderable from App state (one full frame per tick)
EXPORTS:
  - render(app) -> Layout
DEPENDENCIES:
  - rich (Layout, Panel, Table, Text)
  - corkboard.nav.app (App)
NOTES:
  - Read-only with respect to the App
  - The focused region gets a bright border, others stay dim
  - An open popup replaces the main area instead of floating over it
"""

from typing import List, Optional

from rich.console import Group
from rich.layout import Layout
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .. import __version__
from ..core.constants import STATUS_COMPLETE, STATUS_STALE
from ..nav.actions import Action
from ..nav.app import App, InputState
from ..nav.focus import Focus
from ..nav.modes import PopupMode, UiMode
from ..palette import allot_rows

STATUS_STYLES = {
    STATUS_COMPLETE: "strike bright_green",
    STATUS_STALE: "dim yellow",
}


def _border(app: App, focus: Focus) -> str:
    return "bright_cyan" if app.focus is focus else "dim"


def _marker(selected: bool) -> str:
    return "▶ " if selected else "  "


def _list_text(items: List[str], selected: Optional[int], limit: int = 0) -> Text:
    text = Text()
    start = 0
    if limit and selected is not None and selected >= limit:
        start = selected - limit + 1
    shown = items[start:start + limit] if limit else items
    for offset, label in enumerate(shown):
        index = start + offset
        is_selected = index == selected
        text.append(_marker(is_selected) + label + "\n", style="bold" if is_selected else "")
    if not items:
        text.append("  (empty)", style="dim italic")
    return text


# --- Regions ---


def render_title(app: App) -> Panel:
    title = Text()
    title.append("Corkboard", style="bold cyan")
    title.append(f" v{__version__}", style="dim")
    title.append(f"   {app.ui_mode}", style="yellow")
    if app.is_loading:
        title.append("   saving...", style="green")
    return Panel(title, border_style=_border(app, Focus.TITLE))


def render_body(app: App) -> Panel:
    if not app.boards:
        hint = Text("No boards yet. Press ", style="dim")
        chord = app.bindings.first_chord(Action.NEW_BOARD)
        hint.append(str(chord) if chord else "New Board", style="bold")
        hint.append(" to create one.", style="dim")
        return Panel(hint, title="[bold]Boards[/bold]", border_style=_border(app, Focus.BODY))

    table = Table(expand=True, show_lines=False)
    for index, board in enumerate(app.boards):
        selected = index == app.board_list.selected
        table.add_column(
            board.name,
            style="white" if selected else "dim",
            header_style="bold cyan" if selected else "dim cyan",
        )

    rows = max((len(board.cards) for board in app.boards), default=0)
    for row in range(rows):
        cells = []
        for board in app.boards:
            if row >= len(board.cards):
                cells.append("")
                continue
            card = board.cards[row]
            is_current = card is app.current_card
            cell = Text(_marker(is_current) + card.name, style=STATUS_STYLES.get(card.status, ""))
            if is_current:
                cell.stylize("bold reverse" if app.focus is Focus.BODY else "bold")
            cells.append(cell)
        table.add_row(*cells)

    return Panel(table, title="[bold]Boards[/bold]", border_style=_border(app, Focus.BODY))


def render_help(app: App) -> Panel:
    table = Table(show_header=False, box=None, padding=(0, 1))
    table.add_column("Keys", style="bold yellow")
    table.add_column("Action")
    for action in app.contextual_actions():
        chords = ", ".join(str(c) for c in app.bindings.chords_for(action))
        table.add_row(chords, action.label)
    return Panel(table, title="[bold]Help[/bold]", border_style=_border(app, Focus.HELP))


def render_log(app: App, lines: int = 8) -> Panel:
    text = Text("\n".join(app.log.lines(lines)), style="dim")
    return Panel(text, title="[bold]Log[/bold]", border_style=_border(app, Focus.LOG))


def render_config(app: App) -> Panel:
    table = Table(expand=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    for index, (label, value) in enumerate(app.config_list.items):
        selected = index == app.config_list.selected
        table.add_row(_marker(selected) + label, value, style="bold reverse" if selected else "")
    return Panel(table, title="[bold]Config[/bold]", border_style=_border(app, Focus.CONFIG_TABLE))


def render_main_menu(app: App) -> Panel:
    labels = [str(item) for item in app.main_menu_list.items]
    return Panel(
        _list_text(labels, app.main_menu_list.selected),
        title="[bold]Main Menu[/bold]",
        border_style=_border(app, Focus.MAIN_MENU),
    )


def render_help_menu(app: App) -> Panel:
    table = Table(expand=True)
    table.add_column("Action", style="cyan")
    table.add_column("Keys", style="yellow")
    for index, (action, chords) in enumerate(app.bindings.items()):
        selected = index == app.help_list.selected
        table.add_row(
            _marker(selected) + action.label,
            ", ".join(str(c) for c in chords),
            style="bold reverse" if selected else "",
        )
    return Panel(table, title="[bold]Key Bindings[/bold]", border_style=_border(app, Focus.HELP))


def render_load_save(app: App) -> Panel:
    labels = [f"{save.name}  [{save.created_at or ''}]" for save in app.save_list.items]
    return Panel(
        _list_text(labels, app.save_list.selected),
        title="[bold]Load a Save[/bold]",
        border_style=_border(app, Focus.LOAD_SAVE),
    )


def render_edit_keybindings(app: App) -> Panel:
    table = Table(expand=True)
    table.add_column("Action", style="cyan")
    table.add_column("Keys", style="yellow")
    for index, action in enumerate(app.keybinding_list.items):
        selected = index == app.keybinding_list.selected
        chords = ", ".join(str(c) for c in app.bindings.chords_for(action))
        table.add_row(_marker(selected) + action.label, chords, style="bold reverse" if selected else "")
    reset = Text("[ Reset to defaults ]", style="bold" if app.focus is Focus.SUBMIT_BUTTON else "dim")
    return Panel(
        Group(table, reset),
        title="[bold]Edit Keybindings[/bold]",
        border_style=_border(app, Focus.EDIT_KEYBINDINGS_TABLE),
    )


def render_form(app: App) -> Panel:
    group = []
    for focus in app.ui_mode.available_tabs:
        if focus is Focus.SUBMIT_BUTTON:
            style = "bold reverse" if app.focus is focus else "bold"
            group.append(Text("[ Submit ]", style=style))
            continue
        editing = app.input_state is InputState.TEXT_ENTRY and app.text_target is focus
        value = app.input_buffer + "█" if editing else app.form.get(focus, "")
        line = Text()
        line.append(f"{focus.label}: ", style="bold cyan" if app.focus is focus else "cyan")
        line.append(value or "", style="white" if editing else "")
        group.append(line)
    return Panel(Group(*group), title=f"[bold]{app.ui_mode}[/bold]", border_style="bright_cyan")


def render_palette(app: App, budget: int) -> Panel:
    palette = app.palette
    lists = (
        ("Commands", palette.commands, Focus.COMMAND_PALETTE_COMMAND, lambda c: c.label),
        ("Cards", palette.cards, Focus.COMMAND_PALETTE_CARD, lambda h: h.label),
        ("Boards", palette.boards, Focus.COMMAND_PALETTE_BOARD, lambda h: h.label),
    )
    rows = allot_rows([len(items) for _, items, _, _ in lists], budget)

    query = Text("> ", style="bold yellow")
    query.append(palette.query + "█")
    group = [query]
    for (title, items, focus, label), limit in zip(lists, rows):
        heading = Text(title, style="bold cyan" if app.focus is focus else "dim cyan")
        group.append(heading)
        group.append(_list_text([label(item) for item in items], items.selected, limit))
    return Panel(Group(*group), title="[bold]Command Palette[/bold]", border_style="bright_cyan")


def render_popup(app: App) -> Panel:
    if app.popup is PopupMode.COMMAND_PALETTE:
        return render_palette(app, app.config.palette_row_budget)

    if app.popup is PopupMode.CONFIRM_DISCARD:
        buttons = Text()
        for focus, label in ((Focus.SUBMIT_BUTTON, "Discard"), (Focus.CANCEL_BUTTON, "Keep editing")):
            buttons.append(f"[ {label} ]  ", style="bold reverse" if app.focus is focus else "dim")
        return Panel(buttons, title=f"[bold]{app.popup}[/bold]", border_style="yellow")

    if app.popup is PopupMode.EDIT_KEYBINDING:
        action = app.keybinding_list.current()
        prompt = Text(f"Press the new key for '{action.label if action else ''}' (Esc to cancel)")
        return Panel(prompt, title=f"[bold]{app.popup}[/bold]", border_style="yellow")

    labels = [getattr(item, "label", str(item)) for item in app.popup_list.items]
    return Panel(
        _list_text(labels, app.popup_list.selected),
        title=f"[bold]{app.popup}[/bold]",
        border_style="bright_cyan",
    )


def render_toasts(app: App) -> Optional[Group]:
    if not app.toasts.toasts:
        return None
    panels = []
    for toast in app.toasts.toasts[-3:]:
        r, g, b = toast.color
        panels.append(Panel(
            Text(toast.message),
            title=f"[bold]{toast.title}[/bold]",
            border_style=f"rgb({r},{g},{b})",
        ))
    return Group(*panels)


# --- Frame ---


_MENU_RENDERERS = {
    UiMode.CONFIG: render_config,
    UiMode.MAIN_MENU: render_main_menu,
    UiMode.HELP_MENU: render_help_menu,
    UiMode.LOAD_SAVE: render_load_save,
    UiMode.EDIT_KEYBINDINGS: render_edit_keybindings,
    UiMode.NEW_BOARD: render_form,
    UiMode.NEW_CARD: render_form,
}


def render(app: App) -> Layout:
    """Compose the full screen for the current UiMode."""
    tabs = app.ui_mode.available_tabs
    layout = Layout()
    sections = []

    if Focus.TITLE in tabs:
        sections.append(Layout(render_title(app), size=3))

    if app.popups.is_open:
        main = render_popup(app)
    elif app.ui_mode in _MENU_RENDERERS:
        main = _MENU_RENDERERS[app.ui_mode](app)
    else:
        main = render_body(app)

    if Focus.HELP in tabs and app.ui_mode is not UiMode.HELP_MENU:
        row = Layout(name="main", ratio=1)
        row.split_row(Layout(main, ratio=3), Layout(render_help(app), ratio=1))
        sections.append(row)
    else:
        sections.append(Layout(main, ratio=1))

    if Focus.LOG in tabs:
        sections.append(Layout(render_log(app), size=10))

    toasts = render_toasts(app)
    if toasts is not None:
        sections.append(Layout(toasts, size=3 * min(len(app.toasts.toasts), 3)))

    layout.split_column(*sections)
    return layout
