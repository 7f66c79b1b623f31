"""
Test config loading/saving and the keybinding table built from it.
"""

# Path setup handled by conftest.py
import json

import pytest

from corkboard.config import AppConfig, build_binding_table, load_config, save_config
from corkboard.core.exceptions import ConfigError, KeyBindingConflictError
from corkboard.nav.actions import Action
from corkboard.nav.keys import KeyChord
from corkboard.nav.modes import UiMode


def write_config(tmp_path, data):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_missing_file_gives_defaults(tmp_path):
    path = tmp_path / "missing.json"
    config = load_config(path)

    assert config == AppConfig()
    assert config.path == path
    assert config.default_view is UiMode.TITLE_HELP_LOG
    assert config.keybindings["quit"] == ["ctrl+c", "q"]


def test_load_overrides(tmp_path):
    path = write_config(tmp_path, {
        "db_path": str(tmp_path / "boards.db"),
        "default_view": "zen",
        "tickrate_ms": 50,
        "palette_row_budget": 6,
        "keybindings": {"delete": ["x"], "NEW_BOARD": "ctrl+b"},
        "something_else": True,
    })
    config = load_config(path)

    assert config.db_path == tmp_path / "boards.db"
    assert config.default_view is UiMode.ZEN
    assert config.tickrate_ms == 50
    assert config.palette_row_budget == 6
    assert config.keybindings["delete"] == ["x"]
    assert config.keybindings["new_board"] == ["ctrl+b"]
    # Untouched actions keep their defaults
    assert config.keybindings["quit"] == ["ctrl+c", "q"]


def test_default_view_by_label(tmp_path):
    path = write_config(tmp_path, {"default_view": "Help and Log"})
    assert load_config(path).default_view is UiMode.HELP_LOG


@pytest.mark.parametrize("data, message", [
    ({"default_view": "sideways"}, "Unknown default_view"),
    ({"default_view": "config"}, "must be a view mode"),
    ({"tickrate_ms": 0}, "tickrate_ms"),
    ({"palette_row_budget": "ten"}, "palette_row_budget"),
    ({"keybindings": ["q"]}, "must be an object"),
    ({"keybindings": {"fly": ["f"]}}, "Unknown action 'fly'"),
    ({"keybindings": {"quit": [1]}}, "list of strings"),
])
def test_invalid_values(tmp_path, data, message):
    path = write_config(tmp_path, data)
    with pytest.raises(ConfigError, match=message):
        load_config(path)


def test_invalid_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="Could not read"):
        load_config(path)

    path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(ConfigError, match="JSON object"):
        load_config(path)


def test_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "config.json"
    config = AppConfig(default_view=UiMode.LOG, tickrate_ms=20, path=path)
    config.keybindings["delete"] = ["x"]

    assert save_config(config) == path
    reloaded = load_config(path)
    assert reloaded == config
    assert reloaded.db_path is None


def test_build_binding_table(tmp_path):
    config = AppConfig()
    config.keybindings["delete"] = ["x", "ctrl+d"]
    table = build_binding_table(config)

    assert table.chords_for(Action.DELETE) == (KeyChord("x"), KeyChord("d", ctrl=True))


def test_conflicting_config_lists_every_pair():
    config = AppConfig()
    config.keybindings["delete"] = ["q"]
    config.keybindings["new_card"] = ["b"]

    with pytest.raises(KeyBindingConflictError) as exc_info:
        build_binding_table(config)
    assert len(exc_info.value.conflicts) == 2


def test_config_rows():
    config = AppConfig(tickrate_ms=30)
    rows = dict(config.to_rows())
    assert rows["Default view"] == "Title, Help and Log"
    assert rows["Tickrate"] == "30 ms"
    assert "Edit keybindings" in rows

    print("✓ Config loads, validates and saves")
