"""
Test the one-shot CLI commands through typer's CliRunner.
"""

# Path setup handled by conftest.py
import json

import pytest
from typer.testing import CliRunner

from corkboard import __version__
from corkboard.cli.main import app
from corkboard.core import repository, service

runner = CliRunner()


@pytest.fixture(autouse=True)
def temp_db(monkeypatch, tmp_path):
    """Use temporary database for all tests."""
    db_path = tmp_path / "test_corkboard.db"
    monkeypatch.setattr(repository, "DB_PATH", db_path)
    monkeypatch.setattr(repository, "DB_DIR", tmp_path)
    yield db_path


@pytest.fixture
def config_path(tmp_path, temp_db):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"db_path": str(temp_db)}), encoding="utf-8")
    return path


def run_cli(config_path, *args):
    return runner.invoke(app, ["--config", str(config_path), *args])


def test_version(config_path):
    result = run_cli(config_path, "version")
    assert result.exit_code == 0
    assert f"Corkboard v{__version__}" in result.output


def test_keys(config_path):
    result = run_cli(config_path, "keys")
    assert result.exit_code == 0
    assert "Key Bindings" in result.output
    assert "Open command palette" in result.output


def test_keys_json(config_path):
    result = run_cli(config_path, "keys", "--json")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["quit"] == ["ctrl+c", "q"]
    assert data["focus_prev"] == ["shift+tab"]


def test_keys_conflict_exits_1(tmp_path, temp_db):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "db_path": str(temp_db),
        "keybindings": {"delete": ["q"], "new_card": ["b"]},
    }), encoding="utf-8")

    result = run_cli(path, "keys")
    assert result.exit_code == 1
    assert "Conflict key q with actions Quit, Delete" in result.output
    assert "Conflict key b with actions New board, New card" in result.output


def test_bad_chord_exits_1(tmp_path, temp_db):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"keybindings": {"delete": ["hyper+d"]}}), encoding="utf-8")

    result = run_cli(path, "keys")
    assert result.exit_code == 1
    assert "Invalid key chord 'hyper+d'" in result.output


def test_invalid_config_exits_1(tmp_path):
    path = tmp_path / "config.json"
    path.write_text('{"tickrate_ms": -5}', encoding="utf-8")

    result = run_cli(path, "version")
    assert result.exit_code == 1
    assert "tickrate_ms" in result.output


def test_board_add_and_ls(config_path):
    result = run_cli(config_path, "board", "add", "Groceries", "-d", "Weekly shop")
    assert result.exit_code == 0
    assert "Created board 1: Groceries" in result.output

    result = run_cli(config_path, "board", "ls")
    assert result.exit_code == 0
    assert "Groceries" in result.output
    assert "Total: 1 board(s)" in result.output

    result = run_cli(config_path, "board", "ls", "--json")
    data = json.loads(result.output)
    assert data[0]["name"] == "Groceries"
    assert data[0]["description"] == "Weekly shop"


def test_board_add_empty_name(config_path):
    result = run_cli(config_path, "board", "add", "  ")
    assert result.exit_code == 1
    assert "Board name cannot be empty" in result.output


def test_board_ls_empty(config_path):
    result = run_cli(config_path, "board", "ls")
    assert result.exit_code == 0
    assert "No boards found" in result.output


def test_card_add(config_path):
    board = service.create_board("Groceries")

    result = run_cli(
        config_path, "card", "add", str(board.id), "Buy milk",
        "--due", "2026-03-01", "--tags", "dairy,weekly", "--json",
    )
    assert result.exit_code == 0
    card = json.loads(result.output)
    assert card["name"] == "Buy milk"
    assert card["board_id"] == board.id
    assert card["tags"] == ["dairy", "weekly"]
    assert card["due_date"] == "2026-03-01"


def test_card_add_errors(config_path):
    result = run_cli(config_path, "card", "add", "99", "Buy milk")
    assert result.exit_code == 1
    assert "Board 99 not found" in result.output

    board = service.create_board("Groceries")
    result = run_cli(config_path, "card", "add", str(board.id), "Buy milk", "--due", "tomorrow")
    assert result.exit_code == 1
    assert "Invalid due date" in result.output


def test_palette(config_path):
    result = run_cli(config_path, "palette", "new")
    assert result.exit_code == 0
    assert "Commands" in result.output
    assert "New Board" in result.output
    assert "New Card" in result.output


def test_palette_json_finds_cards(config_path):
    board = service.create_board("Groceries")
    service.create_card(board.id, "Buy milk")

    result = run_cli(config_path, "palette", "milk", "--json")
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["cards"] == [{"name": "Buy milk", "board_id": board.id, "card_id": 1}]
    assert data["boards"] == []
    assert data["commands"]


def test_saves(config_path):
    result = run_cli(config_path, "saves")
    assert result.exit_code == 0
    assert "No saves found" in result.output

    save = service.save_local(service.list_boards())
    result = run_cli(config_path, "saves", "--json")
    assert result.exit_code == 0
    assert json.loads(result.output)[0]["name"] == save.name

    print("✓ CLI commands work correctly")
