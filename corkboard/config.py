"""
FILE: corkboard/config.py
PURPOSE: User configuration - load/save JSON and build the keybinding table
EXPORTS:
  - CONFIG_PATH
  - AppConfig (dataclass)
  - load_config(path) -> AppConfig
  - save_config(config, path) -> Path
  - build_binding_table(config) -> KeyBindingTable
DEPENDENCIES:
  - corkboard.nav (Action, KeyBindingTable, UiMode)
  - corkboard.core.exceptions (ConfigError)
NOTES:
  - A missing file means defaults; unknown keys are ignored
  - Actions missing from "keybindings" keep their default chords
  - Chord parse errors and conflicts propagate from build_binding_table()
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .core import repository
from .core.constants import DEFAULT_TICKRATE_MS, PALETTE_DEFAULT_ROW_BUDGET
from .core.exceptions import ConfigError
from .nav.actions import Action
from .nav.bindings import KeyBindingTable
from .nav.modes import UiMode

CONFIG_DIR = Path.home() / ".corkboard"
CONFIG_PATH = CONFIG_DIR / "config.json"


def _default_keybindings() -> Dict[str, List[str]]:
    return {action.name.lower(): list(action.default_keys) for action in Action}


@dataclass
class AppConfig:
    db_path: Optional[Path] = None  # None keeps the repository default
    save_dir: Path = CONFIG_DIR / "exports"
    default_view: UiMode = UiMode.TITLE_HELP_LOG
    tickrate_ms: int = DEFAULT_TICKRATE_MS
    palette_row_budget: int = PALETTE_DEFAULT_ROW_BUDGET
    keybindings: Dict[str, List[str]] = field(default_factory=_default_keybindings)
    path: Optional[Path] = field(default=None, compare=False)

    def to_rows(self) -> List[Tuple[str, str]]:
        """Rows shown on the Config screen, in display order."""
        return [
            ("Database path", str(self.db_path or repository.DB_PATH)),
            ("Default view", self.default_view.label),
            ("Tickrate", f"{self.tickrate_ms} ms"),
            ("Palette rows", str(self.palette_row_budget)),
            ("Edit keybindings", ""),
        ]

    def to_dict(self) -> dict:
        return {
            "db_path": str(self.db_path) if self.db_path else None,
            "save_dir": str(self.save_dir),
            "default_view": self.default_view.name.lower(),
            "tickrate_ms": self.tickrate_ms,
            "palette_row_budget": self.palette_row_budget,
            "keybindings": self.keybindings,
        }


def _positive_int(data: dict, key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ConfigError(f"'{key}' must be a positive integer, got {value!r}")
    return value


def _keybindings(data: dict) -> Dict[str, List[str]]:
    raw = data.get("keybindings", {})
    if not isinstance(raw, dict):
        raise ConfigError("'keybindings' must be an object of action -> [chords]")

    merged = _default_keybindings()
    for name, chords in raw.items():
        try:
            action = Action.from_name(name)
        except KeyError:
            raise ConfigError(f"Unknown action '{name}' in keybindings")
        if isinstance(chords, str):
            chords = [chords]
        if not isinstance(chords, list) or not all(isinstance(c, str) for c in chords):
            raise ConfigError(f"Keybindings for '{name}' must be a list of strings")
        merged[action.name.lower()] = chords
    return merged


def load_config(path: Optional[Path] = None) -> AppConfig:
    """
    Read configuration from JSON.

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values
    """
    path = Path(path) if path else CONFIG_PATH
    if not path.exists():
        return AppConfig(path=path)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read {path}: {e}")
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a JSON object")

    defaults = AppConfig()
    try:
        default_view = UiMode.from_name(data.get("default_view", defaults.default_view.name))
    except KeyError:
        raise ConfigError(f"Unknown default_view {data.get('default_view')!r}")
    if not default_view.is_view:
        raise ConfigError(f"default_view must be a view mode, got {default_view}")

    return AppConfig(
        db_path=Path(data["db_path"]).expanduser() if data.get("db_path") else None,
        save_dir=Path(data.get("save_dir", defaults.save_dir)).expanduser(),
        default_view=default_view,
        tickrate_ms=_positive_int(data, "tickrate_ms", defaults.tickrate_ms),
        palette_row_budget=_positive_int(data, "palette_row_budget", defaults.palette_row_budget),
        keybindings=_keybindings(data),
        path=path,
    )


def save_config(config: AppConfig, path: Optional[Path] = None) -> Path:
    path = Path(path or config.path or CONFIG_PATH)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    return path


def build_binding_table(config: AppConfig) -> KeyBindingTable:
    """
    Parse every chord in config.keybindings into a validated table.

    Raises:
        InvalidKeyChordError: On unparsable chord text
        KeyBindingConflictError: If chords collide (lists every conflict)
    """
    return KeyBindingTable.build(
        {Action.from_name(name): chords for name, chords in config.keybindings.items()}
    )
