"""
FILE: corkboard/nav/worker.py
PURPOSE: Executes IO intents on the worker thread via the service layer
EXPORTS:
  - IoWorker (callable: IoIntent -> IoResult)
DEPENDENCIES:
  - corkboard.core.service (board and card writes, saves, exports, reloads)
  - corkboard.config (save_config)
NOTES:
  - Returns results instead of touching App state; the App applies them on tick
  - Every write answers with a fresh list_boards() so the App never re-reads
    the database itself
  - Expected failures (bad save name, unwritable file) come back as ok=False
"""

import logging

from ..config import AppConfig, save_config
from ..core import service
from ..core.exceptions import CorkboardError
from .dispatch import IoEvent, IoIntent, IoResult

logger = logging.getLogger(__name__)


class IoWorker:
    def __init__(self, config: AppConfig):
        self.config = config

    def __call__(self, intent: IoIntent) -> IoResult:
        handlers = {
            IoEvent.SAVE_LOCAL_DATA: self._save_local,
            IoEvent.SAVE_CLOUD_DATA: self._save_cloud,
            IoEvent.LOAD_SAVE: self._load_save,
            IoEvent.RESET_VISIBLE_BOARDS: self._reset_boards,
            IoEvent.EXPORT_JSON: self._export_json,
            IoEvent.SAVE_CONFIG: self._save_config,
            IoEvent.CREATE_BOARD: self._create_board,
            IoEvent.CREATE_CARD: self._create_card,
            IoEvent.DELETE_CARD: self._delete_card,
            IoEvent.SET_CARD_STATUS: self._set_card_status,
            IoEvent.LIST_SAVES: self._list_saves,
        }
        try:
            return handlers[intent.event](intent)
        except (CorkboardError, OSError) as e:
            logger.error("%s failed: %s", intent.event, e)
            return IoResult(intent, ok=False, message=str(e))

    def _save_local(self, intent: IoIntent) -> IoResult:
        save = service.save_local(intent.payload or [])
        return IoResult(intent, ok=True, message=f"Saved as {save.name}")

    def _save_cloud(self, intent: IoIntent) -> IoResult:
        return IoResult(intent, ok=False, message="Cloud sync not configured")

    def _load_save(self, intent: IoIntent) -> IoResult:
        boards = service.load_save(intent.payload)
        return IoResult(intent, ok=True, message=f"Loaded {intent.payload}", boards=boards)

    def _reset_boards(self, intent: IoIntent) -> IoResult:
        boards = service.list_boards()
        return IoResult(intent, ok=True, message=f"Reloaded {len(boards)} boards", boards=boards)

    def _export_json(self, intent: IoIntent) -> IoResult:
        path = service.export_json(intent.payload or [], self.config.save_dir)
        return IoResult(intent, ok=True, message=f"Exported to {path}")

    def _save_config(self, intent: IoIntent) -> IoResult:
        path = save_config(intent.payload or self.config)
        return IoResult(intent, ok=True, message=f"Config saved to {path}")

    def _create_board(self, intent: IoIntent) -> IoResult:
        fields = intent.payload
        board = service.create_board(fields["name"], fields.get("description"))
        return IoResult(
            intent,
            ok=True,
            message=f"Created board '{board.name}'",
            boards=service.list_boards(),
            board_id=board.id,
        )

    def _create_card(self, intent: IoIntent) -> IoResult:
        fields = dict(intent.payload)
        board_id = fields.pop("board_id")
        card = service.create_card(board_id, **fields)
        return IoResult(
            intent,
            ok=True,
            message=f"Created card '{card.name}'",
            boards=service.list_boards(),
            board_id=board_id,
            card_id=card.id,
        )

    def _delete_card(self, intent: IoIntent) -> IoResult:
        card = intent.payload
        service.delete_card(card.id)
        return IoResult(
            intent,
            ok=True,
            message=f"Deleted card '{card.name}'",
            boards=service.list_boards(),
        )

    def _set_card_status(self, intent: IoIntent) -> IoResult:
        card, status = intent.payload
        service.set_card_status(card.id, status)
        return IoResult(
            intent,
            ok=True,
            message=f"'{card.name}' is now {status}",
            boards=service.list_boards(),
        )

    def _list_saves(self, intent: IoIntent) -> IoResult:
        saves = service.list_saves()
        return IoResult(intent, ok=True, saves=saves)
