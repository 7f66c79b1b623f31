"""
FILE: corkboard/core/service.py
PURPOSE: Business logic layer for boards, cards and local saves
EXPORTS:
  - clean_board_fields(name, description) -> dict   (validation only, no IO)
  - create_board(name, description) -> Board
  - list_boards() -> List[Board]            (boards with their cards attached)
  - find_board(boards, board_id) -> Optional[Board]
  - find_card(board, card_id) -> Optional[Card]
  - clean_card_fields(name, description, due_date, tags) -> dict
  - create_card(board_id, name, description, due_date, tags) -> Card
  - delete_card(card_id) -> None
  - set_card_status(card_id, status) -> Card
  - rank_cards(query, boards) -> List[SearchHit]
  - rank_boards(query, boards) -> List[SearchHit]
  - snapshot(boards) -> list
  - save_local(boards) -> Save
  - load_save(name) -> List[Board]
  - list_saves() -> List[Save]
  - export_json(boards, directory) -> Path
DEPENDENCIES:
  - corkboard.core.repository (all CRUD functions)
  - corkboard.core.models (Board, Card, Save, SearchHit)
  - corkboard.core.exceptions
  - difflib (similarity scoring for titles)
NOTES:
  - All functions validate input and raise descriptive errors
  - No direct database access (use repository layer)
  - Ranking puts substring matches first (earlier match ranks higher),
    then fuzzy matches above the similarity floor; ties keep board/card order
"""

import json
from datetime import datetime
from difflib import SequenceMatcher
from pathlib import Path
from typing import List, Optional

from . import repository
from .constants import CARD_STATUSES, SAVE_NAME_PREFIX, EXPORT_NAME_PREFIX
from .models import Board, Card, Save, SearchHit
from .exceptions import BoardNotFoundError, InvalidInputError


# Titles less similar than this are left out of the ranking entirely
SIMILARITY_FLOOR = 0.4


def clean_board_fields(name: str, description: Optional[str] = None) -> dict:
    """
    Validate board fields without touching the database.

    Raises:
        InvalidInputError: If name is empty or whitespace-only
    """
    name = name.strip()
    if not name:
        raise InvalidInputError("Board name cannot be empty")

    description_value = description.strip() if description else None
    return {"name": name, "description": description_value or None}


def create_board(name: str, description: Optional[str] = None) -> Board:
    """
    Create a new board with validation.

    Raises:
        InvalidInputError: If name is empty or whitespace-only
    """
    fields = clean_board_fields(name, description)
    return repository.create_board(fields["name"], fields["description"])


def list_boards() -> List[Board]:
    """Return every board with its cards attached, in creation order."""
    boards = repository.list_boards()
    cards = repository.list_cards()
    by_board = {board.id: board for board in boards}
    for card in cards:
        board = by_board.get(card.board_id)
        if board:
            board.cards.append(card)
    return boards


def find_board(boards: List[Board], board_id: Optional[int]) -> Optional[Board]:
    """Look a board up by ID in an already-loaded list."""
    if board_id is None:
        return None
    return next((b for b in boards if b.id == board_id), None)


def find_card(board: Optional[Board], card_id: Optional[int]) -> Optional[Card]:
    """Look a card up by ID on an already-loaded board."""
    if board is None or card_id is None:
        return None
    return next((c for c in board.cards if c.id == card_id), None)


def clean_card_fields(
    name: str,
    description: Optional[str] = None,
    due_date: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> dict:
    """
    Validate card fields without touching the database.

    Raises:
        InvalidInputError: If name is empty or due_date is not YYYY-MM-DD
    """
    name = name.strip()
    if not name:
        raise InvalidInputError("Card name cannot be empty")

    due_date = due_date.strip() if due_date else None
    if due_date:
        try:
            datetime.strptime(due_date, "%Y-%m-%d")
        except ValueError:
            raise InvalidInputError(f"Invalid due date '{due_date}'. Use YYYY-MM-DD")

    description_value = description.strip() if description else None
    return {
        "name": name,
        "description": description_value or None,
        "due_date": due_date,
        "tags": [t.strip() for t in (tags or []) if t.strip()],
    }


def create_card(
    board_id: int,
    name: str,
    description: Optional[str] = None,
    due_date: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> Card:
    """
    Create a new card with validation.

    Raises:
        BoardNotFoundError: If the board doesn't exist
        InvalidInputError: If name is empty or due_date is not YYYY-MM-DD
    """
    fields = clean_card_fields(name, description, due_date, tags)

    if not repository.get_board(board_id):
        raise BoardNotFoundError(board_id)

    return repository.create_card(
        board_id,
        fields["name"],
        description=fields["description"],
        due_date=fields["due_date"],
        tags=fields["tags"],
    )


def delete_card(card_id: int) -> None:
    """Delete a card. Raises CardNotFoundError if it doesn't exist."""
    repository.delete_card(card_id)


def set_card_status(card_id: int, status: str) -> Card:
    """
    Change a card's status.

    Raises:
        InvalidInputError: If status is not one of CARD_STATUSES
        CardNotFoundError: If card doesn't exist
    """
    if status not in CARD_STATUSES:
        raise InvalidInputError(
            f"Invalid status '{status}'. Must be one of: {', '.join(CARD_STATUSES)}"
        )
    return repository.update_card_status(card_id, status)


def _title_score(query: str, title: str) -> float:
    """
    Score a title against a lowercase query.

    Substring matches score in (0.5, 1.0], earlier positions higher.
    Other titles score their similarity ratio halved, or 0 below the floor.
    """
    title = title.lower()
    position = title.find(query)
    if position >= 0:
        return 1.0 - 0.5 * position / (len(title) + 1)

    ratio = SequenceMatcher(None, query, title).ratio()
    if ratio < SIMILARITY_FLOOR:
        return 0.0
    return ratio / 2


def _rank(hits: List[SearchHit]) -> List[SearchHit]:
    # sorted() is stable, so equal scores keep board/card order
    return sorted((h for h in hits if h.score > 0), key=lambda h: h.score, reverse=True)


def rank_cards(query: str, boards: List[Board]) -> List[SearchHit]:
    """Rank every card name against the query (case-insensitive)."""
    query = query.strip().lower()
    if not query:
        return []
    hits = [
        SearchHit(card.name, board.id, card.id, _title_score(query, card.name))
        for board in boards
        for card in board.cards
    ]
    return _rank(hits)


def rank_boards(query: str, boards: List[Board]) -> List[SearchHit]:
    """Rank every board name against the query (case-insensitive)."""
    query = query.strip().lower()
    if not query:
        return []
    hits = [SearchHit(board.name, board.id, None, _title_score(query, board.name)) for board in boards]
    return _rank(hits)


def snapshot(boards: List[Board]) -> list:
    """Plain-data copy of boards and cards, suitable for JSON."""
    return [board.to_dict() for board in boards]


def _next_save_name() -> str:
    today = datetime.now().strftime("%Y-%m-%d")
    prefix = f"{SAVE_NAME_PREFIX}_{today}_v"
    versions = [
        int(save.name[len(prefix):])
        for save in repository.list_saves()
        if save.name.startswith(prefix) and save.name[len(prefix):].isdigit()
    ]
    return f"{prefix}{max(versions, default=0) + 1}"


def save_local(boards: List[Board]) -> Save:
    """Store the current boards as a new versioned local save."""
    return repository.create_save(_next_save_name(), snapshot(boards))


def list_saves() -> List[Save]:
    return repository.list_saves()


def load_save(name: str) -> List[Board]:
    """
    Restore a save into the database and return the restored boards.

    Raises:
        InvalidInputError: If no save has that name
    """
    payload = repository.get_save_payload(name)
    if payload is None:
        raise InvalidInputError(f"Save '{name}' not found")

    boards = [Board.from_dict(data) for data in payload]
    repository.restore_snapshot(boards)
    return list_boards()


def export_json(boards: List[Board], directory: Path) -> Path:
    """Write all boards to a timestamped JSON file in directory and return its path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = directory / f"{EXPORT_NAME_PREFIX}_{stamp}.json"
    path.write_text(json.dumps({"boards": snapshot(boards)}, indent=2), encoding="utf-8")
    return path
