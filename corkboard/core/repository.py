"""
FILE: corkboard/core/repository.py
PURPOSE: Database operations and SQLite connection management
EXPORTS:
  - get_connection() -> Connection
  - init_database(conn) -> None
  - create_board(name, description) -> Board
  - get_board(board_id) -> Board | None
  - list_boards() -> List[Board]
  - delete_board(board_id) -> None
  - create_card(board_id, name, description, due_date, tags) -> Card
  - get_card(card_id) -> Card | None
  - list_cards(board_id) -> List[Card]
  - update_card_status(card_id, status) -> Card
  - delete_card(card_id) -> None
  - create_save(name, payload) -> Save
  - list_saves() -> List[Save]
  - get_save_payload(name) -> list | None
  - restore_snapshot(boards) -> None
DEPENDENCIES:
  - sqlite3 (stdlib)
  - json (stdlib)
  - pathlib (stdlib)
  - datetime (stdlib)
  - corkboard.core.models (Board, Card, Save)
  - corkboard.core.exceptions (BoardNotFoundError, CardNotFoundError)
NOTES:
  - Database stored at ~/.corkboard/corkboard.db
  - Auto-creates directory and initializes schema on first connection
  - Returns domain objects (Board, Card, Save), never raw dicts
  - Opens a fresh connection per call, so the IO worker thread can use it too
"""

import json
import sqlite3
from pathlib import Path
from datetime import datetime
from typing import List, Optional

from .models import Board, Card, Save
from .exceptions import BoardNotFoundError, CardNotFoundError


# Database file location (cross-platform)
DB_DIR = Path.home() / ".corkboard"
DB_PATH = DB_DIR / "corkboard.db"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS boards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    description TEXT,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS cards (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    board_id INTEGER NOT NULL REFERENCES boards(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    description TEXT,
    status TEXT NOT NULL DEFAULT 'active',
    due_date TEXT,
    tags TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS saves (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    payload TEXT NOT NULL,
    created_at TEXT
);
"""


def get_connection() -> sqlite3.Connection:
    """
    Get SQLite connection to the Corkboard database.

    Creates ~/.corkboard directory if it doesn't exist.
    Enables row_factory for dict-like row access.
    Enables foreign key constraints.
    Initializes database schema on first connection.
    """
    DB_DIR.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(DB_PATH)
    conn.row_factory = sqlite3.Row

    # Required for ON DELETE CASCADE on cards
    conn.execute("PRAGMA foreign_keys = ON")

    init_database(conn)

    return conn


def init_database(conn: sqlite3.Connection) -> None:
    """
    Initialize database schema if tables don't exist.

    Safe to call multiple times (uses CREATE TABLE IF NOT EXISTS).
    """
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='saves'"
    )
    if cursor.fetchone() is None:
        conn.executescript(SCHEMA_SQL)
        conn.commit()


# --- Boards ---


def create_board(name: str, description: Optional[str] = None) -> Board:
    """Create a new board and return it."""
    conn = get_connection()
    now = datetime.now().isoformat()

    cursor = conn.execute(
        "INSERT INTO boards (name, description, created_at) VALUES (?, ?, ?)",
        (name, description, now),
    )
    conn.commit()

    board = get_board(cursor.lastrowid)
    if not board:
        raise BoardNotFoundError(cursor.lastrowid)
    return board


def get_board(board_id: int) -> Optional[Board]:
    """
    Fetch single board by ID (without cards).

    Returns:
        Board object if found, None otherwise
    """
    conn = get_connection()
    row = conn.execute("SELECT * FROM boards WHERE id = ?", (board_id,)).fetchone()

    return Board.from_row(row) if row else None


def list_boards() -> List[Board]:
    """List all boards in creation order (without cards)."""
    conn = get_connection()
    rows = conn.execute("SELECT * FROM boards ORDER BY id ASC").fetchall()

    return [Board.from_row(row) for row in rows]


def delete_board(board_id: int) -> None:
    """
    Delete board and (via cascade) its cards.

    Raises:
        BoardNotFoundError: If board doesn't exist
    """
    if not get_board(board_id):
        raise BoardNotFoundError(board_id)

    conn = get_connection()
    conn.execute("DELETE FROM boards WHERE id = ?", (board_id,))
    conn.commit()


# --- Cards ---


def create_card(
    board_id: int,
    name: str,
    description: Optional[str] = None,
    due_date: Optional[str] = None,
    tags: Optional[List[str]] = None,
) -> Card:
    """
    Create a new card on a board.

    Note:
        Card starts with status='active'. Sets created_at and updated_at.
    """
    conn = get_connection()
    now = datetime.now().isoformat()

    cursor = conn.execute(
        """
        INSERT INTO cards (board_id, name, description, status, due_date, tags, created_at, updated_at)
        VALUES (?, ?, ?, 'active', ?, ?, ?, ?)
        """,
        (board_id, name, description, due_date, ",".join(tags or []), now, now),
    )
    conn.commit()

    card = get_card(cursor.lastrowid)
    if not card:
        raise CardNotFoundError(cursor.lastrowid)
    return card


def get_card(card_id: int) -> Optional[Card]:
    """Fetch single card by ID, or None."""
    conn = get_connection()
    row = conn.execute("SELECT * FROM cards WHERE id = ?", (card_id,)).fetchone()

    return Card.from_row(row) if row else None


def list_cards(board_id: Optional[int] = None) -> List[Card]:
    """List cards in creation order, optionally restricted to one board."""
    conn = get_connection()
    if board_id is None:
        rows = conn.execute("SELECT * FROM cards ORDER BY id ASC").fetchall()
    else:
        rows = conn.execute(
            "SELECT * FROM cards WHERE board_id = ? ORDER BY id ASC",
            (board_id,)
        ).fetchall()

    return [Card.from_row(row) for row in rows]


def update_card_status(card_id: int, status: str) -> Card:
    """
    Update a card's status.

    Raises:
        CardNotFoundError: If card doesn't exist
    """
    if not get_card(card_id):
        raise CardNotFoundError(card_id)

    conn = get_connection()
    now = datetime.now().isoformat()
    conn.execute(
        "UPDATE cards SET status = ?, updated_at = ? WHERE id = ?",
        (status, now, card_id),
    )
    conn.commit()

    return get_card(card_id)


def delete_card(card_id: int) -> None:
    """
    Delete card by ID.

    Raises:
        CardNotFoundError: If card doesn't exist
    """
    if not get_card(card_id):
        raise CardNotFoundError(card_id)

    conn = get_connection()
    conn.execute("DELETE FROM cards WHERE id = ?", (card_id,))
    conn.commit()


# --- Saves ---


def create_save(name: str, payload: list) -> Save:
    """Store a snapshot (list of board dicts) under a unique name."""
    conn = get_connection()
    now = datetime.now().isoformat()

    cursor = conn.execute(
        "INSERT INTO saves (name, payload, created_at) VALUES (?, ?, ?)",
        (name, json.dumps(payload), now),
    )
    conn.commit()

    row = conn.execute("SELECT * FROM saves WHERE id = ?", (cursor.lastrowid,)).fetchone()
    return Save.from_row(row)


def list_saves() -> List[Save]:
    """List saves, newest first."""
    conn = get_connection()
    rows = conn.execute("SELECT * FROM saves ORDER BY id DESC").fetchall()

    return [Save.from_row(row) for row in rows]


def get_save_payload(name: str) -> Optional[list]:
    """Return the stored snapshot for a save name, or None."""
    conn = get_connection()
    row = conn.execute("SELECT payload FROM saves WHERE name = ?", (name,)).fetchone()

    return json.loads(row["payload"]) if row else None


def restore_snapshot(boards: List[Board]) -> None:
    """
    Replace every board and card with the given snapshot.

    IDs are preserved so that card/board lookups stay stable across a reload.
    """
    conn = get_connection()
    with conn:
        conn.execute("DELETE FROM cards")
        conn.execute("DELETE FROM boards")
        for board in boards:
            conn.execute(
                "INSERT INTO boards (id, name, description, created_at) VALUES (?, ?, ?, ?)",
                (board.id, board.name, board.description, board.created_at),
            )
            for card in board.cards:
                conn.execute(
                    """
                    INSERT INTO cards (id, board_id, name, description, status, due_date, tags, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        card.id,
                        board.id,
                        card.name,
                        card.description,
                        card.status,
                        card.due_date,
                        ",".join(card.tags),
                        card.created_at,
                        card.updated_at,
                    ),
                )
