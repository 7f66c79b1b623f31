"""
FILE: corkboard/core/models.py
PURPOSE: Domain models for boards, cards and local saves
EXPORTS:
  - Card (dataclass)
  - Board (dataclass)
  - Save (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - json (stdlib)
  - typing (stdlib)
NOTES:
  - All models have from_row() for SQLite row conversion
  - Card and Board have to_dict()/from_dict() for snapshots and JSON export
  - Tags are stored as a comma-separated string in SQLite
  - Timestamps stored as ISO-8601 strings
"""

from dataclasses import dataclass, asdict, field
from typing import List, Optional
import json


@dataclass
class Card:
    """A card on a board."""

    id: int
    board_id: int
    name: str
    description: Optional[str] = None
    status: str = "active"
    due_date: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Card":
        """Convert SQLite row to Card object."""
        tags = row["tags"] or ""
        return cls(
            id=row["id"],
            board_id=row["board_id"],
            name=row["name"],
            description=row["description"],
            status=row["status"],
            due_date=row["due_date"],
            tags=[t for t in tags.split(",") if t],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Card":
        return cls(**data)

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize card to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class Board:
    """A board holding an ordered list of cards."""

    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[str] = None
    cards: List[Card] = field(default_factory=list)

    @classmethod
    def from_row(cls, row) -> "Board":
        """Convert SQLite row to Board object (cards are attached by the service)."""
        return cls(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            created_at=row["created_at"],
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Board":
        data = dict(data)
        cards = [Card.from_dict(c) for c in data.pop("cards", [])]
        return cls(cards=cards, **data)

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        """Serialize board (with cards) to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class Save:
    """A named local snapshot of every board."""

    id: int
    name: str
    created_at: Optional[str] = None

    @classmethod
    def from_row(cls, row) -> "Save":
        return cls(id=row["id"], name=row["name"], created_at=row["created_at"])


@dataclass(frozen=True)
class SearchHit:
    """A ranked card or board title, as consumed by the command palette."""

    label: str
    board_id: int
    card_id: Optional[int] = None
    score: float = 0.0
