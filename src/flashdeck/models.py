"""Data classes for decks, flashcards and notes."""
import json
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from flashdeck.db import from_timestamp
from flashdeck.scheduler import DEFAULT_EASE, DEFAULT_INTERVAL, as_utc


@dataclass
class Deck:
    id: int
    title: str
    description: str = ""
    created_at: Optional[datetime] = None
    total_cards: int = 0
    due_cards: int = 0
    last_reviewed: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Deck":
        keys = row.keys()
        return cls(
            id=row["id"],
            title=row["title"],
            description=row["description"] or "",
            created_at=from_timestamp(row["created_at"]),
            total_cards=row["total_cards"] if "total_cards" in keys else 0,
            due_cards=row["due_cards"] if "due_cards" in keys else 0,
            last_reviewed=from_timestamp(row["last_reviewed"]) if "last_reviewed" in keys else None,
        )


@dataclass
class Flashcard:
    id: int
    deck_id: int
    front: str
    back: str
    tags: list[str] = field(default_factory=list)
    created_at: Optional[datetime] = None
    last_reviewed: Optional[datetime] = None
    next_review: Optional[datetime] = None
    interval: int = DEFAULT_INTERVAL
    ease: float = DEFAULT_EASE

    def is_due(self, now: datetime) -> bool:
        """A card is due when it was never scheduled or its review date has passed."""
        return self.next_review is None or self.next_review <= as_utc(now)

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Flashcard":
        return cls(
            id=row["id"],
            deck_id=row["deck_id"],
            front=row["front"],
            back=row["back"],
            tags=json.loads(row["tags"] or "[]"),
            created_at=from_timestamp(row["created_at"]),
            last_reviewed=from_timestamp(row["last_reviewed"]),
            next_review=from_timestamp(row["next_review"]),
            interval=row["interval"],
            ease=row["ease"],
        )


@dataclass
class Note:
    id: int
    title: str
    content: str = ""
    tags: list[str] = field(default_factory=list)
    folder: str = "Uncategorized"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "Note":
        return cls(
            id=row["id"],
            title=row["title"],
            content=row["content"] or "",
            tags=json.loads(row["tags"] or "[]"),
            folder=row["folder"],
            created_at=from_timestamp(row["created_at"]),
            updated_at=from_timestamp(row["updated_at"]),
        )
