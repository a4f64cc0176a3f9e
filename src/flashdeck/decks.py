"""Deck management."""
import logging
from datetime import datetime
from typing import Optional

from flashdeck.db import get_connection, to_timestamp
from flashdeck.models import Deck
from flashdeck.scheduler import utc_now

logger = logging.getLogger(__name__)

DECK_SUMMARY_QUERY = """SELECT d.*,
    COUNT(f.id) AS total_cards,
    COALESCE(SUM(CASE WHEN f.id IS NOT NULL
        AND (f.next_review IS NULL OR f.next_review <= ?) THEN 1 ELSE 0 END), 0) AS due_cards,
    MAX(f.last_reviewed) AS last_reviewed
FROM decks d
LEFT JOIN flashcards f ON f.deck_id = d.id"""


class DeckNotFoundError(LookupError):
    pass


def add_deck(db_path: str, title: str, description: str = "", now: Optional[datetime] = None) -> int:
    title = title.strip()
    if not title:
        raise ValueError("Deck title cannot be empty")
    created_at = to_timestamp(now or utc_now())
    conn = get_connection(db_path)
    cursor = conn.execute(
        "INSERT INTO decks (title, description, created_at) VALUES (?, ?, ?)",
        (title, description, created_at),
    )
    conn.commit()
    conn.close()
    logger.info("Created deck %d (%s)", cursor.lastrowid, title)
    return cursor.lastrowid


def get_deck(db_path: str, deck_id: int, now: Optional[datetime] = None) -> Deck:
    conn = get_connection(db_path)
    row = conn.execute(
        DECK_SUMMARY_QUERY + " WHERE d.id = ? GROUP BY d.id",
        (to_timestamp(now or utc_now()), deck_id),
    ).fetchone()
    conn.close()
    if row is None:
        raise DeckNotFoundError(f"Deck {deck_id} not found")
    return Deck.from_row(row)


def list_decks(db_path: str, now: Optional[datetime] = None) -> list[Deck]:
    """All decks with card totals and how many cards are due at `now`."""
    conn = get_connection(db_path)
    rows = conn.execute(
        DECK_SUMMARY_QUERY + " GROUP BY d.id ORDER BY d.id",
        (to_timestamp(now or utc_now()),),
    ).fetchall()
    conn.close()
    return [Deck.from_row(r) for r in rows]


def update_deck(
    db_path: str,
    deck_id: int,
    title: Optional[str] = None,
    description: Optional[str] = None,
) -> None:
    updates = {}
    if title is not None:
        if not title.strip():
            raise ValueError("Deck title cannot be empty")
        updates["title"] = title.strip()
    if description is not None:
        updates["description"] = description
    conn = get_connection(db_path)
    exists = conn.execute("SELECT 1 FROM decks WHERE id = ?", (deck_id,)).fetchone()
    if exists is None:
        conn.close()
        raise DeckNotFoundError(f"Deck {deck_id} not found")
    if updates:
        assignments = ", ".join(f"{column} = ?" for column in updates)
        conn.execute(
            f"UPDATE decks SET {assignments} WHERE id = ?",
            (*updates.values(), deck_id),
        )
        conn.commit()
    conn.close()


def delete_deck(db_path: str, deck_id: int) -> None:
    """Delete a deck together with its cards and their review history."""
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM decks WHERE id = ?", (deck_id,))
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        raise DeckNotFoundError(f"Deck {deck_id} not found")
    logger.info("Deleted deck %d", deck_id)
