"""Flashcard storage and review recording."""
import json
import logging
from datetime import datetime
from typing import Optional

from flashdeck.db import get_connection, to_timestamp
from flashdeck.decks import DeckNotFoundError
from flashdeck.models import Flashcard
from flashdeck.scheduler import (
    DEFAULT_EASE, DEFAULT_INTERVAL, Difficulty, ReviewResult, compute_next_review, utc_now,
)

logger = logging.getLogger(__name__)


class CardNotFoundError(LookupError):
    pass


def _clean_face(name: str, text: str) -> str:
    if not text or not text.strip():
        raise ValueError(f"Card {name} cannot be empty")
    return text.strip()


def add_flashcard(
    db_path: str,
    deck_id: int,
    front: str,
    back: str,
    tags: Optional[list[str]] = None,
    now: Optional[datetime] = None,
) -> int:
    """Create a card. New cards have no review date, so they are due immediately."""
    front = _clean_face("front", front)
    back = _clean_face("back", back)
    conn = get_connection(db_path)
    if conn.execute("SELECT 1 FROM decks WHERE id = ?", (deck_id,)).fetchone() is None:
        conn.close()
        raise DeckNotFoundError(f"Deck {deck_id} not found")
    cursor = conn.execute(
        """INSERT INTO flashcards (deck_id, front, back, tags, created_at, interval, ease)
        VALUES (?, ?, ?, ?, ?, ?, ?)""",
        (deck_id, front, back, json.dumps(tags or []), to_timestamp(now or utc_now()),
         DEFAULT_INTERVAL, DEFAULT_EASE),
    )
    conn.commit()
    conn.close()
    logger.info("Added card %d to deck %d", cursor.lastrowid, deck_id)
    return cursor.lastrowid


def get_flashcard(db_path: str, card_id: int) -> Flashcard:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM flashcards WHERE id = ?", (card_id,)).fetchone()
    conn.close()
    if row is None:
        raise CardNotFoundError(f"Card {card_id} not found")
    return Flashcard.from_row(row)


def update_flashcard(
    db_path: str,
    card_id: int,
    front: Optional[str] = None,
    back: Optional[str] = None,
    tags: Optional[list[str]] = None,
) -> None:
    """Edit card content. Scheduling state is left untouched."""
    updates = {}
    if front is not None:
        updates["front"] = _clean_face("front", front)
    if back is not None:
        updates["back"] = _clean_face("back", back)
    if tags is not None:
        updates["tags"] = json.dumps(tags)
    conn = get_connection(db_path)
    if conn.execute("SELECT 1 FROM flashcards WHERE id = ?", (card_id,)).fetchone() is None:
        conn.close()
        raise CardNotFoundError(f"Card {card_id} not found")
    if updates:
        assignments = ", ".join(f"{column} = ?" for column in updates)
        conn.execute(
            f"UPDATE flashcards SET {assignments} WHERE id = ?",
            (*updates.values(), card_id),
        )
        conn.commit()
    conn.close()


def delete_flashcard(db_path: str, card_id: int) -> None:
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM flashcards WHERE id = ?", (card_id,))
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        raise CardNotFoundError(f"Card {card_id} not found")
    logger.info("Deleted card %d", card_id)


def get_flashcards_by_deck(db_path: str, deck_id: int) -> list[Flashcard]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM flashcards WHERE deck_id = ? ORDER BY id", (deck_id,)
    ).fetchall()
    conn.close()
    return [Flashcard.from_row(r) for r in rows]


def get_due_cards(
    db_path: str,
    deck_id: Optional[int] = None,
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> list[Flashcard]:
    """Cards never reviewed or whose next review is at or before `now`.

    Never-reviewed cards come first, then the most overdue.
    """
    query = "SELECT * FROM flashcards WHERE (next_review IS NULL OR next_review <= ?)"
    params: list = [to_timestamp(now or utc_now())]
    if deck_id is not None:
        query += " AND deck_id = ?"
        params.append(deck_id)
    query += " ORDER BY next_review ASC NULLS FIRST, id ASC"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)
    conn = get_connection(db_path)
    rows = conn.execute(query, params).fetchall()
    conn.close()
    return [Flashcard.from_row(r) for r in rows]


def record_review(
    db_path: str,
    card_id: int,
    difficulty,
    now: Optional[datetime] = None,
) -> ReviewResult:
    """Schedule a card after a review and persist the outcome.

    `now` is captured once and used both as the card's last_reviewed stamp
    and as the base of its next_review date.
    """
    rating = Difficulty.parse(difficulty)
    now = now or utc_now()
    conn = get_connection(db_path)
    card = conn.execute(
        "SELECT interval, ease FROM flashcards WHERE id = ?", (card_id,)
    ).fetchone()
    if card is None:
        conn.close()
        raise CardNotFoundError(f"Card {card_id} not found")
    result = compute_next_review(
        rating,
        current_interval=card["interval"],
        current_ease=card["ease"],
        now=now,
    )
    reviewed_at = to_timestamp(now)
    conn.execute(
        """UPDATE flashcards SET interval=?, ease=?, next_review=?, last_reviewed=?
        WHERE id=?""",
        (result.interval, result.ease, to_timestamp(result.next_review), reviewed_at, card_id),
    )
    conn.execute(
        """INSERT INTO review_log (flashcard_id, difficulty, interval, ease, reviewed_at)
        VALUES (?, ?, ?, ?, ?)""",
        (card_id, rating.value, result.interval, result.ease, reviewed_at),
    )
    conn.commit()
    conn.close()
    logger.info(
        "Reviewed card %d as %s; next review in %d day(s)",
        card_id, rating.value, result.interval,
    )
    return result


def get_review_history(db_path: str, card_id: int) -> list[dict]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM review_log WHERE flashcard_id = ? ORDER BY id", (card_id,)
    ).fetchall()
    conn.close()
    return [
        {
            "difficulty": r["difficulty"],
            "interval": r["interval"],
            "ease": r["ease"],
            "reviewed_at": r["reviewed_at"],
        }
        for r in rows
    ]
