"""Seed the database with the bundled sample deck and notes."""
import json
from pathlib import Path

from flashdeck.db import get_connection
from flashdeck.decks import add_deck
from flashdeck.flashcards import add_flashcard
from flashdeck.notes import add_note

CONTENT_DIR = Path(__file__).parent / "content"


def is_seeded(db_path: str) -> bool:
    """Check whether any deck exists yet."""
    conn = get_connection(db_path)
    count = conn.execute("SELECT COUNT(*) FROM decks").fetchone()[0]
    conn.close()
    return count > 0


def seed_sample_deck(db_path: str) -> int:
    """Insert the sample deck from sample_deck.json and return its id."""
    data = json.loads((CONTENT_DIR / "sample_deck.json").read_text())
    deck_id = add_deck(db_path, data["title"], data["description"])
    for card in data["cards"]:
        add_flashcard(db_path, deck_id, card["front"], card["back"], tags=card["tags"])
    return deck_id


def seed_sample_notes(db_path: str) -> int:
    """Insert the notes from sample_notes.json. Returns how many were added."""
    data = json.loads((CONTENT_DIR / "sample_notes.json").read_text())
    for note in data["notes"]:
        add_note(db_path, note["title"], note["content"], tags=note["tags"], folder=note["folder"])
    return len(data["notes"])


def seed_all(db_path: str) -> None:
    """Seed everything if the database is empty."""
    if is_seeded(db_path):
        return
    seed_sample_deck(db_path)
    seed_sample_notes(db_path)
