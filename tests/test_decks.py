# tests/test_decks.py
from datetime import timedelta

import pytest

from flashdeck.db import init_db, get_connection
from flashdeck.decks import (
    DeckNotFoundError, add_deck, delete_deck, get_deck, list_decks, update_deck,
)
from flashdeck.flashcards import add_flashcard, record_review
from flashdeck.scheduler import Difficulty


def test_add_and_get_deck(tmp_db, now):
    init_db(tmp_db)
    deck_id = add_deck(tmp_db, "  Spanish  ", "Verbs", now=now)
    deck = get_deck(tmp_db, deck_id, now=now)
    assert deck.title == "Spanish"
    assert deck.description == "Verbs"
    assert deck.created_at == now
    assert deck.total_cards == 0
    assert deck.last_reviewed is None


def test_add_deck_empty_title(tmp_db):
    init_db(tmp_db)
    with pytest.raises(ValueError):
        add_deck(tmp_db, "   ")


def test_get_deck_missing(tmp_db):
    init_db(tmp_db)
    with pytest.raises(DeckNotFoundError):
        get_deck(tmp_db, 42)


def test_list_decks_counts_due_cards(tmp_db, now):
    init_db(tmp_db)
    deck_id = add_deck(tmp_db, "Spanish")
    empty_id = add_deck(tmp_db, "Empty")
    first = add_flashcard(tmp_db, deck_id, "hola", "hello")
    add_flashcard(tmp_db, deck_id, "adios", "goodbye")
    record_review(tmp_db, first, Difficulty.GOOD, now=now)

    decks = {d.id: d for d in list_decks(tmp_db, now=now)}
    assert decks[deck_id].total_cards == 2
    assert decks[deck_id].due_cards == 1  # reviewed card is scheduled 2 days out
    assert decks[deck_id].last_reviewed == now
    assert decks[empty_id].total_cards == 0
    assert decks[empty_id].due_cards == 0

    later = {d.id: d for d in list_decks(tmp_db, now=now + timedelta(days=2))}
    assert later[deck_id].due_cards == 2


def test_update_deck(tmp_db):
    init_db(tmp_db)
    deck_id = add_deck(tmp_db, "Spanish")
    update_deck(tmp_db, deck_id, title="Español", description="All of it")
    deck = get_deck(tmp_db, deck_id)
    assert deck.title == "Español"
    assert deck.description == "All of it"


def test_update_deck_partial(tmp_db):
    init_db(tmp_db)
    deck_id = add_deck(tmp_db, "Spanish", "Verbs")
    update_deck(tmp_db, deck_id, description="Nouns")
    deck = get_deck(tmp_db, deck_id)
    assert deck.title == "Spanish"
    assert deck.description == "Nouns"


def test_update_deck_missing(tmp_db):
    init_db(tmp_db)
    with pytest.raises(DeckNotFoundError):
        update_deck(tmp_db, 99, title="x")


def test_delete_deck_removes_cards(tmp_db, now):
    init_db(tmp_db)
    deck_id = add_deck(tmp_db, "Spanish")
    card_id = add_flashcard(tmp_db, deck_id, "hola", "hello")
    record_review(tmp_db, card_id, Difficulty.AGAIN, now=now)
    delete_deck(tmp_db, deck_id)
    conn = get_connection(tmp_db)
    assert conn.execute("SELECT COUNT(*) FROM flashcards").fetchone()[0] == 0
    assert conn.execute("SELECT COUNT(*) FROM review_log").fetchone()[0] == 0
    conn.close()
    assert list_decks(tmp_db) == []


def test_delete_deck_missing(tmp_db):
    init_db(tmp_db)
    with pytest.raises(DeckNotFoundError):
        delete_deck(tmp_db, 7)
