# tests/test_integration.py
"""End-to-end test of the review workflow."""
from datetime import timedelta

from flashdeck.db import init_db
from flashdeck.decks import list_decks
from flashdeck.flashcards import get_due_cards, get_flashcard, record_review
from flashdeck.scheduler import Difficulty
from flashdeck.seed import seed_all


def test_review_cycle_over_several_days(tmp_db, now):
    init_db(tmp_db)
    seed_all(tmp_db)
    deck = list_decks(tmp_db, now=now)[0]
    assert deck.total_cards == 3
    assert deck.due_cards == 3

    # Day 0: forget one, know one, breeze through one
    first, second, third = get_due_cards(tmp_db, now=now)
    record_review(tmp_db, first.id, Difficulty.AGAIN, now=now)
    record_review(tmp_db, second.id, Difficulty.GOOD, now=now)
    record_review(tmp_db, third.id, Difficulty.EASY, now=now)
    assert list_decks(tmp_db, now=now)[0].due_cards == 0

    # Day 1: only the forgotten card comes back
    day1 = now + timedelta(days=1)
    assert [c.id for c in get_due_cards(tmp_db, now=day1)] == [first.id]
    record_review(tmp_db, first.id, Difficulty.GOOD, now=day1)

    # Day 3: the easy card (interval 3) and the good card (interval 2) are due
    day3 = now + timedelta(days=3)
    due = get_due_cards(tmp_db, now=day3)
    assert {c.id for c in due} == {first.id, second.id, third.id}

    card = get_flashcard(tmp_db, third.id)
    assert card.interval == 3  # floor(1 * 2.5 * 1.3)
    assert card.ease == 2.65
    assert card.last_reviewed == now
    assert card.next_review == now + timedelta(days=3)
