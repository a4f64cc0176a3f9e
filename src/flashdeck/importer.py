"""Import decks from JSON or YAML files."""
import json
import logging
from pathlib import Path

from flashdeck.decks import add_deck
from flashdeck.flashcards import add_flashcard

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".json", ".yaml", ".yml")


def read_deck_file(file_path: str) -> dict:
    """Parse a deck file into {"title", "description", "cards": [{"front", "back", "tags"}]}."""
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path.name}: {e}") from e
    elif suffix in (".yaml", ".yml"):
        import yaml
        try:
            data = yaml.safe_load(path.read_text())
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path.name}: {e}") from e
    else:
        raise ValueError(
            f"Unsupported deck file type {suffix or '(none)'}; use one of {', '.join(SUPPORTED_SUFFIXES)}"
        )
    return _validate_deck(data, path.stem)


def _validate_deck(data, default_title: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError("Deck file must contain a mapping at the top level")
    cards = data.get("cards") or []
    if not isinstance(cards, list):
        raise ValueError("'cards' must be a list")
    parsed = []
    for i, card in enumerate(cards, 1):
        if not isinstance(card, dict) or not card.get("front") or not card.get("back"):
            raise ValueError(f"Card {i} needs both 'front' and 'back'")
        tags = card.get("tags") or []
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        parsed.append({"front": str(card["front"]), "back": str(card["back"]), "tags": list(tags)})
    return {
        "title": str(data.get("title") or default_title),
        "description": str(data.get("description") or ""),
        "cards": parsed,
    }


def import_deck(db_path: str, file_path: str) -> dict:
    """Create a new deck from a file. Returns the deck id, title and card count."""
    deck = read_deck_file(file_path)
    deck_id = add_deck(db_path, deck["title"], deck["description"])
    for card in deck["cards"]:
        add_flashcard(db_path, deck_id, card["front"], card["back"], tags=card["tags"])
    logger.info("Imported %d cards from %s", len(deck["cards"]), Path(file_path).name)
    return {"deck_id": deck_id, "title": deck["title"], "cards": len(deck["cards"])}
