"""Interactive CLI application."""
import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from flashdeck.db import init_db, DEFAULT_DB_PATH
from flashdeck.decks import add_deck, list_decks
from flashdeck.flashcards import add_flashcard, get_due_cards, record_review
from flashdeck.importer import import_deck
from flashdeck.models import Flashcard, Note
from flashdeck.notes import add_note, list_notes, search_notes
from flashdeck.scheduler import Difficulty
from flashdeck.seed import seed_all, is_seeded

console = Console()

EXIT_WORDS = ("q", "menu")
RATING_CHOICES = {
    "1": Difficulty.AGAIN,
    "2": Difficulty.HARD,
    "3": Difficulty.GOOD,
    "4": Difficulty.EASY,
    **{d.value: d for d in Difficulty},
}


class SessionExitRequested(Exception):
    """Raised when the user types 'q' or 'menu' mid-session."""


def session_prompt(prompt: str, choices: list[str] | None = None, default: str = "") -> str:
    """Prompt.ask that lets the user leave the session at any point."""
    while True:
        answer = Prompt.ask(prompt, default=default).strip()
        if answer.lower() in EXIT_WORDS:
            raise SessionExitRequested()
        if choices is None or answer.lower() in choices:
            return answer.lower() if choices else answer
        console.print(f"[red]Please enter one of: {', '.join(choices)}[/red]")


def show_welcome():
    console.print(Panel(
        "[bold]flashdeck[/bold]\n[dim]Spaced repetition flashcards and notes[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("review", "Review due cards"),
        ("decks", "List decks"),
        ("add", "Add a deck or a card"),
        ("import", "Import a deck from JSON/YAML"),
        ("notes", "List, search or add notes"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def run_review_session(db_path: str, cards: list[Flashcard]) -> int:
    """Walk through the cards, recording a rating for each. Returns cards reviewed."""
    if not cards:
        console.print("[yellow]No flashcards due right now![/yellow]")
        return 0
    console.print(f"\n[bold]Review Session[/bold] ({len(cards)} cards, 'q' to stop)\n")
    reviewed = 0
    for i, card in enumerate(cards, 1):
        console.print(Panel(card.front, title=f"Card {i}/{len(cards)}", border_style="cyan"))
        session_prompt("[dim]Press Enter to reveal answer[/dim]")
        console.print(Panel(card.back, border_style="green"))
        answer = session_prompt(
            "Rate yourself (1=again, 2=hard, 3=good, 4=easy)", choices=list(RATING_CHOICES),
        )
        result = record_review(db_path, card.id, RATING_CHOICES[answer])
        reviewed += 1
        console.print(
            f"[dim]Next review in {result.interval} day(s), "
            f"{result.next_review:%Y-%m-%d}[/dim]\n"
        )
    console.print(f"[bold]Reviewed {reviewed} card(s).[/bold]\n")
    return reviewed


def _pick_deck(db_path: str, allow_all: bool = False) -> int | None:
    decks = list_decks(db_path)
    if not decks:
        console.print("[yellow]No decks yet. Use 'add' or 'import' first.[/yellow]")
        return None
    for d in decks:
        console.print(f"  [cyan]{d.id}[/cyan]) {d.title} [dim]({d.due_cards} due)[/dim]")
    choices = [str(d.id) for d in decks]
    if allow_all:
        choices.append("all")
        choice = Prompt.ask("Select deck", choices=choices, default="all")
    else:
        choice = Prompt.ask("Select deck", choices=choices)
    return None if choice == "all" else int(choice)


def cmd_review(db_path: str):
    console.print("\n[bold]Review[/bold]")
    if not list_decks(db_path):
        console.print("[yellow]No decks yet. Use 'add' or 'import' first.[/yellow]")
        return
    deck_id = _pick_deck(db_path, allow_all=True)
    cards = get_due_cards(db_path, deck_id=deck_id, limit=20)
    try:
        run_review_session(db_path, cards)
    except SessionExitRequested:
        console.print("\n[dim]Session stopped. Ratings so far are saved.[/dim]")


def cmd_decks(db_path: str):
    decks = list_decks(db_path)
    if not decks:
        console.print("[yellow]No decks yet.[/yellow]")
        return
    table = Table(title="Decks")
    table.add_column("ID", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Cards", justify="right")
    table.add_column("Due", justify="right")
    table.add_column("Last Reviewed")
    for d in decks:
        table.add_row(
            str(d.id),
            d.title,
            str(d.total_cards),
            f"[yellow]{d.due_cards}[/yellow]" if d.due_cards else "0",
            f"{d.last_reviewed:%Y-%m-%d}" if d.last_reviewed else "[dim]never[/dim]",
        )
    console.print(table)


def cmd_add(db_path: str):
    kind = Prompt.ask("Add a", choices=["deck", "card"], default="card")
    if kind == "deck":
        title = Prompt.ask("Title")
        description = Prompt.ask("Description", default="")
        deck_id = add_deck(db_path, title, description)
        console.print(f"[green]Created deck {deck_id}.[/green]")
        return
    deck_id = _pick_deck(db_path)
    if deck_id is None:
        return
    front = Prompt.ask("Front")
    back = Prompt.ask("Back")
    tags = [t.strip() for t in Prompt.ask("Tags (comma separated)", default="").split(",") if t.strip()]
    card_id = add_flashcard(db_path, deck_id, front, back, tags=tags)
    console.print(f"[green]Added card {card_id}.[/green]")


def cmd_import(db_path: str):
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    result = import_deck(db_path, file_path)
    console.print(f"[green]Imported '{result['title']}' ({result['cards']} cards) as deck {result['deck_id']}[/green]")


def show_notes(notes: list[Note], title: str = "Notes") -> None:
    if not notes:
        console.print("[yellow]No notes found.[/yellow]")
        return
    table = Table(title=title)
    table.add_column("ID", justify="right")
    table.add_column("Title", style="cyan")
    table.add_column("Folder")
    table.add_column("Tags")
    for n in notes:
        table.add_row(str(n.id), n.title, n.folder, ", ".join(n.tags))
    console.print(table)


def cmd_notes(db_path: str):
    action = Prompt.ask("Notes", choices=["list", "search", "add"], default="list")
    if action == "list":
        show_notes(list_notes(db_path))
    elif action == "search":
        query = Prompt.ask("Search for")
        show_notes(search_notes(db_path, query), title=f"Notes matching '{query}'")
    else:
        title = Prompt.ask("Title")
        folder = Prompt.ask("Folder", default="Uncategorized")
        content = Prompt.ask("Content", default="")
        tags = [t.strip() for t in Prompt.ask("Tags (comma separated)", default="").split(",") if t.strip()]
        note_id = add_note(db_path, title, content, tags=tags, folder=folder)
        console.print(f"[green]Added note {note_id}.[/green]")


def configure_logging():
    level = os.environ.get("FLASHDECK_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    configure_logging()
    db_path = DEFAULT_DB_PATH
    init_db(db_path)
    first_run = not is_seeded(db_path)
    if first_run:
        console.print("[dim]Setting up for first use...[/dim]")
    seed_all(db_path)
    if first_run:
        console.print("[green]Ready![/green]\n")

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="review").strip().lower()
        try:
            if choice == "review":
                cmd_review(db_path)
            elif choice == "decks":
                cmd_decks(db_path)
            elif choice == "add":
                cmd_add(db_path)
            elif choice == "import":
                cmd_import(db_path)
            elif choice == "notes":
                cmd_notes(db_path)
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]See you at your next review![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
