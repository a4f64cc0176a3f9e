"""Study notes organized in folders and tags."""
import json
import logging
from datetime import datetime
from typing import Optional

from flashdeck.db import get_connection, to_timestamp
from flashdeck.models import Note
from flashdeck.scheduler import utc_now

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"


class NoteNotFoundError(LookupError):
    pass


def _clean_folder(folder: str) -> str:
    folder = (folder or "").strip()
    if not folder:
        raise ValueError("Folder name cannot be empty")
    return folder


def add_folder(db_path: str, name: str) -> str:
    """Create a folder. Adding an existing folder is a no-op."""
    name = _clean_folder(name)
    conn = get_connection(db_path)
    conn.execute("INSERT OR IGNORE INTO folders (name) VALUES (?)", (name,))
    conn.commit()
    conn.close()
    return name


def list_folders(db_path: str) -> list[str]:
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT name FROM folders
        UNION SELECT folder FROM notes
        ORDER BY 1"""
    ).fetchall()
    conn.close()
    return [r[0] for r in rows]


def delete_folder(db_path: str, name: str, now: Optional[datetime] = None) -> int:
    """Remove a folder, moving its notes to Uncategorized. Returns notes moved."""
    name = _clean_folder(name)
    if name == UNCATEGORIZED:
        raise ValueError(f"The {UNCATEGORIZED} folder cannot be deleted")
    conn = get_connection(db_path)
    conn.execute("DELETE FROM folders WHERE name = ?", (name,))
    cursor = conn.execute(
        "UPDATE notes SET folder = ?, updated_at = ? WHERE folder = ?",
        (UNCATEGORIZED, to_timestamp(now or utc_now()), name),
    )
    conn.commit()
    conn.close()
    logger.info("Deleted folder %s; moved %d note(s)", name, cursor.rowcount)
    return cursor.rowcount


def add_note(
    db_path: str,
    title: str,
    content: str = "",
    tags: Optional[list[str]] = None,
    folder: str = UNCATEGORIZED,
    now: Optional[datetime] = None,
) -> int:
    title = title.strip()
    if not title:
        raise ValueError("Note title cannot be empty")
    folder = add_folder(db_path, folder)
    stamp = to_timestamp(now or utc_now())
    conn = get_connection(db_path)
    cursor = conn.execute(
        """INSERT INTO notes (title, content, tags, folder, created_at, updated_at)
        VALUES (?, ?, ?, ?, ?, ?)""",
        (title, content, json.dumps(tags or []), folder, stamp, stamp),
    )
    conn.commit()
    conn.close()
    logger.info("Added note %d to %s", cursor.lastrowid, folder)
    return cursor.lastrowid


def get_note(db_path: str, note_id: int) -> Note:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM notes WHERE id = ?", (note_id,)).fetchone()
    conn.close()
    if row is None:
        raise NoteNotFoundError(f"Note {note_id} not found")
    return Note.from_row(row)


def update_note(
    db_path: str,
    note_id: int,
    title: Optional[str] = None,
    content: Optional[str] = None,
    tags: Optional[list[str]] = None,
    folder: Optional[str] = None,
    now: Optional[datetime] = None,
) -> None:
    """Edit a note and bump its updated_at stamp."""
    get_note(db_path, note_id)
    updates = {}
    if title is not None:
        if not title.strip():
            raise ValueError("Note title cannot be empty")
        updates["title"] = title.strip()
    if content is not None:
        updates["content"] = content
    if tags is not None:
        updates["tags"] = json.dumps(tags)
    if folder is not None:
        updates["folder"] = add_folder(db_path, folder)
    updates["updated_at"] = to_timestamp(now or utc_now())
    conn = get_connection(db_path)
    assignments = ", ".join(f"{column} = ?" for column in updates)
    conn.execute(
        f"UPDATE notes SET {assignments} WHERE id = ?",
        (*updates.values(), note_id),
    )
    conn.commit()
    conn.close()


def delete_note(db_path: str, note_id: int) -> None:
    conn = get_connection(db_path)
    cursor = conn.execute("DELETE FROM notes WHERE id = ?", (note_id,))
    conn.commit()
    conn.close()
    if cursor.rowcount == 0:
        raise NoteNotFoundError(f"Note {note_id} not found")
    logger.info("Deleted note %d", note_id)


def list_notes(db_path: str) -> list[Note]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM notes ORDER BY id").fetchall()
    conn.close()
    return [Note.from_row(r) for r in rows]


def get_notes_by_folder(db_path: str, folder: str) -> list[Note]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM notes WHERE folder = ? ORDER BY id", (folder,)
    ).fetchall()
    conn.close()
    return [Note.from_row(r) for r in rows]


def get_notes_by_tag(db_path: str, tag: str) -> list[Note]:
    """Notes carrying exactly this tag."""
    return [n for n in list_notes(db_path) if tag in n.tags]


def search_notes(db_path: str, query: str) -> list[Note]:
    """Case-insensitive substring match over title, content and tags."""
    needle = query.lower()
    return [
        n for n in list_notes(db_path)
        if needle in n.title.lower()
        or needle in n.content.lower()
        or any(needle in tag.lower() for tag in n.tags)
    ]
