import logging
from typing import Iterable, List, Optional

from notes_client.schemas import Note, NoteId

logger = logging.getLogger(__name__)


def matches(note: Note, needle: str) -> bool:
    """Case-insensitive substring match on title or content; `needle` is lowercased."""
    return needle in note.title.lower() or needle in note.content.lower()


class NoteStore:
    """
    In-memory collection of notes plus the filtered view derived from it.

    The collection holds at most one note per id. Newly inserted notes are
    prepended; replacements keep their position. Every mutation recomputes
    the filtered view with the current query.
    """

    def __init__(self) -> None:
        self._notes: List[Note] = []
        self._query = ""
        self._filtered: List[Note] = []

    @property
    def notes(self) -> List[Note]:
        return list(self._notes)

    @property
    def filtered(self) -> List[Note]:
        return list(self._filtered)

    @property
    def query(self) -> str:
        return self._query

    def __len__(self) -> int:
        return len(self._notes)

    def get(self, note_id: NoteId) -> Optional[Note]:
        for note in self._notes:
            if note.id == note_id:
                return note
        return None

    def _index_of(self, note_id: NoteId) -> int:
        for idx, note in enumerate(self._notes):
            if note.id == note_id:
                return idx
        return -1

    # PUBLIC_INTERFACE
    def replace_all(self, notes: Iterable[Note]) -> None:
        """Set the whole collection; later duplicates of an id are dropped."""
        seen = set()
        unique = []
        for note in notes:
            if note.id in seen:
                logger.warning("Dropping duplicate note id=%s from listing", note.id)
                continue
            seen.add(note.id)
            unique.append(note)
        self._notes = unique
        self._recompute()

    # PUBLIC_INTERFACE
    def upsert(self, note: Note) -> None:
        """Insert `note` at the front, or replace the note with the same id in place."""
        idx = self._index_of(note.id)
        if idx < 0:
            self._notes.insert(0, note)
        else:
            self._notes[idx] = note
        self._recompute()

    # PUBLIC_INTERFACE
    def remove(self, note_id: NoteId) -> None:
        """Drop the note with `note_id`; absent ids are ignored."""
        self._notes = [n for n in self._notes if n.id != note_id]
        self._recompute()

    # PUBLIC_INTERFACE
    def apply_filter(self, query: str) -> List[Note]:
        """Set the search query and return the recomputed filtered view."""
        self._query = query
        self._recompute()
        return self.filtered

    def _recompute(self) -> None:
        needle = self._query.strip().lower()
        if not needle:
            self._filtered = list(self._notes)
        else:
            self._filtered = [n for n in self._notes if matches(n, needle)]
