from typing import Optional

from notes_client.schemas import Note, NoteDraft, NoteId


class EditorState:
    """
    Selection and draft buffer for the note editor.

    `selected_id is None` means a new, unsaved note is being edited. The draft
    is copied from the note on selection and only flows back on save.
    """

    def __init__(self) -> None:
        self.selected_id: Optional[NoteId] = None
        self.title = ""
        self.content = ""

    @property
    def is_new(self) -> bool:
        return self.selected_id is None

    def select_existing(self, note_id: NoteId, note: Optional[Note]) -> None:
        """Select `note_id`; a missing note yields an empty draft."""
        self.selected_id = note_id
        self.title = note.title if note is not None else ""
        self.content = note.content if note is not None else ""

    def start_new(self) -> None:
        self.selected_id = None
        self.title = ""
        self.content = ""

    def assign_id(self, note_id: NoteId) -> None:
        """Record the id the service gave a freshly created note."""
        self.selected_id = note_id

    def current_draft_payload(self) -> NoteDraft:
        return NoteDraft(title=self.title.strip(), content=self.content)
