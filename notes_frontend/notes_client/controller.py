import asyncio
import logging
from typing import Callable, Optional, Set

from notes_client.api.client import NotesApiClient, TransportError
from notes_client.config import Settings
from notes_client.editor import EditorState
from notes_client.schemas import NoteId, StatusKind, ViewState
from notes_client.status import StatusNotifier
from notes_client.store import NoteStore
from notes_client.timers import Debouncer

logger = logging.getLogger(__name__)

MSG_LOADING = "Loading..."
MSG_LOAD_FAILED = "Failed to load notes"
MSG_SAVING = "Saving..."
MSG_SAVED = "Saved"
MSG_SAVE_FAILED = "Error saving note"
MSG_DELETING = "Deleting..."
MSG_DELETED = "Deleted"
MSG_DELETE_FAILED = "Error deleting note"


class KeyEvent:
    """Minimal keyboard event passed in by the presentation layer."""

    def __init__(self, key: str, ctrl: bool = False, meta: bool = False) -> None:
        self.key = key
        self.ctrl = ctrl
        self.meta = meta
        self.default_prevented = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class NotesController:
    """
    Wires user intents to the store, the editor and the remote service.

    All state lives on this object and is only mutated here. Remote failures
    are caught, logged and turned into status messages; state is left as it
    was before the failed attempt. `on_change` receives a fresh ViewState
    after every change.
    """

    def __init__(
        self,
        api: NotesApiClient,
        settings: Optional[Settings] = None,
        on_change: Optional[Callable[[ViewState], None]] = None,
    ) -> None:
        settings = settings or Settings()
        self._api = api
        self._on_change = on_change
        self.store = NoteStore()
        self.editor = EditorState()
        self.status = StatusNotifier(settings.status_clear_seconds, on_change=lambda _msg: self._notify())
        self._search = Debouncer(settings.search_debounce_seconds, self._apply_search)
        self._saving = False
        self._deleting = False
        self._generation = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def is_saving(self) -> bool:
        return self._saving

    @property
    def is_deleting(self) -> bool:
        return self._deleting

    # PUBLIC_INTERFACE
    def view(self) -> ViewState:
        """Snapshot of everything needed to render the page."""
        return ViewState(
            notes=self.store.filtered,
            selected_id=self.editor.selected_id,
            title=self.editor.title,
            content=self.editor.content,
            delete_enabled=not self.editor.is_new,
            status=self.status.current,
            is_saving=self._saving,
        )

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.view())

    # PUBLIC_INTERFACE
    async def load(self) -> None:
        """Fetch the full collection once and select the first note."""
        self.status.announce(MSG_LOADING, StatusKind.INFO)
        try:
            notes = await self._api.list("")
        except TransportError:
            logger.exception("Initial note listing failed")
            self.status.announce(MSG_LOAD_FAILED, StatusKind.ERROR)
            self.new_note()
            return

        self.status.clear()
        self.store.replace_all(notes)
        logger.info("Loaded %s notes", len(self.store))
        first = next(iter(self.store.notes), None)
        if first is not None:
            self.select_note(first.id)
        else:
            self.new_note()

    # PUBLIC_INTERFACE
    def select_note(self, note_id: NoteId) -> None:
        """Load the note's fields into the editor."""
        self._generation += 1
        self.editor.select_existing(note_id, self.store.get(note_id))
        self._notify()

    # PUBLIC_INTERFACE
    def new_note(self) -> None:
        """Switch the editor to a blank, unsaved note."""
        self._generation += 1
        self.editor.start_new()
        self._notify()

    def edit_title(self, text: str) -> None:
        self.editor.title = text
        self._notify()

    def edit_content(self, text: str) -> None:
        self.editor.content = text
        self._notify()

    # PUBLIC_INTERFACE
    async def save(self) -> None:
        """
        Create or update the note in the editor.

        Ignored while another save is in flight. On success the service's
        representation is upserted into the store; a created note becomes the
        selection unless the user moved to another note meanwhile. An update
        whose note was deleted in the meantime is not put back.
        """
        if self._saving:
            logger.debug("Save ignored: another save is in flight")
            return
        self._saving = True
        try:
            payload = self.editor.current_draft_payload()
            note_id = self.editor.selected_id
            generation = self._generation
            self.status.announce(MSG_SAVING, StatusKind.INFO)
            try:
                if note_id is None:
                    saved = await self._api.create(payload)
                else:
                    saved = await self._api.update(note_id, payload)
            except TransportError:
                logger.exception("Saving note id=%s failed", note_id)
                self.status.announce(MSG_SAVE_FAILED, StatusKind.ERROR)
                return

            if note_id is not None and self.store.get(note_id) is None:
                logger.warning("Note id=%s was deleted while its update was in flight", note_id)
                return

            self.store.upsert(saved)
            if note_id is None and generation == self._generation:
                self.editor.assign_id(saved.id)
            self.store.apply_filter(self.store.query)
            self.status.announce(MSG_SAVED, StatusKind.SUCCESS)
        finally:
            self._saving = False
            self._notify()

    # PUBLIC_INTERFACE
    async def delete(self) -> None:
        """
        Delete the selected note.

        Ignored without a selection or while a delete is in flight. A 404 from
        the service means the note is already gone and counts as success.
        """
        note_id = self.editor.selected_id
        if note_id is None:
            return
        if self._deleting:
            logger.debug("Delete ignored: another delete is in flight")
            return
        self._deleting = True
        try:
            self.status.announce(MSG_DELETING, StatusKind.INFO)
            try:
                await self._api.delete(note_id)
            except TransportError as exc:
                if not exc.is_not_found:
                    logger.exception("Deleting note id=%s failed", note_id)
                    self.status.announce(MSG_DELETE_FAILED, StatusKind.ERROR)
                    return
                logger.warning("Note id=%s was already deleted remotely", note_id)

            self.store.remove(note_id)
            if self.editor.selected_id == note_id:
                self._generation += 1
                self.editor.start_new()
            self.status.announce(MSG_DELETED, StatusKind.SUCCESS)
            self.store.apply_filter(self.store.query)
        finally:
            self._deleting = False
            self._notify()

    # PUBLIC_INTERFACE
    def search(self, query: str) -> None:
        """Debounced: only the last query of a burst is applied."""
        self._search(query)

    def _apply_search(self, query: str) -> None:
        self.store.apply_filter(query)
        self._notify()

    # PUBLIC_INTERFACE
    def on_keydown(self, event: KeyEvent) -> Optional[asyncio.Task]:
        """Handle Ctrl/Cmd+S: suppress the native save and start a save task."""
        if not (event.ctrl or event.meta) or event.key.lower() != "s":
            return None
        event.prevent_default()
        task = asyncio.create_task(self.save())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def close(self) -> None:
        """Cancel pending timers. In-flight requests are left to finish."""
        self._search.cancel()
        self.status.close()
