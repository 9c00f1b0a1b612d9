import itertools
import logging
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "Health", "description": "Service health endpoint."},
    {"name": "Notes", "description": "CRUD operations for notes."},
]


class NoteCreate(BaseModel):
    """Schema for creating a note."""
    title: str = Field(..., min_length=1, max_length=200, description="Short note title (1-200 chars).")
    content: str = Field(..., min_length=1, description="Full note content (non-empty).")


class NoteUpdate(BaseModel):
    """Schema for updating a note (partial update)."""
    title: Optional[str] = Field(None, min_length=1, max_length=200, description="Updated title (1-200 chars).")
    content: Optional[str] = Field(None, min_length=1, description="Updated content (non-empty).")


class NoteOut(BaseModel):
    """Schema returned for a note."""
    id: int = Field(..., description="Identifier of the note.")
    title: str
    content: str


class InMemoryNoteRepository:
    """Notes kept in a dict keyed by id; ids are assigned in increasing order."""

    def __init__(self) -> None:
        self._notes: Dict[int, NoteOut] = {}
        self._ids = itertools.count(1)

    def list(self, query: str = "") -> List[NoteOut]:
        needle = query.strip().lower()
        notes = sorted(self._notes.values(), key=lambda n: n.id, reverse=True)
        if not needle:
            return notes
        return [n for n in notes if needle in n.title.lower() or needle in n.content.lower()]

    def get(self, note_id: int) -> Optional[NoteOut]:
        return self._notes.get(note_id)

    def add(self, title: str, content: str) -> NoteOut:
        note = NoteOut(id=next(self._ids), title=title, content=content)
        self._notes[note.id] = note
        return note

    def save(self, note: NoteOut) -> NoteOut:
        self._notes[note.id] = note
        return note

    def delete(self, note_id: int) -> None:
        self._notes.pop(note_id, None)


# PUBLIC_INTERFACE
def create_app(repository: Optional[InMemoryNoteRepository] = None) -> FastAPI:
    """
    Build a notes service speaking the same REST contract as the real backend.

    Useful for local development and for exercising the client end to end
    through httpx.ASGITransport.
    """
    repo = repository or InMemoryNoteRepository()

    app = FastAPI(
        title="Notes API",
        description="In-memory notes service supporting CRUD operations.",
        version="1.0.0",
        openapi_tags=openapi_tags,
    )
    app.state.repository = repo

    def get_repository() -> InMemoryNoteRepository:
        return repo

    def _get_or_404(note_id: int, notes: InMemoryNoteRepository) -> NoteOut:
        note = notes.get(note_id)
        if not note:
            raise HTTPException(status_code=404, detail="Note not found")
        return note

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return JSON for unexpected errors so clients never see a non-JSON body."""
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )

    @app.get("/", tags=["Health"], summary="Health check")
    def health_check() -> Dict[str, str]:
        return {"message": "Healthy"}

    @app.get(
        "/notes",
        response_model=List[NoteOut],
        tags=["Notes"],
        summary="List notes",
        description="Return notes, most recent first, optionally filtered by a case-insensitive substring.",
    )
    def list_notes(
        q: str = Query("", description="Substring to match in title or content."),
        notes: InMemoryNoteRepository = Depends(get_repository),
    ) -> List[NoteOut]:
        return notes.list(q)

    @app.post(
        "/notes",
        response_model=NoteOut,
        status_code=status.HTTP_201_CREATED,
        tags=["Notes"],
        summary="Create note",
    )
    def create_note(payload: NoteCreate, notes: InMemoryNoteRepository = Depends(get_repository)) -> NoteOut:
        logger.info("Creating note title_len=%s content_len=%s", len(payload.title), len(payload.content))
        return notes.add(title=payload.title.strip(), content=payload.content)

    @app.get("/notes/{note_id}", response_model=NoteOut, tags=["Notes"], summary="Get note")
    def get_note(note_id: int, notes: InMemoryNoteRepository = Depends(get_repository)) -> NoteOut:
        return _get_or_404(note_id, notes)

    @app.put(
        "/notes/{note_id}",
        response_model=NoteOut,
        tags=["Notes"],
        summary="Update note",
        description="Update a note by ID; omitted fields remain unchanged.",
    )
    def update_note(
        note_id: int, payload: NoteUpdate, notes: InMemoryNoteRepository = Depends(get_repository)
    ) -> NoteOut:
        note = _get_or_404(note_id, notes)
        changes = {}
        if payload.title is not None:
            changes["title"] = payload.title.strip()
        if payload.content is not None:
            changes["content"] = payload.content
        return notes.save(note.model_copy(update=changes))

    @app.delete(
        "/notes/{note_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        tags=["Notes"],
        summary="Delete note",
    )
    def delete_note(note_id: int, notes: InMemoryNoteRepository = Depends(get_repository)) -> Response:
        _get_or_404(note_id, notes)
        notes.delete(note_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return app
