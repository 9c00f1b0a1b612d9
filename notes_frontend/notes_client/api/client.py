import logging
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter, ValidationError

from notes_client.config import join_url
from notes_client.schemas import Note, NoteDraft, NoteId

logger = logging.getLogger(__name__)

_NOTE = TypeAdapter(Note)
_NOTE_LIST = TypeAdapter(List[Note])

JSON_HEADERS = {"Accept": "application/json"}


class TransportError(Exception):
    """A remote call failed: network fault, non-2xx status or malformed body."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


class NotesApiClient:
    """
    Async client for the notes REST service.

    No retries are made: the first failure of any call is raised as a
    TransportError. The caller owns the httpx client (and therefore the
    origin used for relative URLs when base_url is empty).
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str = "") -> None:
        self._http = http
        self._base_url = base_url

    def _url(self, path: str) -> str:
        return join_url(self._base_url, path)

    def _note_url(self, note_id: NoteId) -> str:
        return self._url(f"/notes/{quote(str(note_id), safe='')}")

    async def _request(self, action: str, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to {action}: {exc}") from exc
        if not response.is_success:
            raise TransportError(f"Failed to {action}: {response.status_code}", status=response.status_code)
        return response

    @staticmethod
    def _decode(action: str, response: httpx.Response, adapter: TypeAdapter) -> Any:
        try:
            return adapter.validate_json(response.content)
        except ValidationError as exc:
            raise TransportError(f"Failed to {action}: invalid response body", status=response.status_code) from exc

    # PUBLIC_INTERFACE
    async def list(self, query: str = "") -> List[Note]:
        """Return all notes, optionally narrowed server-side by `q`."""
        params = {"q": query} if query else None
        response = await self._request("fetch notes", "GET", self._url("/notes"), params=params, headers=JSON_HEADERS)
        return self._decode("fetch notes", response, _NOTE_LIST)

    # PUBLIC_INTERFACE
    async def create(self, draft: NoteDraft) -> Note:
        """Create a note; the service assigns its id."""
        logger.info("Creating note title_len=%s content_len=%s", len(draft.title), len(draft.content))
        response = await self._request(
            "create note", "POST", self._url("/notes"), json=draft.model_dump(), headers=JSON_HEADERS
        )
        return self._decode("create note", response, _NOTE)

    # PUBLIC_INTERFACE
    async def update(self, note_id: NoteId, draft: NoteDraft) -> Note:
        """Replace a note's title and content; the returned note is authoritative."""
        logger.info("Updating note id=%s title_len=%s content_len=%s", note_id, len(draft.title), len(draft.content))
        response = await self._request(
            "update note", "PUT", self._note_url(note_id), json=draft.model_dump(), headers=JSON_HEADERS
        )
        return self._decode("update note", response, _NOTE)

    # PUBLIC_INTERFACE
    async def delete(self, note_id: NoteId) -> None:
        """Delete a note. The response body, if any, is ignored."""
        logger.info("Deleting note id=%s", note_id)
        await self._request("delete note", "DELETE", self._note_url(note_id))
