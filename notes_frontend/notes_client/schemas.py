from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from notes_client.config import PREVIEW_LENGTH, UNTITLED_LABEL

NoteId = Union[int, str]


class NoteDraft(BaseModel):
    """Payload sent to the service when creating or updating a note."""
    model_config = ConfigDict(frozen=True)

    title: str = Field("", description="Note title, already trimmed by the editor.")
    content: str = Field("", description="Note content, sent verbatim.")


class Note(BaseModel):
    """A note as returned by the remote service."""
    model_config = ConfigDict(frozen=True)

    id: NoteId = Field(..., description="Identifier assigned by the service.")
    title: str = Field("", description="Short note title.")
    content: str = Field("", description="Full note content.")

    @property
    def display_title(self) -> str:
        return self.title.strip() or UNTITLED_LABEL

    @property
    def preview(self) -> str:
        return self.content.replace("\n", " ")[:PREVIEW_LENGTH]


class StatusKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class StatusMessage(BaseModel):
    """A user-facing status line; `sequence` orders messages for auto-clear."""
    model_config = ConfigDict(frozen=True)

    text: str = ""
    kind: StatusKind = StatusKind.INFO
    sequence: int = 0
    issued_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ViewState(BaseModel):
    """Everything the presentation layer needs to re-render."""
    model_config = ConfigDict(frozen=True)

    notes: List[Note] = Field(default_factory=list)
    selected_id: Optional[NoteId] = None
    title: str = ""
    content: str = ""
    delete_enabled: bool = False
    status: StatusMessage = Field(default_factory=StatusMessage)
    is_saving: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.notes
