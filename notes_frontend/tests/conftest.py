"""Common fixtures for the notes client tests."""

import httpx
import pytest

from fakes import FakeNotesApi
from notes_client.api.client import NotesApiClient
from notes_client.api.server import InMemoryNoteRepository, create_app
from notes_client.config import Settings
from notes_client.controller import NotesController

BASE_URL = "http://notes.test"


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Restrict anyio tests to asyncio only (trio is not installed)."""
    return request.param


@pytest.fixture
def fast_settings():
    """Short timers so tests do not wait for the production delays."""
    return Settings(search_debounce_seconds=0.05, status_clear_seconds=0.05)


@pytest.fixture
def fake_api():
    return FakeNotesApi()


@pytest.fixture
def views():
    """Collects every ViewState pushed to the presentation callback."""
    return []


@pytest.fixture
def controller(fake_api, fast_settings, views):
    ctrl = NotesController(fake_api, settings=fast_settings, on_change=views.append)
    yield ctrl
    ctrl.close()


@pytest.fixture
def repository():
    return InMemoryNoteRepository()


@pytest.fixture
async def http_client(repository):
    """httpx client routed in-process to the reference notes service."""
    transport = httpx.ASGITransport(app=create_app(repository))
    async with httpx.AsyncClient(transport=transport, base_url=BASE_URL) as client:
        yield client


@pytest.fixture
def api_client(http_client):
    return NotesApiClient(http_client)
