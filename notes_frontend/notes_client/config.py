import logging
import os

from pydantic import BaseModel, ConfigDict

SEARCH_DEBOUNCE_SECONDS = 0.2
STATUS_CLEAR_SECONDS = 2.5
PREVIEW_LENGTH = 80
UNTITLED_LABEL = "Untitled"

DEFAULT_LOG_LEVEL = "INFO"


class Settings(BaseModel):
    """Client settings, resolved once at startup."""
    model_config = ConfigDict(frozen=True)

    api_base_url: str = ""
    log_level: str = DEFAULT_LOG_LEVEL
    search_debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS
    status_clear_seconds: float = STATUS_CLEAR_SECONDS


def _read_api_base_url() -> str:
    """
    Read the service base URL from NOTES_API_BASE_URL.

    Blank or unset means "relative paths against the current origin", i.e. the
    base_url of whatever httpx client the caller hands to the API client.
    """
    return (os.getenv("NOTES_API_BASE_URL") or "").strip()


def _read_log_level() -> str:
    """Return a valid logging level name from NOTES_LOG_LEVEL, defaulting to INFO."""
    raw = (os.getenv("NOTES_LOG_LEVEL") or "").strip().upper()
    if raw and isinstance(logging.getLevelName(raw), int):
        return raw
    return DEFAULT_LOG_LEVEL


# PUBLIC_INTERFACE
def load_settings() -> Settings:
    """Build Settings from the environment."""
    return Settings(api_base_url=_read_api_base_url(), log_level=_read_log_level())


# PUBLIC_INTERFACE
def configure_logging(settings: Settings) -> None:
    """Apply the configured level to the package loggers."""
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("notes_client").setLevel(settings.log_level)


# PUBLIC_INTERFACE
def join_url(base: str, path: str) -> str:
    """
    Join a base URL and a path with exactly one slash between them.

    Accepts a base with or without trailing slashes and a path with or without
    leading slashes. An empty base returns the path unchanged.
    """
    if not base:
        return path
    return f"{base.rstrip('/')}/{path.lstrip('/')}"
