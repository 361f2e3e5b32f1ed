import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from recap.cache import Cache, DatabaseCache, FileCache
from recap.enrich import REQUEST_DELAY_SECONDS
from recap.integrations.strava.client import API_URL
from .sessions import DEFAULT_MAX_SESSIONS, DEFAULT_SESSION_TTL_SECONDS

CacheBackend = Literal["file", "postgres"]


class Settings(BaseModel):
    """Runtime configuration read from the environment."""

    strava_api_url: str = API_URL
    cache_backend: CacheBackend = "file"
    cache_dir: Path = Path(".cache/recap")
    kom_request_delay_seconds: float = REQUEST_DELAY_SECONDS
    user_timezone: str | None = None
    max_sessions: int = DEFAULT_MAX_SESSIONS
    session_ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            strava_api_url=os.getenv("STRAVA_API_URL", API_URL),
            cache_backend=os.getenv("CACHE_BACKEND", "file").lower(),  # type: ignore[arg-type]
            cache_dir=Path(os.getenv("CACHE_DIR", ".cache/recap")),
            kom_request_delay_seconds=float(
                os.getenv("KOM_REQUEST_DELAY_SECONDS", str(REQUEST_DELAY_SECONDS))
            ),
            user_timezone=os.getenv("USER_TIMEZONE") or None,
            max_sessions=int(os.getenv("MAX_SESSIONS", str(DEFAULT_MAX_SESSIONS))),
            session_ttl_seconds=float(
                os.getenv("SESSION_TTL_SECONDS", str(DEFAULT_SESSION_TTL_SECONDS))
            ),
        )


def get_cache(settings: Settings) -> Cache:
    """Build the cache backend selected by the settings."""
    match settings.cache_backend:
        case "file":
            return FileCache(settings.cache_dir)
        case "postgres":
            return DatabaseCache()
        case _:
            raise ValueError(f"Invalid cache backend: {settings.cache_backend}")
