import hashlib
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from recap.cache import NamespacedCache
from recap.integrations.strava.client import StravaClient
from recap.integrations.strava.errors import StravaAPIError, StravaRateLimitError
from recap.session import ActivitySession
from .sessions import SessionRegistry
from .settings import Settings, get_cache

logger = logging.getLogger(__name__)
bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache
def get_session_registry() -> SessionRegistry:
    settings = get_settings()
    return SessionRegistry(
        max_sessions=settings.max_sessions, ttl_seconds=settings.session_ttl_seconds
    )


def strava_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """The caller's Strava access token, passed through as an opaque string."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Strava bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


@contextmanager
def strava_http_errors(
    rate_limit_detail: str = "Strava rate limit reached",
) -> Iterator[None]:
    """Turn Strava failures raised inside the block into HTTP errors."""
    try:
        yield
    except StravaRateLimitError:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=rate_limit_detail,
        )
    except StravaAPIError as e:
        if e.status_code == 401:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Strava rejected the access token",
            )
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Strava request failed (status {e.status_code})",
        )
    except httpx.HTTPError as e:
        logger.error(f"Failed to reach Strava: {type(e).__name__}: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to reach Strava",
        )


async def activity_session(
    token: str = Depends(strava_token),
    settings: Settings = Depends(get_settings),
    registry: SessionRegistry = Depends(get_session_registry),
) -> ActivitySession:
    """The caller's session, created on first use.

    A new session looks up the athlete behind the token once, and its cache
    entries are namespaced by that athlete so users never share cached data.
    """
    session_key = hashlib.sha256(token.encode()).hexdigest()
    session = registry.get(session_key)
    if session is not None:
        return session

    client = StravaClient(access_token=token, base_url=settings.strava_api_url)
    with strava_http_errors("Strava rate limit reached while identifying the athlete"):
        athlete = await client.get_athlete()
    session = ActivitySession(
        client,
        NamespacedCache(get_cache(settings), f"athlete_{athlete.id}"),
        user_timezone=settings.user_timezone,
        request_delay=settings.kom_request_delay_seconds,
    )
    registry.put(session_key, session)
    logger.info(f"Created activity session {session_key[:8]} for athlete {athlete.id}")
    return session


async def load_or_raise(
    session: ActivitySession, year: int, retry: bool = False
) -> None:
    """Load a year into the session, turning Strava failures into HTTP errors."""
    detail = f"Strava rate limit reached and no cached activities for {year}"
    with strava_http_errors(detail):
        if retry and session.year == year:
            await session.retry()
        else:
            await session.load_year(year)


async def session_for_year(
    year: int, session: ActivitySession = Depends(activity_session)
) -> ActivitySession:
    """The caller's session with `year` loaded, fetching it if it isn't already."""
    if session.year != year:
        await load_or_raise(session, year)
    return session
