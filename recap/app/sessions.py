import logging
import time
from collections import OrderedDict
from collections.abc import Callable

from recap.session import ActivitySession

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 64
# Strava access tokens live for six hours.
DEFAULT_SESSION_TTL_SECONDS = 6 * 60 * 60


class SessionRegistry:
    """In-process sessions keyed by a hash of the caller's token.

    Holds at most `max_sessions`, dropping the least recently used first, and
    drops any session unused for `ttl_seconds`. A dropped session is closed so
    its enrichment run stops and its late results are discarded.
    """

    def __init__(
        self,
        max_sessions: int = DEFAULT_MAX_SESSIONS,
        ttl_seconds: float = DEFAULT_SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self.max_sessions = max_sessions
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._sessions: OrderedDict[str, tuple[ActivitySession, float]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, key: str) -> bool:
        return key in self._sessions

    def get(self, key: str) -> ActivitySession | None:
        self._evict_expired()
        entry = self._sessions.get(key)
        if entry is None:
            return None
        session, _ = entry
        self._touch(key, session)
        return session

    def put(self, key: str, session: ActivitySession) -> None:
        self._evict_expired()
        self._touch(key, session)
        while len(self._sessions) > self.max_sessions:
            old_key, (old_session, _) = self._sessions.popitem(last=False)
            self._close(old_key, old_session, "least recently used")

    def clear(self) -> None:
        while self._sessions:
            key, (session, _) = self._sessions.popitem(last=False)
            self._close(key, session, "registry cleared")

    def _touch(self, key: str, session: ActivitySession) -> None:
        self._sessions[key] = (session, self.clock())
        self._sessions.move_to_end(key)

    def _evict_expired(self) -> None:
        now = self.clock()
        expired = [
            key
            for key, (_, last_used) in self._sessions.items()
            if now - last_used > self.ttl_seconds
        ]
        for key in expired:
            session, _ = self._sessions.pop(key)
            self._close(key, session, "idle")

    def _close(self, key: str, session: ActivitySession, reason: str) -> None:
        logger.info(f"Evicting activity session {key[:8]} ({reason})")
        session.close()
