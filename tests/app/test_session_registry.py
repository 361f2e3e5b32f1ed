"""Tests for the bounded in-process session registry."""

from unittest.mock import MagicMock

import pytest

from recap.app.sessions import SessionRegistry


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _registry(max_sessions=3, ttl_seconds=100.0):
    clock = FakeClock()
    return SessionRegistry(max_sessions, ttl_seconds, clock=clock), clock


class TestSessionRegistry:
    def test_get_returns_stored_session(self):
        registry, _ = _registry()
        session = MagicMock()

        registry.put("a", session)

        assert registry.get("a") is session
        assert registry.get("b") is None
        assert len(registry) == 1

    def test_evicts_least_recently_used(self):
        registry, _ = _registry(max_sessions=2)
        a, b, c = MagicMock(), MagicMock(), MagicMock()
        registry.put("a", a)
        registry.put("b", b)
        # Touch "a" so "b" becomes the oldest.
        registry.get("a")

        registry.put("c", c)

        assert "b" not in registry
        assert registry.get("a") is a
        assert registry.get("c") is c
        b.close.assert_called_once_with()
        a.close.assert_not_called()

    def test_evicts_idle_sessions(self):
        registry, clock = _registry(ttl_seconds=100.0)
        old, fresh = MagicMock(), MagicMock()
        registry.put("old", old)
        clock.now = 60.0
        registry.put("fresh", fresh)

        clock.now = 120.0

        assert registry.get("old") is None
        assert registry.get("fresh") is fresh
        old.close.assert_called_once_with()
        fresh.close.assert_not_called()

    def test_use_extends_lifetime(self):
        registry, clock = _registry(ttl_seconds=100.0)
        session = MagicMock()
        registry.put("a", session)

        for now in (90.0, 180.0, 270.0):
            clock.now = now
            assert registry.get("a") is session

        session.close.assert_not_called()

    def test_clear_closes_everything(self):
        registry, _ = _registry()
        sessions = [MagicMock() for _ in range(3)]
        for i, session in enumerate(sessions):
            registry.put(str(i), session)

        registry.clear()

        assert len(registry) == 0
        for session in sessions:
            session.close.assert_called_once_with()

    def test_rejects_empty_capacity(self):
        with pytest.raises(ValueError):
            SessionRegistry(max_sessions=0)
