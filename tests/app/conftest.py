from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from recap.app.app import app
from recap.app.dependencies import activity_session
from recap.session import ActivitySession
from tests._factories import FakeStravaClient, InMemoryCache

AUTH_HEADERS = {"Authorization": "Bearer test-token"}


@pytest.fixture()
def strava_client() -> FakeStravaClient:
    return FakeStravaClient()


@pytest.fixture()
def session(strava_client: FakeStravaClient) -> ActivitySession:
    """A session over fakes whose orchestrator is a mock, so no runs are scheduled."""
    session = ActivitySession(strava_client, InMemoryCache(), request_delay=0)
    session.orchestrator = MagicMock()
    return session


@pytest.fixture()
def client(session: ActivitySession) -> Iterator[TestClient]:
    app.dependency_overrides[activity_session] = lambda: session
    with TestClient(app, headers=AUTH_HEADERS) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def anonymous_client() -> TestClient:
    return TestClient(app)
