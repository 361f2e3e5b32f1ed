"""Test the /activities endpoints."""

import httpx
from fastapi.testclient import TestClient

from recap.integrations.strava.errors import StravaAPIError, StravaRateLimitError
from recap.integrations.strava.models import StravaPhoto
from tests._factories import FakeStravaClient


def _raw_year(activity_factory) -> list[dict]:
    return [
        activity_factory.make_raw(
            {"id": 1, "sport_type": "Ride", "start_date": "2024-01-10T08:00:00Z"}
        ),
        activity_factory.make_raw(
            {"id": 2, "sport_type": "Run", "start_date": "2024-03-02T08:00:00Z"}
        ),
        activity_factory.make_raw(
            {
                "id": 3,
                "sport_type": "Ride",
                "start_date": "2024-03-20T08:00:00Z",
                "total_photo_count": 2,
            }
        ),
    ]


class TestGetActivities:
    """Test GET /activities/{year}."""

    def test_returns_classified_year(
        self, client: TestClient, strava_client: FakeStravaClient, activity_factory
    ):
        strava_client.activities = _raw_year(activity_factory)

        response = client.get("/activities/2024")

        assert response.status_code == 200
        data = response.json()
        assert data["year"] == 2024
        assert data["filters"] == []
        assert data["from_cache"] is False
        assert [a["id"] for a in data["all"]] == [1, 2, 3]
        assert [a["id"] for a in data["by_month"]["January"]] == [1]
        assert [a["id"] for a in data["by_month"]["March"]] == [2, 3]
        assert data["by_month"]["December"] == []
        assert sorted(data["by_type"]) == ["Ride", "Run"]
        assert data["available_sports"] == ["Ride", "Run"]
        assert [a["id"] for a in data["with_photos"]] == [3]

    def test_year_is_fetched_once(
        self, client: TestClient, strava_client: FakeStravaClient, activity_factory
    ):
        strava_client.activities = _raw_year(activity_factory)

        client.get("/activities/2024")
        client.get("/activities/2024?sport_type=Run")

        assert strava_client.list_calls == [2024]

    def test_sport_type_filter(
        self, client: TestClient, strava_client: FakeStravaClient, activity_factory
    ):
        strava_client.activities = _raw_year(activity_factory)

        response = client.get("/activities/2024?sport_type=Ride&sport_type=Hike")

        assert response.status_code == 200
        data = response.json()
        assert data["filters"] == ["Ride", "Hike"]
        assert [a["id"] for a in data["all"]] == [1, 3]
        assert data["available_sports"] == ["Ride", "Run"]

    def test_new_dataset_is_handed_to_orchestrator(
        self, client: TestClient, session, strava_client, activity_factory
    ):
        strava_client.activities = _raw_year(activity_factory)

        client.get("/activities/2024")

        session.orchestrator.on_dataset.assert_called_once_with(2024, session.dataset)

    def test_rate_limited_without_cache(
        self, client: TestClient, strava_client: FakeStravaClient
    ):
        strava_client.activities = StravaRateLimitError()

        response = client.get("/activities/2024")

        assert response.status_code == 429

    def test_rate_limited_with_cache(
        self, client: TestClient, session, strava_client, activity_factory
    ):
        session.cache.set("activities_cache_2024", _raw_year(activity_factory))
        strava_client.activities = StravaRateLimitError()

        response = client.get("/activities/2024")

        assert response.status_code == 200
        assert response.json()["from_cache"] is True
        assert len(response.json()["all"]) == 3

    def test_rejected_token(self, client: TestClient, strava_client: FakeStravaClient):
        strava_client.activities = StravaAPIError(401, "Authorization Error")

        assert client.get("/activities/2024").status_code == 401

    def test_strava_error(self, client: TestClient, strava_client: FakeStravaClient):
        strava_client.activities = StravaAPIError(500, "boom")

        assert client.get("/activities/2024").status_code == 502

    def test_strava_unreachable(
        self, client: TestClient, strava_client: FakeStravaClient
    ):
        strava_client.activities = httpx.ConnectError("connection refused")

        assert client.get("/activities/2024").status_code == 502

    def test_requires_token(self, anonymous_client: TestClient):
        response = anonymous_client.get("/activities/2024")
        assert response.status_code == 401


class TestRetryActivities:
    """Test POST /activities/{year}/retry."""

    def test_retry_refetches(
        self, client: TestClient, session, strava_client, activity_factory
    ):
        session.cache.set("activities_cache_2024", _raw_year(activity_factory))
        strava_client.activities = StravaRateLimitError()
        assert client.get("/activities/2024").json()["from_cache"] is True

        strava_client.activities = _raw_year(activity_factory)[:1]
        response = client.post("/activities/2024/retry")

        assert response.status_code == 200
        data = response.json()
        assert data["from_cache"] is False
        assert [a["id"] for a in data["all"]] == [1]
        assert strava_client.list_calls == [2024, 2024]

    def test_retry_still_rate_limited(
        self, client: TestClient, strava_client: FakeStravaClient
    ):
        strava_client.activities = StravaRateLimitError()

        assert client.post("/activities/2024/retry").status_code == 429


class TestFeaturedPhotos:
    """Test GET /activities/{year}/photos."""

    def test_returns_photos_of_photo_activity(
        self, client: TestClient, strava_client: FakeStravaClient, activity_factory
    ):
        strava_client.activities = _raw_year(activity_factory)
        strava_client.photos = {
            3: [
                StravaPhoto(
                    unique_id="abc",
                    activity_id=3,
                    urls={"2000": "https://photos.test/abc.jpg"},
                )
            ]
        }

        response = client.get("/activities/2024/photos")

        assert response.status_code == 200
        data = response.json()
        assert data["activity_id"] == 3
        assert [p["unique_id"] for p in data["photos"]] == ["abc"]
        assert data["photos"][0]["urls"] == {"2000": "https://photos.test/abc.jpg"}
        assert strava_client.photo_calls == [3]

    def test_no_photo_activities(
        self, client: TestClient, strava_client: FakeStravaClient, activity_factory
    ):
        strava_client.activities = _raw_year(activity_factory)[:2]

        response = client.get("/activities/2024/photos")

        assert response.status_code == 200
        assert response.json() == {
            "activity_id": None,
            "activity_name": None,
            "photos": [],
        }
        assert strava_client.photo_calls == []
